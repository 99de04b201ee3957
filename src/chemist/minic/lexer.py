"""
Mini-C Lexer (Tokenizer)
========================

This module implements the lexer for the mini-C language. It converts
source text into a finite, ordered list of tokens for the parser,
always terminated by exactly one EOF token.

Token Categories
----------------
- Keywords: int, return
- Identifiers: ASCII letter followed by ASCII letters/digits
- Numbers: runs of decimal digits (kept as text)
- Delimiters: ; { } ( ) =

Scanning Rules
--------------
At each position the lexer, in order:

1. skips whitespace (space, tab, newline, vertical tab, form feed, CR)
2. matches a keyword if the next character after it is not alphanumeric
   (so ``integer`` and ``returned`` are identifiers)
3. scans a maximal alphanumeric run starting with a letter
4. scans a maximal digit run
5. matches a single-character delimiter
6. otherwise emits an UNKNOWN token for that one character

The lexer never fails: UNKNOWN tokens are reported by the parser when
it reaches them. It makes a single left-to-right pass and never
backtracks.

Example Usage
-------------
>>> from chemist.minic.lexer import CLexer
>>> for token in CLexer('int main() { return 42; }', "test.c").tokenize():
...     print(token)
Token(INT, 1:1)
Token(IDENTIFIER, 'main', 1:5)
Token(LPAREN, 1:9)
Token(RPAREN, 1:10)
Token(LBRACE, 1:12)
Token(RETURN, 1:14)
Token(NUMBER, '42', 1:21)
Token(SEMICOLON, 1:23)
Token(RBRACE, 1:25)
Token(EOF, 1:26)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from chemist.errors import SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class CTokenType(Enum):
    """Token types for the mini-C language."""

    # === Keywords ===
    INT = auto()            # int
    RETURN = auto()         # return

    # === Identifiers and Literals ===
    IDENTIFIER = auto()     # variable/function names
    NUMBER = auto()         # decimal integer literals

    # === Delimiters ===
    SEMICOLON = auto()      # ;
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    ASSIGN = auto()         # =

    # === Structural ===
    EOF = auto()            # end of input
    UNKNOWN = auto()        # unrecognized character


# Keywords in the order they are tried
KEYWORDS: dict[str, CTokenType] = {
    "int": CTokenType.INT,
    "return": CTokenType.RETURN,
}

SINGLE_CHAR_TOKENS: dict[str, CTokenType] = {
    ";": CTokenType.SEMICOLON,
    "{": CTokenType.LBRACE,
    "}": CTokenType.RBRACE,
    "(": CTokenType.LPAREN,
    ")": CTokenType.RPAREN,
    "=": CTokenType.ASSIGN,
}

# Source text used in diagnostics for tokens without a payload
TOKEN_TEXT: dict[CTokenType, str] = {
    CTokenType.INT: "int",
    CTokenType.RETURN: "return",
    CTokenType.SEMICOLON: ";",
    CTokenType.LBRACE: "{",
    CTokenType.RBRACE: "}",
    CTokenType.LPAREN: "(",
    CTokenType.RPAREN: ")",
    CTokenType.ASSIGN: "=",
    CTokenType.EOF: "end of input",
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class CToken:
    """
    Represents a single token from the source.

    Attributes:
        type: The CTokenType classification
        value: Text payload for IDENTIFIER and NUMBER tokens, None otherwise
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: CTokenType
    value: Optional[str]
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def text(self) -> str:
        """Human readable text of the token for diagnostics."""
        if self.value is not None:
            return self.value
        return TOKEN_TEXT.get(self.type, self.type.name.lower())


# =============================================================================
# Lexer Implementation
# =============================================================================

class CLexer:
    """
    Tokenizes mini-C source code.

    Usage:
        lexer = CLexer(source_bytes, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    WHITESPACE = " \t\n\v\f\r"
    LETTERS = string.ascii_letters
    ALNUM = string.ascii_letters + string.digits
    DIGITS = string.digits

    def __init__(self, source: str | bytes, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source text, or raw bytes (decoded one byte per character)
            filename: Name of the source file (for error messages)
        """
        if isinstance(source, bytes):
            source = source.decode("latin-1")
        self.source = source
        self.filename = filename

        # Current position in source
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[CToken]:
        """
        Generate tokens from the source code.

        Yields:
            CToken objects in source order, ending with one EOF token
        """
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()

        yield self._make_token(CTokenType.EOF, None, self._line, self._column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without advancing; empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _make_token(
        self,
        token_type: CTokenType,
        value: Optional[str],
        line: int,
        column: int,
    ) -> CToken:
        return CToken(
            type=token_type,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in self.WHITESPACE:
            self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> CToken:
        """Scan the next token; the current character is not whitespace."""
        start_line = self._line
        start_column = self._column

        keyword = self._match_keyword()
        if keyword is not None:
            return self._make_token(keyword, None, start_line, start_column)

        char = self._peek()

        if char in self.LETTERS:
            name = self._consume_run(self.ALNUM)
            return self._make_token(CTokenType.IDENTIFIER, name, start_line, start_column)

        if char in self.DIGITS:
            digits = self._consume_run(self.DIGITS)
            return self._make_token(CTokenType.NUMBER, digits, start_line, start_column)

        self._advance()
        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[char], None, start_line, start_column)

        return self._make_token(CTokenType.UNKNOWN, None, start_line, start_column)

    def _match_keyword(self) -> Optional[CTokenType]:
        """
        Consume a keyword at the current position if one is present.

        A keyword only matches when the character following it is not
        alphanumeric, otherwise it is the prefix of an identifier.
        """
        for word, token_type in KEYWORDS.items():
            if not self.source.startswith(word, self._pos):
                continue
            following = self._peek(len(word))
            if following and following in self.ALNUM:
                continue
            for _ in word:
                self._advance()
            return token_type
        return None

    def _consume_run(self, allowed: str) -> str:
        """Consume the maximal run of characters from `allowed`."""
        chars = []
        while self._peek() and self._peek() in allowed:
            chars.append(self._advance())
        return "".join(chars)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str | bytes, filename: str = "<input>") -> list[CToken]:
    """Tokenize source into a list of tokens ending with EOF."""
    return list(CLexer(source, filename).tokenize())
