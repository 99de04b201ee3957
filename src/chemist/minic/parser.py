"""
Mini-C Recursive Descent Parser
===============================

This module implements a recursive descent parser for the mini-C
language. It takes the token list from the lexer and builds an
Abstract Syntax Tree (AST).

Grammar (EBNF)
--------------
program       ::= function_decl*
function_decl ::= 'int' IDENTIFIER '(' ')' '{' statement* '}'
statement     ::= return_stmt ';' | var_decl ';' | var_assign ';' | call ';'
return_stmt   ::= 'return' value
var_decl      ::= 'int' IDENTIFIER ('=' value)?
var_assign    ::= IDENTIFIER '=' value
call          ::= IDENTIFIER '(' ')'
value         ::= NUMBER | IDENTIFIER ('(' ')')?

Disambiguation
--------------
An IDENTIFIER at the start of a statement is an assignment when the
next token is '=' and a call when it is '('. In value position an
IDENTIFIER followed by '(' is a call, otherwise a variable reference.
One token of lookahead is always enough.

There is no error recovery: the first grammar violation raises a
CSyntaxError and parsing stops.

Example Usage
-------------
>>> from chemist.minic.parser import parse_source
>>> ast = parse_source('int main() { return 42; }')
>>> ast.functions[0].name
'main'
"""

from typing import Optional

from chemist.errors import SourceLocation
from chemist.minic.lexer import CLexer, CToken, CTokenType
from chemist.minic.ast import (
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    VariableDeclaration,
    AssignmentStatement,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
    Statement,
    Value,
)
from chemist.minic.errors import (
    InvalidCharacterError,
    LiteralRangeError,
    MissingTokenError,
    UnexpectedTokenError,
)


# Largest value of the 32-bit int type
INT_MAX = 2**31 - 1


class CParser:
    """
    Recursive descent parser for mini-C.

    The parser owns a single forward cursor over the token list.

    Attributes:
        tokens: List of tokens to parse (must end with EOF)
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[CToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        # Current position in token stream
        self._pos = 0

    def parse(self) -> ProgramNode:
        """
        Parse the token stream into an AST.

        Returns:
            ProgramNode containing all functions in source order

        Raises:
            CSyntaxError: On the first grammar violation
        """
        functions = []
        while not self._at_end():
            functions.append(self._parse_function())

        return ProgramNode(
            location=SourceLocation(self.filename, 1, 1),
            functions=functions,
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._peek().type == CTokenType.EOF

    def _peek(self, offset: int = 0) -> CToken:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[pos]

    def _advance(self) -> CToken:
        """Consume and return the current token."""
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _check(self, *types: CTokenType) -> bool:
        return self._peek().type in types

    def _expect(self, token_type: CTokenType, message: str) -> CToken:
        """
        Expect and consume a specific token type.

        Args:
            token_type: The expected token type
            message: Description of the expected token for the error

        Raises:
            MissingTokenError: If the current token does not match
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        self._reject_unknown(current)
        raise MissingTokenError(
            message,
            found=current.text,
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _unexpected(self, expected: str) -> UnexpectedTokenError:
        """Build the error for the current token not starting `expected`."""
        current = self._peek()
        self._reject_unknown(current)
        return UnexpectedTokenError(
            current.text,
            expected=expected,
            location=current.location,
            source_line=self._get_source_line(current.line),
        )

    def _reject_unknown(self, token: CToken) -> None:
        """Report an unrecognized character as such rather than as a bad token."""
        if token.type != CTokenType.UNKNOWN:
            return
        source_line = self._get_source_line(token.line)
        char = ""
        if source_line is not None and 0 < token.column <= len(source_line):
            char = source_line[token.column - 1]
        raise InvalidCharacterError(char, token.location, source_line)

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_function(self) -> FunctionNode:
        """Parse 'int' IDENTIFIER '(' ')' '{' statement* '}'."""
        self._expect(CTokenType.INT, "'int'")

        if not self._check(CTokenType.IDENTIFIER):
            raise self._unexpected("function name")
        name_token = self._advance()

        # Functions take no parameters
        self._expect(CTokenType.LPAREN, "'('")
        self._expect(CTokenType.RPAREN, "')'")
        self._expect(CTokenType.LBRACE, "'{'")

        body = []
        while not self._check(CTokenType.RBRACE):
            body.append(self._parse_statement())

        self._expect(CTokenType.RBRACE, "'}'")

        return FunctionNode(
            location=name_token.location,
            name=name_token.value,
            body=body,
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse one statement including its terminating ';'."""
        token = self._peek()

        if token.type == CTokenType.RETURN:
            stmt = self._parse_return_statement()
        elif token.type == CTokenType.INT:
            stmt = self._parse_variable_declaration()
        elif token.type == CTokenType.IDENTIFIER:
            next_type = self._peek(1).type
            if next_type == CTokenType.ASSIGN:
                stmt = self._parse_assignment()
            elif next_type == CTokenType.LPAREN:
                stmt = self._parse_call()
            else:
                self._advance()
                raise self._unexpected("'=' or '(' after identifier")
        else:
            raise self._unexpected("statement")

        self._expect(CTokenType.SEMICOLON, "';'")
        return stmt

    def _parse_return_statement(self) -> ReturnStatement:
        location = self._expect(CTokenType.RETURN, "'return'").location
        value = self._parse_value()
        return ReturnStatement(location=location, value=value)

    def _parse_variable_declaration(self) -> VariableDeclaration:
        """Parse 'int' IDENTIFIER ('=' value)?."""
        self._expect(CTokenType.INT, "'int'")

        if not self._check(CTokenType.IDENTIFIER):
            raise self._unexpected("variable name")
        name_token = self._advance()

        initializer = None
        if self._check(CTokenType.ASSIGN):
            self._advance()
            initializer = self._parse_value()

        return VariableDeclaration(
            location=name_token.location,
            name=name_token.value,
            initializer=initializer,
        )

    def _parse_assignment(self) -> AssignmentStatement:
        name_token = self._expect(CTokenType.IDENTIFIER, "variable name")
        self._expect(CTokenType.ASSIGN, "'='")
        value = self._parse_value()
        return AssignmentStatement(
            location=name_token.location,
            name=name_token.value,
            value=value,
        )

    def _parse_call(self) -> CallExpression:
        """Parse IDENTIFIER '(' ')'."""
        name_token = self._expect(CTokenType.IDENTIFIER, "function name")
        self._expect(CTokenType.LPAREN, "'('")
        self._expect(CTokenType.RPAREN, "')'")  # no arguments
        return CallExpression(
            location=name_token.location,
            function_name=name_token.value,
        )

    # =========================================================================
    # Values
    # =========================================================================

    def _parse_value(self) -> Value:
        """Parse NUMBER | IDENTIFIER ('(' ')')?."""
        token = self._peek()

        if token.type == CTokenType.NUMBER:
            self._advance()
            value = int(token.value)
            if value > INT_MAX:
                raise LiteralRangeError(
                    token.value,
                    INT_MAX,
                    location=token.location,
                    source_line=self._get_source_line(token.line),
                )
            return NumberLiteral(location=token.location, value=value)

        if token.type == CTokenType.IDENTIFIER:
            if self._peek(1).type == CTokenType.LPAREN:
                return self._parse_call()
            self._advance()
            return IdentifierExpression(location=token.location, name=token.value)

        raise self._unexpected("number, variable or function call")


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str | bytes, filename: str = "<input>") -> ProgramNode:
    """
    Parse mini-C source code into an AST.

    Combines lexing and parsing.

    Raises:
        CSyntaxError: If parsing fails
    """
    lexer = CLexer(source, filename)
    tokens = list(lexer.tokenize())
    parser = CParser(tokens, filename, lexer.source.split("\n"))
    return parser.parse()
