"""
Per-Function Scope Table
========================

Maps local variable names to stack offsets below the frame base (rbp).

Every variable occupies one 8-byte slot. Offsets are handed out in
declaration order starting at 8, so the n-th declared variable lives
at [rbp - 8*n] and the frame reservation equals 8 times the number of
declared variables. There is no block scoping or shadowing: a function
has a single flat namespace and a slot is never reused.

The code generator owns one ScopeTable and resets it at the start of
each function.

Usage
-----
>>> scope = ScopeTable()
>>> scope.declare("x")
8
>>> scope.declare("y")
16
>>> scope.resolve("x")
8
>>> scope.frame_size
16
"""

from dataclasses import dataclass
from typing import Optional

from chemist.errors import SourceLocation
from chemist.minic.errors import DuplicateDeclarationError, UndeclaredIdentifierError


# Width of one stack slot in bytes
SLOT_SIZE = 8


@dataclass
class SymbolInfo:
    """
    Information about a local variable.

    Attributes:
        name: Variable name
        offset: Byte offset below the frame base
        location: Where the variable was declared
    """
    name: str
    offset: int
    location: Optional[SourceLocation] = None


class ScopeTable:
    """Ordered name -> stack offset mapping for the function being generated."""

    def __init__(self):
        self._symbols: dict[str, SymbolInfo] = {}
        self._size = 0

    def reset(self) -> None:
        """Clear all bindings and the offset accumulator."""
        self._symbols = {}
        self._size = 0

    def declare(self, name: str, location: Optional[SourceLocation] = None) -> int:
        """
        Bind a new variable to the next free slot.

        Returns:
            The offset assigned to the variable

        Raises:
            DuplicateDeclarationError: If `name` is already declared
        """
        existing = self._symbols.get(name)
        if existing is not None:
            raise DuplicateDeclarationError(
                name,
                location=location,
                original_location=existing.location,
            )

        self._size += SLOT_SIZE
        self._symbols[name] = SymbolInfo(name=name, offset=self._size, location=location)
        return self._size

    def resolve(self, name: str, location: Optional[SourceLocation] = None) -> int:
        """
        Look up the offset of a declared variable.

        Raises:
            UndeclaredIdentifierError: If `name` was never declared
        """
        symbol = self._symbols.get(name)
        if symbol is None:
            raise UndeclaredIdentifierError(
                name,
                location=location,
                similar_identifiers=self._find_similar(name),
            )
        return symbol.offset

    def _find_similar(self, name: str) -> list[str]:
        """Declared names within a small edit distance of `name`."""
        name_lower = name.lower()
        similar = []
        for other in self._symbols:
            other_lower = other.lower()
            if (
                other_lower == name_lower or
                abs(len(other) - len(name)) <= 1 and
                _edit_distance(name_lower, other_lower) <= 2
            ):
                similar.append(other)
        return similar[:3]

    @property
    def frame_size(self) -> int:
        """Bytes of stack reserved for the declared variables."""
        return self._size

    def names(self) -> list[str]:
        """Declared names in declaration order."""
        return list(self._symbols)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        row = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                row.append(distances[j])
            else:
                row.append(1 + min(distances[j], distances[j + 1], row[-1]))
        distances = row

    return distances[-1]
