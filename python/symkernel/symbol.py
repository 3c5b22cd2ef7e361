# SymKernel - Symbols
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Named variables carrying an algebraic type tag.

The tag decides commutativity: scalar symbols commute with everything,
while matrix, operator and quaternion symbols do not commute with each other
(or with themselves) under multiplication.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class SymbolType(Enum):
    """Algebraic type of a symbol."""
    SCALAR = "scalar"
    MATRIX = "matrix"
    OPERATOR = "operator"
    QUATERNION = "quaternion"


# Position of each tag in the canonical ordering
SYMBOL_TYPE_RANK = {
    SymbolType.SCALAR: 0,
    SymbolType.MATRIX: 1,
    SymbolType.OPERATOR: 2,
    SymbolType.QUATERNION: 3,
}


@dataclass(frozen=True)
class Symbol:
    """A symbol is equal to another iff both name and type tag match."""
    name: str
    symbol_type: SymbolType = SymbolType.SCALAR

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Symbol name must be a string, got {type(self.name).__name__}")
        if not self.name:
            raise ValueError("Symbol name cannot be empty")
        if isinstance(self.symbol_type, str):
            object.__setattr__(self, 'symbol_type', SymbolType(self.symbol_type))

    def is_commutative(self) -> bool:
        return self.symbol_type is SymbolType.SCALAR

    def sort_key(self) -> tuple:
        return (self.name, SYMBOL_TYPE_RANK[self.symbol_type])

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        if self.symbol_type is SymbolType.SCALAR:
            return f"Symbol('{self.name}')"
        return f"Symbol('{self.name}', {self.symbol_type.value})"
