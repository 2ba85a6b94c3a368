"""
Expression system for planframe: immutable AST nodes consumed by plans.

Nodes never evaluate anything. Python operators on an expression build new
nodes, and the engine adapter lowers the finished tree when a plan runs.

Core Classes:
  - Expr: Abstract base class for all expressions
  - Column: Column reference (e.g., col("age"))
  - Literal: Constant value (e.g., 42, "hello")
  - BinaryExpr: Binary operation (e.g., col("age") + 5, col("price") > 10)
  - UnaryExpr: NOT, negation and null checks
  - ScalarFunction / AggregateFunction / WindowFunction: function calls
  - SortExpr: Sort specification
  - Alias: Renamed expression
  - InList: Membership test

Example:
  >>> expr = (col("age") > 18) & col("name").is_not_null()
  >>> str(expr)
  'age > 18 AND name IS NOT NULL'
"""

from typing import Any

from .base import Expr
from .types import (
    Alias,
    AggregateFunction,
    BinaryExpr,
    Cast,
    Column,
    InList,
    Literal,
    ScalarFunction,
    SortExpr,
    UnaryExpr,
    WindowFrame,
    WindowFunction,
)


def col(name: str) -> Column:
    """Reference the column called ``name``."""
    if not isinstance(name, str):
        raise TypeError(f"Column name must be str, got {type(name).__name__}")
    return Column(name)


def lit(value: Any) -> Expr:
    """Wrap a Python value in a literal expression."""
    return Expr._coerce(value)


__all__ = [
    "Expr",
    "Column",
    "Literal",
    "BinaryExpr",
    "UnaryExpr",
    "Cast",
    "ScalarFunction",
    "AggregateFunction",
    "WindowFunction",
    "WindowFrame",
    "SortExpr",
    "Alias",
    "InList",
    "col",
    "lit",
]
