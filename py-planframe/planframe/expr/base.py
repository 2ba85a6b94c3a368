"""Base expression class for planframe."""

from typing import Any, Iterable


class Expr:
    """
    Abstract base class for expression nodes.

    Expressions are immutable trees. Python operators build new nodes instead
    of evaluating anything, so ``col("id") > 1`` is a ``BinaryExpr`` that the
    engine evaluates later.
    """

    __slots__ = ()

    # Operators build nodes, so identity is the only sensible hash.
    def __hash__(self) -> int:
        return id(self)

    def __bool__(self):
        raise TypeError(
            "Expressions have no truth value; combine them with &, | and ~ "
            "instead of and, or and not"
        )

    # Comparison operators

    def __eq__(self, other: Any) -> "BinaryExpr":  # type: ignore[override]
        from .types import BinaryExpr

        return BinaryExpr("Eq", self, self._coerce(other))

    def __ne__(self, other: Any) -> "BinaryExpr":  # type: ignore[override]
        from .types import BinaryExpr

        return BinaryExpr("Ne", self, self._coerce(other))

    def __lt__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Lt", self, self._coerce(other))

    def __le__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Le", self, self._coerce(other))

    def __gt__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Gt", self, self._coerce(other))

    def __ge__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Ge", self, self._coerce(other))

    # Arithmetic operators

    def __add__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Add", self, self._coerce(other))

    def __sub__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Sub", self, self._coerce(other))

    def __mul__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Mul", self, self._coerce(other))

    def __truediv__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Div", self, self._coerce(other))

    def __mod__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Mod", self, self._coerce(other))

    def __radd__(self, other: Any) -> "BinaryExpr":
        """Right addition: other + expr"""
        from .types import BinaryExpr

        return BinaryExpr("Add", self._coerce(other), self)

    def __rsub__(self, other: Any) -> "BinaryExpr":
        """Right subtraction: other - expr"""
        from .types import BinaryExpr

        return BinaryExpr("Sub", self._coerce(other), self)

    def __rmul__(self, other: Any) -> "BinaryExpr":
        """Right multiplication: other * expr"""
        from .types import BinaryExpr

        return BinaryExpr("Mul", self._coerce(other), self)

    def __rtruediv__(self, other: Any) -> "BinaryExpr":
        """Right division: other / expr"""
        from .types import BinaryExpr

        return BinaryExpr("Div", self._coerce(other), self)

    def __rmod__(self, other: Any) -> "BinaryExpr":
        """Right modulo: other % expr"""
        from .types import BinaryExpr

        return BinaryExpr("Mod", self._coerce(other), self)

    # Boolean operators

    def __and__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("And", self, self._coerce(other))

    def __or__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Or", self, self._coerce(other))

    def __rand__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("And", self._coerce(other), self)

    def __ror__(self, other: Any) -> "BinaryExpr":
        from .types import BinaryExpr

        return BinaryExpr("Or", self._coerce(other), self)

    def __invert__(self) -> "UnaryExpr":
        from .types import UnaryExpr

        return UnaryExpr("Not", self)

    def __neg__(self) -> "UnaryExpr":
        from .types import UnaryExpr

        return UnaryExpr("Neg", self)

    # Builders

    def alias(self, name: str) -> "Alias":
        """
        Rename the output of this expression.

        Example:
            >>> (col("price") * 2).alias("double_price")
        """
        from .types import Alias

        return Alias(self, name)

    def sort(self, ascending: bool = True, nulls_first: bool = True) -> "SortExpr":
        """
        Wrap this expression in a sort specification for ``DataFrame.sort``.

        Example:
            >>> df.sort(col("age").sort(ascending=False))
        """
        from .types import SortExpr

        return SortExpr(self, ascending, nulls_first)

    def cast(self, to) -> "Cast":
        """
        Cast to an Arrow data type.

        Args:
            to: A ``pyarrow.DataType`` (e.g. ``pa.float64()``)

        Example:
            >>> col("amount").cast(pa.float64())
        """
        from .types import Cast

        return Cast(self, to)

    def is_null(self) -> "UnaryExpr":
        """True where the value is null."""
        from .types import UnaryExpr

        return UnaryExpr("IsNull", self)

    def is_not_null(self) -> "UnaryExpr":
        """True where the value is not null."""
        from .types import UnaryExpr

        return UnaryExpr("IsNotNull", self)

    def between(self, low: Any, high: Any) -> "BinaryExpr":
        """
        Check if the value is between low and high (inclusive).

        Equivalent to: (expr >= low) & (expr <= high)
        """
        return (self >= self._coerce(low)) & (self <= self._coerce(high))

    def is_in(self, values: Iterable[Any], negated: bool = False) -> "InList":
        """
        Membership test against a list of values.

        Equivalent to SQL: expr IN (v1, v2, ...)
        """
        from .types import InList

        return InList(self, tuple(self._coerce(v) for v in values), negated)

    @staticmethod
    def _coerce(value: Any) -> "Expr":
        """Wrap Python values in a Literal; leave expressions untouched."""
        if isinstance(value, Expr):
            return value
        from .types import Literal

        return Literal(value)
