"""Concrete expression types for planframe."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .base import Expr

_OP_SYMBOLS = {
    "Add": "+",
    "Sub": "-",
    "Mul": "*",
    "Div": "/",
    "Mod": "%",
    "Eq": "=",
    "Ne": "!=",
    "Lt": "<",
    "Le": "<=",
    "Gt": ">",
    "Ge": ">=",
    "And": "AND",
    "Or": "OR",
}

UNARY_OPS = ("Not", "Neg", "IsNull", "IsNotNull")


def _join(exprs) -> str:
    return ", ".join(str(e) for e in exprs)


@dataclass(frozen=True, eq=False)
class Column(Expr):
    """
    Column reference.

    Whether the column exists is not checked here; the engine resolves the
    name against the input schema when the plan is lowered.

    Attributes:
        name (str): The column name
    """

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """
    Constant value: int, float, str, bool, None or a pyarrow scalar.

    Attributes:
        value: The Python value
    """

    value: Any

    def __str__(self) -> str:
        if isinstance(self.value, str):
            return f"'{self.value}'"
        if self.value is None:
            return "NULL"
        return str(self.value)


@dataclass(frozen=True, eq=False)
class BinaryExpr(Expr):
    """
    Binary operation: +, -, >, <, ==, &, |, etc.

    Attributes:
        op (str): Operation name ("Add", "Gt", "And", etc.)
        left (Expr): Left operand
        right (Expr): Right operand
    """

    op: str
    left: Expr
    right: Expr

    def __post_init__(self):
        if self.op not in _OP_SYMBOLS:
            raise ValueError(f"Unknown binary operator: {self.op}")

    def __str__(self) -> str:
        return f"{self.left} {_OP_SYMBOLS[self.op]} {self.right}"


@dataclass(frozen=True, eq=False)
class UnaryExpr(Expr):
    """
    Unary operation: NOT (~), negation, null checks.

    Attributes:
        op (str): One of "Not", "Neg", "IsNull", "IsNotNull"
        operand (Expr): The operand
    """

    op: str
    operand: Expr

    def __post_init__(self):
        if self.op not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator: {self.op}")

    def __str__(self) -> str:
        if self.op == "Not":
            return f"NOT {self.operand}"
        if self.op == "Neg":
            return f"(- {self.operand})"
        if self.op == "IsNull":
            return f"{self.operand} IS NULL"
        return f"{self.operand} IS NOT NULL"


@dataclass(frozen=True, eq=False)
class Cast(Expr):
    """Cast to a pyarrow data type."""

    expr: Expr
    to: Any

    def __str__(self) -> str:
        return f"CAST({self.expr} AS {self.to})"


@dataclass(frozen=True, eq=False)
class ScalarFunction(Expr):
    """
    Call of a built-in scalar function.

    Attributes:
        name (str): The host-facing name the call was built with
        engine_name (str): Engine function identifier
        args (tuple): Argument expressions
    """

    name: str
    engine_name: str
    args: Tuple[Expr, ...] = ()

    def __str__(self) -> str:
        return f"{self.engine_name}({_join(self.args)})"


@dataclass(frozen=True, eq=False)
class AggregateFunction(Expr):
    """
    Call of an aggregate function.

    Attributes:
        name (str): The host-facing name the call was built with
        engine_name (str): Engine function identifier
        args (tuple): Argument expressions (empty for ``count()``)
        distinct (bool): Aggregate distinct values only
    """

    name: str
    engine_name: str
    args: Tuple[Expr, ...] = ()
    distinct: bool = False

    def __str__(self) -> str:
        inner = _join(self.args) if self.args else "*"
        if self.distinct:
            inner = f"DISTINCT {inner}"
        return f"{self.engine_name}({inner})"


@dataclass(frozen=True)
class WindowFrame:
    """
    Window frame bounds.

    ``start``/``end`` of None mean UNBOUNDED; 0 means CURRENT ROW; a positive
    ``start`` is N PRECEDING and a positive ``end`` is N FOLLOWING.
    """

    units: str
    start: Optional[int]
    end: Optional[int]

    @classmethod
    def default(cls, has_order_by: bool) -> "WindowFrame":
        """
        The frame SQL implies when none is written.

        With ORDER BY the frame runs from the partition start to the current
        row's peers; without it the whole partition is in the frame.
        """
        if has_order_by:
            return cls("range", None, 0)
        return cls("rows", None, None)

    @staticmethod
    def _bound(value: Optional[int], side: str) -> str:
        if value is None:
            return f"UNBOUNDED {side}"
        if value == 0:
            return "CURRENT ROW"
        return f"{value} {side}"

    def __str__(self) -> str:
        return (
            f"{self.units.upper()} BETWEEN {self._bound(self.start, 'PRECEDING')} "
            f"AND {self._bound(self.end, 'FOLLOWING')}"
        )


@dataclass(frozen=True, eq=False)
class WindowFunction(Expr):
    """
    Window function call with partitioning, ordering and frame.

    Attributes:
        name (str): Host-facing window function name
        engine_name (str): Engine function identifier
        args (tuple): Argument expressions
        partition_by (tuple): Partition key expressions
        order_by (tuple): Sort expressions
        frame (WindowFrame): Frame specification
    """

    name: str
    engine_name: str
    args: Tuple[Expr, ...]
    partition_by: Tuple[Expr, ...]
    order_by: Tuple["SortExpr", ...]
    frame: WindowFrame

    def __str__(self) -> str:
        parts = [f"{self.engine_name}({_join(self.args)})"]
        if self.partition_by:
            parts.append(f"PARTITION BY [{_join(self.partition_by)}]")
        if self.order_by:
            parts.append(f"ORDER BY [{_join(self.order_by)}]")
        parts.append(str(self.frame))
        return " ".join(parts)


@dataclass(frozen=True, eq=False)
class SortExpr(Expr):
    """
    Sort specification consumed by ``DataFrame.sort`` and window ORDER BY.

    Attributes:
        expr (Expr): Expression to order by
        ascending (bool): Ascending order when True
        nulls_first (bool): Nulls sort before values when True
    """

    expr: Expr
    ascending: bool = True
    nulls_first: bool = True

    def __str__(self) -> str:
        direction = "ASC" if self.ascending else "DESC"
        nulls = "NULLS FIRST" if self.nulls_first else "NULLS LAST"
        return f"{self.expr} {direction} {nulls}"


@dataclass(frozen=True, eq=False)
class Alias(Expr):
    """Expression renamed to ``name``."""

    expr: Expr
    name: str

    def __str__(self) -> str:
        return f"{self.expr} AS {self.name}"


@dataclass(frozen=True, eq=False)
class InList(Expr):
    """
    Membership test: ``expr [NOT] IN (values...)``.

    Attributes:
        expr (Expr): Tested expression
        values (tuple): Candidate expressions
        negated (bool): NOT IN when True
    """

    expr: Expr
    values: Tuple[Expr, ...]
    negated: bool = False

    def __str__(self) -> str:
        keyword = "NOT IN" if self.negated else "IN"
        return f"{self.expr} {keyword} ([{_join(self.values)}])"
