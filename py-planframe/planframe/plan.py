"""
Logical plan nodes.

A plan is a persistent tree: every node is frozen and holds references to
its inputs, so deriving a plan allocates one new node and shares the rest.
Plans never carry a schema; the engine derives it when asked.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .expr import Expr
from .expr.types import SortExpr
from .joins import JoinType


def _join(items) -> str:
    return ", ".join(str(i) for i in items)


class LogicalPlan:
    """Base class for plan nodes."""

    def inputs(self) -> Tuple["LogicalPlan", ...]:
        return ()

    def label(self) -> str:
        raise NotImplementedError

    def walk(self) -> Iterator["LogicalPlan"]:
        """Yield this node and every node below it, depth first."""
        yield self
        for child in self.inputs():
            yield from child.walk()

    def display_indent(self) -> str:
        """
        Render the tree one node per line, children indented under parents.

        Example:
            Limit: skip=0, fetch=2
              Filter: id > 1
                TableScan: r
        """
        lines: List[str] = []

        def visit(node: "LogicalPlan", depth: int) -> None:
            lines.append("  " * depth + node.label())
            for child in node.inputs():
                visit(child, depth + 1)

        visit(self, 0)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.display_indent()


@dataclass(frozen=True)
class Source(LogicalPlan):
    """Scan of a table registered with the engine under ``name``."""

    name: str

    def label(self) -> str:
        return f"TableScan: {self.name}"


@dataclass(frozen=True, eq=False)
class ColumnProjection(LogicalPlan):
    input: LogicalPlan
    names: Tuple[str, ...]

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Projection: {_join(self.names)}"


@dataclass(frozen=True, eq=False)
class Projection(LogicalPlan):
    input: LogicalPlan
    exprs: Tuple[Expr, ...]

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Projection: {_join(self.exprs)}"


@dataclass(frozen=True, eq=False)
class Filter(LogicalPlan):
    input: LogicalPlan
    predicate: Expr

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Filter: {self.predicate}"


@dataclass(frozen=True, eq=False)
class WithColumn(LogicalPlan):
    """Add ``name`` computed by ``expr``, or replace the column of that name."""

    input: LogicalPlan
    name: str
    expr: Expr

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"WithColumn: {self.name}={self.expr}"


@dataclass(frozen=True, eq=False)
class Aggregate(LogicalPlan):
    input: LogicalPlan
    group_by: Tuple[Expr, ...]
    aggs: Tuple[Expr, ...]

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Aggregate: groupBy=[[{_join(self.group_by)}]], aggr=[[{_join(self.aggs)}]]"


@dataclass(frozen=True, eq=False)
class Sort(LogicalPlan):
    input: LogicalPlan
    exprs: Tuple[SortExpr, ...]

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Sort: {_join(self.exprs)}"


@dataclass(frozen=True, eq=False)
class Limit(LogicalPlan):
    input: LogicalPlan
    count: int
    offset: int = 0

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return f"Limit: skip={self.offset}, fetch={self.count}"


@dataclass(frozen=True, eq=False)
class Join(LogicalPlan):
    """Equi-join pairing ``left_on[i]`` with ``right_on[i]``."""

    left: LogicalPlan
    right: LogicalPlan
    join_type: JoinType
    left_on: Tuple[str, ...]
    right_on: Tuple[str, ...]

    def inputs(self):
        return (self.left, self.right)

    def label(self) -> str:
        pairs = ", ".join(f"({l}, {r})" for l, r in zip(self.left_on, self.right_on))
        return f"{self.join_type.label} Join: {pairs}"


@dataclass(frozen=True, eq=False)
class Distinct(LogicalPlan):
    input: LogicalPlan

    def inputs(self):
        return (self.input,)

    def label(self) -> str:
        return "Distinct:"


@dataclass(frozen=True, eq=False)
class Union(LogicalPlan):
    left: LogicalPlan
    right: LogicalPlan
    distinct: bool = False

    def inputs(self):
        return (self.left, self.right)

    def label(self) -> str:
        return "Union: distinct" if self.distinct else "Union:"
