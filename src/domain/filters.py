"""
Record filter expressions.

Filters are small immutable trees of field predicates. Each node can
render itself as a record-store formula (Airtable formula syntax) and
evaluate itself against a plain field mapping, so the same filter drives
both the remote store and in-memory stores.

Every value interpolated into a formula passes through escape_formula_value()
to prevent filter injection through user-controlled names.
"""

from dataclasses import dataclass
from typing import Any, Protocol


def escape_formula_value(value: str) -> str:
    """
    Escape a value for use inside a single-quoted formula string.

    Backslashes are escaped first so an input ending in a backslash cannot
    swallow the closing quote.
    """
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _field_ref(name: str) -> str:
    return "{" + name + "}"


class Filter(Protocol):
    """
    Interface for filter expressions.

    Implementations use structural subtyping - no explicit inheritance.
    """

    def to_formula(self) -> str:
        """Render as a record-store formula with every value escaped."""
        ...

    def matches(self, fields: dict[str, Any]) -> bool:
        """Evaluate against a record's field mapping."""
        ...


@dataclass(frozen=True)
class FieldEquals:
    """Field value equals the given string."""

    field: str
    value: str

    def to_formula(self) -> str:
        return f"{_field_ref(self.field)} = '{escape_formula_value(self.value)}'"

    def matches(self, fields: dict[str, Any]) -> bool:
        stored = fields.get(self.field)
        return stored is not None and str(stored) == self.value


@dataclass(frozen=True)
class FieldContains:
    """Field value contains the given string (case-sensitive)."""

    field: str
    value: str

    def to_formula(self) -> str:
        return f"FIND('{escape_formula_value(self.value)}', {_field_ref(self.field)}) > 0"

    def matches(self, fields: dict[str, Any]) -> bool:
        stored = fields.get(self.field)
        return stored is not None and self.value in str(stored)


@dataclass(frozen=True, init=False)
class AnyOf:
    """Disjunction of filters."""

    clauses: tuple[Filter, ...]

    def __init__(self, *clauses: Filter) -> None:
        if not clauses:
            raise ValueError("AnyOf requires at least one clause")
        object.__setattr__(self, "clauses", tuple(clauses))

    def to_formula(self) -> str:
        return "OR(" + ", ".join(c.to_formula() for c in self.clauses) + ")"

    def matches(self, fields: dict[str, Any]) -> bool:
        return any(c.matches(fields) for c in self.clauses)

