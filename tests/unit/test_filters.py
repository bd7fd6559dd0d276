"""
Unit tests for record filter expressions.

Tests verify formula rendering, value escaping against filter injection,
and in-memory evaluation.
"""

import pytest

from src.domain.filters import AnyOf, FieldContains, FieldEquals, escape_formula_value


class TestEscaping:
    """Tests for escape_formula_value()."""

    def test_plain_value_unchanged(self) -> None:
        assert escape_formula_value("sneakerhead") == "sneakerhead"

    def test_single_quote_escaped(self) -> None:
        """Quotes cannot terminate the formula string."""
        assert escape_formula_value("o'neil") == "o\\'neil"

    def test_backslash_escaped_before_quote(self) -> None:
        """A trailing backslash cannot swallow the closing quote."""
        assert escape_formula_value("name\\") == "name\\\\"
        assert escape_formula_value("\\'") == "\\\\\\'"


class TestFormulaRendering:
    """Tests for to_formula()."""

    def test_field_equals(self) -> None:
        assert FieldEquals("Discord ID", "123").to_formula() == "{Discord ID} = '123'"

    def test_field_contains(self) -> None:
        assert (
            FieldContains("Discord Username", "bob").to_formula()
            == "FIND('bob', {Discord Username}) > 0"
        )

    def test_any_of(self) -> None:
        formula = AnyOf(FieldContains("Name", "a"), FieldContains("Name", "b")).to_formula()
        assert formula == "OR(FIND('a', {Name}) > 0, FIND('b', {Name}) > 0)"

    def test_injection_attempt_stays_inside_string(self) -> None:
        """A crafted name cannot widen the filter to every record."""
        formula = FieldEquals("Discord ID", "x') , TRUE(), ('").to_formula()
        assert formula == "{Discord ID} = 'x\\') , TRUE(), (\\''"

    def test_any_of_requires_clauses(self) -> None:
        with pytest.raises(ValueError):
            AnyOf()


class TestMatching:
    """Tests for matches()."""

    def test_equals_matches_exact_value(self) -> None:
        assert FieldEquals("Discord ID", "123").matches({"Discord ID": "123"})
        assert not FieldEquals("Discord ID", "123").matches({"Discord ID": "1234"})

    def test_equals_compares_as_string(self) -> None:
        assert FieldEquals("Discord ID", "123").matches({"Discord ID": 123})

    def test_missing_field_never_matches(self) -> None:
        assert not FieldEquals("Discord ID", "123").matches({})
        assert not FieldContains("Discord Username", "bob").matches({})

    def test_contains_is_case_sensitive(self) -> None:
        assert FieldContains("Discord Username", "bob").matches({"Discord Username": "@bob#1"})
        assert not FieldContains("Discord Username", "Bob").matches({"Discord Username": "@bob#1"})

    def test_any_of_matches_any_clause(self) -> None:
        where = AnyOf(FieldContains("N", "x"), FieldContains("N", "y"))
        assert where.matches({"N": "aya"})
        assert not where.matches({"N": "zzz"})


class TestStructuralFilters:
    """Any object with to_formula() and matches() composes with the built-ins."""

    def test_custom_filter_in_any_of(self) -> None:
        class AlwaysTrue:
            def to_formula(self) -> str:
                return "TRUE()"

            def matches(self, fields: dict) -> bool:
                return True

        where = AnyOf(FieldEquals("Discord ID", "1"), AlwaysTrue())

        assert where.to_formula() == "OR({Discord ID} = '1', TRUE())"
        assert where.matches({})
