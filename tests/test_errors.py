"""Tests for formstate.errors — exception hierarchy and error messages."""

import pytest

from formstate.errors import (
    FormStateError,
    RuleResultError,
    SchemaError,
    SchemaIssue,
    StateShapeError,
    UnknownFieldError,
)


class TestHierarchy:
    def test_schema_error_is_formstate_error(self) -> None:
        assert issubclass(SchemaError, FormStateError)

    def test_state_shape_error_is_formstate_error(self) -> None:
        assert issubclass(StateShapeError, FormStateError)

    def test_unknown_field_is_key_error(self) -> None:
        assert issubclass(UnknownFieldError, FormStateError)
        assert issubclass(UnknownFieldError, KeyError)

    def test_rule_result_is_type_error(self) -> None:
        assert issubclass(RuleResultError, FormStateError)
        assert issubclass(RuleResultError, TypeError)


class TestSchemaIssue:
    def test_str_with_field(self) -> None:
        assert str(SchemaIssue("email", "validate must be callable")) == (
            "email: validate must be callable"
        )

    def test_str_without_field(self) -> None:
        assert str(SchemaIssue(None, "validate_form must be callable")) == (
            "validate_form must be callable"
        )

    def test_frozen(self) -> None:
        issue = SchemaIssue("email", "bad")
        with pytest.raises(AttributeError):
            issue.message = "worse"  # type: ignore[misc]


class TestSchemaError:
    def test_collects_issues(self) -> None:
        issues = [SchemaIssue("a", "one"), SchemaIssue(None, "two")]
        err = SchemaError(issues)
        assert err.issues == tuple(issues)

    def test_message_lists_every_issue(self) -> None:
        err = SchemaError([SchemaIssue("a", "one"), SchemaIssue("b", "two")])
        text = str(err)
        assert "2 issue(s)" in text
        assert "a: one" in text
        assert "b: two" in text


class TestUnknownFieldError:
    def test_lists_known_fields(self) -> None:
        err = UnknownFieldError("emial", ("name", "email"))
        assert err.field == "emial"
        assert "name, email" in str(err)

    def test_without_known_fields(self) -> None:
        assert str(UnknownFieldError("x")) == "Unknown field 'x'"
