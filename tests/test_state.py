"""Tests for formstate.state — FormState builders and serialization."""

import json

import pytest

from formstate import FieldRule, FormRules, FormState, Message, compile_schema, init_form
from formstate.errors import UnknownFieldError


@pytest.fixture
def state() -> FormState:
    schema = compile_schema(
        FormRules(fields={"name": FieldRule(required=True), "note": FieldRule()})
    )
    return init_form({"name": "alice"}, schema)


class TestBuilders:
    def test_with_value_returns_copy(self, state: FormState) -> None:
        updated = state.with_value("note", "hi")

        assert updated.values["note"] == "hi"
        assert state.values["note"] == ""
        assert updated.schema is state.schema

    def test_with_values(self, state: FormState) -> None:
        updated = state.with_values({"name": "bob"}, note="hey")
        assert dict(updated.values) == {"name": "bob", "note": "hey"}

    def test_with_filled(self, state: FormState) -> None:
        updated = state.with_filled("name")

        assert updated.filled["name"] is True
        assert state.filled["name"] is False

    def test_with_filled_false(self, state: FormState) -> None:
        assert state.with_filled("name").with_filled("name", False).filled["name"] is False

    def test_with_field_message(self, state: FormState) -> None:
        updated = state.with_field_message("note", Message.warning("short"))
        assert updated.messages["note"] == Message.warning("short")

    def test_with_form_message(self, state: FormState) -> None:
        updated = state.with_form_message(Message.error("nope"))
        assert updated.form_message == Message.error("nope")
        assert state.form_message is None

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.with_value("age", "3"),
            lambda s: s.with_values(age="3"),
            lambda s: s.with_filled("age"),
            lambda s: s.with_field_message("age", None),
        ],
    )
    def test_unknown_field_rejected(self, state: FormState, call) -> None:
        with pytest.raises(UnknownFieldError):
            call(state)


class TestImmutability:
    def test_frozen(self, state: FormState) -> None:
        with pytest.raises(AttributeError):
            state.is_form_valid = True  # type: ignore[misc]

    def test_mappings_read_only(self, state: FormState) -> None:
        with pytest.raises(TypeError):
            state.values["name"] = "mallory"  # type: ignore[index]
        with pytest.raises(TypeError):
            state.filled["name"] = True  # type: ignore[index]
        with pytest.raises(TypeError):
            state.messages["name"] = None  # type: ignore[index]

    def test_constructor_copies_mappings(self, state: FormState) -> None:
        values = {"name": "a", "note": ""}
        copy = FormState(
            values=values,
            filled=state.filled,
            messages=state.messages,
            schema=state.schema,
        )
        values["name"] = "changed"
        assert copy.values["name"] == "a"


class TestEquality:
    def test_equal_states(self, state: FormState) -> None:
        assert state == state.with_value("note", "")

    def test_schema_not_compared(self, state: FormState) -> None:
        other_schema = compile_schema(
            FormRules(fields={"name": FieldRule(), "note": FieldRule()})
        )
        twin = FormState(
            values=state.values,
            filled=state.filled,
            messages=state.messages,
            form_message=state.form_message,
            is_form_valid=state.is_form_valid,
            schema=other_schema,
        )
        assert twin == state

    def test_repr_omits_schema(self, state: FormState) -> None:
        assert "schema" not in repr(state)


class TestIntrospection:
    def test_error_messages(self, state: FormState) -> None:
        updated = state.with_field_message("name", Message.error("bad")).with_field_message(
            "note", Message.info("fyi")
        )
        assert updated.error_messages == {"name": Message.error("bad")}

    def test_as_dict_is_json_serialisable(self, state: FormState) -> None:
        updated = state.with_field_message("name", Message.error("bad")).with_form_message(
            Message.warning("heads up")
        )
        dumped = updated.as_dict()

        assert dumped == {
            "values": {"name": "alice", "note": ""},
            "filled": {"name": False, "note": False},
            "messages": {"name": {"kind": "error", "text": "bad"}, "note": None},
            "form_message": {"kind": "warning", "text": "heads up"},
            "is_form_valid": True,
        }
        json.dumps(dumped)
