"""The validation engine — pure state transitions over ``FormState``.

Two entry points::

    state = init_form({"email": ""}, schema)        # build the first state
    state = validate_form(next_state, config)       # produce the next one

Each pass runs in two stages:

1. **Field pass** — for every field in declaration order: optionally trim
   (destructively, when ``config.use_preprocessor`` is set), check
   requiredness, then run the custom validator. The outcome is displayed
   in ``messages`` only once the field has been ``filled`` (blurred).
2. **Whole-form pass** — the schema's ``form_rule`` sees the
   post-field-pass state and returns the next one. ``form_message`` is
   cleared before the rule runs, so it never carries over.

``is_form_valid`` is recomputed from scratch at the end. Requiredness is
judged on values, not on displayed messages: an untouched required field
with no value keeps the form invalid without ever showing a message.

Nothing here performs I/O or mutates its input. Exceptions raised by a
caller's validator or form rule propagate unchanged.
"""

import dataclasses
import logging
from collections.abc import Mapping

from formstate.config import ValidationConfig
from formstate.errors import FormStateError, RuleResultError, StateShapeError, UnknownFieldError
from formstate.messages import Message
from formstate.schema import CompiledSchema, FieldRule, FormRule, FormRules, compile_schema
from formstate.state import FormState

logger = logging.getLogger("formstate.engine")

_DEFAULT_CONFIG = ValidationConfig()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def init_form(
    initial_values: Mapping[str, str | None] | None,
    schema: CompiledSchema | FormRules | Mapping,
    *,
    filled: Mapping[str, bool] | None = None,
    config: ValidationConfig | None = None,
) -> FormState:
    """Build the first state of a form and run one validation pass on it.

    Args:
        initial_values: Starting values. Fields missing here (or ``None``)
            start as ``""``. Keys the schema does not declare are dropped.
        schema: A compiled schema, or anything ``compile_schema`` accepts.
        filled: Optional touch-flag seed; every field defaults to ``False``,
            so no message is visible on first render.
        config: Options for the initial pass (defaults to trimming on).

    Raises:
        SchemaError: If *schema* needs compiling and is malformed.
        FormStateError: If an initial value is not a string.
        UnknownFieldError: If *filled* names an undeclared field.
    """
    compiled = compile_schema(schema)
    initial = initial_values or {}

    values: dict[str, str] = {}
    for name in compiled.field_names:
        value = initial.get(name)
        if value is None:
            value = ""
        elif not isinstance(value, str):
            msg = f"Initial value for {name!r} must be a string, got {type(value).__name__}"
            raise FormStateError(msg)
        values[name] = value

    dropped = [str(key) for key in initial if key not in compiled]
    if dropped:
        logger.debug("Ignoring initial values for undeclared fields: %s", ", ".join(dropped))

    seed = filled or {}
    for name in seed:
        if name not in compiled:
            raise UnknownFieldError(name, compiled.field_names)

    state = FormState(
        values=values,
        filled={name: bool(seed.get(name, False)) for name in compiled.field_names},
        messages=dict.fromkeys(compiled.field_names),
        schema=compiled,
    )
    return validate_form(state, config or _DEFAULT_CONFIG)


def validate_form(state: FormState, config: ValidationConfig = _DEFAULT_CONFIG) -> FormState:
    """Run a full validation pass and return the next state.

    The input state is never modified.

    Raises:
        StateShapeError: If the state's keys do not match its schema, or
            the whole-form rule returns a state that does not.
        RuleResultError: If a validator or the whole-form rule returns
            the wrong type.
    """
    schema = state.schema
    _check_shape(state, schema)

    values = dict(state.values)
    messages: dict[str, Message | None] = {}

    for name in schema.field_names:
        rule = schema.fields[name]
        value = values[name].strip() if rule.trim else values[name]
        if rule.trim and config.use_preprocessor:
            values[name] = value

        outcome = _field_outcome(name, rule, value, config)
        # Untouched fields never display a message.
        messages[name] = outcome if state.filled[name] else None

    checked = dataclasses.replace(state, values=values, messages=messages, form_message=None)
    checked = dataclasses.replace(checked, is_form_valid=_is_valid(checked))

    if schema.form_rule is not None:
        checked = _apply_form_rule(schema.form_rule, checked)

    result = dataclasses.replace(checked, is_form_valid=_is_valid(checked))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Validated %d field(s) (preprocess=%s): %d displayed error(s), form_message=%r, valid=%s",
            len(schema.field_names),
            config.use_preprocessor,
            len(result.error_messages),
            result.form_message,
            result.is_form_valid,
        )
    return result


def compute_validity(state: FormState) -> bool:
    """Derive ``is_form_valid`` for *state* without running a full pass.

    True iff no displayed field message or form message is an ERROR and
    every required field has a non-blank value, touched or not.
    """
    return _is_valid(state)


# ---------------------------------------------------------------------------
# Field pass
# ---------------------------------------------------------------------------


def _field_outcome(
    name: str, rule: FieldRule, value: str, config: ValidationConfig
) -> Message | None:
    """What the rules say about *value*, before display gating."""
    if rule.required and not value.strip():
        if rule.required_message is not None:
            return Message.error(rule.required_message)
        return Message.error(config.required_template.format(label=rule.label or name))

    if rule.validate is None:
        return None
    return _coerce_result(name, rule.validate(value))


def _coerce_result(name: str, result: object) -> Message | None:
    if isinstance(result, Message):
        return result
    if not result:
        return None
    if isinstance(result, str):
        return Message.error(result)
    msg = (
        f"Validator for {name!r} returned {type(result).__name__}; "
        "expected Message, str, or None"
    )
    raise RuleResultError(msg)


def _is_valid(state: FormState) -> bool:
    if state.form_message is not None and state.form_message.is_error:
        return False
    if state.error_messages:
        return False
    # Requiredness is judged on values, not on messages: an untouched
    # required field shows nothing yet still blocks the form.
    return all(state.values[name].strip() for name in state.schema.required_fields)


# ---------------------------------------------------------------------------
# Whole-form pass
# ---------------------------------------------------------------------------


def _apply_form_rule(rule: FormRule, state: FormState) -> FormState:
    result = rule(state)
    if not isinstance(result, FormState):
        msg = f"Whole-form rule returned {type(result).__name__}; expected FormState"
        raise RuleResultError(msg)

    names = state.schema.field_names
    merged: dict[str, dict] = {}
    for attr in ("values", "filled", "messages"):
        returned = getattr(result, attr)
        extra = [str(key) for key in returned if key not in state.schema]
        if extra:
            msg = f"Whole-form rule returned {attr} for undeclared fields: {', '.join(extra)}"
            raise StateShapeError(msg)
        # Keys the rule left out keep their post-field-pass entries.
        previous = getattr(state, attr)
        merged[attr] = {name: returned.get(name, previous[name]) for name in names}

    # Field messages were computed from these values; a rewrite would leave
    # them describing values the form no longer holds.
    changed = [name for name in names if merged["values"][name] != state.values[name]]
    if changed:
        msg = f"Whole-form rule may not change values (changed: {', '.join(changed)})"
        raise StateShapeError(msg)
    for name, message in merged["messages"].items():
        if message is not None and not isinstance(message, Message):
            msg = f"Whole-form rule set message for {name!r} to {type(message).__name__}"
            raise RuleResultError(msg)
    if result.form_message is not None and not isinstance(result.form_message, Message):
        msg = f"Whole-form rule set form_message to {type(result.form_message).__name__}"
        raise RuleResultError(msg)

    return dataclasses.replace(
        result,
        values=merged["values"],
        filled=merged["filled"],
        messages=merged["messages"],
        schema=state.schema,
    )


# ---------------------------------------------------------------------------
# Shape checks
# ---------------------------------------------------------------------------


def _check_shape(state: FormState, schema: CompiledSchema) -> None:
    expected = set(schema.field_names)
    for attr in ("values", "filled", "messages"):
        keys = set(getattr(state, attr))
        if keys != expected:
            missing = ", ".join(sorted(expected - keys)) or "-"
            extra = ", ".join(sorted(str(key) for key in keys - expected)) or "-"
            msg = f"FormState.{attr} does not match schema (missing: {missing}; extra: {extra})"
            raise StateShapeError(msg)
    for name, value in state.values.items():
        if not isinstance(value, str):
            msg = f"Value for {name!r} must be a string, got {type(value).__name__}"
            raise StateShapeError(msg)
