"""Built-in rules for formstate schemas.

Field validators are callables with the signature::

    def rule(value: str) -> Message | None:
        '''Return a message, or None if the value is fine.'''

Parameterized validators are factory functions that return a validator::

    def max_length(n: int) -> FieldValidator:
        def check(value: str) -> Message | None:
            if len(value) > n:
                return Message.error(f"Must be at most {n} characters")
            return None
        return check

Custom validators follow the same protocol. Returning a plain string is
shorthand for an ERROR message with that text.

Whole-form rules take the post-field-pass ``FormState`` and return the
next one; see ``fields_match()``.
"""

import re

from formstate.messages import Message, MessageKind
from formstate.schema import FieldValidator, FormRule
from formstate.state import FormState


def _message(text: str | None, default: str, kind: MessageKind) -> Message:
    return Message(kind, text or default)


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def length(
    min: int = 0,  # noqa: A002
    max: int | None = None,  # noqa: A002
    *,
    message: str | None = None,
    kind: MessageKind = MessageKind.ERROR,
) -> FieldValidator:
    """String length must lie within ``[min, max]`` (inclusive)."""
    if max is None:
        default = f"Must be at least {min} characters"
    else:
        default = f"Must be between {min} and {max} characters"

    def check(value: str) -> Message | None:
        if len(value) < min or (max is not None and len(value) > max):
            return _message(message, default, kind)
        return None

    return check


def max_length(
    n: int, *, message: str | None = None, kind: MessageKind = MessageKind.ERROR
) -> FieldValidator:
    """String must be at most *n* characters."""

    def check(value: str) -> Message | None:
        if len(value) > n:
            return _message(message, f"Must be at most {n} characters", kind)
        return None

    return check


def min_length(
    n: int, *, message: str | None = None, kind: MessageKind = MessageKind.ERROR
) -> FieldValidator:
    """String must be at least *n* characters."""

    def check(value: str) -> Message | None:
        if len(value) < n:
            return _message(message, f"Must be at least {n} characters", kind)
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: str) -> Message | None:
    """Value must be a valid email address (basic format check)."""
    if not _EMAIL_RE.match(value):
        return Message.error("Must be a valid email address")
    return None


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def first_of(*validators: FieldValidator) -> FieldValidator:
    """Run *validators* in order; the first one that objects wins.

    Mirrors listing several rules for one field::

        FieldRule(required=True, validate=first_of(min_length(8), max_length(64)))
    """

    def check(value: str) -> Message | str | None:
        for validator in validators:
            result = validator(value)
            if result:
                return result
        return None

    return check


def with_message(
    validator: FieldValidator, text: str, *, kind: MessageKind = MessageKind.ERROR
) -> FieldValidator:
    """Replace whatever *validator* says with a fixed message.

    Useful to reword a built-in::

        with_message(email, "Please give a valid email address")
    """

    def check(value: str) -> Message | None:
        if validator(value):
            return Message(kind, text)
        return None

    return check


# ---------------------------------------------------------------------------
# Whole-form rules
# ---------------------------------------------------------------------------


def fields_match(
    first: str,
    second: str,
    text: str = "Fields do not match",
    *,
    kind: MessageKind = MessageKind.ERROR,
) -> FormRule:
    """Both fields must hold the same value.

    Only checked once the user has filled both fields, so typing into
    the first of a password/confirmation pair shows nothing yet.
    """

    def check(state: FormState) -> FormState:
        if not (state.filled[first] and state.filled[second]):
            return state
        if state.values[first] != state.values[second]:
            return state.with_form_message(Message(kind, text))
        return state

    return check


def all_of(*rules: FormRule) -> FormRule:
    """Chain whole-form rules; each sees the previous one's result.

    The first form message set wins; later rules still run and may
    add field messages.
    """

    def check(state: FormState) -> FormState:
        for rule in rules:
            message = state.form_message
            state = rule(state)
            if message is not None:
                state = state.with_form_message(message)
        return state

    return check
