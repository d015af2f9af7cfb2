"""Form state — an immutable snapshot of values, touch flags, and messages.

The caller owns the state and passes it through the engine by value.
Every change produces a new ``FormState``::

    state = init_form({"email": ""}, schema)
    state = validate_form(state.with_value("email", "a@b.co"), EDITING)
    state = validate_form(state.with_filled("email"))

The mappings are read-only views over private copies, so a state can
be shared freely between callers and threads.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from formstate.errors import UnknownFieldError

if TYPE_CHECKING:
    from formstate.messages import Message
    from formstate.schema import CompiledSchema


@dataclass(frozen=True, slots=True)
class FormState:
    """The validation state of one form instance.

    ``values``, ``filled`` and ``messages`` always carry exactly the
    schema's fields. ``is_form_valid`` is derived by the engine on every
    pass; setting it by hand has no lasting effect.

    ``schema`` travels with the state so ``validate_form`` needs nothing
    else. It is excluded from equality and repr.
    """

    values: Mapping[str, str]
    filled: Mapping[str, bool]
    messages: Mapping[str, Message | None]
    form_message: Message | None = None
    is_form_valid: bool = False
    schema: CompiledSchema = field(kw_only=True, compare=False, repr=False)

    def __post_init__(self) -> None:
        for name in ("values", "filled", "messages"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    # -- Builders --

    def with_value(self, name: str, value: str) -> FormState:
        """Return a copy with *name* set to *value*."""
        self._check(name)
        return dataclasses.replace(self, values={**self.values, name: value})

    def with_values(self, values: Mapping[str, str] | None = None, /, **kwargs: str) -> FormState:
        """Return a copy with several values replaced at once."""
        updates = {**(values or {}), **kwargs}
        for name in updates:
            self._check(name)
        return dataclasses.replace(self, values={**self.values, **updates})

    def with_filled(self, name: str, filled: bool = True) -> FormState:
        """Return a copy with the touch flag of *name* set."""
        self._check(name)
        return dataclasses.replace(self, filled={**self.filled, name: filled})

    def with_field_message(self, name: str, message: Message | None) -> FormState:
        """Return a copy with the message for *name* replaced.

        Intended for whole-form rules that want to flag a specific field.
        """
        self._check(name)
        return dataclasses.replace(self, messages={**self.messages, name: message})

    def with_form_message(self, message: Message | None) -> FormState:
        """Return a copy with the form-level message replaced."""
        return dataclasses.replace(self, form_message=message)

    # -- Introspection --

    @property
    def error_messages(self) -> dict[str, Message]:
        """Displayed field messages of kind ERROR, by field."""
        return {
            name: message
            for name, message in self.messages.items()
            if message is not None and message.is_error
        }

    def as_dict(self) -> dict[str, Any]:
        """JSON-serialisable dump of the state, for debug views and logs."""
        return {
            "values": dict(self.values),
            "filled": dict(self.filled),
            "messages": {
                name: message.as_dict() if message is not None else None
                for name, message in self.messages.items()
            },
            "form_message": self.form_message.as_dict() if self.form_message else None,
            "is_form_valid": self.is_form_valid,
        }

    def _check(self, name: str) -> None:
        if name not in self.schema:
            raise UnknownFieldError(name, self.schema.field_names)
