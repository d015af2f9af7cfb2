"""formstate — declarative form validation as pure state transitions.

Declare rules once, then feed every edit through ``validate_form``::

    from formstate import EDITING, FieldRule, FormRules, init_form, validate_form
    from formstate.rules import email, fields_match, length

    rules = FormRules(
        fields={
            "display_name": FieldRule(required=True, trim=True, validate=length(5, 30)),
            "email": FieldRule(required=True, trim=True, validate=email),
            "password1": FieldRule(required=True, trim=True),
            "password2": FieldRule(required=True, trim=True),
        },
        validate_form=fields_match("password1", "password2", "Password do not match"),
    )

    form = init_form({}, rules)
    form = validate_form(form.with_value("email", "al"), EDITING)   # typing
    form = validate_form(form.with_filled("email"))                 # blur
    form.messages["email"]   # Message(kind=ERROR, text='Must be a valid email address')
    form.is_form_valid       # False

``FormSession`` wraps the same calls for callers that want one object
holding the current state.
"""

from formstate.config import COMMIT, EDITING, ValidationConfig
from formstate.engine import compute_validity, init_form, validate_form
from formstate.errors import (
    FormStateError,
    RuleResultError,
    SchemaError,
    SchemaIssue,
    StateShapeError,
    UnknownFieldError,
)
from formstate.messages import Message, MessageKind
from formstate.schema import CompiledSchema, FieldRule, FormRules, compile_schema
from formstate.session import FormSession
from formstate.state import FormState

__version__ = "0.1.0-dev"
__all__ = [
    "COMMIT",
    "EDITING",
    "CompiledSchema",
    "FieldRule",
    "FormRules",
    "FormSession",
    "FormState",
    "FormStateError",
    "Message",
    "MessageKind",
    "RuleResultError",
    "SchemaError",
    "SchemaIssue",
    "StateShapeError",
    "UnknownFieldError",
    "ValidationConfig",
    "compile_schema",
    "compute_validity",
    "init_form",
    "validate_form",
]
