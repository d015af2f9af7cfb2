"""Form schemas — declare the rules, compile them once.

A schema maps field names to ``FieldRule`` objects and may carry a
whole-form rule for cross-field checks::

    from formstate import FieldRule, FormRules, compile_schema
    from formstate.rules import email, fields_match, length

    schema = compile_schema(FormRules(
        fields={
            "display_name": FieldRule(required=True, trim=True, validate=length(5, 30)),
            "email": FieldRule(required=True, trim=True, validate=email),
            "password1": FieldRule(required=True, trim=True),
            "password2": FieldRule(required=True, trim=True),
        },
        validate_form=fields_match("password1", "password2", "Password do not match"),
    ))

Plain mappings work too, which is handy when rules come from config::

    compile_schema({
        "fields": {"email": {"required": True, "validate": email}},
    })

Compilation is purely structural: it checks shapes and callables and
never runs a rule. Every problem is collected and reported in a single
``SchemaError``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from formstate.errors import SchemaError, SchemaIssue, UnknownFieldError

if TYPE_CHECKING:
    from formstate.messages import Message
    from formstate.state import FormState

# A field validator receives the (possibly trimmed) value and returns a
# Message, an error string, or None when the value is fine.
FieldValidator: TypeAlias = "Callable[[str], Message | str | None]"

# A whole-form rule receives the post-field-pass state and returns the next one.
FormRule: TypeAlias = "Callable[[FormState], FormState]"

_FIELD_KEYS = frozenset({"required", "trim", "validate", "label", "required_message"})
_TOP_LEVEL_KEYS = frozenset({"fields", "validate_form"})


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Validation rules for a single field.

    ``label`` names the field in the built-in required message
    (defaults to the field name). ``required_message`` replaces that
    message entirely.
    """

    required: bool = False
    trim: bool = False
    validate: FieldValidator | None = None
    label: str | None = None
    required_message: str | None = None


@dataclass(frozen=True, slots=True)
class FormRules:
    """Uncompiled form schema: field rules plus an optional whole-form rule."""

    fields: Mapping[str, FieldRule | Mapping[str, Any]]
    validate_form: FormRule | None = None


@dataclass(frozen=True, slots=True)
class CompiledSchema:
    """A validated, read-only schema ready for the engine.

    ``fields`` preserves declaration order, which is the order the
    engine evaluates fields in.
    """

    fields: Mapping[str, FieldRule]
    form_rule: FormRule | None = None
    field_names: tuple[str, ...] = field(init=False)
    required_fields: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        frozen = MappingProxyType(dict(self.fields))
        object.__setattr__(self, "fields", frozen)
        object.__setattr__(self, "field_names", tuple(frozen))
        object.__setattr__(
            self,
            "required_fields",
            tuple(name for name, rule in frozen.items() if rule.required),
        )

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def rule(self, name: str) -> FieldRule:
        """Return the rule for *name*, raising ``UnknownFieldError`` if undeclared."""
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownFieldError(name, self.field_names) from None


def compile_schema(raw: CompiledSchema | FormRules | Mapping[str, Any]) -> CompiledSchema:
    """Validate and normalize a raw schema into a ``CompiledSchema``.

    Args:
        raw: A ``FormRules`` instance, a mapping with ``"fields"`` and an
            optional ``"validate_form"``, or an already compiled schema
            (returned as is).

    Raises:
        SchemaError: With every structural problem found.
    """
    if isinstance(raw, CompiledSchema):
        return raw

    issues: list[SchemaIssue] = []

    if isinstance(raw, FormRules):
        raw_fields: Any = raw.fields
        form_rule: Any = raw.validate_form
    elif isinstance(raw, Mapping):
        for key in raw:
            if key not in _TOP_LEVEL_KEYS:
                issues.append(SchemaIssue(None, f"unknown schema key {key!r}"))
        raw_fields = raw.get("fields", {})
        form_rule = raw.get("validate_form")
    else:
        raise SchemaError(
            [SchemaIssue(None, f"schema must be FormRules or a mapping, got {type(raw).__name__}")]
        )

    if form_rule is not None and not callable(form_rule):
        issues.append(SchemaIssue(None, "validate_form must be callable"))

    compiled: dict[str, FieldRule] = {}
    if not isinstance(raw_fields, Mapping):
        issues.append(SchemaIssue(None, "fields must be a mapping of field name to rule"))
    else:
        for name, entry in raw_fields.items():
            rule = _compile_field(name, entry, issues)
            if rule is not None:
                compiled[name] = rule

    if issues:
        raise SchemaError(issues)
    return CompiledSchema(fields=compiled, form_rule=form_rule)


def _compile_field(name: Any, entry: Any, issues: list[SchemaIssue]) -> FieldRule | None:
    if not isinstance(name, str) or not name:
        issues.append(SchemaIssue(None, f"field names must be non-empty strings, got {name!r}"))
        return None

    if isinstance(entry, FieldRule):
        rule = entry
    elif isinstance(entry, Mapping):
        unknown = sorted(str(key) for key in entry if key not in _FIELD_KEYS)
        for key in unknown:
            issues.append(SchemaIssue(name, f"unknown rule key {key!r}"))
        rule = FieldRule(
            required=entry.get("required", False),
            trim=entry.get("trim", False),
            validate=entry.get("validate"),
            label=entry.get("label"),
            required_message=entry.get("required_message"),
        )
    else:
        issues.append(
            SchemaIssue(name, f"rule must be FieldRule or a mapping, got {type(entry).__name__}")
        )
        return None

    before = len(issues)
    for flag in ("required", "trim"):
        if not isinstance(getattr(rule, flag), bool):
            issues.append(SchemaIssue(name, f"{flag} must be a bool"))
    for text in ("label", "required_message"):
        value = getattr(rule, text)
        if value is not None and not isinstance(value, str):
            issues.append(SchemaIssue(name, f"{text} must be a string"))
    if rule.validate is not None and not callable(rule.validate):
        issues.append(SchemaIssue(name, "validate must be callable"))

    return rule if len(issues) == before else None
