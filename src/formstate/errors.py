"""formstate exception hierarchy.

Shared across the schema compiler, the engine, and the session so every
module raises and catches the same types.

A failed validation is never an exception: it is a ``Message`` of kind
``ERROR`` in the returned state. Exceptions are reserved for malformed
schemas and for callers handing the engine the wrong shapes.
"""

from dataclasses import dataclass


class FormStateError(Exception):
    """Base for all formstate-specific errors."""


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """A single structural problem found while compiling a schema.

    ``field`` is ``None`` for problems with the schema as a whole
    (for example a non-callable whole-form rule).
    """

    field: str | None
    message: str

    def __str__(self) -> str:
        if self.field is None:
            return self.message
        return f"{self.field}: {self.message}"


class SchemaError(FormStateError):
    """Raised when a form schema is malformed.

    Raised once, by ``compile_schema()``, with every problem found
    collected in ``issues``.
    """

    def __init__(self, issues: tuple[SchemaIssue, ...] | list[SchemaIssue]) -> None:
        self.issues = tuple(issues)
        lines = "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(f"Invalid form schema ({len(self.issues)} issue(s)):\n{lines}")


class StateShapeError(FormStateError):
    """Raised when a form state's keys do not match its schema."""


class UnknownFieldError(FormStateError, KeyError):
    """Raised when a field name is not declared in the schema."""

    def __init__(self, field: str, known: tuple[str, ...] = ()) -> None:
        self.field = field
        self.known = known
        super().__init__(field)

    def __str__(self) -> str:
        if self.known:
            return f"Unknown field {self.field!r}. Known fields: {', '.join(self.known)}"
        return f"Unknown field {self.field!r}"


class RuleResultError(FormStateError, TypeError):
    """Raised when a validator or whole-form rule returns the wrong type.

    Validators must return a ``Message``, a string, or nothing.
    Whole-form rules must return a ``FormState``.
    """
