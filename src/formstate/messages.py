"""Validation messages — what a rule says about a value."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MessageKind(Enum):
    """Severity of a validation message.

    Only ``ERROR`` makes a form invalid; ``INFO`` and ``WARNING`` are
    shown to the user but never block submission.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Message:
    """A single validation result for a field or the whole form.

    Usage::

        Message.error("Please give a valid email address")
        Message(MessageKind.WARNING, "Looks like a disposable address")
    """

    kind: MessageKind
    text: str

    @classmethod
    def info(cls, text: str) -> Message:
        return cls(MessageKind.INFO, text)

    @classmethod
    def warning(cls, text: str) -> Message:
        return cls(MessageKind.WARNING, text)

    @classmethod
    def error(cls, text: str) -> Message:
        return cls(MessageKind.ERROR, text)

    @property
    def is_error(self) -> bool:
        return self.kind is MessageKind.ERROR

    def as_dict(self) -> dict[str, str]:
        """JSON-friendly form: ``{"kind": "error", "text": "..."}``."""
        return {"kind": self.kind.value, "text": self.text}

    def __str__(self) -> str:
        return self.text
