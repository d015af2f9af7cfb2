"""Validation pass configuration.

ValidationConfig is a frozen dataclass — immutable after creation, one
instance can be shared by every call.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Options for a single ``validate_form`` pass.

    ``use_preprocessor`` controls whether ``trim`` rewrites stored values.
    Turn it off while the user is typing so in-progress whitespace stays
    in the input; rules still see the trimmed value either way::

        validate_form(state, ValidationConfig(use_preprocessor=False))
    """

    use_preprocessor: bool = True

    # Built-in message for an empty required field. ``{label}`` is the
    # field's label, or its name when no label is declared.
    required_template: str = "{label} is required"


# While a field is being edited: validate, but leave whitespace alone.
EDITING = ValidationConfig(use_preprocessor=False)

# On blur or before submit: trim and validate.
COMMIT = ValidationConfig()
