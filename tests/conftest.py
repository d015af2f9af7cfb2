"""Shared fixtures: the registration form used across engine and session tests."""

import pytest

from formstate import CompiledSchema, FieldRule, FormRules, compile_schema
from formstate.rules import email, fields_match, length, with_message


@pytest.fixture
def register_schema() -> CompiledSchema:
    """Display name, email, and a password/confirmation pair."""
    return compile_schema(
        FormRules(
            fields={
                "display_name": FieldRule(
                    required=True,
                    trim=True,
                    validate=length(
                        5, 30, message="Display name must be between 5 to 30 characters in length."
                    ),
                ),
                "email": FieldRule(
                    required=True,
                    trim=True,
                    validate=with_message(email, "Please give a valid email address"),
                ),
                "password1": FieldRule(required=True, trim=True),
                "password2": FieldRule(required=True, trim=True),
            },
            validate_form=fields_match("password1", "password2", "Password do not match"),
        )
    )
