"""Custom exceptions for the dataknobs_valuecheck package.

This module defines exception types for the valuecheck package,
built on the common exception framework from dataknobs_common.
"""

from __future__ import annotations

from typing import Any

from dataknobs_common import (
    ConfigurationError,
    ValidationError,
)


class InvalidConfigurationError(ConfigurationError):
    """Raised when a rule set is built from a malformed configuration entry."""

    def __init__(self, key: str, expected: str, message: str | None = None):
        self.key = key
        self.expected = expected
        if message is None:
            message = f'The "{key}" argument must be {expected}.'
        super().__init__(message, context={"key": key, "expected": expected})


class ValidationCheckError(ValidationError):
    """Raised by ``validate_or_fail`` when a value fails a named check."""

    def __init__(self, check_name: str, value: Any):
        self.check_name = check_name
        self.value = value
        super().__init__(
            f"Value {value!r} failed the '{check_name}' check",
            context={"check_name": check_name, "value": value},
        )
