"""Check result type returned by stateless evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationCheckError


@dataclass(frozen=True)
class CheckResult:
    """Outcome of evaluating one value against a rule set.

    Either ``valid`` is True and ``failed_check`` is None, or ``valid`` is
    False and ``failed_check`` names the first check that failed.
    """

    valid: bool
    value: Any
    failed_check: str | None = None

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def raise_for_failure(self) -> None:
        """Raise :class:`ValidationCheckError` if this result is a failure."""
        if not self.valid:
            raise ValidationCheckError(self.failed_check or "", self.value)

    @classmethod
    def success(cls, value: Any) -> CheckResult:
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, value: Any, failed_check: str) -> CheckResult:
        """Create a failed result attributed to ``failed_check``.

        Args:
            value: The value that failed
            failed_check: Name of the check that failed

        Returns:
            Failed CheckResult
        """
        return cls(valid=False, value=value, failed_check=failed_check)
