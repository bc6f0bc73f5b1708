"""Ordered evaluation of a rule set against single values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .constraints import Constraint, compile_constraints
from .result import CheckResult
from .ruleset import DEFAULT_IGNORE_PREFIX, RuleSet

logger = logging.getLogger(__name__)


class Validation:
    """Validates single non-null values against a :class:`RuleSet`.

    Checks run in a fixed order and evaluation stops at the first failing
    check. ``None`` is never checked: it always validates, leaving the
    question of required values to the caller.

    Example:
        ```python
        username = Validation({"type": "string", "mb_max_length": 20, "regex": r"^\\w+$"})
        username.validate("jane_doe")       # True
        username.validate("jane doe")       # False
        username.last_failure               # 'regex'
        username.check("jane doe").failed_check  # 'regex', no shared state
        ```

    ``validate`` records the failing check on the instance, so a single
    instance must not be shared across threads when ``last_failure`` is
    read. ``check`` returns the failure in its result instead and is safe
    to call concurrently.
    """

    def __init__(
        self,
        rules: RuleSet | Mapping[str, Any] | None = None,
        ignore_prefix: str = DEFAULT_IGNORE_PREFIX,
        **options: Any,
    ):
        """Initialize from a RuleSet, a configuration mapping, or keywords.

        Args:
            rules: RuleSet or configuration mapping
            ignore_prefix: Prefix of configuration keys to ignore
            **options: Rule keywords merged after ``rules`` (mapping form only)

        Raises:
            InvalidConfigurationError: If the configuration is malformed
        """
        if isinstance(rules, RuleSet):
            if options:
                raise TypeError("Rule keywords cannot be combined with a RuleSet")
        else:
            if options:
                rules = {**(rules or {}), **options}
            rules = RuleSet.from_config(rules, ignore_prefix=ignore_prefix)

        self._rules = rules
        self._constraints = compile_constraints(rules)
        self._last_failure: str | None = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Validation:
        return cls(config)

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return self._constraints

    @property
    def last_failure(self) -> str | None:
        """Name of the check the most recent ``validate`` call failed on."""
        return self._last_failure

    def check(self, value: Any) -> CheckResult:
        """Evaluate a value without touching instance state.

        Args:
            value: Value to validate

        Returns:
            CheckResult naming the first failed check, if any
        """
        if value is None:
            return CheckResult.success(value)
        for constraint in self._constraints:
            if not constraint.passes(value):
                logger.debug(f"Value {value!r} failed check: {constraint.name}")
                return CheckResult.failure(value, constraint.name)
        return CheckResult.success(value)

    def validate(self, value: Any) -> bool:
        """Validate the given value if it is non-null.

        Sets ``last_failure`` to the failing check's name, or clears it.

        Args:
            value: Value to validate

        Returns:
            True if every applicable check passed
        """
        result = self.check(value)
        self._last_failure = result.failed_check
        return result.valid

    def validate_or_fail(self, value: Any) -> None:
        """Validate the given value and raise on failure.

        Meant for stand-alone use. ``None`` is a no-op.

        Raises:
            ValidationCheckError: Carrying the failed check name and the value
        """
        if value is None:
            return
        result = self.check(value)
        self._last_failure = result.failed_check
        result.raise_for_failure()

    def __call__(self, value: Any) -> bool:
        return self.validate(value)

    def __repr__(self) -> str:
        return f"Validation({self._rules.to_dict()!r})"
