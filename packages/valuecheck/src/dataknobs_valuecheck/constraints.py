"""Named checks evaluated by :class:`~dataknobs_valuecheck.validation.Validation`.

Each populated field of a :class:`RuleSet` compiles to one (or, for
``callbacks``, several) constraint objects. The evaluation order is fixed
by :func:`compile_constraints` and never depends on configuration order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from decimal import Decimal
from re import Pattern as RegexPattern
from typing import Any

from .kinds import (
    SCALAR_TAG,
    ValueKind,
    as_number,
    byte_length,
    char_length,
    is_scalar,
    is_sequence,
    kind_of,
    resource_type_of,
    scalar_text,
)
from .result import CheckResult
from .ruleset import RuleSet


class Constraint(ABC):
    """Base class for a single named check."""

    name: str = ""

    @abstractmethod
    def passes(self, value: Any) -> bool:
        """Return True if the non-null value satisfies this check."""

    def check(self, value: Any) -> CheckResult:
        """Evaluate the check and wrap the outcome in a CheckResult."""
        if self.passes(value):
            return CheckResult.success(value)
        return CheckResult.failure(value, self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TypesConstraint(Constraint):
    """Value kind must be one of the accepted tags."""

    name = "types"

    def __init__(self, types: Iterable[str]):
        self.types = frozenset(types)
        self.accepts_scalar = SCALAR_TAG in self.types

    def passes(self, value: Any) -> bool:
        if kind_of(value).value in self.types:
            return True
        return self.accepts_scalar and is_scalar(value)


class ResourceTypeConstraint(Constraint):
    """Resource handles must be of the configured subtype.

    Values that are not resource handles are not subject to this check.
    """

    name = "resource_type"

    def __init__(self, resource_type: str):
        self.resource_type = resource_type

    def passes(self, value: Any) -> bool:
        if kind_of(value) is not ValueKind.RESOURCE:
            return True
        return resource_type_of(value) == self.resource_type


class _BoundConstraint(Constraint):
    """Shared shape for the length and value bounds."""

    upper = True

    def __init__(self, bound: Any):
        self.bound = bound

    @abstractmethod
    def measure(self, value: Any) -> Any:
        """Return the measured quantity, or None when the value has none."""

    def passes(self, value: Any) -> bool:
        measured = self.measure(value)
        if measured is None:
            return False
        if self.upper:
            return measured <= self.bound
        return measured >= self.bound


class MaxLength(_BoundConstraint):
    name = "max_length"

    def measure(self, value: Any) -> int | None:
        return byte_length(value) if is_scalar(value) else None


class MinLength(MaxLength):
    name = "min_length"
    upper = False


class MbMaxLength(_BoundConstraint):
    """Character (code point) length, not byte length."""

    name = "mb_max_length"

    def measure(self, value: Any) -> int | None:
        return char_length(value) if is_scalar(value) else None


class MbMinLength(MbMaxLength):
    name = "mb_min_length"
    upper = False


class MaxValue(_BoundConstraint):
    """Inclusive numeric upper bound; numeric strings are compared as numbers."""

    name = "max_value"

    def measure(self, value: Any) -> Any:
        return as_number(value)


class MinValue(MaxValue):
    name = "min_value"
    upper = False


class IsaConstraint(Constraint):
    """Value must be an instance of a class, or of a class with a given name."""

    name = "isa"

    def __init__(self, isa: type | str):
        self.isa = isa

    def passes(self, value: Any) -> bool:
        if isinstance(self.isa, type):
            return isinstance(value, self.isa)
        return any(
            self.isa in (cls.__name__, cls.__qualname__) for cls in type(value).__mro__
        )


class RegexConstraint(Constraint):
    """Scalar must contain a match for the pattern."""

    name = "regex"

    def __init__(self, regex: RegexPattern[Any]):
        self.regex = regex
        self.binary = isinstance(regex.pattern, bytes)

    def passes(self, value: Any) -> bool:
        if not is_scalar(value):
            return False
        text = scalar_text(value)
        if self.binary and isinstance(text, str):
            text = text.encode("utf-8", errors="surrogatepass")
        elif not self.binary and isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        return self.regex.search(text) is not None


class CallbackConstraint(Constraint):
    """Predicate result must be truthy."""

    name = "callback"

    def __init__(self, callback: Callable[[Any], Any], name: str | None = None):
        self.callback = callback
        if name is not None:
            self.name = name

    def passes(self, value: Any) -> bool:
        return bool(self.callback(value))


class NamedCallbackConstraint(CallbackConstraint):
    """One entry of ``callbacks``; failures are reported as ``"<key> (callback)"``."""

    def __init__(self, key: str, callback: Callable[[Any], Any]):
        super().__init__(callback, name=f"{key} (callback)")
        self.key = key


def _fold(value: Any) -> str:
    text = scalar_text(value)
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text.lower()


def _exact_key(value: Any) -> tuple[ValueKind, Any]:
    kind = kind_of(value)
    if isinstance(value, bytearray):
        value = bytes(value)
    elif isinstance(value, Decimal) and value.is_snan():
        # Signaling NaNs cannot be hashed
        value = str(value)
    return (kind, value)


class AllowedValues(Constraint):
    """Scalar, or every element of a sequence, must be an allowed value.

    Without ``nocase`` the comparison is exact and kind-aware (``1`` does
    not match ``"1"``, ``1.0`` or ``True``). With ``nocase`` values are
    compared by lower-cased textual form.
    """

    name = "allowed_values"

    def __init__(self, allowed_values: Iterable[Any], nocase: bool = False):
        self.nocase = nocase
        if nocase:
            self.allowed = frozenset(_fold(v) for v in allowed_values)
        else:
            self.allowed = frozenset(_exact_key(v) for v in allowed_values)

    def _allows(self, item: Any) -> bool:
        if not is_scalar(item):
            return False
        key = _fold(item) if self.nocase else _exact_key(item)
        return key in self.allowed

    def passes(self, value: Any) -> bool:
        if is_sequence(value):
            return all(self._allows(item) for item in value)
        if is_scalar(value):
            return self._allows(value)
        return False


def compile_constraints(rules: RuleSet) -> tuple[Constraint, ...]:
    """Turn a rule set into its checks, in evaluation order.

    Args:
        rules: RuleSet to compile

    Returns:
        Tuple of constraints for the populated rules only
    """
    checks: list[Constraint] = []
    if rules.types:
        checks.append(TypesConstraint(rules.types))
    if rules.resource_type is not None:
        checks.append(ResourceTypeConstraint(rules.resource_type))
    if rules.max_length is not None:
        checks.append(MaxLength(rules.max_length))
    if rules.min_length is not None:
        checks.append(MinLength(rules.min_length))
    if rules.mb_max_length is not None:
        checks.append(MbMaxLength(rules.mb_max_length))
    if rules.mb_min_length is not None:
        checks.append(MbMinLength(rules.mb_min_length))
    if rules.max_value is not None:
        checks.append(MaxValue(rules.max_value))
    if rules.min_value is not None:
        checks.append(MinValue(rules.min_value))
    if rules.isa is not None:
        checks.append(IsaConstraint(rules.isa))
    if rules.regex is not None:
        checks.append(RegexConstraint(rules.regex))
    if rules.callback is not None:
        checks.append(CallbackConstraint(rules.callback))
    if rules.callbacks:
        checks.extend(
            NamedCallbackConstraint(key, callback) for key, callback in rules.callbacks.items()
        )
    if rules.allowed_values:
        checks.append(AllowedValues(rules.allowed_values, nocase=rules.nocase))
    return tuple(checks)
