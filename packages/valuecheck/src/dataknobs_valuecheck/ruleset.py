"""Immutable rule sets built from configuration mappings.
"""

from __future__ import annotations

import importlib
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from re import Pattern as RegexPattern
from types import MappingProxyType
from typing import Any

from .exceptions import InvalidConfigurationError
from .kinds import as_number, is_scalar, normalize_type_tag

DEFAULT_IGNORE_PREFIX = "_"

LENGTH_KEYS = ("max_length", "min_length", "mb_max_length", "mb_min_length")
VALUE_KEYS = ("max_value", "min_value")


def _require_unsigned_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidConfigurationError(key, "an unsigned integer")
    if isinstance(value, int) and value >= 0:
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise InvalidConfigurationError(key, "an unsigned integer")


def _require_numeric(key: str, value: Any) -> Any:
    number = as_number(value)
    if number is None:
        raise InvalidConfigurationError(key, "numeric")
    return number


def _require_string(key: str, value: Any, expected: str) -> str:
    if not (isinstance(value, str) and value):
        raise InvalidConfigurationError(key, expected)
    return value


def _require_callable(key: str, value: Any) -> Callable[[Any], Any]:
    if not callable(value):
        raise InvalidConfigurationError(key, "callable, such as a function or a lambda")
    return value


def _resolve_isa(value: Any) -> type | str:
    if isinstance(value, type):
        return value
    name = _require_string("isa", value, "a class or a valid class name")
    if "." not in name:
        # Matched against class names in the value's MRO
        return name
    module_path, class_name = name.rsplit(".", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise InvalidConfigurationError(
            "isa", "a class or a valid class name", f"Cannot import {module_path} for isa: {e}"
        ) from e
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type):
        raise InvalidConfigurationError(
            "isa", "a class or a valid class name", f"{name} is not a class"
        )
    return cls


def _compile_regex(value: Any) -> RegexPattern[Any]:
    if isinstance(value, RegexPattern):
        return value
    pattern = _require_string("regex", value, "a valid regular expression string")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidConfigurationError(
            "regex",
            "a valid regular expression string",
            f"Invalid regular expression {pattern!r}: {e}",
        ) from e


def _require_callbacks(value: Any) -> Mapping[str, Callable[[Any], Any]]:
    if not (isinstance(value, Mapping) and value):
        raise InvalidConfigurationError("callbacks", "a mapping containing at least 1 callable")
    for name, callback in value.items():
        if not isinstance(name, str) or not callable(callback):
            raise InvalidConfigurationError("callbacks", "a mapping of names to callables")
    return MappingProxyType(dict(value))


def _require_allowed_values(value: Any) -> tuple[Any, ...]:
    if not (isinstance(value, (list, tuple, set, frozenset)) and value):
        raise InvalidConfigurationError("allowed_values", "a list containing at least 1 value")
    for item in value:
        if not is_scalar(item):
            raise InvalidConfigurationError("allowed_values", "a list of scalars")
    return tuple(value)


def _require_types(value: Any) -> tuple[str, ...]:
    if not (isinstance(value, (list, tuple)) and value):
        raise InvalidConfigurationError("types", "a list containing at least 1 type")
    normalized = []
    for tag in value:
        if not isinstance(tag, str):
            raise InvalidConfigurationError("types", "a list of type strings")
        normalized.append(normalize_type_tag(tag))
    return tuple(normalized)


def _plain_pattern(regex: RegexPattern[Any]) -> bool:
    """True when a string source alone rebuilds the pattern."""
    return isinstance(regex.pattern, str) and regex.flags == re.compile(regex.pattern).flags


@dataclass(frozen=True)
class RuleSet:
    """Read-only bag of named value constraints.

    Every field is optional; a field left as None means the matching check
    is skipped. Shapes are validated on construction, so a RuleSet that
    exists is always well formed. Listed in evaluation order:

        types: accepted kind tags (aliases normalized, ``scalar`` allowed)
        resource_type: required handle subtype for resource values
        max_length / min_length: bounds on byte length of scalars
        mb_max_length / mb_min_length: bounds on character length of scalars
        max_value / min_value: inclusive numeric bounds
        isa: class (or class name) the value must be an instance of
        regex: pattern the value must match
        callback: single boolean predicate
        callbacks: named boolean predicates, run in insertion order
        allowed_values: scalars the value (or each sequence element) must be in
        nocase: makes the allowed_values comparison case-insensitive
    """

    types: tuple[str, ...] | None = None
    resource_type: str | None = None
    max_length: int | None = None
    min_length: int | None = None
    mb_max_length: int | None = None
    mb_min_length: int | None = None
    max_value: Any = None
    min_value: Any = None
    isa: type | str | None = None
    regex: RegexPattern[Any] | None = None
    callback: Callable[[Any], Any] | None = None
    callbacks: Mapping[str, Callable[[Any], Any]] | None = None
    allowed_values: tuple[Any, ...] | None = None
    nocase: bool = False

    def __post_init__(self) -> None:
        normalized: dict[str, Any] = {}
        if self.types is not None:
            normalized["types"] = _require_types(self.types)
        if self.resource_type is not None:
            normalized["resource_type"] = _require_string(
                "resource_type", self.resource_type, "a valid resource type"
            )
        for key in LENGTH_KEYS:
            value = getattr(self, key)
            if value is not None:
                normalized[key] = _require_unsigned_int(key, value)
        for key in VALUE_KEYS:
            value = getattr(self, key)
            if value is not None:
                normalized[key] = _require_numeric(key, value)
        if self.isa is not None:
            normalized["isa"] = _resolve_isa(self.isa)
        if self.regex is not None:
            normalized["regex"] = _compile_regex(self.regex)
        if self.callback is not None:
            normalized["callback"] = _require_callable("callback", self.callback)
        if self.callbacks is not None:
            normalized["callbacks"] = _require_callbacks(self.callbacks)
        if self.allowed_values is not None:
            normalized["allowed_values"] = _require_allowed_values(self.allowed_values)
        normalized["nocase"] = bool(self.nocase)

        for key, value in normalized.items():
            object.__setattr__(self, key, value)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None = None,
        ignore_prefix: str = DEFAULT_IGNORE_PREFIX,
    ) -> RuleSet:
        """Build a rule set from a configuration mapping.

        ``type`` appends one tag to ``types``; ``types`` concatenates onto
        whatever tags were already given, so both keys may be combined.
        Keys starting with ``ignore_prefix`` are dropped.

        Args:
            config: Mapping of rule names to rule arguments
            ignore_prefix: Prefix marking caller-side metadata keys

        Returns:
            RuleSet instance

        Raises:
            InvalidConfigurationError: On an unknown key or malformed argument
        """
        if config is None:
            return cls()
        if not isinstance(config, Mapping):
            raise InvalidConfigurationError(
                "config", "a mapping", f"Rule configuration must be a mapping, got {type(config).__name__}"
            )

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        types: list[str] | None = None

        for key, value in config.items():
            if key == "type":
                tag = _require_string("type", value, "a type string")
                types = (types or []) + [normalize_type_tag(tag, key="type")]
            elif key == "types":
                types = (types or []) + list(_require_types(value))
            elif key in known:
                kwargs[key] = value
            elif isinstance(key, str) and ignore_prefix and key.startswith(ignore_prefix):
                continue
            else:
                raise InvalidConfigurationError(str(key), "a known rule", f'Unknown argument "{key}".')

        if types is not None:
            kwargs["types"] = tuple(types)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Return the populated rules as a configuration mapping.

        Classes given for ``isa`` are rendered as dotted paths and patterns
        compiled from a plain string as that string. Other patterns and
        callables are returned as-is.
        """
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "nocase":
                if value:
                    data["nocase"] = True
                continue
            if value is None:
                continue
            if f.name == "types" or f.name == "allowed_values":
                value = list(value)
            elif f.name == "callbacks":
                value = dict(value)
            elif f.name == "regex" and _plain_pattern(value):
                value = value.pattern
            elif f.name == "isa" and isinstance(value, type):
                value = f"{value.__module__}.{value.__qualname__}"
            data[f.name] = value
        return data

    def is_empty(self) -> bool:
        """True when no check is configured."""
        return not any(
            getattr(self, f.name) is not None for f in fields(self) if f.name != "nocase"
        )


def build(config: Mapping[str, Any] | None = None, ignore_prefix: str = DEFAULT_IGNORE_PREFIX) -> RuleSet:
    """Build a :class:`RuleSet` from a configuration mapping."""
    return RuleSet.from_config(config, ignore_prefix=ignore_prefix)
