"""Factory classes for building validations from configuration."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from dataknobs_config import Config, FactoryBase

from .exceptions import InvalidConfigurationError
from .validation import Validation

logger = logging.getLogger(__name__)


def _load_callable(key: str, path: str) -> Callable[[Any], Any]:
    """Import a callable from a dotted path such as ``mypkg.checks.is_even``."""
    if "." not in path:
        raise InvalidConfigurationError(
            key, "a callable or a dotted import path", f"Invalid callable path: {path}"
        )
    module_path, attr = path.rsplit(".", 1)
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise InvalidConfigurationError(
            key, "a callable or a dotted import path", f"Failed to import {path}: {e}"
        ) from e
    func = getattr(module, attr, None)
    if not callable(func):
        raise InvalidConfigurationError(
            key, "a callable or a dotted import path", f"{path} is not callable"
        )
    return func


class ValidationFactory(FactoryBase):
    """Factory for creating Validation instances from configuration.

    Configuration Options:
        rules (dict): Rule configuration (type, max_length, regex, ...)
        ignore_prefix (str): Prefix of rule keys to drop (default: "_")

    Rule keys may also be given at the top level instead of under ``rules``.
    ``callback`` and the values of ``callbacks`` may be dotted import paths,
    which is the only way to name predicates from YAML or JSON.

    Example Configuration:
        validations:
          - name: username
            factory: dataknobs_valuecheck.factory.ValidationFactory
            rules:
              types: [string]
              mb_min_length: 3
              mb_max_length: 20
              regex: "^[a-z0-9_]+$"
          - name: status
            factory: dataknobs_valuecheck.factory.ValidationFactory
            rules:
              allowed_values: [active, inactive]
              nocase: true
              callbacks:
                not_reserved: myapp.checks.not_reserved
    """

    def create(self, **config: Any) -> Validation:
        """Create a Validation instance from configuration.

        Args:
            **config: Validation configuration

        Returns:
            Validation instance
        """
        name = config.pop("name", None)
        ignore_prefix = config.pop("ignore_prefix", "_")
        rules = dict(config.pop("rules", None) or {})
        rules.update(config)

        logger.info(f"Creating validation: {name or 'unnamed'}")

        if isinstance(rules.get("callback"), str):
            rules["callback"] = _load_callable("callback", rules["callback"])
        callbacks = rules.get("callbacks")
        if isinstance(callbacks, Mapping):
            rules["callbacks"] = {
                key: _load_callable("callbacks", cb) if isinstance(cb, str) else cb
                for key, cb in callbacks.items()
            }

        return Validation(rules, ignore_prefix=ignore_prefix)


def load_validations(
    source: str | Path | dict[str, Any],
    type_name: str = "validations",
) -> dict[str, Validation]:
    """Build every named validation of one type in a configuration source.

    Entries without a ``factory`` attribute are built with
    :class:`ValidationFactory`.

    Args:
        source: YAML/JSON file path or configuration dictionary
        type_name: Configuration type holding the validation entries

    Returns:
        Mapping of configuration name to Validation
    """
    config = Config(source)
    if type_name not in config.get_types():
        logger.warning(f"No '{type_name}' entries found in configuration")
        return {}

    validations: dict[str, Validation] = {}
    for name in config.get_names(type_name):
        entry = dict(config.get(type_name, name))
        if "factory" in entry or "class" in entry:
            validations[name] = config.get_instance(type_name, name)
        else:
            # "type" is the configuration type name, not a rule
            entry.pop("type", None)
            validations[name] = validation_factory.create(**entry)
    logger.info(f"Loaded {len(validations)} validations from '{type_name}'")
    return validations


# Create singleton instance for registration
validation_factory = ValidationFactory()
