"""DataKnobs ValueCheck Package

Validation of single values against declarative rule sets:
- RuleSet: immutable, shape-checked bag of named constraints
- Validation: fixed-order evaluation stopping at the first failing check
- CheckResult: stateless outcome naming the failed check
- ValidationFactory: construction from dataknobs_config configurations
"""

from .constraints import (
    AllowedValues,
    CallbackConstraint,
    Constraint,
    IsaConstraint,
    MaxLength,
    MaxValue,
    MbMaxLength,
    MbMinLength,
    MinLength,
    MinValue,
    NamedCallbackConstraint,
    RegexConstraint,
    ResourceTypeConstraint,
    TypesConstraint,
    compile_constraints,
)
from .exceptions import InvalidConfigurationError, ValidationCheckError
from .factory import ValidationFactory, load_validations, validation_factory
from .kinds import ValueKind, kind_of
from .result import CheckResult
from .ruleset import RuleSet, build
from .validation import Validation

__version__ = "0.1.0"
__all__ = [
    # Rules
    "RuleSet",
    "build",
    # Evaluation
    "Validation",
    "CheckResult",
    # Kinds
    "ValueKind",
    "kind_of",
    # Constraints
    "Constraint",
    "TypesConstraint",
    "ResourceTypeConstraint",
    "MaxLength",
    "MinLength",
    "MbMaxLength",
    "MbMinLength",
    "MaxValue",
    "MinValue",
    "IsaConstraint",
    "RegexConstraint",
    "CallbackConstraint",
    "NamedCallbackConstraint",
    "AllowedValues",
    "compile_constraints",
    # Errors
    "InvalidConfigurationError",
    "ValidationCheckError",
    # Factories
    "ValidationFactory",
    "validation_factory",
    "load_validations",
]
