"""Pytest configuration for dataknobs_valuecheck tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


class Animal:
    """Base class used by isa tests."""


class Dog(Animal):
    """Subclass used by isa tests."""


@pytest.fixture
def dog():
    return Dog()


@pytest.fixture
def call_log():
    """List shared by recording predicates."""
    return []


@pytest.fixture
def recording(call_log):
    """Build a predicate that records its name and returns a fixed result."""

    def make(name, result=True):
        def predicate(value):
            call_log.append(name)
            return result

        return predicate

    return make
