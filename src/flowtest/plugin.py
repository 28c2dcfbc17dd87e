"""
pytest fixtures, registered through the ``pytest11`` entry point.
"""

from typing import Any, Callable

import pytest

from .decorators import seed_context
from .mock import MockExternalContext


@pytest.fixture
def external_context() -> MockExternalContext:
    """A fresh mock external context with nothing seeded."""
    return MockExternalContext()


@pytest.fixture
def external_context_factory() -> Callable[..., MockExternalContext]:
    """
    Build seeded contexts on demand.

        def test_resume(external_context_factory):
            ctx = external_context_factory(event_id="submit", current_user="keith")
    """
    def factory(**fields: Any) -> MockExternalContext:
        return seed_context(MockExternalContext(), **fields)
    return factory
