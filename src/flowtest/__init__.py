"""
flowtest - A mock external context for unit testing web flow logic without a container.
"""

from .attributes import (
    AttributeMap, MockMultipartFile, MockParameterMap, ParameterMap, SharedAttributeMap
)
from .context import ExternalContext
from .decorators import seed_context, with_external_context
from .errors import (
    AttributeNotFoundError,
    AttributeTypeError,
    ConfigurationError,
    FlowTestError,
    IllegalContextStateError,
    RedirectNotRequestedError,
    ResponseNotAllowedError,
)
from .mock import MockExternalContext, MockPrincipal

__version__ = "0.1.0"
__all__ = [
    "ExternalContext",
    "MockExternalContext",
    "MockPrincipal",
    "AttributeMap",
    "SharedAttributeMap",
    "ParameterMap",
    "MockParameterMap",
    "MockMultipartFile",
    "seed_context",
    "with_external_context",
    "FlowTestError",
    "IllegalContextStateError",
    "RedirectNotRequestedError",
    "ResponseNotAllowedError",
    "ConfigurationError",
    "AttributeNotFoundError",
    "AttributeTypeError",
]
