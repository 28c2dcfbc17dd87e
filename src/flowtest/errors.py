"""
Exceptions raised by the mock external context and its attribute maps.

Every error carries the same rich formatting: the message, the keyword
context it was raised with, optional debug information and suggestions for
fixing the test setup that triggered it.
"""

from typing import Any, Dict, List, Optional


class FlowTestError(Exception):
    """Base exception for all flowtest errors with enhanced debugging info."""

    def __init__(self, message: str, **metadata: Any) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata
        self._suggestions: List[str] = []
        self._debug_info: Dict[str, Any] = {}

    def add_suggestion(self, suggestion: str) -> "FlowTestError":
        """Add a helpful suggestion for fixing this error."""
        self._suggestions.append(suggestion)
        return self

    def add_debug_info(self, key: str, value: Any) -> "FlowTestError":
        """Add debugging information."""
        self._debug_info[key] = value
        return self

    @property
    def suggestions(self) -> List[str]:
        return list(self._suggestions)

    @property
    def debug_info(self) -> Dict[str, Any]:
        return dict(self._debug_info)

    def __str__(self) -> str:
        """Generate a rich, formatted error message."""
        parts = [f"{type(self).__name__}: {self.message}"]

        context = {k: v for k, v in self.metadata.items() if v is not None}
        if context:
            parts.append("\nError Context:")
            for key, value in context.items():
                parts.append(f"  {key}: {value}")

        if self._debug_info:
            parts.append("\nDebug Information:")
            for key, value in self._debug_info.items():
                parts.append(f"  {key}: {value}")

        if self._suggestions:
            parts.append("\nDid you mean?")
            for suggestion in self._suggestions:
                parts.append(f"  → {suggestion}")

        return "\n".join(parts)


class IllegalContextStateError(FlowTestError, RuntimeError):
    """Raised when the external context is used in a state that does not permit the call."""


class RedirectNotRequestedError(IllegalContextStateError):
    """Raised when a popup redirect is requested before any redirect."""

    def __init__(self, message: Optional[str] = None, **metadata: Any) -> None:
        super().__init__(
            message or (
                "Only call request_redirect_in_popup after a redirect has been requested by calling "
                "request_flow_execution_redirect, request_flow_definition_redirect, or request_external_redirect"
            ),
            **metadata,
        )
        self.add_suggestion("Request a redirect first, then mark it as a popup redirect")


class ResponseNotAllowedError(IllegalContextStateError):
    """Raised when the response writer is accessed while a response is not allowed."""

    def __init__(self, message: str, reason: str, **metadata: Any) -> None:
        super().__init__(message, reason=reason, **metadata)
        self.reason = reason
        if reason != "not_allowed":
            self.add_suggestion("Set response_allowed = True to write a response regardless")


class ConfigurationError(FlowTestError, TypeError):
    """Raised when a context is seeded with a field it does not have."""

    def __init__(self, message: str, field: Optional[str] = None, **metadata: Any) -> None:
        super().__init__(message, field=field, **metadata)
        if field:
            self.add_debug_info("configuration_field", field)


class AttributeNotFoundError(FlowTestError, KeyError):
    """Raised when a required attribute or parameter is missing."""

    def __init__(self, message: str, key: Optional[str] = None, **metadata: Any) -> None:
        super().__init__(message, key=key, **metadata)
        self.key = key
        if key:
            self.add_debug_info("missing_key", key)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return FlowTestError.__str__(self)


class AttributeTypeError(FlowTestError, TypeError):
    """Raised when a required attribute is present but of an unexpected type."""

    def __init__(self, message: str, key: Optional[str] = None,
                 expected_type: Optional[type] = None, value: Any = None, **metadata: Any) -> None:
        super().__init__(message, key=key, **metadata)
        self.key = key
        self.expected_type = expected_type
        if expected_type is not None:
            self.add_debug_info("expected_type", expected_type.__name__)
        if value is not None:
            self.add_debug_info("actual_type", type(value).__name__)
