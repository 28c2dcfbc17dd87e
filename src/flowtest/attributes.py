"""
Attribute and parameter maps handed to flow logic by the external context.

AttributeMap wraps a plain dict (or any mutable mapping it is given, without
copying it) and adds the typed lookups flow code leans on. ParameterMap is
the read-only view of request parameters; MockParameterMap is the variant
tests fill in.
"""

import io
import threading
from dataclasses import dataclass
from typing import (
    Any, ContextManager, Dict, Iterator, List, Mapping, MutableMapping, Optional, Sequence, Type,
)

from .errors import AttributeNotFoundError, AttributeTypeError
from .types import Converter, ParameterValue, T

_TRUE_VALUES = frozenset(["true", "on", "yes", "1"])
_FALSE_VALUES = frozenset(["false", "off", "no", "0"])


@dataclass(frozen=True)
class MockMultipartFile:
    """An uploaded file as it would arrive in a multipart request."""

    name: str
    content: bytes = b""
    original_filename: str = ""
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    def is_empty(self) -> bool:
        return not self.content

    def get_bytes(self) -> bytes:
        return self.content

    def open(self) -> io.BytesIO:
        """Return a fresh binary stream over the file content."""
        return io.BytesIO(self.content)


class AttributeMap(MutableMapping[str, Any]):
    """
    A mutable string-keyed attribute store.

    Behaves as a regular mapping and adds the put/remove/get_required
    vocabulary flow engines use when reading scoped attributes.
    """

    def __init__(self, backing: Optional[MutableMapping[str, Any]] = None) -> None:
        self._attributes: MutableMapping[str, Any] = backing if backing is not None else {}

    def __getitem__(self, key: str) -> Any:
        return self._attributes[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def __delitem__(self, key: str) -> None:
        del self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def put(self, key: str, value: Any) -> Any:
        """Store a value, returning the one it replaced (or None)."""
        previous = self._attributes.get(key)
        self._attributes[key] = value
        return previous

    def put_all(self, attributes: Mapping[str, Any]) -> "AttributeMap":
        self._attributes.update(attributes)
        return self

    def remove(self, key: str) -> Any:
        """Remove a value, returning it (or None when absent)."""
        return self._attributes.pop(key, None)

    def get_required(self, key: str, expected_type: Optional[Type[T]] = None) -> Any:
        """Get a value that must be present, optionally of a given type."""
        if key not in self._attributes:
            raise AttributeNotFoundError(
                f"Required attribute '{key}' is not present", key=key,
                available=sorted(self._attributes) or None,
            )
        value = self._attributes[key]
        if expected_type is not None and not isinstance(value, expected_type):
            raise AttributeTypeError(
                f"Attribute '{key}' is not of type {expected_type.__name__}",
                key=key, expected_type=expected_type, value=value,
            )
        return value

    def as_dict(self) -> Dict[str, Any]:
        """Return a shallow copy of the attributes as a plain dict."""
        return dict(self._attributes)

    def union(self, other: Mapping[str, Any]) -> "AttributeMap":
        """Return a new map holding these attributes overlaid with ``other``."""
        merged = self.as_dict()
        merged.update(other)
        return AttributeMap(merged)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeMap):
            return self.as_dict() == other.as_dict()
        if isinstance(other, Mapping):
            return self.as_dict() == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.as_dict()})"


class SharedAttributeMap(AttributeMap):
    """An attribute map whose backing store may be shared between requests."""

    def __init__(self, backing: Optional[MutableMapping[str, Any]] = None) -> None:
        super().__init__(backing)
        self._mutex = threading.RLock()

    @property
    def mutex(self) -> ContextManager[bool]:
        """Lock callers may hold while doing compound operations on the shared store."""
        return self._mutex


class ParameterMap(Mapping[str, Any]):
    """
    Read-only request parameters.

    Indexing returns the raw stored value. ``get`` collapses multi-valued
    parameters to their first value; ``get_array`` always returns a list.
    Multi-valued parameters are held as tuples so indexing cannot change them.
    """

    def __init__(self, parameters: Optional[Mapping[str, ParameterValue]] = None) -> None:
        self._parameters: Dict[str, Any] = {}
        if parameters:
            for name, value in parameters.items():
                self._parameters[name] = _normalize_parameter(name, value)

    def __getitem__(self, name: str) -> Any:
        return self._parameters[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def get(self, name: str, default: Any = None) -> Any:
        if name not in self._parameters:
            return default
        value = self._parameters[name]
        if isinstance(value, tuple):
            return value[0] if value else default
        return value

    def get_required(self, name: str) -> Any:
        value = self.get(name)
        if value is None:
            raise AttributeNotFoundError(
                f"Required request parameter '{name}' is not present", key=name,
            ).add_suggestion(f"Seed it with put_request_parameter({name!r}, ...)")
        return value

    def get_array(self, name: str) -> List[Any]:
        value = self._parameters.get(name)
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return [value]

    def get_multipart_file(self, name: str) -> Optional[MockMultipartFile]:
        value = self.get(name)
        if value is None or isinstance(value, MockMultipartFile):
            return value
        raise AttributeTypeError(
            f"Request parameter '{name}' is not a multipart file",
            key=name, expected_type=MockMultipartFile, value=value,
        )

    def get_required_multipart_file(self, name: str) -> MockMultipartFile:
        value = self.get_multipart_file(name)
        if value is None:
            raise AttributeNotFoundError(
                f"Required multipart file '{name}' is not present", key=name,
            )
        return value

    def get_number(self, name: str, converter: Converter = int, default: Any = None) -> Any:
        """Convert a parameter with ``converter`` (int by default)."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return converter(value)
        except (TypeError, ValueError) as e:
            raise AttributeTypeError(
                f"Request parameter '{name}' could not be converted: {e}",
                key=name, value=value,
            ) from e

    def get_boolean(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self.get(name)
        if value is None:
            return default
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        raise AttributeTypeError(
            f"Request parameter '{name}' is not a boolean value",
            key=name, expected_type=bool, value=value,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            name: list(value) if isinstance(value, tuple) else value
            for name, value in self._parameters.items()
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._parameters})"


class MockParameterMap(ParameterMap):
    """A parameter map tests can write to."""

    def put(self, name: str, value: ParameterValue) -> "MockParameterMap":
        self._parameters[name] = _normalize_parameter(name, value)
        return self

    def __setitem__(self, name: str, value: ParameterValue) -> None:
        self.put(name, value)

    def __delitem__(self, name: str) -> None:
        del self._parameters[name]


def _normalize_parameter(name: str, value: Any) -> Any:
    """Store sequences as tuples; reject anything a request could not carry."""
    if isinstance(value, (str, MockMultipartFile)):
        return value
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        values = tuple(value)
        if all(isinstance(v, str) for v in values) or all(isinstance(v, MockMultipartFile) for v in values):
            return values
    raise AttributeTypeError(
        f"Request parameter '{name}' must be a string, a multipart file, or a list of either",
        key=name, value=value,
    )
