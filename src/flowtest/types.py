"""
Type definitions for the flowtest package.
"""

from typing import TYPE_CHECKING, Any, Callable, List, TypeVar, Union

if TYPE_CHECKING:
    from .attributes import MockMultipartFile

# Type variables
T = TypeVar('T')

# A single request parameter value as a flow engine sees it
ParameterValue = Union[str, List[str], "MockMultipartFile", List["MockMultipartFile"]]

# Converts a raw parameter string into a typed value
Converter = Callable[[str], T]

# Type for functions decorated with with_external_context
Handler = Callable[..., Any]
