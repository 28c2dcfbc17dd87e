"""
The external context contract a flow engine is written against.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, TextIO

from .attributes import AttributeMap, ParameterMap, SharedAttributeMap


class ExternalContext(ABC):
    """
    Abstraction over the environment hosting a flow execution.

    Gives flow code access to the request parameters, the request, session
    and application scoped attributes, and the response, and lets it ask for
    a redirect instead of rendering content.
    """

    @property
    @abstractmethod
    def context_path(self) -> Optional[str]:
        """Path the application is deployed under."""

    @property
    @abstractmethod
    def request_parameter_map(self) -> ParameterMap:
        ...

    @property
    @abstractmethod
    def request_map(self) -> AttributeMap:
        ...

    @property
    @abstractmethod
    def session_map(self) -> SharedAttributeMap:
        ...

    @property
    @abstractmethod
    def global_session_map(self) -> SharedAttributeMap:
        """Session attributes shared across all portlets or sub-applications."""

    @property
    @abstractmethod
    def application_map(self) -> SharedAttributeMap:
        ...

    @property
    @abstractmethod
    def current_user(self) -> Any:
        """The authenticated principal, or None."""

    @property
    @abstractmethod
    def locale(self) -> Optional[str]:
        ...

    @property
    @abstractmethod
    def native_context(self) -> Any:
        ...

    @property
    @abstractmethod
    def native_request(self) -> Any:
        ...

    @property
    @abstractmethod
    def native_response(self) -> Any:
        ...

    @abstractmethod
    def is_ajax_request(self) -> bool:
        ...

    @abstractmethod
    def get_flow_execution_url(self, flow_id: str, flow_execution_key: str) -> str:
        """URL that resumes the given flow execution."""

    @abstractmethod
    def get_response_writer(self) -> TextIO:
        """Writer for the response body; raises if a response is not allowed."""

    @abstractmethod
    def is_response_allowed(self) -> bool:
        ...

    @abstractmethod
    def is_response_complete(self) -> bool:
        ...

    @abstractmethod
    def record_response_complete(self) -> None:
        ...

    @abstractmethod
    def is_response_complete_flow_execution_redirect(self) -> bool:
        """True when the completed response is a redirect back to the flow execution."""

    @abstractmethod
    def request_flow_execution_redirect(self) -> None:
        ...

    @abstractmethod
    def request_flow_definition_redirect(self, flow_id: str,
                                         input: Optional[Mapping[str, Any]] = None) -> None:
        """Ask for a redirect that launches a new execution of ``flow_id``."""

    @abstractmethod
    def request_external_redirect(self, location: str) -> None:
        ...

    @abstractmethod
    def request_redirect_in_popup(self) -> None:
        """Issue the already requested redirect from a popup dialog."""
