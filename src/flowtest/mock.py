"""
Mock implementation of the ExternalContext contract for unit testing flows.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from .attributes import (
    AttributeMap, MockMultipartFile, MockParameterMap, ParameterMap, SharedAttributeMap
)
from .config import EVENT_ID_PARAMETER, FLOW_EXECUTION_URL_TEMPLATE
from .context import ExternalContext
from .errors import ConfigurationError, RedirectNotRequestedError, ResponseNotAllowedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockPrincipal:
    """A named user principal."""

    name: str

    def __str__(self) -> str:
        return self.name


class MockExternalContext(ExternalContext):
    """
    Mock external context holding everything a flow reads or requests.

    Every property has a setter so a test can seed state before driving the
    flow engine, and the redirect/response flags can be asserted afterwards:

        ctx = MockExternalContext()
        ctx.put_request_parameter("name", "Keith")
        ctx.current_user = "keith"
        engine.resume(ctx)
        assert ctx.flow_execution_redirect_requested
    """

    def __init__(self, request_parameter_map: Optional[Mapping[str, Any]] = None) -> None:
        if request_parameter_map is None:
            request_parameter_map = MockParameterMap()
        elif not isinstance(request_parameter_map, ParameterMap):
            request_parameter_map = MockParameterMap(request_parameter_map)

        self._context_path: Optional[str] = None
        self._request_parameter_map: ParameterMap = request_parameter_map
        self._request_map = AttributeMap()
        self._session_map = SharedAttributeMap()
        self._global_session_map = self._session_map
        self._application_map = SharedAttributeMap()
        self._native_context: Any = object()
        self._native_request: Any = object()
        self._native_response: Any = object()
        self._current_user: Any = None
        self._locale: Optional[str] = None
        self._response_writer = io.StringIO()
        self._ajax_request = False

        # None means "derive from response_complete"
        self._response_allowed: Optional[bool] = None
        self._response_complete = False

        self._flow_execution_redirect_requested = False
        self._flow_definition_redirect_flow_id: Optional[str] = None
        self._flow_definition_redirect_flow_input: Optional[AttributeMap] = None
        self._external_redirect_url: Optional[str] = None
        self._redirect_in_popup = False

    # implementing external context

    @property
    def context_path(self) -> Optional[str]:
        return self._context_path

    @context_path.setter
    def context_path(self, context_path: Optional[str]) -> None:
        self._context_path = context_path

    @property
    def request_parameter_map(self) -> ParameterMap:
        return self._request_parameter_map

    @request_parameter_map.setter
    def request_parameter_map(self, request_parameter_map: Mapping[str, Any]) -> None:
        """Accepts a ParameterMap, or a plain mapping that is wrapped in a MockParameterMap."""
        if not isinstance(request_parameter_map, ParameterMap):
            request_parameter_map = MockParameterMap(request_parameter_map)
        self._request_parameter_map = request_parameter_map

    @property
    def request_map(self) -> AttributeMap:
        return self._request_map

    @request_map.setter
    def request_map(self, request_map: AttributeMap) -> None:
        self._request_map = request_map

    @property
    def session_map(self) -> SharedAttributeMap:
        return self._session_map

    @session_map.setter
    def session_map(self, session_map: SharedAttributeMap) -> None:
        self._session_map = session_map

    @property
    def global_session_map(self) -> SharedAttributeMap:
        """By default the same object as ``session_map``."""
        return self._global_session_map

    @global_session_map.setter
    def global_session_map(self, global_session_map: SharedAttributeMap) -> None:
        self._global_session_map = global_session_map

    @property
    def application_map(self) -> SharedAttributeMap:
        return self._application_map

    @application_map.setter
    def application_map(self, application_map: SharedAttributeMap) -> None:
        self._application_map = application_map

    @property
    def current_user(self) -> Any:
        return self._current_user

    @current_user.setter
    def current_user(self, current_user: Union[str, Any, None]) -> None:
        """Accepts a principal object, or a user name that is wrapped in MockPrincipal."""
        if isinstance(current_user, str):
            current_user = MockPrincipal(current_user)
        self._current_user = current_user

    @property
    def locale(self) -> Optional[str]:
        return self._locale

    @locale.setter
    def locale(self, locale: Optional[str]) -> None:
        self._locale = locale

    @property
    def native_context(self) -> Any:
        return self._native_context

    @native_context.setter
    def native_context(self, native_context: Any) -> None:
        self._native_context = native_context

    @property
    def native_request(self) -> Any:
        return self._native_request

    @native_request.setter
    def native_request(self, native_request: Any) -> None:
        self._native_request = native_request

    @property
    def native_response(self) -> Any:
        return self._native_response

    @native_response.setter
    def native_response(self, native_response: Any) -> None:
        self._native_response = native_response

    def is_ajax_request(self) -> bool:
        return self._ajax_request

    @property
    def ajax_request(self) -> bool:
        return self._ajax_request

    @ajax_request.setter
    def ajax_request(self, ajax_request: bool) -> None:
        self._ajax_request = ajax_request

    def get_flow_execution_url(self, flow_id: str, flow_execution_key: str) -> str:
        return FLOW_EXECUTION_URL_TEMPLATE.format(
            flow_id=flow_id, flow_execution_key=flow_execution_key
        )

    def get_response_writer(self) -> io.StringIO:
        self._assert_response_allowed()
        return self._response_writer

    def is_response_allowed(self) -> bool:
        if self._response_allowed is not None:
            return self._response_allowed
        return not self._response_complete

    @property
    def response_allowed(self) -> bool:
        return self.is_response_allowed()

    @response_allowed.setter
    def response_allowed(self, response_allowed: Optional[bool]) -> None:
        """Force the response-allowed answer; None goes back to deriving it."""
        if response_allowed is not None and not isinstance(response_allowed, bool):
            raise ConfigurationError(
                f"response_allowed must be True, False or None, not {response_allowed!r}",
                field="response_allowed",
            )
        self._response_allowed = response_allowed

    def is_response_complete(self) -> bool:
        return self._response_complete

    def record_response_complete(self) -> None:
        self._response_complete = True
        logger.debug("Response recorded as complete")

    def is_response_complete_flow_execution_redirect(self) -> bool:
        return self._flow_execution_redirect_requested

    def request_flow_execution_redirect(self) -> None:
        self._flow_execution_redirect_requested = True
        logger.debug("Flow execution redirect requested")
        self.record_response_complete()

    def request_flow_definition_redirect(self, flow_id: str,
                                         input: Optional[Mapping[str, Any]] = None) -> None:
        self._flow_definition_redirect_flow_id = flow_id
        self._flow_definition_redirect_flow_input = AttributeMap()
        if input is not None:
            self._flow_definition_redirect_flow_input.put_all(input)
        logger.debug(f"Flow definition redirect requested to '{flow_id}'")
        self.record_response_complete()

    def request_external_redirect(self, location: str) -> None:
        self._external_redirect_url = location
        logger.debug(f"External redirect requested to '{location}'")
        self.record_response_complete()

    def request_redirect_in_popup(self) -> None:
        if not self.is_redirect_requested():
            raise RedirectNotRequestedError()
        self._redirect_in_popup = True
        logger.debug("Redirect will be issued from a popup")

    # convenience helpers

    @property
    def mock_request_parameter_map(self) -> MockParameterMap:
        """The request parameter map as a MockParameterMap, for seeding parameters."""
        if not isinstance(self._request_parameter_map, MockParameterMap):
            raise TypeError(
                f"Request parameter map is a {type(self._request_parameter_map).__name__}, "
                "not a MockParameterMap"
            )
        return self._request_parameter_map

    def put_request_parameter(
        self,
        name: str,
        value: Union[str, Sequence[str], MockMultipartFile, Sequence[MockMultipartFile]],
    ) -> None:
        """Put a single or multi-valued parameter, string or multipart file."""
        self.mock_request_parameter_map.put(name, value)

    def set_event_id(self, event_id: str) -> None:
        """Set the id of the event to signal when resuming a flow."""
        self.put_request_parameter(EVENT_ID_PARAMETER, event_id)

    @property
    def mock_response_writer(self) -> io.StringIO:
        """The underlying writer, for asserting what was written. Never guarded."""
        return self._response_writer

    @property
    def flow_execution_redirect_requested(self) -> bool:
        return self._flow_execution_redirect_requested

    @property
    def flow_definition_redirect_requested(self) -> bool:
        return self._flow_definition_redirect_flow_id is not None

    @property
    def flow_redirect_flow_id(self) -> Optional[str]:
        """Only set when a flow definition redirect was requested."""
        return self._flow_definition_redirect_flow_id

    @property
    def flow_redirect_flow_input(self) -> Optional[AttributeMap]:
        """Only set when a flow definition redirect was requested."""
        return self._flow_definition_redirect_flow_input

    @property
    def external_redirect_requested(self) -> bool:
        return self._external_redirect_url is not None

    @property
    def external_redirect_url(self) -> Optional[str]:
        return self._external_redirect_url

    @property
    def redirect_in_popup(self) -> bool:
        return self._redirect_in_popup

    def is_redirect_requested(self) -> bool:
        return (self.flow_execution_redirect_requested
                or self.flow_definition_redirect_requested
                or self.external_redirect_requested)

    # internal helpers

    def _assert_response_allowed(self) -> None:
        if self.is_response_allowed():
            return
        if self.flow_execution_redirect_requested:
            raise ResponseNotAllowedError(
                "A response is not allowed because a redirect has already been requested "
                "on this ExternalContext",
                reason="flow_execution_redirect",
            )
        if self.flow_definition_redirect_requested:
            raise ResponseNotAllowedError(
                "A response is not allowed because a flowRedirect has already been requested "
                "on this ExternalContext",
                reason="flow_definition_redirect",
                flow_id=self._flow_definition_redirect_flow_id,
            )
        if self.external_redirect_requested:
            raise ResponseNotAllowedError(
                "A response is not allowed because an externalRedirect has already been requested "
                "on this ExternalContext",
                reason="external_redirect",
                location=self._external_redirect_url,
            )
        if self._response_complete:
            raise ResponseNotAllowedError(
                "A response is not allowed because one has already been completed "
                "on this ExternalContext",
                reason="response_complete",
            )
        raise ResponseNotAllowedError("A response is not allowed", reason="not_allowed")

    def __repr__(self) -> str:
        return (f"MockExternalContext(context_path={self._context_path!r}, "
                f"response_complete={self._response_complete}, "
                f"redirect_requested={self.is_redirect_requested()})")
