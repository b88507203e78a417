"""
API request handler for making HTTP requests.

This module provides a class for executing HTTP requests against the budget
service and translating every failure into the API error taxonomy. It
performs no retries and no caching.
"""

import logging
import uuid
import requests
from typing import Any, Callable, Dict, Optional

from ..utils.api_utils import (
    parse_response,
    build_query_params,
    validate_response
)
from .errors import AuthenticationError, HttpStatusError, MalformedResponseError, NetworkError

# Setup logger
logger = logging.getLogger(__name__)

HeaderProvider = Callable[[], Dict[str, str]]


class RequestHandler:
    """
    Handler for making HTTP requests with uniform error classification.
    """

    def __init__(self,
                 session: requests.Session,
                 base_url: str,
                 timeout: float,
                 header_provider: Optional[HeaderProvider] = None):
        """
        Initialize the request handler.

        Args:
            session: Requests session used for every call
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            header_provider: Callable returning the headers to attach to each request
        """
        self.session = session
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.header_provider = header_provider or (lambda: {})

    def _get_correlation_id(self) -> str:
        """Generate a unique correlation ID for request tracing"""
        return str(uuid.uuid4())

    def _handle_response_error(self, error_details: Dict[str, Any]) -> None:
        """
        Raise the exception matching an error response.

        Args:
            error_details: Details extracted from the response

        Raises:
            AuthenticationError: For 401 and 403 errors
            HttpStatusError: For every other non-2xx status
        """
        status_code = error_details['status_code']
        error_message = error_details['message']

        if status_code in (401, 403):
            raise AuthenticationError(error_message, status_code, error_details)
        raise HttpStatusError(error_message, status_code, error_details)

    def make_request(self,
                     method: str,
                     endpoint: str,
                     params: Optional[Dict[str, Any]] = None,
                     json_body: Optional[Any] = None,
                     files: Optional[Dict[str, Any]] = None,
                     form: Optional[Dict[str, Any]] = None,
                     timeout: Optional[float] = None) -> Any:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, PUT, POST)
            endpoint: API endpoint (without base URL)
            params: Query parameters
            json_body: Body to send as JSON
            files: Multipart file fields
            form: Multipart form fields sent alongside ``files``
            timeout: Request timeout (overrides default)

        Returns:
            Any: Parsed response data

        Raises:
            NetworkError: When no response was received
            HttpStatusError: For non-2xx responses
            MalformedResponseError: When a 2xx body is not valid JSON
        """
        correlation_id = self._get_correlation_id()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        request_headers = {'X-Correlation-ID': correlation_id}
        request_headers.update(self.header_provider())
        if files:
            # requests sets the multipart boundary itself
            request_headers.pop('Content-Type', None)

        formatted_params = build_query_params(params) if params else None

        logger.debug(f"API Request: {method} {url} | Correlation ID: {correlation_id}")
        if formatted_params:
            logger.debug(f"Query params: {formatted_params}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=formatted_params,
                json=json_body,
                data=form,
                files=files,
                headers=request_headers,
                timeout=timeout or self.timeout
            )
        except requests.Timeout as e:
            logger.warning(f"Request timed out: {method} {url}")
            raise NetworkError(f"Request timed out: {e}")
        except requests.RequestException as e:
            logger.warning(f"Request error: {e}")
            raise NetworkError(f"Request failed: {e}")

        is_valid, error_details = validate_response(response)
        if not is_valid:
            self._handle_response_error(error_details)

        try:
            return parse_response(response)
        except ValueError as e:
            raise MalformedResponseError(str(e), response.status_code)


