"""
Base API client for budget service interactions.

This module provides the foundation for all API interactions with the budget
service, handling authentication headers, request formatting and response
classification.
"""

import logging
import requests
from typing import Any, Callable, Dict, Optional, TypeVar

from ..session import SessionGate
from .errors import HttpStatusError, MalformedResponseError
from .request_handler import RequestHandler

# Setup logger
logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:5000/api'
DEFAULT_TIMEOUT = 30

T = TypeVar('T')


class BaseAPIClient:
    """
    Base client for interacting with the budget service.

    Every request carries the headers returned by ``SessionGate.auth_headers()``
    at the time the request is sent, so a login or logout takes effect on the
    next call without rebuilding the client.
    """

    def __init__(self,
                 session_gate: SessionGate,
                 base_url: str = DEFAULT_API_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 http_session: Optional[requests.Session] = None):
        """
        Initialize the API client.

        Args:
            session_gate: Source of the authentication headers
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            http_session: Requests session to use (a new one by default)
        """
        self.session_gate = session_gate
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        self.session = http_session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

        self.request_handler = RequestHandler(
            session=self.session,
            base_url=self.base_url,
            timeout=self.timeout,
            header_provider=self.session_gate.auth_headers
        )

        logger.debug(f"Initialized API client with base URL: {self.base_url}")

    def get(self,
            endpoint: str,
            params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a GET request to the API.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            Any: Parsed response data
        """
        return self.request_handler.make_request('GET', endpoint, params=params)

    def put(self,
            endpoint: str,
            data: Any) -> Any:
        """
        Make a PUT request with a JSON body.

        Args:
            endpoint: API endpoint
            data: Request body data

        Returns:
            Any: Parsed response data
        """
        return self.request_handler.make_request('PUT', endpoint, json_body=data)

    def post_multipart(self,
                       endpoint: str,
                       files: Dict[str, Any],
                       form: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a multipart POST request.

        Args:
            endpoint: API endpoint
            files: File fields, as accepted by ``requests``
            form: Additional form fields

        Returns:
            Any: Parsed response data
        """
        return self.request_handler.make_request('POST', endpoint, files=files, form=form)


def parse_payload(parser: Callable[[Any], T], data: Any, description: str) -> T:
    """
    Apply a payload parser, classifying shape failures.

    Args:
        parser: Callable turning the decoded JSON into model objects
        data: Decoded JSON body
        description: What was being parsed, for the error message

    Returns:
        The parser's result

    Raises:
        MalformedResponseError: If the payload does not have the expected shape
    """
    try:
        return parser(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed {description} payload: {e}")
        raise MalformedResponseError(f"Malformed {description} payload: {e}")


def ensure_success(data: Any, description: str) -> None:
    """
    Check a mutation reply of the form ``{"success": bool}``.

    Raises:
        MalformedResponseError: If the reply has no ``success`` flag
        HttpStatusError: If the service reported ``success: false``
    """
    if not isinstance(data, dict) or 'success' not in data:
        raise MalformedResponseError(f"Malformed {description} reply: {data!r}")
    if not data['success']:
        message = data.get('error') or f"{description} was not accepted"
        details = {'error': data['error']} if data.get('error') else {}
        raise HttpStatusError(message, 200, details)
