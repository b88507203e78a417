"""
API error classes for handling budget service failures.

This module provides the failure taxonomy shared by the transport layer and
the aggregation store.
"""

from typing import Dict, Any, Optional


class APIError(Exception):
    """Base exception for API errors"""

    kind = "api_error"
    generic_message = "The budget service request failed"

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NetworkError(APIError):
    """Exception raised when no response reached the client (connection error, timeout)"""

    kind = "network_error"
    generic_message = "Could not reach the budget service"


class HttpStatusError(APIError):
    """Exception raised when the service rejects a request"""

    kind = "http_status_error"
    generic_message = "The budget service rejected the request"

    @property
    def server_message(self) -> Optional[str]:
        """Detail supplied by the server, if any"""
        return self.details.get("error")


class AuthenticationError(HttpStatusError):
    """Exception raised for 401/403 responses"""

    kind = "authentication_error"
    generic_message = "Your session is no longer valid, please sign in again"


class MalformedResponseError(APIError):
    """Exception raised when a 2xx body does not have the expected shape"""

    kind = "malformed_response"
    generic_message = "Unexpected response from the budget service"


TransportError = NetworkError
ServerRejection = HttpStatusError
