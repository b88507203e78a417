"""
API utilities for common request handling and error processing.

This module provides utilities for working with budget service requests and responses.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
import requests

# Setup logger
logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODES = (200, 201, 204)


def parse_response(response: requests.Response) -> Any:
    """
    Parse API response body as JSON

    Args:
        response (requests.Response): Response object

    Returns:
        Any: Parsed response data (empty dict for an empty body)

    Raises:
        ValueError: If response cannot be parsed
    """
    if not response.text:
        return {}

    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as e:
        logger.error(f"Failed to parse response: {e}")
        logger.debug(f"Response text: {response.text[:500]}...")
        raise ValueError(f"Invalid JSON response: {e}")


def extract_error_details(response: requests.Response) -> Dict[str, Any]:
    """
    Extract error details from response

    The budget service reports failures as ``{"error": "<message>"}``.

    Args:
        response (requests.Response): Response object

    Returns:
        Dict[str, Any]: Error details with ``status_code``, ``message`` and,
        when the server supplied one, ``error``
    """
    generic = f"HTTP error! Status: {response.status_code}"
    details: Dict[str, Any] = {"status_code": response.status_code, "message": generic}

    if not response.text:
        return details

    try:
        data = response.json()
    except ValueError:
        details["detail"] = response.text[:500]
        return details

    if isinstance(data, dict) and data.get("error"):
        details["error"] = str(data["error"])
        details["message"] = details["error"]

    return details


def build_query_params(params: Dict[str, Any]) -> Dict[str, str]:
    """
    Build query parameters with proper formatting

    Args:
        params (Dict[str, Any]): Raw parameters

    Returns:
        Dict[str, str]: Formatted parameters
    """
    formatted_params = {}

    for key, value in params.items():
        if value is None:
            continue

        if isinstance(value, bool):
            formatted_params[key] = str(value).lower()
        elif isinstance(value, (list, tuple)):
            formatted_params[key] = ",".join(str(item) for item in value)
        else:
            formatted_params[key] = str(value)

    return formatted_params


def validate_response(
    response: requests.Response,
    expected_status_codes: Tuple[int, ...] = SUCCESS_STATUS_CODES
) -> Tuple[bool, Optional[Dict[str, Any]]]:
    """
    Validate response status code and extract error details if needed

    Args:
        response (requests.Response): Response object
        expected_status_codes (Tuple[int, ...]): Status codes treated as success

    Returns:
        Tuple[bool, Optional[Dict[str, Any]]]: (is_valid, error_details)
    """
    if response.status_code in expected_status_codes:
        return True, None

    error_details = extract_error_details(response)
    logger.warning(f"API error: {error_details}")

    return False, error_details
