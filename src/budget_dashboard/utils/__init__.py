"""
Utility functions and classes for the budget dashboard.

This module provides month key handling, change notification, money
formatting and API response helpers.
"""

from .api_utils import (
    parse_response,
    extract_error_details,
    build_query_params,
    validate_response
)
from .date_utils import MonthFormatter
from .events import Event, EventBus
from .money import format_currency, to_decimal

__all__ = [
    # API utilities
    'parse_response',
    'extract_error_details',
    'build_query_params',
    'validate_response',

    # Date utilities
    'MonthFormatter',

    # Events
    'Event',
    'EventBus',

    # Money
    'format_currency',
    'to_decimal'
]
