"""
Summary API client for the budget service.

This module provides access to the month summary and the list of months
that have data.
"""

import logging
from typing import Any, List

from ..models.category import Summary, summary_from_api_response
from ..utils.date_utils import MonthFormatter
from .base_client import parse_payload

logger = logging.getLogger(__name__)


def _months_from_api_response(data: Any) -> List[str]:
    if not isinstance(data, list):
        raise TypeError(f"Expected a list of months, got {type(data).__name__}")
    return MonthFormatter.newest_first(MonthFormatter.validate_month(str(month)) for month in data)


class SummaryAPI:
    """
    API client for summary-related endpoints.
    """

    def __init__(self, client):
        """
        Initialize the SummaryAPI client.

        Args:
            client: The base client to use for API requests
        """
        self.client = client

    def get_summary(self, month: str) -> Summary:
        """
        Get the per-category summary for a month.

        Args:
            month: Month key (YYYY-MM)

        Returns:
            Summary: Mapping of category name to CategorySummary
        """
        response = self.client.get('summary', params={'month': month})
        summary = parse_payload(summary_from_api_response, response, 'summary')
        logger.debug(f"Fetched summary for {month}: {len(summary)} categories")
        return summary

    def get_available_months(self) -> List[str]:
        """
        Get the months that have transactions.

        Returns:
            List[str]: Month keys, newest first
        """
        response = self.client.get('months')
        return parse_payload(_months_from_api_response, response, 'months')
