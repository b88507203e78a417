"""
Date utilities for month keys.

Month keys are ``YYYY-MM`` strings. They sort chronologically as strings.
"""

import logging
import re
from datetime import date, datetime
from typing import Iterable, List, Optional

# Setup logger
logger = logging.getLogger(__name__)

_MONTH_KEY = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


class MonthFormatter:
    """Utility class for month key formatting and parsing"""

    @staticmethod
    def is_month_key(value: str) -> bool:
        return bool(_MONTH_KEY.match(value or ''))

    @staticmethod
    def format_month(input_date: date) -> str:
        """
        Format a date as a month key

        Args:
            input_date: Any date within the month

        Returns:
            str: Month key (YYYY-MM)
        """
        return input_date.strftime('%Y-%m')

    @staticmethod
    def current_month(today: Optional[date] = None) -> str:
        """Month key for today (or the given date)"""
        return MonthFormatter.format_month(today or datetime.now().date())

    @staticmethod
    def validate_month(value: str) -> str:
        """
        Validate a month key

        Args:
            value: Candidate month key

        Returns:
            str: The month key, stripped of surrounding whitespace

        Raises:
            ValueError: If the value is not a YYYY-MM key
        """
        candidate = (value or '').strip()
        if not MonthFormatter.is_month_key(candidate):
            raise ValueError(f"Invalid month (expected YYYY-MM): {value!r}")
        return candidate

    @staticmethod
    def newest_first(months: Iterable[str]) -> List[str]:
        """Order month keys newest first, dropping duplicates"""
        return sorted(set(months), reverse=True)
