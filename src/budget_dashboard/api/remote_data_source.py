"""
Remote data source for the budget dashboard.

This module provides the transport boundary used by the aggregation store.
Every operation returns a ``Result``: expected failures (no response,
rejected request, malformed body) never escape as exceptions. There are no
retries and no caching here.
"""

import logging
from decimal import Decimal
from typing import BinaryIO, Callable, List, Mapping, Optional

import requests

from ..models.budget import BudgetMap
from ..models.category import Summary
from ..models.transaction import Transaction
from ..models.upload import AccountFormat, UploadResult
from ..session import SessionGate
from .base_client import BaseAPIClient, DEFAULT_API_URL, DEFAULT_TIMEOUT
from .budgets_api import BudgetsAPI
from .errors import APIError
from .result import Result
from .summary_api import SummaryAPI
from .transactions_api import TransactionsAPI
from .uploads_api import UploadsAPI

# Setup logger
logger = logging.getLogger(__name__)


class RemoteDataSource(BaseAPIClient):
    """
    Client for the budget service.

    This client extends the BaseAPIClient with one method per service
    operation and converts raised API errors into failed results.
    """

    def __init__(self,
                 session_gate: SessionGate,
                 base_url: str = DEFAULT_API_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 http_session: Optional[requests.Session] = None):
        """
        Initialize the remote data source.

        Args:
            session_gate: Source of the authentication headers
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            http_session: Requests session to use
        """
        super().__init__(session_gate, base_url, timeout, http_session)

        # Initialize specialized API clients
        self.summary_api = SummaryAPI(self)
        self.transactions_api = TransactionsAPI(self)
        self.budgets_api = BudgetsAPI(self)
        self.uploads_api = UploadsAPI(self)

    def _call(self, operation: str, func: Callable, *args) -> Result:
        try:
            return Result.success(func(*args))
        except APIError as e:
            logger.warning(f"{operation} failed ({e.kind}): {e.message}")
            return Result.failure(e)

    # Read operations

    def fetch_summary(self, month: str) -> Result[Summary]:
        """
        Fetch the per-category summary of a month.

        Args:
            month: Month key (YYYY-MM)

        Returns:
            Result[Summary]: Category name to CategorySummary
        """
        return self._call('fetch_summary', self.summary_api.get_summary, month)

    def fetch_transactions(self, month: str) -> Result[List[Transaction]]:
        """
        Fetch the transactions of a month.

        Args:
            month: Month key (YYYY-MM)

        Returns:
            Result[List[Transaction]]: Transactions in server order
        """
        return self._call('fetch_transactions', self.transactions_api.get_transactions, month)

    def fetch_budgets(self) -> Result[BudgetMap]:
        """Fetch the confirmed budget map"""
        return self._call('fetch_budgets', self.budgets_api.get_budgets)

    def fetch_available_months(self) -> Result[List[str]]:
        """Fetch the months with data, newest first"""
        return self._call('fetch_available_months', self.summary_api.get_available_months)

    # Write operations

    def upload_statement(self, file: BinaryIO, account_format: AccountFormat) -> Result[UploadResult]:
        """
        Submit a bank statement for server-side parsing.

        Args:
            file: Open binary file
            account_format: Bank format of the statement

        Returns:
            Result[UploadResult]: Import counts
        """
        return self._call('upload_statement', self.uploads_api.upload_statement, file, account_format)

    def update_transaction_category(self, transaction_id: int, category: str) -> Result[None]:
        """
        Move one transaction to another category.

        Args:
            transaction_id: Transaction ID
            category: New category

        Returns:
            Result[None]: Success or the classified failure
        """
        return self._call('update_transaction_category',
                          self.transactions_api.update_category, transaction_id, category)

    def save_budgets(self, budgets: Mapping[str, Decimal]) -> Result[None]:
        """
        Replace the full budget map.

        Args:
            budgets: Category name to limit

        Returns:
            Result[None]: Success or the classified failure
        """
        return self._call('save_budgets', self.budgets_api.save_budgets, budgets)
