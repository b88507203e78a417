"""
Transactions API client for the budget service.

This module provides access to transaction-related endpoints.
"""

import logging
from typing import List

from ..models.transaction import Transaction, transactions_from_api_response
from .base_client import ensure_success, parse_payload

logger = logging.getLogger(__name__)


class TransactionsAPI:
    """
    API client for transaction-related endpoints.
    """

    def __init__(self, client):
        """
        Initialize the TransactionsAPI client.

        Args:
            client: The base client to use for API requests
        """
        self.client = client

    def get_transactions(self, month: str) -> List[Transaction]:
        """
        Get the transactions of a month.

        Args:
            month: Month key (YYYY-MM)

        Returns:
            List[Transaction]: List of transactions
        """
        response = self.client.get('transactions', params={'month': month})
        transactions = parse_payload(transactions_from_api_response, response, 'transactions')
        logger.debug(f"Fetched {len(transactions)} transactions for {month}")
        return transactions

    def update_category(self, transaction_id: int, category: str) -> None:
        """
        Move a transaction to another category.

        Args:
            transaction_id: Transaction ID
            category: New category name

        Raises:
            HttpStatusError: If the service refused the change
        """
        response = self.client.put(
            f'transactions/{transaction_id}/category',
            {'category': category}
        )
        ensure_success(response, 'Category update')
        logger.info(f"Updated category of transaction {transaction_id} to {category}")
