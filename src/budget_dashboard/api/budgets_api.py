"""
Budgets API client for the budget service.
"""

import logging
from decimal import Decimal
from typing import Mapping

from ..models.budget import BudgetMap, budget_map_to_payload, normalize_budget_map
from .base_client import ensure_success, parse_payload

logger = logging.getLogger(__name__)


class BudgetsAPI:
    """
    API client for budget-related endpoints.
    """

    def __init__(self, client):
        """
        Initialize the BudgetsAPI client.

        Args:
            client: The base client to use for API requests
        """
        self.client = client

    def get_budgets(self) -> BudgetMap:
        """
        Get the budget limit of every category.

        Returns:
            BudgetMap: Category name to limit, 0 for unset categories
        """
        response = self.client.get('budgets')
        return parse_payload(normalize_budget_map, response, 'budgets')

    def save_budgets(self, budgets: Mapping[str, Decimal]) -> None:
        """
        Replace the full budget map.

        Args:
            budgets: Category name to limit

        Raises:
            HttpStatusError: If the service refused the budgets
        """
        response = self.client.put('budgets', budget_map_to_payload(budgets))
        ensure_success(response, 'Budget update')
        logger.info(f"Saved budgets for {len(budgets)} categories")
