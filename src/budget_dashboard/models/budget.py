"""
Budget data models for the budget dashboard.

Budgets are a plain mapping of category name to a non-negative limit.
"""

from decimal import Decimal
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, computed_field

from ..utils.money import to_decimal
from .category import CATEGORIES

BudgetMap = Dict[str, Decimal]


def normalize_budget_map(data: Mapping[str, Any]) -> BudgetMap:
    """
    Normalize a budget mapping.

    Every known category gets an entry (0 when unset); categories the server
    knows about beyond the fixed set are kept as they are.

    Raises:
        TypeError: If ``data`` is not a mapping
        ValueError: If an amount is not a number or is negative
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"Expected a mapping of budgets, got {type(data).__name__}")

    budgets: BudgetMap = {category: Decimal('0') for category in CATEGORIES}
    for category, amount in data.items():
        limit = to_decimal(amount)
        if limit < 0:
            raise ValueError(f"Budget for {category} cannot be negative: {limit}")
        budgets[str(category)] = limit
    return budgets


def budget_map_to_payload(budgets: Mapping[str, Decimal]) -> Dict[str, float]:
    """Serialize a budget map for ``PUT /budgets``"""
    return {category: float(amount) for category, amount in budgets.items()}


class Totals(BaseModel):
    """Month-wide totals folded from the category summaries"""
    total_spent: Decimal = Decimal('0')
    total_budget: Decimal = Decimal('0')

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.total_spent
