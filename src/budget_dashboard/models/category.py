"""
Category data models for the budget dashboard.

This module contains the fixed category set and the per-category summary model.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..utils.money import to_decimal


class Category(str, Enum):
    """Spending classifications applied to transactions and budgets"""
    GROCERIES = "Groceries"
    TRANSPORTATION = "Transportation"
    DINING = "Dining & Restaurants"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    HEALTHCARE = "Healthcare"
    TRAVEL = "Travel"
    EDUCATION = "Learning & Education"
    OTHER = "Other"


CATEGORIES: List[str] = [category.value for category in Category]


def is_known_category(name: str) -> bool:
    """Check whether a name belongs to the category set"""
    return name in CATEGORIES


class CategorySummary(BaseModel):
    """
    Spending for one category in one month.

    ``remaining``, ``percentage_used`` and ``over_budget`` are always derived
    from ``spent`` and ``budget``; values sent by the server for them are
    ignored so they can never disagree.
    """
    spent: Annotated[Decimal, Field(description="Amount spent in the month")]
    budget: Annotated[Decimal, Field(ge=0, description="Budget limit for the category")]
    transaction_count: Annotated[int, Field(default=0, ge=0, description="Number of transactions")]

    model_config = ConfigDict(frozen=True)

    @field_validator('spent', 'budget', mode='before')
    @classmethod
    def validate_amount(cls, value: Any) -> Decimal:
        """Accept numbers and numeric strings"""
        return to_decimal(value)

    @computed_field
    @property
    def remaining(self) -> Decimal:
        return self.budget - self.spent

    @computed_field
    @property
    def percentage_used(self) -> Decimal:
        if self.budget == 0:
            return Decimal('0')
        return self.spent / self.budget * 100

    @computed_field
    @property
    def over_budget(self) -> bool:
        return self.spent > self.budget

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'CategorySummary':
        """Create instance from budget service response"""
        return cls(
            spent=data['spent'],
            budget=data.get('budget', 0),
            transaction_count=data.get('transactions_count', 0)
        )


Summary = Dict[str, CategorySummary]


def summary_from_api_response(data: Any) -> Summary:
    """
    Build a month Summary from the ``GET /summary`` payload.

    Raises:
        TypeError: If the payload is not a mapping of category to summary
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected a mapping of categories, got {type(data).__name__}")
    return {
        str(name): CategorySummary.from_api_response(entry)
        for name, entry in data.items()
    }
