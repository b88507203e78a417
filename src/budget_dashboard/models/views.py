"""
Chart and status models produced by the derived view functions.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class BudgetStatus(str, Enum):
    """Per-category status, ordered by severity"""
    ON_TRACK = "on_track"
    APPROACHING = "approaching"
    AT_OR_OVER_LIMIT = "at_or_over_limit"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    BudgetStatus.ON_TRACK: 0,
    BudgetStatus.APPROACHING: 1,
    BudgetStatus.AT_OR_OVER_LIMIT: 2,
}


class UsageStatus(str, Enum):
    """Status of the month-wide budget"""
    WITHIN_BUDGET = "within_budget"
    APPROACHING = "approaching"
    OVER_BUDGET = "over_budget"


class PieSlice(BaseModel):
    name: str
    value: Decimal
    color: str

    model_config = ConfigDict(frozen=True)


class BarEntry(BaseModel):
    key: Annotated[str, Field(description="Category name used for lookups and edits")]
    label: Annotated[str, Field(description="Display label, possibly truncated")]
    budget: Decimal
    spent: Decimal

    model_config = ConfigDict(frozen=True)


class BudgetUsage(BaseModel):
    """How much of the total monthly budget has been used"""
    percentage_used: Decimal
    status: UsageStatus
    message: str

    model_config = ConfigDict(frozen=True)
