"""
Core data models for the budget dashboard.

This package contains Pydantic models for the budget service data structures.
"""

from .transaction import Transaction

from .category import (
    Category,
    CATEGORIES,
    CategorySummary,
    Summary,
    is_known_category
)

from .budget import (
    BudgetMap,
    Totals,
    normalize_budget_map
)

from .upload import (
    AccountFormat,
    UploadResult
)

from .views import (
    BarEntry,
    BudgetStatus,
    BudgetUsage,
    PieSlice,
    UsageStatus
)

from .tracked import Tracked

__all__ = [
    # Transaction models
    'Transaction',

    # Category models
    'Category',
    'CATEGORIES',
    'CategorySummary',
    'Summary',
    'is_known_category',

    # Budget models
    'BudgetMap',
    'Totals',
    'normalize_budget_map',

    # Upload models
    'AccountFormat',
    'UploadResult',

    # View models
    'BarEntry',
    'BudgetStatus',
    'BudgetUsage',
    'PieSlice',
    'UsageStatus',

    'Tracked'
]
