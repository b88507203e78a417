"""
Derived views for the budget dashboard.

Pure functions turning store state into chart series and status
classifications. Nothing here keeps state.
"""

from decimal import Decimal
from typing import Dict, List, Mapping

from ..models.budget import Totals
from ..models.category import CategorySummary
from ..models.views import BarEntry, BudgetStatus, BudgetUsage, PieSlice, UsageStatus
from ..utils.money import format_currency

PALETTE = [
    '#8884d8', '#82ca9d', '#ffc658', '#ff7300', '#00ff88',
    '#ff0088', '#8800ff', '#00ffff', '#ff8800', '#8888ff'
]

LABEL_MAX_LENGTH = 10
ON_TRACK_LIMIT = Decimal('70')
APPROACHING_LIMIT = Decimal('90')

Summary = Mapping[str, CategorySummary]


class DerivedViewBuilder:
    """Utility class for building chart-ready views from store state"""

    @staticmethod
    def compute_totals(summary: Summary) -> Totals:
        """
        Fold the month summary into totals.

        Decimal addition is exact, so the result does not depend on the
        iteration order of ``summary``.
        """
        return Totals(
            total_spent=sum((entry.spent for entry in summary.values()), Decimal('0')),
            total_budget=sum((entry.budget for entry in summary.values()), Decimal('0'))
        )

    @staticmethod
    def to_pie_series(summary: Summary) -> List[PieSlice]:
        """
        One slice per category, valued by amount spent.

        The color is picked by the category's position in the summary, cycling
        through the palette.
        """
        return [
            PieSlice(name=category, value=entry.spent, color=PALETTE[index % len(PALETTE)])
            for index, (category, entry) in enumerate(summary.items())
        ]

    @staticmethod
    def truncate_label(name: str, max_length: int = LABEL_MAX_LENGTH) -> str:
        """Shorten a category name for axis labels"""
        if len(name) > max_length:
            return name[:max_length] + '...'
        return name

    @staticmethod
    def to_bar_series(summary: Summary) -> List[BarEntry]:
        """One budget-versus-spent entry per category"""
        return [
            BarEntry(
                key=category,
                label=DerivedViewBuilder.truncate_label(category),
                budget=entry.budget,
                spent=entry.spent
            )
            for category, entry in summary.items()
        ]

    @staticmethod
    def status_for_percentage(percentage_used: Decimal, over_budget: bool = False) -> BudgetStatus:
        """
        Classify a usage percentage.

        Band edges belong to the lower band: 70 is on track, 90 is approaching.
        """
        if over_budget or percentage_used > APPROACHING_LIMIT:
            return BudgetStatus.AT_OR_OVER_LIMIT
        if percentage_used > ON_TRACK_LIMIT:
            return BudgetStatus.APPROACHING
        return BudgetStatus.ON_TRACK

    @staticmethod
    def status_of(category_summary: CategorySummary) -> BudgetStatus:
        """Status used for progress bars and status icons"""
        return DerivedViewBuilder.status_for_percentage(
            category_summary.percentage_used, category_summary.over_budget
        )

    @staticmethod
    def category_statuses(summary: Summary) -> Dict[str, BudgetStatus]:
        return {category: DerivedViewBuilder.status_of(entry) for category, entry in summary.items()}

    @staticmethod
    def progress_width(category_summary: CategorySummary) -> Decimal:
        """Progress bar fill, capped at 100 percent"""
        return min(category_summary.percentage_used, Decimal('100'))

    @staticmethod
    def budget_usage(totals: Totals) -> BudgetUsage:
        """Share of the total monthly budget already spent"""
        if totals.total_budget > 0:
            percentage = totals.total_spent / totals.total_budget * 100
        else:
            percentage = Decimal('0')

        if percentage > 100:
            status = UsageStatus.OVER_BUDGET
            message = f"You've exceeded your total budget by {format_currency(abs(totals.remaining))}."
        elif percentage > APPROACHING_LIMIT:
            status = UsageStatus.APPROACHING
            message = f"You're approaching your budget limit. {format_currency(totals.remaining)} remaining."
        else:
            status = UsageStatus.WITHIN_BUDGET
            message = f"You're within budget. {format_currency(totals.remaining)} remaining."

        return BudgetUsage(percentage_used=percentage, status=status, message=message)
