import random
from decimal import Decimal

import pytest

from budget_dashboard.models import BudgetStatus, CategorySummary
from budget_dashboard.models.budget import Totals
from budget_dashboard.models.views import UsageStatus
from budget_dashboard.services.derived_views import PALETTE, DerivedViewBuilder

from helpers import summary_of


def test_totals_fold_the_summary():
    summary = summary_of({"Groceries": ("250.50", "300"), "Travel": ("99.99", "50"), "Other": ("0", "0")})

    totals = DerivedViewBuilder.compute_totals(summary)

    assert totals.total_spent == Decimal("350.49")
    assert totals.total_budget == Decimal("350")
    assert totals.remaining == Decimal("-0.49")


def test_totals_do_not_depend_on_order():
    entries = {f"Category {i}": (f"{i}.1{i}", f"{i * 3}.3") for i in range(20)}
    items = list(summary_of(entries).items())
    expected = DerivedViewBuilder.compute_totals(dict(items))

    rng = random.Random(7)
    for _ in range(10):
        rng.shuffle(items)
        assert DerivedViewBuilder.compute_totals(dict(items)) == expected


def test_totals_of_empty_summary():
    assert DerivedViewBuilder.compute_totals({}) == Totals()


@pytest.mark.parametrize("percentage, expected", [
    ("0", BudgetStatus.ON_TRACK),
    ("70", BudgetStatus.ON_TRACK),
    ("70.01", BudgetStatus.APPROACHING),
    ("90", BudgetStatus.APPROACHING),
    ("90.01", BudgetStatus.AT_OR_OVER_LIMIT),
    ("150", BudgetStatus.AT_OR_OVER_LIMIT),
])
def test_status_bands(percentage, expected):
    assert DerivedViewBuilder.status_for_percentage(Decimal(percentage)) == expected


def test_status_is_monotonic():
    percentages = [Decimal(p) / 4 for p in range(0, 500)]
    severities = [DerivedViewBuilder.status_for_percentage(p).severity for p in percentages]
    assert severities == sorted(severities)


def test_over_budget_with_zero_budget_is_at_limit():
    entry = CategorySummary(spent="5", budget="0")
    assert DerivedViewBuilder.status_of(entry) == BudgetStatus.AT_OR_OVER_LIMIT


def test_pie_series_colors_cycle():
    summary = summary_of({f"Category {i}": ("1", "1") for i in range(12)})

    series = DerivedViewBuilder.to_pie_series(summary)

    assert [s.color for s in series[:10]] == PALETTE
    assert series[10].color == PALETTE[0]
    assert series[11].color == PALETTE[1]
    assert series[0].value == Decimal("1")


def test_bar_series_truncates_labels():
    summary = summary_of({"Dining & Restaurants": ("80", "100"), "Travel": ("0", "10")})

    series = DerivedViewBuilder.to_bar_series(summary)

    assert series[0].key == "Dining & Restaurants"
    assert series[0].label == "Dining & R..."
    assert series[1].label == "Travel"
    assert series[0].budget == Decimal("100")


def test_truncate_label_keeps_ten_characters():
    assert DerivedViewBuilder.truncate_label("Healthcare") == "Healthcare"


def test_progress_width_is_capped():
    assert DerivedViewBuilder.progress_width(CategorySummary(spent="250", budget="100")) == Decimal("100")
    assert DerivedViewBuilder.progress_width(CategorySummary(spent="25", budget="100")) == Decimal("25")


@pytest.mark.parametrize("spent, budget, status, message", [
    ("500", "1000", UsageStatus.WITHIN_BUDGET, "You're within budget. $500.00 remaining."),
    ("950", "1000", UsageStatus.APPROACHING, "You're approaching your budget limit. $50.00 remaining."),
    ("1000", "1000", UsageStatus.APPROACHING, "You're approaching your budget limit. $0.00 remaining."),
    ("1200.5", "1000", UsageStatus.OVER_BUDGET, "You've exceeded your total budget by $200.50."),
    ("0", "0", UsageStatus.WITHIN_BUDGET, "You're within budget. $0.00 remaining."),
])
def test_budget_usage(spent, budget, status, message):
    usage = DerivedViewBuilder.budget_usage(Totals(total_spent=Decimal(spent), total_budget=Decimal(budget)))
    assert usage.status == status
    assert usage.message == message
