"""Tests for budget windows, scopes and status."""

from datetime import datetime

import pytest

from components.budget.models import Budget, budget_status
from components.budget.periods import AllCategoriesScope, CategoryScope, budget_window, scope_for


def test_weekly_window_starts_sunday():
    # 2024-03-20 is a Wednesday
    start, end = budget_window("weekly", datetime(2024, 3, 20, 14, 30))
    assert start == datetime(2024, 3, 17)
    assert end == datetime(2024, 3, 23, 23, 59, 59, 999999)


def test_weekly_window_on_sunday_itself():
    start, _ = budget_window("weekly", datetime(2024, 3, 17, 9))
    assert start == datetime(2024, 3, 17)


def test_weekly_window_starts_monday():
    start, end = budget_window("weekly", datetime(2024, 3, 17, 9), week_start="monday")
    assert start == datetime(2024, 3, 11)
    assert end.date() == datetime(2024, 3, 17).date()


def test_monthly_window():
    assert budget_window("monthly", datetime(2024, 2, 10)) == (
        datetime(2024, 2, 1), datetime(2024, 2, 29, 23, 59, 59, 999999)
    )


def test_yearly_window():
    assert budget_window("yearly", datetime(2024, 7, 4)) == (
        datetime(2024, 1, 1), datetime(2024, 12, 31, 23, 59, 59, 999999)
    )


def test_unknown_period():
    with pytest.raises(ValueError):
        budget_window("daily", datetime(2024, 7, 4))


def test_scope_for_sentinel():
    assert scope_for("Overall Budget") == AllCategoriesScope()
    assert scope_for("Food & Dining") == CategoryScope("Food & Dining")
    # Exact match only
    assert scope_for("overall budget") == CategoryScope("overall budget")


@pytest.mark.parametrize(
    "percentage, threshold, expected",
    [(0, 80, "good"), (79.9, 80, "good"), (80, 80, "warning"), (99.9, 80, "warning"),
     (100, 80, "exceeded"), (150, 80, "exceeded"), (50, 50, "warning")],
)
def test_budget_status(percentage, threshold, expected):
    assert budget_status(percentage, threshold) == expected


def test_derived_budget_values():
    budget = Budget(budget_amount=600, spent_amount=500, alert_threshold=80)
    assert budget.remaining_amount == 100
    assert budget.percentage_spent == pytest.approx(83.33, abs=0.01)
    assert budget.status == "warning"

    over = Budget(budget_amount=100, spent_amount=130, alert_threshold=80)
    assert over.remaining_amount == 0
    assert over.status == "exceeded"


def test_zero_budget_amount():
    budget = Budget(budget_amount=0, spent_amount=20, alert_threshold=80)
    assert budget.percentage_spent == 0
    assert budget.status == "good"
