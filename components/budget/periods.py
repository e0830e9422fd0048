"""Budget windows and scopes."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Tuple, Union

from components.budget.models import OVERALL_BUDGET

# datetime.weekday() numbering
WEEK_START_DAYS = {"monday": 0, "sunday": 6}


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max)


def budget_window(period: str, now: datetime, week_start: str = "sunday") -> Tuple[datetime, datetime]:
    """
    Get the [start, end] window a budget period maps to around `now`.

    Both ends are inclusive: start is midnight of the first day and end is the
    last instant of the final day.
    - weekly: the week containing now, beginning on `week_start`
    - monthly: the calendar month containing now
    - yearly: the calendar year containing now
    """
    if period == "weekly":
        days_back = (now.weekday() - WEEK_START_DAYS[week_start]) % 7
        start = start_of_day(now - timedelta(days=days_back))
        return start, end_of_day(start + timedelta(days=6))
    if period == "monthly":
        start = datetime(now.year, now.month, 1)
        return start, end_of_day(last_day_of_month(now.year, now.month))
    if period == "yearly":
        return datetime(now.year, 1, 1), end_of_day(datetime(now.year, 12, 31))
    raise ValueError(f"Unknown budget period: {period}")


def last_day_of_month(year: int, month: int) -> datetime:
    """Day 0 of the following month, i.e. the day before its 1st."""
    if month == 12:
        first_of_next = datetime(year + 1, 1, 1)
    else:
        first_of_next = datetime(year, month + 1, 1)
    return first_of_next - timedelta(days=1)


@dataclass(frozen=True)
class CategoryScope:
    """Budget over one category, summed inside the budget window."""
    category: str


@dataclass(frozen=True)
class AllCategoriesScope:
    """Budget over every category, summed over all time."""


BudgetScope = Union[CategoryScope, AllCategoriesScope]


def scope_for(category: str) -> BudgetScope:
    if category == OVERALL_BUDGET:
        return AllCategoriesScope()
    return CategoryScope(category)
