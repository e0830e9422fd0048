"""
Pure aggregation over a snapshot of financial records.

Every function takes an iterable of records (anything with `type`, `amount`,
`category` and `date` attributes) and returns plain values; nothing here touches
the database.
"""

from collections import defaultdict
from datetime import datetime, time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from components.budget.periods import last_day_of_month
from components.core.errors import ValidationError
from components.record.models import EXPENSE, INCOME


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """
    Get the first and last instant of a month, month numbered 1..12.

    The last day is found as the day before the 1st of the next month, which
    covers December rollover and leap years without a day-count table.
    """
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    start = datetime(year, month, 1)
    end = datetime.combine(last_day_of_month(year, month).date(), time.max)
    return start, end


def _in_window(record, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and record.date < start:
        return False
    if end is not None and record.date > end:
        return False
    return True


def _money(value) -> Decimal:
    # Amounts arrive as Decimal from the store; str() keeps plain numbers exact
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _totals_by_type(records: Iterable) -> Dict[str, Decimal]:
    totals = {INCOME: Decimal(0), EXPENSE: Decimal(0)}
    for record in records:
        totals[record.type] = totals.get(record.type, Decimal(0)) + _money(record.amount)
    return totals


def compute_balance(records: Iterable) -> Dict[str, float]:
    """Income, expense and balance over every record given."""
    totals = _totals_by_type(records)
    return {
        "income": float(totals[INCOME]),
        "expense": float(totals[EXPENSE]),
        "balance": float(totals[INCOME] - totals[EXPENSE]),
    }


def compute_monthly_summary(records: Iterable, year: int, month: int) -> Dict:
    """Balance restricted to one calendar month, both month ends included."""
    start, end = month_bounds(year, month)
    summary = compute_balance(r for r in records if _in_window(r, start, end))
    summary.update(month=month, year=year)
    return summary


def compute_category_breakdown(
    records: Iterable,
    type: str = EXPENSE,
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> List[Dict]:
    """
    Totals of one record type grouped by category, largest first.

    The month filter applies only when both year and month are given.
    """
    start = end = None
    if year is not None and month is not None:
        start, end = month_bounds(year, month)

    totals = defaultdict(Decimal)
    counts = defaultdict(int)
    for record in records:
        if record.type != type or not _in_window(record, start, end):
            continue
        totals[record.category] += _money(record.amount)
        counts[record.category] += 1

    breakdown = [
        {"category": category, "total": float(total), "count": counts[category]}
        for category, total in totals.items()
    ]
    breakdown.sort(key=lambda item: (-item["total"], item["category"]))
    return breakdown
