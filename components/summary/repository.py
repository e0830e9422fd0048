"""Repository serving ledger summaries for a user."""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from components.record.models import EXPENSE
from components.record.repository import RecordRepository
from components.record.schemas import Record
from components.summary import aggregation
from components.summary import schemas


class SummaryRepository:
    """Loads record snapshots and aggregates them."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.records = RecordRepository(session)

    async def get_balance(self, user_id: int) -> schemas.Balance:
        """Get all-time income, expense and balance."""
        records = await self.records.snapshot(user_id)
        return schemas.Balance(**aggregation.compute_balance(records))

    async def get_monthly_summary(self, user_id: int, year: int, month: int) -> schemas.MonthlySummary:
        """Get totals for one month (month is 1-indexed)."""
        start, end = aggregation.month_bounds(year, month)
        records = await self.records.snapshot(user_id, start=start, end=end)
        return schemas.MonthlySummary(**aggregation.compute_monthly_summary(records, year, month))

    async def get_category_breakdown(
        self,
        user_id: int,
        type: str = EXPENSE,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[schemas.CategoryTotal]:
        """Get per-category totals for a record type, optionally for one month."""
        start = end = None
        if year is not None and month is not None:
            start, end = aggregation.month_bounds(year, month)
        records = await self.records.snapshot(user_id, start=start, end=end, type=type)
        return [
            schemas.CategoryTotal(**item)
            for item in aggregation.compute_category_breakdown(records, type, year, month)
        ]

    async def get_overview(
        self,
        user_id: int,
        year: Optional[int] = None,
        month: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> schemas.Overview:
        """
        Get the dashboard summary.

        Includes the all-time balance, the requested month's summary when
        year and month are given, the five latest records and the current
        month's expense breakdown.
        """
        now = now or datetime.now()
        monthly_summary = None
        if year is not None and month is not None:
            monthly_summary = await self.get_monthly_summary(user_id, year, month)

        return schemas.Overview(
            balance=await self.get_balance(user_id),
            monthly_summary=monthly_summary,
            recent_records=[
                Record.model_validate(record) for record in await self.records.recent(user_id, limit=5)
            ],
            category_breakdown=await self.get_category_breakdown(user_id, EXPENSE, now.year, now.month),
        )
