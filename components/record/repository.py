"""Repository for financial record operations."""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.record.models import EXPENSE, FinancialRecord
from components.record.schemas import RecordCreate


class RecordRepository:
    """Repository for financial record operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user_id: int, record: RecordCreate) -> FinancialRecord:
        """Create a new record owned by the user."""
        db_record = FinancialRecord(user_id=user_id, **record.model_dump())
        self.session.add(db_record)
        await self.session.commit()
        await self.session.refresh(db_record)
        return db_record

    async def create_many(self, user_id: int, records: List[RecordCreate]) -> List[FinancialRecord]:
        """Create several records in one commit."""
        db_records = [FinancialRecord(user_id=user_id, **record.model_dump()) for record in records]
        self.session.add_all(db_records)
        await self.session.commit()
        for db_record in db_records:
            await self.session.refresh(db_record)
        return db_records

    async def get_owned(self, user_id: int, record_id: int) -> Optional[FinancialRecord]:
        """Get a record by ID if it belongs to the user."""
        result = await self.session.execute(
            select(FinancialRecord).where(
                FinancialRecord.id == record_id,
                FinancialRecord.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_page(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        type: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[List[FinancialRecord], int, int]:
        """
        Get a page of the user's records, newest first.

        Returns the records, the total number of matches and the page count.
        """
        conditions = [FinancialRecord.user_id == user_id]
        if type:
            conditions.append(FinancialRecord.type == type)
        if category:
            conditions.append(func.lower(FinancialRecord.category).contains(category.lower(), autoescape=True))
        if start_date:
            conditions.append(FinancialRecord.date >= start_date)
        if end_date:
            conditions.append(FinancialRecord.date <= end_date)

        result = await self.session.execute(
            select(FinancialRecord)
            .where(*conditions)
            .order_by(FinancialRecord.date.desc(), FinancialRecord.created_at.desc(), FinancialRecord.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        records = list(result.scalars().all())

        total = (
            await self.session.execute(select(func.count(FinancialRecord.id)).where(*conditions))
        ).scalar_one()
        return records, total, math.ceil(total / limit)

    async def recent(self, user_id: int, limit: int = 5) -> List[FinancialRecord]:
        """Get the user's most recent records."""
        result = await self.session.execute(
            select(FinancialRecord)
            .where(FinancialRecord.user_id == user_id)
            .order_by(FinancialRecord.date.desc(), FinancialRecord.created_at.desc(), FinancialRecord.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def snapshot(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        type: Optional[str] = None,
    ) -> List[FinancialRecord]:
        """Get the user's records for aggregation, optionally bounded by date (inclusive)."""
        query = select(FinancialRecord).where(FinancialRecord.user_id == user_id)
        if start is not None:
            query = query.where(FinancialRecord.date >= start)
        if end is not None:
            query = query.where(FinancialRecord.date <= end)
        if type:
            query = query.where(FinancialRecord.type == type)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def sum_expenses(
        self,
        user_id: int,
        category: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> float:
        """Sum the user's expense amounts, optionally for one category and date window."""
        query = select(func.sum(FinancialRecord.amount)).where(
            FinancialRecord.user_id == user_id,
            FinancialRecord.type == EXPENSE,
        )
        if category is not None:
            query = query.where(FinancialRecord.category == category)
        if start is not None:
            query = query.where(FinancialRecord.date >= start)
        if end is not None:
            query = query.where(FinancialRecord.date <= end)

        result = await self.session.execute(query)
        return float(result.scalar() or 0)

    async def apply(self, record: FinancialRecord, values: Dict[str, Any]) -> FinancialRecord:
        """Write validated field values onto a record."""
        for field, value in values.items():
            setattr(record, field, value)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def delete(self, record: FinancialRecord) -> None:
        """Delete a record permanently."""
        await self.session.delete(record)
        await self.session.commit()
