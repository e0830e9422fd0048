"""Repository for budget operations."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import OVERALL_BUDGET, Budget


class BudgetRepository:
    """Repository for budget operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user_id: int, values: Dict[str, Any]) -> Budget:
        """Create a new budget owned by the user."""
        db_budget = Budget(user_id=user_id, spent_amount=0, is_active=True, **values)
        self.session.add(db_budget)
        await self.session.commit()
        await self.session.refresh(db_budget)
        return db_budget

    async def get_owned(self, user_id: int, budget_id: int) -> Optional[Budget]:
        """Get a budget by ID if it belongs to the user."""
        result = await self.session.execute(
            select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self, user_id: int, active_only: bool = True) -> List[Budget]:
        """Get the user's budgets ordered by category."""
        query = select(Budget).where(Budget.user_id == user_id)
        if active_only:
            query = query.where(Budget.is_active.is_(True))
        result = await self.session.execute(query.order_by(Budget.category, Budget.id))
        return list(result.scalars().all())

    async def get_current(self, user_id: int, now: datetime) -> List[Budget]:
        """Get active budgets whose window contains `now`."""
        result = await self.session.execute(
            select(Budget)
            .where(
                Budget.user_id == user_id,
                Budget.is_active.is_(True),
                Budget.start_date <= now,
                Budget.end_date >= now,
            )
            .order_by(Budget.category, Budget.id)
        )
        return list(result.scalars().all())

    async def find_active(
        self,
        user_id: int,
        category: str,
        on_date: Optional[datetime] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[Budget]:
        """
        Find the active budget for a category.

        With `on_date` only a budget whose window contains that date matches.
        """
        query = select(Budget).where(
            Budget.user_id == user_id,
            Budget.category == category,
            Budget.is_active.is_(True),
        )
        if on_date is not None:
            query = query.where(Budget.start_date <= on_date, Budget.end_date >= on_date)
        if exclude_id is not None:
            query = query.where(Budget.id != exclude_id)
        result = await self.session.execute(query.order_by(Budget.id).limit(1))
        return result.scalar_one_or_none()

    async def find_overall(self, user_id: int) -> Optional[Budget]:
        """Find the active all-categories budget."""
        return await self.find_active(user_id, OVERALL_BUDGET)

    async def save(self, budget: Budget) -> Budget:
        """Commit pending changes on a budget."""
        await self.session.commit()
        await self.session.refresh(budget)
        return budget

    async def delete(self, budget: Budget) -> None:
        """Delete a budget permanently."""
        await self.session.delete(budget)
        await self.session.commit()
