"""Recomputes the cached spent amount of budgets from current records."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from components.budget.models import Budget
from components.budget.periods import AllCategoriesScope, scope_for
from components.budget.repository import BudgetRepository
from components.core.database import rollback_keeping_state
from components.core.errors import ReconciliationError
from components.record.repository import RecordRepository

logger = logging.getLogger(__name__)


class BudgetReconciler:
    """Keeps Budget.spent_amount in line with the record store."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.records = RecordRepository(session)
        self.budgets = BudgetRepository(session)

    async def compute_spent(self, budget: Budget) -> float:
        """
        Sum the expenses a budget covers.

        A category budget counts expenses of exactly that category dated inside
        [start_date, end_date]. The Overall Budget counts every expense the user
        ever recorded and ignores its own window.
        """
        scope = scope_for(budget.category)
        if isinstance(scope, AllCategoriesScope):
            return await self.records.sum_expenses(budget.user_id)
        return await self.records.sum_expenses(
            budget.user_id,
            category=scope.category,
            start=budget.start_date,
            end=budget.end_date,
        )

    async def reconcile(self, budget: Budget) -> Budget:
        """
        Recompute and persist the budget's spent amount.

        Raises ReconciliationError if the store fails; the budget then keeps
        its previously cached spent amount.
        """
        previous = budget.spent_amount
        try:
            budget.spent_amount = await self.compute_spent(budget)
            budget = await self.budgets.save(budget)
        except SQLAlchemyError as exc:
            await rollback_keeping_state(self.session)
            set_committed_value(budget, "spent_amount", previous)
            raise ReconciliationError(f"Could not reconcile budget {budget.id}") from exc

        logger.debug("Budget %s reconciled, spent %s", budget.id, budget.spent_amount)
        return budget
