"""Write path for records and budgets, keeping budget spend reconciled."""

import io
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd
import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import OVERALL_BUDGET, Budget, EXCEEDED, GOOD, WARNING
from components.budget.periods import budget_window
from components.budget.reconciler import BudgetReconciler
from components.budget.repository import BudgetRepository
from components.budget.schemas import BudgetCreate, BudgetUpdate
from components.core.config import get_settings
from components.core.errors import (
    DuplicateActiveBudgetError,
    NotFoundError,
    ReconciliationError,
    ValidationError,
)
from components.record.models import EXPENSE, FinancialRecord
from components.record.repository import RecordRepository
from components.record.schemas import RecordCreate, RecordUpdate

logger = logging.getLogger(__name__)

RECORD_FIELDS = tuple(RecordCreate.model_fields)
IMPORT_COLUMNS = ("description", "amount", "type", "category")


def _validation_error(exc: pydantic.ValidationError) -> ValidationError:
    errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return ValidationError(errors=errors)


class LedgerCoordinator:
    """
    Orchestrates record and budget mutations.

    Every change that can move a budget's spend is followed by a
    reconciliation of that budget. A failed reconciliation never fails the
    mutation: it is logged and the budget keeps its cached spend until the
    next read reconciles it again.
    """

    def __init__(self, session: AsyncSession, now: Optional[datetime] = None):
        self.session = session
        self.records = RecordRepository(session)
        self.budgets = BudgetRepository(session)
        self.reconciler = BudgetReconciler(session)
        self._now = now

    def now(self) -> datetime:
        return self._now or datetime.now()

    async def _reconcile_quietly(self, budgets: Iterable[Optional[Budget]]) -> None:
        seen = set()
        for budget in budgets:
            if budget is None or budget.id in seen:
                continue
            seen.add(budget.id)
            try:
                await self.reconciler.reconcile(budget)
            except ReconciliationError:
                logger.warning("Serving cached spend for budget %s", budget.id, exc_info=True)

    async def _expense_budgets(
        self, user_id: int, category: str, on_date: Optional[datetime] = None
    ) -> List[Optional[Budget]]:
        """Active budgets an expense in `category` counts towards."""
        budgets = [await self.budgets.find_active(user_id, category, on_date=on_date)]
        if category != OVERALL_BUDGET:
            budgets.append(await self.budgets.find_overall(user_id))
        return budgets

    # Records

    async def get_record(self, user_id: int, record_id: int) -> FinancialRecord:
        record = await self.records.get_owned(user_id, record_id)
        if record is None:
            raise NotFoundError("Record not found")
        return record

    async def create_record(self, user_id: int, data: RecordCreate) -> FinancialRecord:
        """Persist a record and reconcile the budget covering its date."""
        record = await self.records.create(user_id, data)
        logger.info("Record %s created for user %s", record.id, user_id)

        if record.type == EXPENSE:
            await self._reconcile_quietly(
                await self._expense_budgets(user_id, record.category, on_date=record.date)
            )
        return record

    async def update_record(self, user_id: int, record_id: int, changes: RecordUpdate) -> FinancialRecord:
        """
        Apply a partial update to a record.

        The merged record is validated as a whole before anything is written.
        Budgets of both the old and the new category are reconciled, so an
        expense moved out of a budgeted category stops counting there.
        """
        record = await self.get_record(user_id, record_id)
        old_category, old_type = record.category, record.type

        merged = {field: getattr(record, field) for field in RECORD_FIELDS}
        merged.update(changes.model_dump(exclude_unset=True))
        try:
            values = RecordCreate.model_validate(merged).model_dump()
        except pydantic.ValidationError as exc:
            raise _validation_error(exc) from exc

        record = await self.records.apply(record, values)
        logger.info("Record %s updated for user %s", record.id, user_id)

        affected = []
        if old_type == EXPENSE:
            affected.extend(await self._expense_budgets(user_id, old_category))
        if record.type == EXPENSE:
            affected.extend(await self._expense_budgets(user_id, record.category, on_date=record.date))
        await self._reconcile_quietly(affected)
        return record

    async def delete_record(self, user_id: int, record_id: int) -> None:
        """Delete a record and reconcile the budget it counted towards."""
        record = await self.get_record(user_id, record_id)
        was_expense, category = record.type == EXPENSE, record.category

        await self.records.delete(record)
        logger.info("Record %s deleted for user %s", record_id, user_id)

        if was_expense:
            await self._reconcile_quietly(await self._expense_budgets(user_id, category))

    async def import_records(self, user_id: int, content: bytes) -> Tuple[int, List[Dict]]:
        """
        Import records from CSV content.

        Required columns: description, amount, type, category. Optional:
        date, paymentMethod, notes, tags (separated by ';').
        All rows are validated first; any error rejects the whole file.

        Returns the number of imported records and the list of row errors.
        """
        try:
            frame = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            raise ValidationError(f"Could not read CSV file: {exc}") from exc

        missing = [column for column in IMPORT_COLUMNS if column not in frame.columns]
        if missing:
            raise ValidationError(f"CSV file must contain columns: {', '.join(IMPORT_COLUMNS)}")

        rows, errors = [], []
        for row_num, row in enumerate(frame.to_dict(orient="records"), start=2):  # Row 1 is the header
            values = {key: value for key, value in row.items() if value != ""}
            if "tags" in values:
                values["tags"] = values["tags"].split(";")
            try:
                rows.append(RecordCreate.model_validate(values))
            except pydantic.ValidationError as exc:
                for err in exc.errors():
                    field = ".".join(str(part) for part in err["loc"]) or "row"
                    errors.append({"row": row_num, "message": f"{field}: {err['msg']}"})

        if errors:
            return 0, errors

        records = await self.records.create_many(user_id, rows)
        logger.info("Imported %s records for user %s", len(records), user_id)

        affected = []
        for category in sorted({r.category for r in records if r.type == EXPENSE}):
            affected.extend(await self._expense_budgets(user_id, category))
        await self._reconcile_quietly(affected)
        return len(records), []

    # Budgets

    async def list_budgets(self, user_id: int, active_only: bool = True) -> List[Budget]:
        """Get the user's budgets with freshly reconciled spend."""
        budgets = await self.budgets.get_all(user_id, active_only=active_only)
        await self._reconcile_quietly(budgets)
        return budgets

    async def get_budget(self, user_id: int, budget_id: int) -> Budget:
        """Get one budget with freshly reconciled spend."""
        budget = await self.budgets.get_owned(user_id, budget_id)
        if budget is None:
            raise NotFoundError("Budget not found")
        await self._reconcile_quietly([budget])
        return budget

    async def create_budget(self, user_id: int, data: BudgetCreate) -> Budget:
        """Create a budget for the current window of its period."""
        if await self.budgets.find_active(user_id, data.category) is not None:
            raise DuplicateActiveBudgetError(data.category)

        start_date, end_date = budget_window(data.period, self.now(), get_settings().WEEK_START)
        budget = await self.budgets.create(
            user_id,
            dict(data.model_dump(), start_date=start_date, end_date=end_date),
        )
        logger.info("Budget %s created for user %s (%s)", budget.id, user_id, budget.category)

        await self._reconcile_quietly([budget])
        return budget

    async def update_budget(self, user_id: int, budget_id: int, changes: BudgetUpdate) -> Budget:
        """Apply a partial update; a new period moves the window to the current one."""
        budget = await self.budgets.get_owned(user_id, budget_id)
        if budget is None:
            raise NotFoundError("Budget not found")

        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        if budget.is_active and values.get("category", budget.category) != budget.category:
            other = await self.budgets.find_active(user_id, values["category"], exclude_id=budget.id)
            if other is not None:
                raise DuplicateActiveBudgetError(values["category"])

        period_changed = "period" in values and values["period"] != budget.period
        for field, value in values.items():
            setattr(budget, field, value)
        if period_changed:
            budget.start_date, budget.end_date = budget_window(
                budget.period, self.now(), get_settings().WEEK_START
            )

        budget = await self.budgets.save(budget)
        logger.info("Budget %s updated for user %s", budget.id, user_id)

        await self._reconcile_quietly([budget])
        return budget

    async def delete_budget(self, user_id: int, budget_id: int) -> None:
        budget = await self.budgets.get_owned(user_id, budget_id)
        if budget is None:
            raise NotFoundError("Budget not found")
        await self.budgets.delete(budget)
        logger.info("Budget %s deleted for user %s", budget_id, user_id)

    async def toggle_budget(self, user_id: int, budget_id: int) -> Budget:
        """Flip a budget between active and inactive."""
        budget = await self.budgets.get_owned(user_id, budget_id)
        if budget is None:
            raise NotFoundError("Budget not found")

        if not budget.is_active:
            other = await self.budgets.find_active(user_id, budget.category, exclude_id=budget.id)
            if other is not None:
                raise DuplicateActiveBudgetError(budget.category)

        budget.is_active = not budget.is_active
        budget = await self.budgets.save(budget)
        logger.info(
            "Budget %s %s for user %s",
            budget.id, "activated" if budget.is_active else "deactivated", user_id,
        )
        return budget

    async def budget_overview(self, user_id: int) -> Dict:
        """
        Get the budgets running right now with totals and status groups.

        Returns a dict with `budgets`, `summary` (total budget, spent,
        remaining and percentage spent) and `budgets_by_status`.
        """
        budgets = await self.budgets.get_current(user_id, self.now())
        await self._reconcile_quietly(budgets)

        total_budget = sum(float(b.budget_amount) for b in budgets)
        total_spent = sum(float(b.spent_amount) for b in budgets)
        return {
            "budgets": budgets,
            "summary": {
                "total_budget": total_budget,
                "total_spent": total_spent,
                "total_remaining": total_budget - total_spent,
                "percentage_spent": (total_spent / total_budget * 100) if total_budget > 0 else 0,
            },
            "budgets_by_status": {
                status: [b for b in budgets if b.status == status]
                for status in (GOOD, WARNING, EXCEEDED)
            },
        }
