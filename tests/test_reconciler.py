"""Tests for budget spend reconciliation."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from components.budget.reconciler import BudgetReconciler
from components.budget.schemas import BudgetCreate
from components.core.errors import ReconciliationError
from components.record.repository import RecordRepository
from components.record.schemas import RecordCreate


async def add_march_records(ledger, user_id):
    records = [
        RecordCreate(description="Salary", amount=5000, type="income", category="Salary",
                     date=datetime(2024, 3, 5)),
        RecordCreate(description="Rent", amount=1200, type="expense", category="Housing",
                     date=datetime(2024, 3, 10)),
        RecordCreate(description="Groceries", amount=500, type="expense", category="Food & Dining",
                     date=datetime(2024, 3, 15)),
    ]
    return [await ledger.create_record(user_id, record) for record in records]


async def test_new_budget_reflects_existing_spend(ledger, user_id):
    await add_march_records(ledger, user_id)

    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Food & Dining", budget_amount=600, period="monthly")
    )

    assert float(budget.spent_amount) == 500
    assert budget.percentage_spent == pytest.approx(83.33, abs=0.01)
    assert budget.status == "warning"
    assert budget.start_date == datetime(2024, 3, 1)


async def test_deleting_expense_resets_spend_on_read(ledger, user_id):
    _, _, groceries = await add_march_records(ledger, user_id)
    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Food & Dining", budget_amount=600, period="monthly")
    )

    await ledger.delete_record(user_id, groceries.id)
    budget = await ledger.get_budget(user_id, budget.id)

    assert float(budget.spent_amount) == 0
    assert budget.status == "good"


async def test_overall_budget_counts_all_time_expenses(ledger, user_id):
    await add_march_records(ledger, user_id)
    # Outside the monthly window and in another category
    await ledger.create_record(user_id, RecordCreate(
        description="Old laptop", amount=300, type="expense", category="Electronics",
        date=datetime(2022, 6, 1),
    ))

    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Overall Budget", budget_amount=2000, period="monthly")
    )

    assert float(budget.spent_amount) == 2000
    assert budget.status == "exceeded"


async def test_category_budget_ignores_records_outside_window(ledger, user_id):
    await ledger.create_record(user_id, RecordCreate(
        description="February food", amount=90, type="expense", category="Food & Dining",
        date=datetime(2024, 2, 29, 23, 59, 59),
    ))
    await ledger.create_record(user_id, RecordCreate(
        description="Last minute", amount=10, type="expense", category="Food & Dining",
        date=datetime(2024, 3, 31, 23, 59, 59),
    ))

    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Food & Dining", budget_amount=100, period="monthly")
    )

    assert float(budget.spent_amount) == 10


async def test_reconcile_is_idempotent(ledger, session, user_id):
    await add_march_records(ledger, user_id)
    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Housing", budget_amount=1500, period="monthly")
    )
    reconciler = BudgetReconciler(session)

    first = float((await reconciler.reconcile(budget)).spent_amount)
    second = float((await reconciler.reconcile(budget)).spent_amount)

    assert first == second == 1200


async def test_failed_reconcile_keeps_cached_spend(ledger, session, user_id, monkeypatch):
    await add_march_records(ledger, user_id)
    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Food & Dining", budget_amount=600, period="monthly")
    )

    async def broken_sum(*args, **kwargs):
        raise OperationalError("SELECT sum(amount)", {}, Exception("connection lost"))

    reconciler = BudgetReconciler(session)
    monkeypatch.setattr(reconciler.records, "sum_expenses", broken_sum)

    with pytest.raises(ReconciliationError):
        await reconciler.reconcile(budget)
    assert float(budget.spent_amount) == 500


async def test_failed_reconcile_does_not_block_record_write(ledger, session, user_id, monkeypatch):
    await add_march_records(ledger, user_id)
    budget = await ledger.create_budget(
        user_id, BudgetCreate(category="Food & Dining", budget_amount=600, period="monthly")
    )

    async def broken_sum(*args, **kwargs):
        raise OperationalError("SELECT sum(amount)", {}, Exception("connection lost"))

    monkeypatch.setattr(ledger.reconciler.records, "sum_expenses", broken_sum)

    record = await ledger.create_record(user_id, RecordCreate(
        description="Takeaway", amount=40, type="expense", category="Food & Dining",
        date=datetime(2024, 3, 18),
    ))

    assert record.description == "Takeaway"
    assert await RecordRepository(session).get_owned(user_id, record.id) is not None
    assert float(budget.spent_amount) == 500
