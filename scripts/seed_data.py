"""Script to seed demo data into the database."""

import asyncio
from datetime import datetime, timedelta

from components.budget.schemas import BudgetCreate
from components.core.init_db import db_manager, get_db
from components.ledger.coordinator import LedgerCoordinator
from components.record.schemas import RecordCreate
from components.user.repository import UserRepository
from components.user.schemas import UserCreate

DEMO_EMAIL = "demo@example.com"


async def seed_data():
    """Seed a demo user with a month of records and a few budgets."""
    await db_manager.create_tables()

    async for db in get_db():
        users = UserRepository(db)
        if await users.exists(DEMO_EMAIL):
            print(f"{DEMO_EMAIL} already exists, nothing to do")
            return

        user = await users.create(UserCreate(name="Demo User", email=DEMO_EMAIL, password="password123"))
        ledger = LedgerCoordinator(db)

        today = datetime.now()
        first_of_month = datetime(today.year, today.month, 1)
        records = [
            RecordCreate(description="Salary", amount=5000, type="income", category="Salary",
                         date=first_of_month, payment_method="bank_transfer"),
            RecordCreate(description="Rent", amount=1200, type="expense", category="Housing",
                         date=first_of_month + timedelta(days=1), is_recurring=True,
                         recurring_frequency="monthly"),
            RecordCreate(description="Groceries", amount=180.40, type="expense", category="Food & Dining",
                         date=first_of_month + timedelta(days=3), payment_method="card",
                         tags=["weekly-shop"]),
            RecordCreate(description="Dinner out", amount=64.50, type="expense", category="Food & Dining",
                         date=first_of_month + timedelta(days=6), payment_method="card"),
            RecordCreate(description="Cinema", amount=24, type="expense", category="Entertainment",
                         date=first_of_month + timedelta(days=8), payment_method="cash"),
            RecordCreate(description="Freelance invoice", amount=750, type="income", category="Freelance",
                         date=first_of_month + timedelta(days=10)),
        ]
        for record in records:
            await ledger.create_record(user.id, record)

        budgets = [
            BudgetCreate(category="Food & Dining", budget_amount=600, period="monthly"),
            BudgetCreate(category="Entertainment", budget_amount=100, period="monthly", color="#F59E0B"),
            BudgetCreate(category="Overall Budget", budget_amount=2000, period="monthly", color="#10B981"),
        ]
        for budget in budgets:
            await ledger.create_budget(user.id, budget)

        print(f"Seeded {len(records)} records and {len(budgets)} budgets for {DEMO_EMAIL}")
        break


if __name__ == "__main__":
    asyncio.run(seed_data())
