"""Pydantic schemas for budget data validation."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional
from pydantic import Field, StringConstraints

from components.core.schemas import CamelModel

BudgetPeriod = Literal["weekly", "monthly", "yearly"]
BudgetStatus = Literal["good", "warning", "exceeded"]
CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


class BudgetCreate(CamelModel):
    """Schema for budget creation."""
    category: CategoryName
    budget_amount: float = Field(..., ge=0)
    period: BudgetPeriod = "monthly"
    alert_threshold: float = Field(80, ge=0, le=100)
    color: str = Field("#3B82F6", max_length=20)


class BudgetUpdate(CamelModel):
    """Schema for partial budget updates. The spent amount is not editable."""
    category: Optional[CategoryName] = None
    budget_amount: Optional[float] = Field(None, ge=0)
    period: Optional[BudgetPeriod] = None
    alert_threshold: Optional[float] = Field(None, ge=0, le=100)
    color: Optional[str] = Field(None, max_length=20)


class Budget(CamelModel):
    """Schema for budget response, including values derived on read."""
    id: int
    category: str
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    percentage_spent: float
    status: BudgetStatus
    period: BudgetPeriod
    start_date: datetime
    end_date: datetime
    is_active: bool
    alert_threshold: float
    color: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BudgetTotals(CamelModel):
    """Schema for totals across the current budgets."""
    total_budget: float
    total_spent: float
    total_remaining: float
    percentage_spent: float


class BudgetsByStatus(CamelModel):
    """Schema for budgets grouped by status."""
    good: List[Budget]
    warning: List[Budget]
    exceeded: List[Budget]


class BudgetOverview(CamelModel):
    """Schema for the budget overview."""
    budgets: List[Budget]
    summary: BudgetTotals
    budgets_by_status: BudgetsByStatus
