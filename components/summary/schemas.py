"""Pydantic schemas for ledger summaries."""

from typing import List, Optional

from components.core.schemas import CamelModel
from components.record.schemas import Record


class Balance(CamelModel):
    """Schema for income/expense totals."""
    income: float
    expense: float
    balance: float


class MonthlySummary(Balance):
    """Schema for one month's totals."""
    month: int
    year: int


class CategoryTotal(CamelModel):
    """Schema for one category of a breakdown."""
    category: str
    total: float
    count: int


class Overview(CamelModel):
    """Schema for the combined dashboard summary."""
    balance: Balance
    monthly_summary: Optional[MonthlySummary] = None
    recent_records: List[Record]
    category_breakdown: List[CategoryTotal]
