"""Financial record model for the database."""

from datetime import datetime

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, JSON, Numeric, String
from sqlalchemy.orm import relationship

from components.core.database import Base, PreciseDateTime, TimestampMixin

INCOME = "income"
EXPENSE = "expense"


class FinancialRecord(TimestampMixin, Base):
    """A single dated income or expense entry."""
    __tablename__ = "financial_records"
    __table_args__ = (
        Index("ix_records_user_date", "user_id", "date"),
        Index("ix_records_user_type", "user_id", "type"),
        Index("ix_records_user_category", "user_id", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    description = Column(String(200), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Always positive, sign comes from type
    type = Column(String(10), nullable=False)
    category = Column(String(50), nullable=False)
    date = Column(PreciseDateTime, nullable=False, default=datetime.now)
    payment_method = Column(String(20), nullable=False, default="other")
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(String(500), nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String(10), nullable=True)

    user = relationship("User", back_populates="records")

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    @property
    def signed_amount(self) -> float:
        """Amount with the sign implied by the record type."""
        return -float(self.amount) if self.is_expense else float(self.amount)
