"""Budget model for the database."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from components.core.database import Base, PreciseDateTime, TimestampMixin

OVERALL_BUDGET = "Overall Budget"
DEFAULT_ALERT_THRESHOLD = 80
DEFAULT_COLOR = "#3B82F6"

GOOD = "good"
WARNING = "warning"
EXCEEDED = "exceeded"


class Budget(TimestampMixin, Base):
    """Spending cap for a category, or for all categories, over a time window."""
    __tablename__ = "budgets"
    __table_args__ = (
        Index("ix_budgets_user_category", "user_id", "category"),
        Index("ix_budgets_user_active", "user_id", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    category = Column(String(50), nullable=False)
    budget_amount = Column(Numeric(12, 2), nullable=False)
    spent_amount = Column(Numeric(12, 2), nullable=False, default=0)  # Owned by the reconciler
    period = Column(String(10), nullable=False, default="monthly")
    start_date = Column(PreciseDateTime, nullable=False)
    end_date = Column(PreciseDateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    alert_threshold = Column(Numeric(5, 2), nullable=False, default=DEFAULT_ALERT_THRESHOLD)
    color = Column(String(20), nullable=False, default=DEFAULT_COLOR)

    user = relationship("User", back_populates="budgets")

    @property
    def remaining_amount(self) -> float:
        return max(0.0, float(self.budget_amount) - float(self.spent_amount or 0))

    @property
    def percentage_spent(self) -> float:
        budget_amount = float(self.budget_amount)
        if budget_amount <= 0:
            return 0.0
        return float(self.spent_amount or 0) / budget_amount * 100

    @property
    def status(self) -> str:
        return budget_status(self.percentage_spent, float(self.alert_threshold))


def budget_status(percentage_spent: float, alert_threshold: float) -> str:
    """Classify spending against a budget."""
    if percentage_spent >= 100:
        return EXCEEDED
    if percentage_spent >= alert_threshold:
        return WARNING
    return GOOD
