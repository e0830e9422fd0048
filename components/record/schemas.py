"""Pydantic schemas for financial record validation."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional
from pydantic import Field, StringConstraints, field_validator, model_validator

from components.core.schemas import CamelModel

RecordType = Literal["income", "expense"]
PaymentMethod = Literal["cash", "card", "bank_transfer", "digital_wallet", "other"]
RecurringFrequency = Literal["daily", "weekly", "monthly", "yearly"]

Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
# Same precision as the Numeric(12, 2) column
Amount = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


def _lowercase(value):
    return value.strip().lower() if isinstance(value, str) else value


def _unique_tags(tags: List[str]) -> List[str]:
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class RecordCreate(CamelModel):
    """Schema for record creation. Also used to re-validate merged updates."""
    description: Description
    amount: Amount = Field(..., description="Positive amount, sign comes from type")
    type: RecordType
    category: CategoryName
    date: datetime = Field(default_factory=datetime.now)
    payment_method: PaymentMethod = "other"
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=500)
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None

    lower_type = field_validator("type", mode="before")(_lowercase)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: List[str]) -> List[str]:
        return _unique_tags(v)

    @field_validator("date")
    @classmethod
    def naive_date(cls, v: datetime) -> datetime:
        # Stored naive; aware inputs are converted to local time first
        return v.astimezone().replace(tzinfo=None) if v.tzinfo else v

    @model_validator(mode="after")
    def check_recurring(self) -> "RecordCreate":
        if self.is_recurring and self.recurring_frequency is None:
            raise ValueError("recurringFrequency is required for recurring records")
        if not self.is_recurring:
            self.recurring_frequency = None
        return self


class RecordUpdate(CamelModel):
    """Schema for partial record updates."""
    description: Optional[Description] = None
    amount: Optional[Amount] = None
    type: Optional[RecordType] = None
    category: Optional[CategoryName] = None
    date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = Field(None, max_length=500)
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[RecurringFrequency] = None

    lower_type = field_validator("type", mode="before")(_lowercase)


class Record(CamelModel):
    """Schema for record response."""
    id: int
    description: str
    amount: float
    signed_amount: float
    type: RecordType
    category: str
    date: datetime
    payment_method: str
    tags: List[str]
    notes: Optional[str] = None
    is_recurring: bool
    recurring_frequency: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecordPage(CamelModel):
    """Schema for a page of records."""
    records: List[Record]
    total: int
    total_pages: int
    current_page: int


class RecordImportError(CamelModel):
    """Schema for a rejected row of a CSV import."""
    row: int
    message: str


class RecordImportResponse(CamelModel):
    """Schema for CSV import response."""
    success: bool
    message: str
    imported: int = 0
    errors: Optional[List[RecordImportError]] = None
