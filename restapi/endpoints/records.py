"""Financial record endpoints for the API."""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import Message
from components.ledger.coordinator import LedgerCoordinator
from components.record import schemas
from components.record.repository import RecordRepository
from components.record.schemas import RecordType
from components.summary import schemas as summary_schemas
from components.summary.repository import SummaryRepository
from restapi.endpoints.auth import get_current_user_id

router = APIRouter(
    prefix="/records",
    tags=["records"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=schemas.RecordPage)
async def list_records(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(10, ge=1, le=100, description="Records per page"),
    type: Optional[RecordType] = Query(None, description="income or expense"),
    category: Optional[str] = Query(None, description="Case-insensitive part of the category"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get the user's records, newest first."""
    records, total, total_pages = await RecordRepository(db).get_page(
        user_id,
        page=page,
        limit=limit,
        type=type,
        category=category,
        start_date=start_date,
        end_date=end_date,
    )
    return schemas.RecordPage(records=records, total=total, total_pages=total_pages, current_page=page)


@router.get("/balance", response_model=summary_schemas.Balance)
async def get_balance(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get the user's all-time income, expense and balance."""
    return await SummaryRepository(db).get_balance(user_id)


@router.get("/monthly-summary", response_model=summary_schemas.MonthlySummary)
async def get_monthly_summary(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12, description="Month number, January is 1"),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get income, expense and balance for one month."""
    return await SummaryRepository(db).get_monthly_summary(user_id, year, month)


@router.get("/category-breakdown", response_model=List[summary_schemas.CategoryTotal])
async def get_category_breakdown(
    type: RecordType = Query("expense"),
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Get totals per category, largest first.

    Limited to one month when both year and month are given.
    """
    return await SummaryRepository(db).get_category_breakdown(user_id, type, year, month)


@router.get("/summary/overview", response_model=summary_schemas.Overview)
async def get_overview(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Get the dashboard summary.

    Returns:
    - All-time balance
    - Summary of the requested month (when year and month are given)
    - Five most recent records
    - Expense breakdown for the current month
    """
    return await SummaryRepository(db).get_overview(user_id, year, month)


@router.post("/import", response_model=schemas.RecordImportResponse)
async def import_records(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Import records from a CSV file.

    The CSV file must have the columns description, amount, type and
    category; date, paymentMethod, notes and tags (separated by ';') are
    optional. Nothing is imported if any row is invalid.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        return schemas.RecordImportResponse(
            success=False,
            message="Invalid file format. Only CSV files (.csv) are supported.",
        )

    imported, errors = await LedgerCoordinator(db).import_records(user_id, await file.read())
    if errors:
        return schemas.RecordImportResponse(
            success=False,
            message="Validation errors occurred",
            errors=[schemas.RecordImportError(**error) for error in errors],
        )
    return schemas.RecordImportResponse(
        success=True,
        message="Records imported successfully",
        imported=imported,
    )


@router.get("/{record_id}", response_model=schemas.Record)
async def get_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get one of the user's records."""
    return await LedgerCoordinator(db).get_record(user_id, record_id)


@router.post("/", response_model=schemas.Record, status_code=status.HTTP_201_CREATED)
async def create_record(
    record: schemas.RecordCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Create a record; an expense updates the spend of its budget."""
    return await LedgerCoordinator(db).create_record(user_id, record)


@router.put("/{record_id}", response_model=schemas.Record)
async def update_record(
    record_id: int,
    changes: schemas.RecordUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Update some fields of a record."""
    return await LedgerCoordinator(db).update_record(user_id, record_id, changes)


@router.delete("/{record_id}", response_model=Message)
async def delete_record(
    record_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Delete a record."""
    await LedgerCoordinator(db).delete_record(user_id, record_id)
    return Message(message="Record deleted successfully")
