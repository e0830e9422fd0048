"""Budget endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget import schemas
from components.core.init_db import get_db
from components.core.schemas import Message
from components.ledger.coordinator import LedgerCoordinator
from restapi.endpoints.auth import get_current_user_id

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"description": "Not found"}},
)


@router.get("/", response_model=List[schemas.Budget])
async def list_budgets(
    active: bool = Query(True, description="Only active budgets"),
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get the user's budgets with up-to-date spend, ordered by category."""
    return await LedgerCoordinator(db).list_budgets(user_id, active_only=active)


@router.get("/overview/summary", response_model=schemas.BudgetOverview)
async def get_budget_overview(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Get the budgets running today.

    Returns the budgets, their combined amount, spend, remainder and
    percentage spent, and the budgets grouped by status.
    """
    return await LedgerCoordinator(db).budget_overview(user_id)


@router.get("/{budget_id}", response_model=schemas.Budget)
async def get_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get one budget with up-to-date spend."""
    return await LedgerCoordinator(db).get_budget(user_id, budget_id)


@router.post("/", response_model=schemas.Budget, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget: schemas.BudgetCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Create a budget; only one active budget is allowed per category."""
    return await LedgerCoordinator(db).create_budget(user_id, budget)


@router.put("/{budget_id}", response_model=schemas.Budget)
async def update_budget(
    budget_id: int,
    changes: schemas.BudgetUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Update some fields of a budget."""
    return await LedgerCoordinator(db).update_budget(user_id, budget_id, changes)


@router.patch("/{budget_id}/toggle", response_model=schemas.Budget)
async def toggle_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Activate or deactivate a budget."""
    return await LedgerCoordinator(db).toggle_budget(user_id, budget_id)


@router.delete("/{budget_id}", response_model=Message)
async def delete_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Delete a budget."""
    await LedgerCoordinator(db).delete_budget(user_id, budget_id)
    return Message(message="Budget deleted successfully")
