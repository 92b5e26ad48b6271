"""Expense endpoints scoped to the authenticated user."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from expense_tracker.api.deps import get_current_identity, get_transaction_service
from expense_tracker.config import settings
from expense_tracker.schemas.auth import Identity
from expense_tracker.schemas.common import ApiResponse, MessageResponse, PaginationMeta
from expense_tracker.schemas.transaction import (
    DashboardSummary,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
)
from expense_tracker.services.transaction import TransactionService

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post(
    "",
    response_model=ApiResponse[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an expense or income entry",
)
async def create_expense(
    data: TransactionCreate,
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    transaction = await service.create(identity.user_id, data)
    return ApiResponse(data=TransactionResponse.model_validate(transaction))


@router.get(
    "",
    response_model=ApiResponse[TransactionListResult],
    summary="List own expenses",
    description="Paginated list of the caller's entries, newest first.",
)
async def list_expenses(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[
        int, Query(ge=1, le=settings.max_page_size, description="Items per page")
    ] = settings.default_page_size,
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionListResult]:
    result = await service.list(identity.user_id, page=page, limit=limit)
    return ApiResponse(
        data=TransactionListResult(
            transactions=[TransactionResponse.model_validate(t) for t in result.items],
            pagination=PaginationMeta(
                page=result.page,
                limit=result.limit,
                total=result.total,
                total_pages=result.total_pages,
            ),
        )
    )


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardSummary],
    summary="Income/expense totals",
    description="Totals over all of the caller's entries (not paginated).",
)
async def dashboard(
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[DashboardSummary]:
    return ApiResponse(data=await service.dashboard_summary(identity.user_id))


@router.get(
    "/{transaction_id}",
    response_model=ApiResponse[TransactionResponse],
    summary="Get one of the caller's expenses",
)
async def get_expense(
    transaction_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    transaction = await service.get(identity.user_id, transaction_id)
    return ApiResponse(data=TransactionResponse.model_validate(transaction))


@router.put(
    "/{transaction_id}",
    response_model=ApiResponse[TransactionResponse],
    summary="Update one of the caller's expenses",
    description="Omitted fields keep their value; total_amount is always recomputed.",
)
async def update_expense(
    transaction_id: UUID,
    data: TransactionUpdate,
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    transaction = await service.update(identity.user_id, transaction_id, data)
    return ApiResponse(data=TransactionResponse.model_validate(transaction))


@router.delete(
    "/{transaction_id}",
    response_model=MessageResponse,
    summary="Delete one of the caller's expenses",
)
async def delete_expense(
    transaction_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: TransactionService = Depends(get_transaction_service),
) -> MessageResponse:
    await service.delete(identity.user_id, transaction_id)
    return MessageResponse(message="Expense deleted successfully")
