"""Admin endpoints for managing users and every user's expenses.

The router-level ``require_admin`` dependency runs before every handler,
so none of the handlers repeat the role check.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from expense_tracker.api.deps import get_admin_service, require_admin
from expense_tracker.schemas.admin import (
    AdminStats,
    AdminTransactionCreate,
    AdminTransactionListResult,
    AdminTransactionResponse,
    AdminTransactionUpdate,
    AdminUserCreate,
    AdminUserUpdate,
    UserListResult,
)
from expense_tracker.schemas.auth import UserResponse
from expense_tracker.schemas.common import ApiResponse, MessageResponse
from expense_tracker.services.admin import AdminService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=ApiResponse[UserListResult], summary="List all users")
async def list_users(
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserListResult]:
    users = await service.list_users()
    return ApiResponse(data=UserListResult(users=[UserResponse.model_validate(u) for u in users]))


@router.post(
    "/users",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a user with a chosen role",
)
async def create_user(
    data: AdminUserCreate,
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserResponse]:
    user = await service.create_user(data.name, data.email, data.password, role=data.role)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put(
    "/users/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update a user's name, email or role",
)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[UserResponse]:
    user = await service.update_user(user_id, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user and all of their expenses",
)
async def delete_user(
    user_id: UUID,
    service: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    await service.delete_user(user_id)
    return MessageResponse(message="User and their expenses deleted successfully")


@router.get(
    "/expenses",
    response_model=ApiResponse[AdminTransactionListResult],
    summary="List every expense with its owner",
)
async def list_all_expenses(
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[AdminTransactionListResult]:
    transactions = await service.list_all_expenses()
    return ApiResponse(data=AdminTransactionListResult(transactions=transactions))


@router.post(
    "/expenses",
    response_model=ApiResponse[AdminTransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an expense on behalf of a user",
)
async def create_expense(
    data: AdminTransactionCreate,
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[AdminTransactionResponse]:
    return ApiResponse(data=await service.create_expense_for(data))


@router.put(
    "/expenses/{transaction_id}",
    response_model=ApiResponse[AdminTransactionResponse],
    summary="Update any expense",
    description="total_amount is always recomputed; a supplied value is ignored.",
)
async def update_expense(
    transaction_id: UUID,
    data: AdminTransactionUpdate,
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[AdminTransactionResponse]:
    return ApiResponse(data=await service.update_expense(transaction_id, data))


@router.delete(
    "/expenses/{transaction_id}",
    response_model=MessageResponse,
    summary="Delete any expense",
)
async def delete_expense(
    transaction_id: UUID,
    service: AdminService = Depends(get_admin_service),
) -> MessageResponse:
    await service.delete_expense(transaction_id)
    return MessageResponse(message="Expense deleted successfully")


@router.get("/stats", response_model=ApiResponse[AdminStats], summary="System-wide totals")
async def stats(
    service: AdminService = Depends(get_admin_service),
) -> ApiResponse[AdminStats]:
    return ApiResponse(data=await service.system_stats())
