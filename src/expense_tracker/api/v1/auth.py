"""Registration, login and token endpoints.

Only ``/auth/me`` needs a bearer token; the other routes are how a client
gets one.
"""

from fastapi import APIRouter, Depends, status

from expense_tracker.api.deps import get_auth_service, get_current_identity
from expense_tracker.schemas.auth import (
    Identity,
    LoginRequest,
    LoginResult,
    RefreshRequest,
    TokenPair,
    UserRegister,
    UserResponse,
)
from expense_tracker.schemas.common import ApiResponse
from expense_tracker.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    description="New accounts always get the `user` role. Responds 400 when the email is taken.",
)
async def register(
    data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[UserResponse]:
    user = await auth_service.register(name=data.name, email=data.email, password=data.password)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=ApiResponse[LoginResult],
    summary="Exchange email and password for tokens",
)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[LoginResult]:
    """
    Returns an access token, a refresh token and the user's profile.

    Unknown email and wrong password both answer 401 with the same message.
    """
    return ApiResponse(data=await auth_service.login(email=data.email, password=data.password))


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenPair],
    summary="Trade a refresh token for a new token pair",
)
async def refresh(
    data: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[TokenPair]:
    return ApiResponse(data=await auth_service.refresh_tokens(data.refresh_token))


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Profile of the token's owner",
)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[UserResponse]:
    user = await auth_service.get_user(identity.user_id)
    return ApiResponse(data=UserResponse.model_validate(user))
