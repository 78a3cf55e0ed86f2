"""
Authentication API endpoints for registration, login, token refresh and profiles.
"""

from fastapi import APIRouter, Depends, status
from keyhost.models.user import User
from keyhost.services.auth import AuthService
from keyhost.schemas.auth import AuthResponse, LoginRequest, RefreshTokenRequest, RegisterRequest
from keyhost.schemas.common import ApiResponse
from keyhost.schemas.user import ProfileUpdate, UserResponse
from keyhost.utils.dependencies import get_auth_service, get_current_user
from keyhost.utils.responses import success_response


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_payload(user: User, access_token: str, refresh_token: str) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=access_token,
        refresh_token=refresh_token,
    )


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a guest or property owner"
)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    user, access_token, refresh_token = await auth_service.register(data)
    return success_response(
        data=_auth_payload(user, access_token, refresh_token),
        message="Registration successful"
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate with email and password. Repeated failures lock the account."
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate user and return JWT tokens.

    Raises:
        InvalidCredentialsError: If credentials are invalid (401)
        InactiveUserError: If user account is inactive (403)
        AccountLockedError: If the account is locked (423)
    """
    user, access_token, refresh_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return success_response(
        data=_auth_payload(user, access_token, refresh_token),
        message="Login successful"
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[AuthResponse],
    summary="Refresh tokens",
    description="Exchange a refresh token for a new access and refresh token pair"
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    user, access_token, new_refresh_token = await auth_service.refresh_tokens(refresh_data.refresh_token)
    return success_response(
        data=_auth_payload(user, access_token, new_refresh_token),
        message="Token refreshed"
    )


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Get current user"
)
async def get_me(current_user: User = Depends(get_current_user)):
    return success_response(
        data=UserResponse.model_validate(current_user),
        message="User retrieved successfully"
    )


@router.put(
    "/profile",
    response_model=ApiResponse[UserResponse],
    summary="Update own profile"
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    user = await auth_service.update_profile(current_user, data)
    return success_response(
        data=UserResponse.model_validate(user),
        message="Profile updated successfully"
    )
