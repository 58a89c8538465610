"""
Authentication endpoints: registration, login, token refresh and the current user.
"""

from fastapi import APIRouter, status

from neurmatic.core.models.io.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenPair, UserRead
from neurmatic.server.services.deps import AuthServiceDep, CurrentUserDep

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a new member account with the default `user` role.",
    response_description="The created user.",
    responses={
        201: {"description": "Account created"},
        409: {"description": "Email or username already in use"},
    },
)
async def register(data: RegisterRequest, service: AuthServiceDep) -> UserRead:
    """
    Register a new account.

    - **email**: Unique email address (compared case-insensitively).
    - **username**: Unique handle; letters, digits, `_` and `-`.
    - **password**: At least 8 characters.
    """
    user = await service.register(data)
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=TokenPair,
    summary="Log In",
    description="Exchange email and password for an access/refresh token pair.",
    response_description="Bearer token pair.",
    responses={401: {"description": "Invalid credentials or inactive account"}},
)
async def login(data: LoginRequest, service: AuthServiceDep) -> TokenPair:
    """
    Log in with email and password.

    Records the login time and increments the login counter.
    """
    return await service.login(data)


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh Tokens",
    description="Exchange a refresh token for a new token pair. Access tokens are rejected.",
    response_description="New bearer token pair.",
    responses={401: {"description": "Invalid, expired or wrong-scope token"}},
)
async def refresh(data: RefreshRequest, service: AuthServiceDep) -> TokenPair:
    return await service.refresh(data.refresh_token)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the authenticated user.",
    response_description="The current user.",
    responses={401: {"description": "Not authenticated"}},
)
async def me(user: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(user)
