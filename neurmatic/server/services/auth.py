"""
Authentication service.

Registration, credential checks and token issuance.
"""

from neurmatic.core.database.entities.users import User, UserStatus
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import ConflictError, UnauthorizedError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.auth import LoginRequest, RegisterRequest, TokenPair
from neurmatic.core.security import (
    REFRESH_SCOPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)

logger = get_logger(__name__)


def issue_tokens(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user.id, user.role),
        refresh_token=create_refresh_token(user.id),
    )


class AuthService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def register(self, data: RegisterRequest) -> User:
        if await self.repos.users.get_by_email(data.email):
            raise ConflictError("Email already registered")
        if await self.repos.users.get_by_username(data.username):
            raise ConflictError("Username already taken")

        user = await self.repos.users.create(
            User(
                email=data.email.lower(),
                username=data.username,
                password_hash=get_password_hash(data.password),
            )
        )
        logger.info(f"User registered: id={user.id}, username={user.username}")
        return user

    async def login(self, data: LoginRequest) -> TokenPair:
        user = await self.repos.users.get_by_email(data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        if user.status != UserStatus.ACTIVE:
            raise UnauthorizedError(f"Account is {user.status}")

        await self.repos.users.record_login(user)
        return issue_tokens(user)

    async def refresh(self, refresh_token: str) -> TokenPair:
        payload = decode_token(refresh_token)
        if payload is None or payload.get("scope") != REFRESH_SCOPE:
            raise UnauthorizedError("Invalid refresh token")

        user = await self.repos.users.get_by_id(payload.get("sub", ""))
        if user is None or user.status != UserStatus.ACTIVE:
            raise UnauthorizedError("User not found or inactive")
        return issue_tokens(user)
