from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable, Iterable

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv

TEST_ROOT = Path(__file__).resolve().parent
# Load test/.env first, then fallback to test/.env.example for defaults
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("LOGFIRE_ENABLED", "false")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from neurmatic.core.cache import reset_cache  # noqa: E402
from neurmatic.core.database.base import utc_now  # noqa: E402
from neurmatic.core.database.entities.articles import Article, ArticleStatus  # noqa: E402
from neurmatic.core.database.entities.companies import Company  # noqa: E402
from neurmatic.core.database.entities.forum import Topic  # noqa: E402
from neurmatic.core.database.entities.jobs import Job, JobSkill, JobStatus  # noqa: E402
from neurmatic.core.database.entities.users import User, UserRole, UserStatus  # noqa: E402
from neurmatic.core.database.repositories.bundle import (  # noqa: E402
    SqlRepoBundle,
    build_sql_repos_from_session,
)
from neurmatic.core.database.utils import create_all, create_engine, create_sessionmaker  # noqa: E402
from neurmatic.core.security import create_access_token, get_password_hash  # noqa: E402

DEFAULT_PASSWORD = "password123"


@lru_cache(maxsize=None)
def _password_hash(password: str) -> str:
    return get_password_hash(password)


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "http://test",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest.fixture(autouse=True)
def _fresh_cache():
    """Every test starts with an empty process-wide cache store."""
    reset_cache()
    yield
    reset_cache()


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with every table created."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app, sharing the test session."""
    from neurmatic.core.database import get_session
    from neurmatic.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def make_user(repos: SqlRepoBundle) -> UserFactory:
    """Create an active user directly in the database."""

    async def _make_user(
        username: str = "alice",
        role: str = UserRole.USER,
        status: str = UserStatus.ACTIVE,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        return await repos.users.create(
            User(
                email=email or f"{username}@example.com",
                username=username,
                role=role,
                status=status,
                password_hash=_password_hash(password),
            )
        )

    return _make_user


def bearer(user: User) -> dict[str, str]:
    """Authorization header carrying an access token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    return bearer


@pytest.fixture
def make_company(repos: SqlRepoBundle):
    """Create a company owned by ``owner``; verified unless told otherwise."""

    async def _make_company(owner: User, name: str = "Acme AI", verified: bool = True, **fields) -> Company:
        slug = fields.pop("slug", name.lower().replace(" ", "-"))
        return await repos.companies.create(
            Company(name=name, slug=slug, owner_id=owner.id, verified=verified, **fields)
        )

    return _make_company


@pytest.fixture
def make_job(repos: SqlRepoBundle):
    """Create a job posting with optional ``(name, level, required)`` skill tuples."""

    async def _make_job(
        company: Company,
        title: str = "ML Engineer",
        status: str = JobStatus.ACTIVE,
        skills: Iterable[tuple[str, int, bool]] = (),
        **fields,
    ) -> Job:
        values = dict(
            title=title,
            description=f"{title} wanted",
            job_type="full_time",
            work_location="remote",
            experience_level="mid",
            published_at=utc_now() if status == JobStatus.ACTIVE else None,
        )
        values.update(fields)
        job = await repos.jobs.create(Job(company_id=company.id, status=status, **values))
        if skills:
            await repos.job_skills.replace_for_job(
                job.id,
                [JobSkill(skill_name=name, required_level=level, is_required=required) for name, level, required in skills],
            )
        return job

    return _make_job


@pytest.fixture
def make_article(repos: SqlRepoBundle):
    async def _make_article(
        author: User, title: str = "New model released", status: str = ArticleStatus.PUBLISHED, **fields
    ) -> Article:
        values = dict(
            slug=title.lower().replace(" ", "-"),
            content="Body text",
            published_at=utc_now() if status == ArticleStatus.PUBLISHED else None,
        )
        values.update(fields)
        return await repos.articles.create(Article(title=title, author_id=author.id, status=status, **values))

    return _make_article


@pytest.fixture
def make_topic(repos: SqlRepoBundle):
    async def _make_topic(author: User, title: str = "How do you eval RAG?", **fields) -> Topic:
        values = dict(slug=title.lower().replace(" ", "-").strip("?"), content="Discuss", category="general")
        values.update(fields)
        return await repos.topics.create(Topic(title=title, author_id=author.id, **values))

    return _make_topic
