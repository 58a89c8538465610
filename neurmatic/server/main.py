"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from neurmatic import __version__
from neurmatic.core.database import init_db
from neurmatic.core.logging_config import get_logger, setup_logging
from neurmatic.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    applications,
    articles,
    auth,
    companies,
    follows,
    forum,
    health,
    jobs,
    notifications,
    profiles,
    recommendations,
    saved_jobs,
    seo,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup.
    """
    try:
        logger.info("Starting up Neurmatic API server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Neurmatic API server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Neurmatic API

    Backend of the Neurmatic community platform for LLM practitioners: news,
    forum, job board with candidate matching, member profiles, personalized
    recommendations and admin analytics.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(seo.router)
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth")
app.include_router(profiles.router, prefix=f"{constant.API_V1_STR}/profiles")
app.include_router(companies.router, prefix=f"{constant.API_V1_STR}/companies")
app.include_router(jobs.router, prefix=f"{constant.API_V1_STR}/jobs")
app.include_router(applications.router, prefix=f"{constant.API_V1_STR}/applications")
app.include_router(saved_jobs.router, prefix=f"{constant.API_V1_STR}/saved-jobs")
app.include_router(articles.router, prefix=f"{constant.API_V1_STR}/articles")
app.include_router(articles.bookmarks_router, prefix=f"{constant.API_V1_STR}/bookmarks")
app.include_router(forum.router, prefix=f"{constant.API_V1_STR}/forum")
app.include_router(follows.router, prefix=f"{constant.API_V1_STR}/users")
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications")
app.include_router(recommendations.router, prefix=f"{constant.API_V1_STR}/recommendations")
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin")
