"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire for monitoring and
tracing of the Neurmatic API server, including:
- API endpoint tracing
- Database operation monitoring
- Error tracking (uncaught exceptions are captured here)
- Scoring engine metrics (match scores, recommendation generation)

Every ``log_*`` helper is best effort: a Logfire failure is logged at debug
level and never propagates into the request that triggered it.
"""

import logging
from typing import Any, Optional

import logfire
from fastapi import FastAPI
from logfire import SamplingOptions

logger = logging.getLogger(__name__)


def _logfire_settings():
    from neurmatic.server.core.config import settings

    return settings.logfire


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    This function sets up Logfire with automatic instrumentation for:
    - SQLAlchemy database operations
    - HTTPX HTTP requests
    - FastAPI endpoints

    Args:
        app: FastAPI application instance for FastAPI instrumentation (optional).

    Returns:
        True when Logfire was configured, False when it stays disabled.
    """
    config = _logfire_settings()
    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not config.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        logfire.configure(
            token=config.token,
            service_name=config.service_name,
            service_version=config.service_version,
            environment=config.environment,
            sampling=SamplingOptions(head=config.sample_rate),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    if config.trace_sqlalchemy:
        try:
            logfire.instrument_sqlalchemy()
            logger.info("Logfire: SQLAlchemy instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument SQLAlchemy: {e}")

    if config.trace_httpx:
        try:
            logfire.instrument_httpx()
            logger.info("Logfire: HTTPX instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument HTTPX: {e}")

    if config.trace_fastapi and app is not None:
        try:
            logfire.instrument_fastapi(app=app)
            logger.info("Logfire: FastAPI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument FastAPI: {e}")

    logger.info(
        f"Logfire monitoring initialized: "
        f"project={config.project_name}, "
        f"environment={config.environment}, "
        f"service={config.service_name}"
    )
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_error(error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Capture an error with context for error tracking.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        logfire.error(
            "{error_type}: {error_message}",
            error_type=error_type,
            error_message=error_message,
            **(context or {}),
        )
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")


def log_match_computed(job_id: str, user_id: str, score: int, cached: bool) -> None:
    """
    Record a job/candidate match score computation.

    Args:
        job_id: The scored job
        user_id: The scored candidate
        score: Final score (0..100)
        cached: Whether the score was served from the cache
    """
    try:
        logfire.info(
            "Match score computed",
            job_id=job_id,
            user_id=user_id,
            score=score,
            cached=cached,
        )
    except Exception:
        logger.debug(f"Could not log match score to Logfire: job={job_id} user={user_id}")


def log_recommendations_generated(user_id: str, types: list[str], count: int, duration_ms: float) -> None:
    """
    Record a recommendation generation run.

    Args:
        user_id: The requesting user
        types: Item types that were ranked
        count: Number of recommendations produced
        duration_ms: Generation time in milliseconds
    """
    try:
        logfire.info(
            "Recommendations generated",
            user_id=user_id,
            types=types,
            count=count,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log recommendations to Logfire: user={user_id}")
