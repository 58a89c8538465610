"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup creates the database tables and that a failing
database does not prevent the application from starting.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from neurmatic.server.main import lifespan

pytestmark = pytest.mark.asyncio


class TestLifespan:
    async def test_startup_initializes_database(self):
        init_db = AsyncMock()
        with patch("neurmatic.server.main.init_db", init_db):
            async with lifespan(FastAPI()):
                init_db.assert_awaited_once()

    async def test_startup_survives_database_failure(self):
        init_db = AsyncMock(side_effect=ConnectionError("database unreachable"))
        with patch("neurmatic.server.main.init_db", init_db), patch("neurmatic.server.main.logger") as logger:
            async with lifespan(FastAPI()):
                pass

        init_db.assert_awaited_once()
        logger.error.assert_called_once()
        assert "database unreachable" in logger.error.call_args.args[0]

    async def test_shutdown_is_logged(self):
        with patch("neurmatic.server.main.init_db", AsyncMock()), patch("neurmatic.server.main.logger") as logger:
            async with lifespan(FastAPI()):
                logger.info.reset_mock()

        logger.info.assert_called_once_with("Shutting down Neurmatic API server...")
