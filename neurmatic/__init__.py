"""Neurmatic.

This package contains the API server of the Neurmatic community platform:
news, forum, job board, member profiles and admin analytics.

High-level architecture
-----------------------

Requests flow through a conventional layering::

    router (server.api.v1) -> service -> repository (core.database) -> database

Core subpackages
----------------

- ``neurmatic.core``:

  - Logging, monitoring (Logfire) and domain errors.
  - The TTL cache store shared by the scoring engines.
  - SQLModel entities, repositories and I/O schemas.

- ``neurmatic.matching``:

  - Weighted multi-factor match score between a job posting and a candidate.

- ``neurmatic.recommendations``:

  - Hybrid collaborative / content-based / trending recommendation ranking
    with caching and feedback-driven invalidation.

- ``neurmatic.server``:

  - FastAPI application, versioned routers, middleware and exception handlers.
"""

__version__ = "0.1.0"
