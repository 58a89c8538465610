"""
Neurmatic API server.

- core: settings and API constants
- api.v1: versioned routers
- services: request-scoped business logic and FastAPI dependencies
- middleware: request tracing
- exception_handlers: error to response mapping
"""
