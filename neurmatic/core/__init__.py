"""
Core building blocks shared by every Neurmatic subsystem.

- logging_config: central logging setup
- monitoring: Logfire tracing and error tracking
- errors: domain exceptions mapped to HTTP status codes
- cache: async TTL key/value store
- security: password hashing and JWT helpers
- database: SQLModel entities, repositories and session management
- models.io: API request/response schemas
"""
