"""DevTracker.

Backend service for DevTracker, a time and project tracker for developers.

High-level architecture
-----------------------

- ``devtracker.core``:

  - Logging and Logfire monitoring setup.
  - The database layer: SQLModel entities, async repositories, engine and
    session management.
  - Redis-backed cache stores for refresh tokens and OAuth2 login state.

- ``devtracker.github``:

  - An async HTTP client for the GitHub OAuth2 endpoints and REST API,
    with rate-limit aware error mapping.

- ``devtracker.server``:

  - The FastAPI application: settings, JWT and OAuth2 security, the
    authentication service, exception handlers and the v1 REST routers.
"""

__version__ = "0.1.0"
