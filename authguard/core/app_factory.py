"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and embedding services get the same wiring.
"""

from __future__ import annotations

from fastapi import FastAPI

from authguard.api.routes import health_router
from authguard.core.config import settings
from authguard.core.exception_handlers import setup_exception_handlers
from authguard.core.logging import configure_logging
from authguard.core.middleware import request_id_middleware


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Services mount their own login/registration routers on the returned app
    and guard them with ``Depends(require_rate_limit(...))``.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="authguard",
        description=(
            "Fixed-window rate limiting, client IP resolution and auth event "
            "logging for authentication endpoints."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)

    return app
