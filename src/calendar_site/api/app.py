"""FastAPI application factory.

Creates the webhook application that lets external services trigger a site
rebuild on demand.

## Usage

```python
from calendar_site.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=3001)
```

## Configuration

The app is configured via environment variables. See `calendar_site.config`
for available settings.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from calendar_site.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} webhook v{settings.app_version}")
    if not settings.webhook_secret_configured:
        logger.warning("WEBHOOK_SECRET is not set, rebuilds can be triggered by anyone")

    yield

    logger.info("Shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Rebuild webhook for the calendar-backed site",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Include routers
    from calendar_site.api.routes import webhook

    app.include_router(webhook.router, tags=["Webhook"])
    app.add_exception_handler(
        webhook.WebhookUnauthorizedError, webhook.unauthorized_handler
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": settings.app_version}

    return app
