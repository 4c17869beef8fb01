"""FastAPI application and routes.

This module provides the HTTP entry point for on-demand rebuilds.

## API Structure

- POST / - Trigger a site rebuild
- GET /health - Health check

## Security

- Bind to localhost and put a reverse proxy in front in production
- Set WEBHOOK_SECRET so only callers knowing it can trigger builds
"""

from calendar_site.api.app import create_app

__all__ = ["create_app"]
