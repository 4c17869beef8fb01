"""Rebuild webhook.

`POST /` schedules a site rebuild and answers immediately. When a
`WEBHOOK_SECRET` is configured, callers must send it in the
`X-Webhook-Secret` header.

```
curl -X POST -H "X-Webhook-Secret: $WEBHOOK_SECRET" http://127.0.0.1:3001/
```
"""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse

from calendar_site.build.rebuild import SiteBuilder
from calendar_site.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class WebhookUnauthorizedError(Exception):
    """Raised when a webhook call lacks the configured secret."""


async def unauthorized_handler(
    request: Request, exc: WebhookUnauthorizedError
) -> PlainTextResponse:
    return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)


def get_site_builder(settings: Settings = Depends(get_settings)) -> SiteBuilder:
    """Build the site builder from settings."""
    return SiteBuilder.from_settings(settings)


async def verify_webhook_secret(
    x_webhook_secret: str | None = Header(default=None, alias="X-Webhook-Secret"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests without the shared secret, if one is configured."""
    if not settings.webhook_secret_configured:
        return

    if x_webhook_secret is None or not secrets.compare_digest(
        x_webhook_secret.encode(), settings.webhook_secret.encode()
    ):
        logger.warning("Rejected webhook call with missing or wrong secret")
        raise WebhookUnauthorizedError()


@router.post(
    "/",
    response_class=PlainTextResponse,
    dependencies=[Depends(verify_webhook_secret)],
)
async def trigger_rebuild(
    background_tasks: BackgroundTasks,
    builder: SiteBuilder = Depends(get_site_builder),
) -> str:
    """Schedule a site rebuild."""
    logger.info("Rebuild triggered")
    background_tasks.add_task(builder.run)
    return "Build triggered"
