"""
Delivery strategies for non-blocking requests.

A request with `configuration.blocking = false` and a push notification URL
is still processed synchronously; once the response has been sent the task
is handed to a NotificationSink. The default sink only records the intent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from .models import TaskResult

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger("a2a.push")


class NotificationSink:
    async def notify(self, url: str, task: TaskResult, token: Optional[str] = None) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class LoggingNotificationSink(NotificationSink):
    """Records that a webhook was requested; nothing is sent."""

    async def notify(self, url: str, task: TaskResult, token: Optional[str] = None) -> None:
        logger.info("a2a.push.deferred", extra={"url": url, "task_id": task.id, "context_id": task.contextId})


class WebhookNotificationSink(NotificationSink):
    """POSTs the completed task to the webhook once. Failures are logged, not retried."""

    def __init__(self, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0))

    async def notify(self, url: str, task: TaskResult, token: Optional[str] = None) -> None:
        headers = {"Content-Type": "application/json", "User-Agent": "a2a-planner-agent"}
        if token:
            headers["X-A2A-Notification-Token"] = token
        try:
            r = await self._client.post(url, json=task.model_dump(mode="json"), headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("a2a.push.failed", extra={"url": url, "task_id": task.id, "error": str(e)})
            return
        if r.is_success:
            logger.info("a2a.push.delivered", extra={"url": url, "task_id": task.id, "status_code": r.status_code})
        else:
            logger.warning("a2a.push.failed", extra={"url": url, "task_id": task.id, "status_code": r.status_code})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def build_notifier(settings: Optional["Settings"] = None) -> NotificationSink:
    from .config import settings as default_settings

    cfg = settings or default_settings
    if cfg.push_notifications == "webhook":
        return WebhookNotificationSink(timeout=cfg.webhook_timeout)
    return LoggingNotificationSink()
