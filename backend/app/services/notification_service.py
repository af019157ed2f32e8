"""Notification service — builds push payloads and hands them to a delivery backend."""

import json
import logging
from typing import Any, Protocol

from app.config import settings

logger = logging.getLogger(__name__)


class PushSender(Protocol):
    async def __call__(self, subscription: dict, payload: str) -> None: ...


async def log_only_sender(subscription: dict, payload: str) -> None:
    logger.info(f"Push to {subscription.get('endpoint', '<unknown>')}: {payload}")


class NotificationService:
    """Produces push messages; delivery is done by the configured ``PushSender``."""

    def __init__(self, sender: PushSender | None = None):
        self.sender = sender or log_only_sender

    def build_payload(self, message: str, url: str = "/") -> dict[str, Any]:
        return {
            "title": settings.push_notification_title,
            "body": message,
            "icon": settings.push_notification_icon,
            "badge": settings.push_notification_badge,
            "data": {"url": url},
        }

    def trip_saved_message(self, destination: str) -> str:
        return f"Your trip to {destination} is saved. Have a great journey! ✈️"

    async def send(self, subscription: dict, message: str) -> dict[str, Any]:
        if not subscription or not message:
            raise ValueError("Missing required fields")
        payload = self.build_payload(message)
        await self.sender(subscription, json.dumps(payload))
        return payload


notification_service = NotificationService()
