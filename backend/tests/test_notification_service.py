"""Unit tests for push notification payloads."""

import json

import pytest

from app.services.notification_service import NotificationService

SUBSCRIPTION = {"endpoint": "https://push.test/abc", "keys": {"p256dh": "k", "auth": "a"}}


class TestNotificationService:
    """Tests for NotificationService."""

    def test_payload_shape(self):
        payload = NotificationService().build_payload("Your trip is saved", url="/trips/1")

        assert payload == {
            "title": "True Travel AI",
            "body": "Your trip is saved",
            "icon": "/icons/icon-192x192.png",
            "badge": "/icons/icon-72x72.png",
            "data": {"url": "/trips/1"},
        }

    async def test_send_hands_payload_to_sender(self):
        sent = []

        async def sender(subscription, payload):
            sent.append((subscription, json.loads(payload)))

        await NotificationService(sender).send(SUBSCRIPTION, "Hello")

        assert sent[0][0] == SUBSCRIPTION
        assert sent[0][1]["body"] == "Hello"
        assert sent[0][1]["data"] == {"url": "/"}

    @pytest.mark.parametrize("subscription, message", [({}, "Hello"), (SUBSCRIPTION, "")])
    async def test_missing_fields_rejected(self, subscription, message):
        with pytest.raises(ValueError, match="Missing required fields"):
            await NotificationService().send(subscription, message)

    def test_trip_saved_message(self):
        assert NotificationService().trip_saved_message("Paris").startswith("Your trip to Paris is saved.")
