"""Web push notification client built on pywebpush."""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pywebpush import WebPushException, webpush

from storysky.domain.errors import ValidationError

logger = logging.getLogger(__name__)

# Push services answer these when a subscription has expired or was revoked
GONE_STATUSES = (404, 410)

TEST_NOTIFICATION = {"title": "New Story!", "body": "A new story has been added!"}


@dataclass(frozen=True)
class VapidKeys:
    """Base64url-encoded raw P-256 key pair identifying this server."""

    public_key: str
    private_key: str


def load_vapid_keys(path: str | Path) -> VapidKeys:
    """Load the VAPID key pair written by scripts/generate_vapid.py.

    Raises:
        RuntimeError: If the file is missing or does not hold both keys
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return VapidKeys(public_key=data["publicKey"], private_key=data["privateKey"])
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise RuntimeError(
            f"VAPID keys not found in {path}. Run scripts/generate_vapid.py first."
        ) from e


class PushNotifier:
    """Best-effort fan-out of notifications to registered subscriptions.

    Delivery never raises: failures are logged and, for expired
    subscriptions, the subscription is dropped.
    """

    def __init__(self, keys: VapidKeys, subject: str) -> None:
        """Initialize notifier.

        Args:
            keys: VAPID key pair used to sign push requests
            subject: VAPID "sub" claim, a mailto: or https: URL
        """
        self.keys = keys
        self.subject = subject
        self._subscriptions: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def public_key(self) -> str:
        return self.keys.public_key

    @property
    def subscriptions(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._subscriptions.values())

    def subscribe(self, subscription: dict[str, Any] | None) -> dict[str, Any]:
        """Register a browser push subscription, keyed by endpoint.

        Raises:
            ValidationError: If the descriptor has no endpoint
        """
        if not subscription or not subscription.get("endpoint"):
            raise ValidationError("Invalid subscription object")
        with self._lock:
            self._subscriptions[subscription["endpoint"]] = subscription
        logger.info(f"Registered push subscription {subscription['endpoint']}")
        return subscription

    def unsubscribe(self, endpoint: str) -> None:
        with self._lock:
            self._subscriptions.pop(endpoint, None)

    def send(self, subscription: dict[str, Any], payload: dict[str, Any]) -> bool:
        """Deliver one notification. Returns False instead of raising."""
        endpoint = subscription.get("endpoint")
        try:
            webpush(
                subscription_info=subscription,
                data=json.dumps(payload),
                vapid_private_key=self.keys.private_key,
                vapid_claims={"sub": self.subject},
            )
            return True
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            if status in GONE_STATUSES:
                logger.info(f"Dropping expired push subscription {endpoint}")
                self.unsubscribe(endpoint)
            else:
                logger.error(f"Push delivery to {endpoint} failed: {e}")
        except Exception as e:
            logger.error(f"Push delivery to {endpoint} failed: {e}", exc_info=True)
        return False

    def send_test(self, subscription: dict[str, Any]) -> bool:
        return self.send(subscription, TEST_NOTIFICATION)

    def broadcast(self, payload: dict[str, Any]) -> int:
        """Send to every registered subscription; returns the delivered count."""
        delivered = sum(1 for sub in self.subscriptions if self.send(sub, payload))
        logger.info(f"Push broadcast delivered to {delivered} subscription(s)")
        return delivered

    def notify_new_story(self, title: str) -> int:
        return self.broadcast({"title": "New Story!", "body": title})
