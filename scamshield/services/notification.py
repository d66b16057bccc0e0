"""
Notification senders used to deliver family alerts.

Senders report delivery per channel as a boolean and never raise for
delivery failures; the dispatcher turns those booleans into channel statuses.
"""

import asyncio
from enum import Enum
from typing import Dict, Optional, Protocol

import httpx

from scamshield.core.logging import get_logger
from config.settings import settings

logger = get_logger(__name__)


class NotificationChannel(Enum):
    """Delivery channels supported by the gateway."""
    SMS = "sms"
    WHATSAPP = "whatsapp"
    EMAIL = "email"


class NotificationSender(Protocol):
    """Sends one message on one channel and reports whether it was accepted."""

    async def send(self, channel: NotificationChannel, recipient: str, message: str) -> bool:
        ...


class LoggingNotificationSender:
    """Development sender: logs the message and reports success."""

    async def send(self, channel: NotificationChannel, recipient: str, message: str) -> bool:
        logger.info(
            f"[{channel.value.upper()}] notification to {recipient}",
            extra={"channel": channel.value, "recipient": recipient, "message_length": len(message)}
        )
        return True


class HttpNotificationSender:
    """
    Sender that posts messages to an HTTP notification gateway.

    Use as an async context manager to share one connection pool across a
    dispatch; outside a context each send opens a short-lived client.
    """

    def __init__(
        self,
        gateway_url: str,
        api_key: Optional[str] = None,
        sender_id: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.gateway_url = gateway_url
        self.api_key = api_key if api_key is not None else settings.notification.api_key
        self.sender_id = sender_id or settings.notification.sender_id
        self.timeout = timeout if timeout is not None else settings.notification.timeout
        self.transport = transport
        self.http_client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
                "User-Agent": f"{settings.app_name}/{settings.app_version}"
            },
            transport=self.transport,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self.http_client = self._build_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.http_client:
            await self.http_client.aclose()
            self.http_client = None

    async def send(self, channel: NotificationChannel, recipient: str, message: str) -> bool:
        payload = {
            "channel": channel.value,
            "to": recipient,
            "sender": self.sender_id,
            "message": message,
        }

        try:
            if self.http_client is not None:
                response = await self.http_client.post(self.gateway_url, json=payload)
            else:
                async with self._build_client() as client:
                    response = await client.post(self.gateway_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                f"Notification gateway error on {channel.value}: {e}",
                extra={"channel": channel.value, "recipient": recipient}
            )
            return False

        if response.is_success:
            logger.info(f"{channel.value} notification accepted for {recipient}")
            return True

        logger.error(
            f"Notification gateway rejected {channel.value}: {response.status_code} - {response.text}",
            extra={"channel": channel.value, "recipient": recipient}
        )
        return False


async def send_multi_channel(
    sender: NotificationSender,
    phone: str,
    message: str,
    email: Optional[str] = None
) -> Dict[NotificationChannel, bool]:
    """
    Fan one message out to SMS, WhatsApp and (when given) email concurrently.

    A channel whose sender raises is reported as not delivered.
    """
    targets = [
        (NotificationChannel.SMS, phone),
        (NotificationChannel.WHATSAPP, phone),
    ]
    if email:
        targets.append((NotificationChannel.EMAIL, email))

    results = await asyncio.gather(
        *(sender.send(channel, recipient, message) for channel, recipient in targets),
        return_exceptions=True
    )

    delivered: Dict[NotificationChannel, bool] = {}
    for (channel, _), result in zip(targets, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(f"{channel.value} notification raised: {result}", extra={"channel": channel.value})
            delivered[channel] = False
        else:
            delivered[channel] = bool(result)
    return delivered


def build_notification_sender() -> NotificationSender:
    """Configured sender: HTTP gateway when a URL is set, logging otherwise."""
    if settings.notification.gateway_url:
        return HttpNotificationSender(settings.notification.gateway_url)
    return LoggingNotificationSender()
