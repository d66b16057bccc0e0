"""
Services package: notification delivery, family alerts and the service facade.
"""

from .notification import (
    NotificationChannel, NotificationSender, LoggingNotificationSender,
    HttpNotificationSender, send_multi_channel, build_notification_sender
)
from .family_alerts import AlertDispatcher, FamilyContact, FamilyContactStore, InMemoryFamilyContactStore

__all__ = [
    "NotificationChannel",
    "NotificationSender",
    "LoggingNotificationSender",
    "HttpNotificationSender",
    "send_multi_channel",
    "build_notification_sender",
    "AlertDispatcher",
    "FamilyContact",
    "FamilyContactStore",
    "InMemoryFamilyContactStore",
]
