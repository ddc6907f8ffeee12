"""
Notification Module

Account owner notices for low funds and an approaching pay-in limit. The
ledger operations depend only on the NotificationService contract; the
implementations here either log the notice or queue it as a stored record for
a separate delivery process.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from enum import Enum
import logging
import uuid
from abc import ABC, abstractmethod

from .storage import StorageInterface, StorageRecord
from .logging_config import get_logger, log_action


class NotificationType(Enum):
    """Types of account notifications"""
    FUNDS_LOW = "funds_low"
    APPROACHING_PAY_IN_LIMIT = "approaching_pay_in_limit"


class NotificationStatus(Enum):
    """Status of notifications"""
    PENDING = "pending"
    SENT = "sent"


# (subject, body) per notification type
TEMPLATES = {
    NotificationType.FUNDS_LOW: (
        "Your funds are running low",
        "The balance of your account has dropped below the low funds threshold."
    ),
    NotificationType.APPROACHING_PAY_IN_LIMIT: (
        "You are approaching your pay in limit",
        "Your account is close to its pay in limit. Further deposits may be refused."
    ),
}


@dataclass
class Notification(StorageRecord):
    """Individual notification instance"""
    notification_type: NotificationType
    recipient_address: str
    subject: str
    body: str
    status: NotificationStatus = NotificationStatus.PENDING
    sent_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['notification_type'] = self.notification_type.value
        result['status'] = self.status.value
        if self.sent_at:
            result['sent_at'] = self.sent_at.isoformat()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Notification':
        return cls(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            notification_type=NotificationType(data['notification_type']),
            recipient_address=data['recipient_address'],
            subject=data['subject'],
            body=data['body'],
            status=NotificationStatus(data['status']),
            sent_at=datetime.fromisoformat(data['sent_at']) if data.get('sent_at') else None
        )


class NotificationService(ABC):
    """Notifies account owners, addressed by email"""

    @abstractmethod
    def notify_funds_low(self, email_address: str) -> None:
        pass

    @abstractmethod
    def notify_approaching_pay_in_limit(self, email_address: str) -> None:
        pass


class LoggingNotificationService(NotificationService):
    """Writes notices to the log instead of delivering them"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("moneybox.notifications")

    def notify_funds_low(self, email_address: str) -> None:
        self._log(NotificationType.FUNDS_LOW, email_address)

    def notify_approaching_pay_in_limit(self, email_address: str) -> None:
        self._log(NotificationType.APPROACHING_PAY_IN_LIMIT, email_address)

    def _log(self, notification_type: NotificationType, email_address: str) -> None:
        subject, _ = TEMPLATES[notification_type]
        log_action(
            self.logger, "info", f"EMAIL to {email_address}: {subject}",
            action=notification_type.value, resource=f"recipient:{email_address}"
        )


class StoredNotificationService(NotificationService):
    """Queues notices in storage for a separate delivery process"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.notifications_table = "notifications"
        self.logger = get_logger("moneybox.notifications")

    def notify_funds_low(self, email_address: str) -> None:
        self._queue(NotificationType.FUNDS_LOW, email_address)

    def notify_approaching_pay_in_limit(self, email_address: str) -> None:
        self._queue(NotificationType.APPROACHING_PAY_IN_LIMIT, email_address)

    def get_notifications(self, recipient_address: Optional[str] = None) -> List[Notification]:
        """List queued notifications, optionally for a single recipient"""
        if recipient_address is None:
            records = self.storage.load_all(self.notifications_table)
        else:
            records = self.storage.find(
                self.notifications_table, {"recipient_address": recipient_address}
            )
        notifications = [Notification.from_dict(data) for data in records]
        notifications.sort(key=lambda n: n.created_at)
        return notifications

    def get_pending_notifications(self) -> List[Notification]:
        """Notifications still waiting for delivery"""
        return [
            Notification.from_dict(data)
            for data in self.storage.find(
                self.notifications_table, {"status": NotificationStatus.PENDING.value}
            )
        ]

    def mark_sent(self, notification_id: str) -> Notification:
        """Record that the delivery process has sent a notification"""
        data = self.storage.load(self.notifications_table, notification_id)
        if not data:
            raise ValueError(f"Notification {notification_id} not found")

        notification = Notification.from_dict(data)
        if notification.status == NotificationStatus.SENT:
            raise ValueError(f"Notification {notification_id} already sent")

        now = datetime.now(timezone.utc)
        notification.status = NotificationStatus.SENT
        notification.sent_at = now
        notification.updated_at = now
        self.storage.save(self.notifications_table, notification.id, notification.to_dict())
        return notification

    def _queue(self, notification_type: NotificationType, email_address: str) -> Notification:
        subject, body = TEMPLATES[notification_type]
        now = datetime.now(timezone.utc)

        notification = Notification(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            notification_type=notification_type,
            recipient_address=email_address,
            subject=subject,
            body=body
        )
        self.storage.save(self.notifications_table, notification.id, notification.to_dict())

        log_action(
            self.logger, "info", f"Notification queued: {notification_type.value}",
            action="queue_notification", resource=f"notification:{notification.id}",
            extra={"recipient_address": email_address}
        )
        return notification
