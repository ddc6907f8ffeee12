"""
Application Wiring Module

Builds storage, repository, notification service and ledger operations from
configuration.
"""

from typing import Optional

from .accounts import Account, Amount
from .config import MoneyboxConfig, get_config
from .features import TransferMoney, WithdrawMoney
from .logging_config import setup_logging
from .notifications import (
    LoggingNotificationService, NotificationService, StoredNotificationService
)
from .repository import StorageAccountRepository
from .storage import InMemoryStorage, StorageInterface
from .users import User


class MoneyboxApp:
    """Wired ledger components"""

    def __init__(self, storage: StorageInterface, notifications: NotificationService):
        self.storage = storage
        self.repository = StorageAccountRepository(storage)
        self.notifications = notifications
        self.withdraw_money = WithdrawMoney(self.repository, notifications)
        self.transfer_money = TransferMoney(self.repository, notifications)

    def open_account(self, user: User, balance: Amount = 0, withdrawn: Amount = 0,
                     paid_in: Amount = 0) -> Account:
        """Open and store an account for ``user`` with the given starting state"""
        account = Account.create(user).set_balance(balance, withdrawn, paid_in)
        return self.repository.add(account)


def create_notification_service(backend: str, storage: StorageInterface) -> NotificationService:
    """Build the notification service named by ``backend``"""
    if backend == "log":
        return LoggingNotificationService()
    if backend == "storage":
        return StoredNotificationService(storage)
    raise ValueError(f"Unknown notification backend '{backend}'")


def create_app(config: Optional[MoneyboxConfig] = None,
               storage: Optional[StorageInterface] = None) -> MoneyboxApp:
    """Create a MoneyboxApp from configuration"""
    config = config or get_config()
    setup_logging(config.log_level, log_format=config.log_format)

    storage = storage or InMemoryStorage()
    notifications = create_notification_service(config.notification_backend, storage)
    return MoneyboxApp(storage, notifications)
