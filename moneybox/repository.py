"""
Account Repository Module

Contract through which the ledger operations load and persist accounts, and
an implementation backed by a StorageInterface.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List

from .accounts import Account, MoneyboxError
from .storage import StorageInterface


class AccountNotFoundError(MoneyboxError):
    """Raised when no account exists for the requested id"""


class AccountRepository(ABC):
    """Abstract account lookup and persistence"""

    @abstractmethod
    def get_account_by_id(self, account_id: str) -> Account:
        """Load an account, raising AccountNotFoundError if it does not exist"""
        pass

    @abstractmethod
    def update(self, account: Account) -> None:
        """Persist the full current state of an account"""
        pass


class StorageAccountRepository(AccountRepository):
    """Account repository persisting accounts as storage records"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.accounts_table = "accounts"

    def add(self, account: Account) -> Account:
        """Store a newly opened account"""
        if self.storage.exists(self.accounts_table, account.id):
            raise ValueError(f"Account {account.id} already exists")
        self.storage.save(self.accounts_table, account.id, account.to_dict())
        return account

    def get_account_by_id(self, account_id: str) -> Account:
        account_dict = self.storage.load(self.accounts_table, account_id)
        if not account_dict:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return Account.from_dict(account_dict)

    def update(self, account: Account) -> None:
        if not self.storage.exists(self.accounts_table, account.id):
            raise AccountNotFoundError(f"Account {account.id} not found")
        account.updated_at = datetime.now(timezone.utc)
        self.storage.save(self.accounts_table, account.id, account.to_dict())

    def get_user_accounts(self, user_id: str) -> List[Account]:
        """Get all accounts owned by a user"""
        return [
            Account.from_dict(data)
            for data in self.storage.load_all(self.accounts_table)
            if data['user']['id'] == user_id
        ]
