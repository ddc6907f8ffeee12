"""
Ledger Operations Module

Withdrawals and transfers between accounts. Each operation loads fresh
accounts from the repository, applies the domain rules, persists only after
every rule has passed and then notifies owners who are close to a threshold.

A transfer must name two different accounts. The two legs are persisted one
after the other; a repository failure between them is not rolled back.
"""

from typing import Tuple

from .accounts import Account, Amount, InvalidTransferError, MoneyboxError, to_decimal
from .repository import AccountRepository
from .notifications import NotificationService
from .logging_config import get_logger, log_action


class WithdrawMoney:
    """Withdraw money from a single account"""

    def __init__(self, account_repository: AccountRepository, notification_service: NotificationService):
        self.account_repository = account_repository
        self.notification_service = notification_service
        self.logger = get_logger("moneybox.features.withdraw")

    def execute(self, account_id: str, amount: Amount) -> Account:
        """
        Withdraw ``amount`` from the account

        Args:
            account_id: ID of the account to withdraw from
            amount: Amount to withdraw

        Returns:
            The updated Account

        Raises:
            AccountNotFoundError: If the account does not exist
            InvalidAmountError: If the amount is negative or not a number
            InsufficientFundsError: If the balance does not cover the amount
        """
        account = self.account_repository.get_account_by_id(account_id)

        try:
            amount = to_decimal(amount)
            account.withdraw(amount)
        except MoneyboxError as e:
            log_action(
                self.logger, "warning", f"Withdrawal rejected: {e}",
                action="withdraw_money", resource=f"account:{account_id}",
                extra={"amount": str(amount)}
            )
            raise

        self.account_repository.update(account)

        log_action(
            self.logger, "info", "Withdrawal completed",
            action="withdraw_money", resource=f"account:{account.id}",
            extra={"amount": str(amount), "balance": str(account.balance)}
        )

        if account.is_funds_low:
            self.notification_service.notify_funds_low(account.user.email)

        return account


class TransferMoney:
    """Move money from one account to another"""

    def __init__(self, account_repository: AccountRepository, notification_service: NotificationService):
        self.account_repository = account_repository
        self.notification_service = notification_service
        self.logger = get_logger("moneybox.features.transfer")

    def execute(self, from_account_id: str, to_account_id: str, amount: Amount) -> Tuple[Account, Account]:
        """
        Transfer ``amount`` between two accounts

        Both accounts are validated before either is persisted.

        Returns:
            Tuple of (from_account, to_account) after the transfer

        Raises:
            InvalidTransferError: If both ids name the same account
            InvalidAmountError: If the amount is negative or not a number
            AccountNotFoundError: If either account does not exist
            InsufficientFundsError: If the source balance does not cover the amount
            PayInLimitReachedError: If the destination would exceed its pay-in limit
        """
        try:
            if from_account_id == to_account_id:
                raise InvalidTransferError("Cannot transfer money from an account to itself")
            amount = to_decimal(amount)
        except MoneyboxError as e:
            self._log_rejection(e, from_account_id, to_account_id, amount)
            raise

        from_account = self.account_repository.get_account_by_id(from_account_id)
        to_account = self.account_repository.get_account_by_id(to_account_id)

        try:
            from_account.withdraw(amount, purpose="transfer")
            to_account.deposit(amount)
        except MoneyboxError as e:
            self._log_rejection(e, from_account_id, to_account_id, amount)
            raise

        self.account_repository.update(from_account)
        self.account_repository.update(to_account)

        log_action(
            self.logger, "info", "Transfer completed",
            action="transfer_money", resource=f"account:{from_account.id}",
            extra={
                "to_account_id": to_account.id,
                "amount": str(amount),
                "from_balance": str(from_account.balance),
                "to_paid_in": str(to_account.paid_in)
            }
        )

        if from_account.is_funds_low:
            self.notification_service.notify_funds_low(from_account.user.email)

        if to_account.is_approaching_pay_in_limit:
            self.notification_service.notify_approaching_pay_in_limit(to_account.user.email)

        return from_account, to_account

    def _log_rejection(self, error: MoneyboxError, from_account_id: str,
                       to_account_id: str, amount: Amount) -> None:
        log_action(
            self.logger, "warning", f"Transfer rejected: {error}",
            action="transfer_money", resource=f"account:{from_account_id}",
            extra={"to_account_id": to_account_id, "amount": str(amount)}
        )
