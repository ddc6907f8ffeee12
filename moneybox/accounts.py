"""
Account Module

The account aggregate: running balance, cumulative withdrawals and cumulative
pay-ins for a single user. Withdrawals may never overdraw the balance and
pay-ins are capped by a lifetime limit. All amounts use Decimal.
"""

from decimal import Decimal, InvalidOperation
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, Dict, Union
import uuid

from .storage import StorageRecord
from .users import User


Amount = Union[Decimal, int, float, str]


class MoneyboxError(ValueError):
    """Base class for ledger business rule violations"""


class InsufficientFundsError(MoneyboxError):
    """Raised when a withdrawal would drive the balance below zero"""


class PayInLimitReachedError(MoneyboxError):
    """Raised when a deposit would push cumulative pay-ins over the limit"""


class InvalidAmountError(MoneyboxError):
    """Raised when an amount is negative or not a finite number"""


class InvalidTransferError(MoneyboxError):
    """Raised when a transfer names the same account on both sides"""


def to_decimal(value: Amount) -> Decimal:
    """Coerce a numeric value to Decimal without float rounding artefacts"""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidAmountError(f"Amount {value!r} is not a number")

    if not amount.is_finite():
        raise InvalidAmountError(f"Amount {value!r} is not a finite number")
    return amount


@dataclass
class Account(StorageRecord):
    """
    Bank account owned by a single user

    ``withdrawn`` is a running negative total: every withdrawal lowers it by
    the withdrawn amount. ``paid_in`` only grows and never exceeds
    ``PAY_IN_LIMIT``.
    """
    user: User
    balance: Decimal = field(default_factory=lambda: Decimal('0'))
    withdrawn: Decimal = field(default_factory=lambda: Decimal('0'))
    paid_in: Decimal = field(default_factory=lambda: Decimal('0'))

    PAY_IN_LIMIT = Decimal('4000')
    LOW_FUNDS_THRESHOLD = Decimal('500')

    def __post_init__(self):
        self.balance = to_decimal(self.balance)
        self.withdrawn = to_decimal(self.withdrawn)
        self.paid_in = to_decimal(self.paid_in)

    @classmethod
    def create(cls, user: User) -> 'Account':
        """Open an empty account for ``user``"""
        now = datetime.now(timezone.utc)
        return cls(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            user=user
        )

    def set_balance(self, balance: Amount, withdrawn: Amount = 0, paid_in: Amount = 0) -> 'Account':
        """Overwrite the numeric state; used to build pre-populated accounts"""
        self.balance = to_decimal(balance)
        self.withdrawn = to_decimal(withdrawn)
        self.paid_in = to_decimal(paid_in)
        return self

    def withdraw(self, amount: Amount, purpose: str = "withdrawal") -> 'Account':
        """
        Take ``amount`` out of the account

        Args:
            amount: Amount to withdraw, must not be negative
            purpose: Operation named in the insufficient funds message

        Returns:
            This account, for chaining

        Raises:
            InvalidAmountError: If amount is negative or not a number
            InsufficientFundsError: If amount exceeds the balance
        """
        amount = self._validate_amount(amount)

        if self.balance < amount:
            raise InsufficientFundsError(f"Insufficient funds to make {purpose}")

        self.balance -= amount
        self.withdrawn -= amount
        return self

    def deposit(self, amount: Amount) -> 'Account':
        """
        Pay ``amount`` into the account

        Raises:
            InvalidAmountError: If amount is negative or not a number
            PayInLimitReachedError: If the pay-in limit would be exceeded
        """
        amount = self._validate_amount(amount)

        if self.paid_in + amount > self.PAY_IN_LIMIT:
            raise PayInLimitReachedError("Account pay in limit reached")

        self.balance += amount
        self.paid_in += amount
        return self

    @property
    def pay_in_remaining(self) -> Decimal:
        """Amount that can still be paid in before hitting the limit"""
        return self.PAY_IN_LIMIT - self.paid_in

    @property
    def is_funds_low(self) -> bool:
        """Check if balance is below the low funds threshold"""
        return self.balance < self.LOW_FUNDS_THRESHOLD

    @property
    def is_approaching_pay_in_limit(self) -> bool:
        """Check if the remaining pay-in allowance is below the threshold"""
        return self.pay_in_remaining < self.LOW_FUNDS_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        result = super().to_dict()
        result['user'] = {
            'id': self.user.id,
            'name': self.user.name,
            'email': self.user.email
        }
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """Create an account from its storage dictionary"""
        return cls(
            id=data['id'],
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            user=User.from_dict(data['user']),
            balance=Decimal(data['balance']),
            withdrawn=Decimal(data['withdrawn']),
            paid_in=Decimal(data['paid_in'])
        )

    @staticmethod
    def _validate_amount(amount: Amount) -> Decimal:
        amount = to_decimal(amount)
        if amount < Decimal('0'):
            raise InvalidAmountError("Amount must not be negative")
        return amount
