"""
Test suite for accounts module

Tests the account aggregate: withdrawal and deposit rules, threshold
predicates, Decimal handling and the storage dictionary format.
"""

import pytest
from decimal import Decimal

from moneybox.users import User
from moneybox.accounts import (
    Account, InsufficientFundsError, PayInLimitReachedError, InvalidAmountError,
    MoneyboxError, to_decimal
)


@pytest.fixture
def user():
    return User.create("Test User", "test@test.com")


@pytest.fixture
def account(user):
    return Account.create(user).set_balance(Decimal('1000.00'))


class TestUser:
    """Test User identity"""

    def test_create_assigns_unique_ids(self):
        first = User.create("First", "first@test.com")
        second = User.create("Second", "second@test.com")

        assert first.id != second.id
        assert first.name == "First"
        assert first.email == "first@test.com"

    def test_user_is_immutable(self, user):
        with pytest.raises(AttributeError):
            user.email = "other@test.com"


class TestAccountCreation:
    """Test opening accounts"""

    def test_create_empty_account(self, user):
        account = Account.create(user)

        assert account.user is user
        assert account.balance == Decimal('0')
        assert account.withdrawn == Decimal('0')
        assert account.paid_in == Decimal('0')
        assert account.created_at == account.updated_at

    def test_create_assigns_unique_ids(self, user):
        assert Account.create(user).id != Account.create(user).id

    def test_set_balance_returns_same_account(self, user):
        account = Account.create(user)
        result = account.set_balance(1000, -200, 300)

        assert result is account
        assert account.balance == Decimal('1000')
        assert account.withdrawn == Decimal('-200')
        assert account.paid_in == Decimal('300')

    def test_float_input_is_converted_exactly(self, user):
        account = Account.create(user).set_balance(0.1)

        assert account.balance == Decimal('0.1')

    def test_limits(self):
        assert Account.PAY_IN_LIMIT == Decimal('4000')
        assert Account.LOW_FUNDS_THRESHOLD == Decimal('500')


class TestWithdraw:
    """Test withdrawals"""

    def test_withdraw_reduces_balance_and_withdrawn(self, account):
        account.set_balance(1000, -200)

        result = account.withdraw(Decimal('100'))

        assert result is account
        assert account.balance == Decimal('900')
        assert account.withdrawn == Decimal('-300')
        assert account.paid_in == Decimal('0')

    def test_withdraw_entire_balance(self, account):
        account.withdraw(Decimal('1000'))

        assert account.balance == Decimal('0')
        assert account.withdrawn == Decimal('-1000')

    def test_withdraw_more_than_balance_raises(self, account):
        with pytest.raises(InsufficientFundsError, match="Insufficient funds to make withdrawal"):
            account.withdraw(Decimal('1000.01'))

        assert account.balance == Decimal('1000.00')
        assert account.withdrawn == Decimal('0')

    def test_withdraw_message_names_purpose(self, account):
        with pytest.raises(InsufficientFundsError) as exc_info:
            account.withdraw(Decimal('1500'), purpose="transfer")

        assert str(exc_info.value) == "Insufficient funds to make transfer"

    def test_zero_withdrawal_leaves_totals_unchanged(self, account):
        account.set_balance(1000, -100)

        account.withdraw(0)

        assert account.balance == Decimal('1000')
        assert account.withdrawn == Decimal('-100')

    def test_negative_withdrawal_rejected(self, account):
        with pytest.raises(InvalidAmountError, match="must not be negative"):
            account.withdraw(Decimal('-50'))

        assert account.balance == Decimal('1000.00')

    def test_repeated_withdrawals_accumulate_exactly(self, account):
        for _ in range(10):
            account.withdraw('0.10')

        assert account.balance == Decimal('999.00')
        assert account.withdrawn == Decimal('-1.00')

    def test_chained_operations(self, user):
        account = Account.create(user).deposit(300).withdraw(100).deposit(50)

        assert account.balance == Decimal('250')
        assert account.paid_in == Decimal('350')
        assert account.withdrawn == Decimal('-100')


class TestDeposit:
    """Test deposits"""

    def test_deposit_increases_balance_and_paid_in(self, account):
        result = account.deposit(Decimal('250'))

        assert result is account
        assert account.balance == Decimal('1250')
        assert account.paid_in == Decimal('250')

    def test_deposit_up_to_limit(self, account):
        account.set_balance(0, 0, 3600)

        account.deposit(Decimal('400'))

        assert account.paid_in == Decimal('4000')
        assert account.pay_in_remaining == Decimal('0')

    def test_deposit_over_limit_raises(self, account):
        account.set_balance(1000, 0, 3600)

        with pytest.raises(PayInLimitReachedError, match="Account pay in limit reached"):
            account.deposit(Decimal('500'))

        assert account.balance == Decimal('1000')
        assert account.paid_in == Decimal('3600')

    def test_deposit_just_over_limit_raises(self, account):
        account.set_balance(0, 0, 4000)

        with pytest.raises(PayInLimitReachedError):
            account.deposit(Decimal('0.01'))

    def test_negative_deposit_rejected(self, account):
        with pytest.raises(InvalidAmountError):
            account.deposit(-10)

        assert account.balance == Decimal('1000.00')
        assert account.paid_in == Decimal('0')

    def test_domain_errors_are_value_errors(self):
        assert issubclass(InsufficientFundsError, MoneyboxError)
        assert issubclass(PayInLimitReachedError, ValueError)


class TestThresholds:
    """Test low funds and pay-in limit predicates"""

    def test_funds_low_is_strict(self, account):
        account.set_balance(500)
        assert not account.is_funds_low

        account.set_balance('499.99')
        assert account.is_funds_low

    def test_approaching_pay_in_limit_is_strict(self, account):
        account.set_balance(0, 0, 3500)
        assert not account.is_approaching_pay_in_limit

        account.set_balance(0, 0, 3700)
        assert account.is_approaching_pay_in_limit
        assert account.pay_in_remaining == Decimal('300')


class TestSerialization:
    """Test storage dictionary conversion"""

    def test_to_dict_stores_decimals_as_strings(self, account, user):
        account.set_balance('1000.50', '-20.25', '300')

        data = account.to_dict()

        assert data['balance'] == '1000.50'
        assert data['withdrawn'] == '-20.25'
        assert data['paid_in'] == '300'
        assert data['user'] == {"id": user.id, "name": user.name, "email": user.email}

    def test_from_dict_restores_account(self, account):
        account.set_balance('1000.50', '-20.25', '300')

        restored = Account.from_dict(account.to_dict())

        assert restored == account
        assert restored.user == account.user

    def test_to_decimal(self):
        assert to_decimal(Decimal('1.5')) == Decimal('1.5')
        assert to_decimal(2) == Decimal('2')
        assert to_decimal('3.25') == Decimal('3.25')
        assert to_decimal(0.3) == Decimal('0.3')

    @pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", Decimal('NaN')])
    def test_to_decimal_rejects_non_finite_values(self, value):
        with pytest.raises(InvalidAmountError):
            to_decimal(value)

    def test_withdraw_non_numeric_amount(self, account):
        with pytest.raises(InvalidAmountError, match="not a number"):
            account.withdraw("abc")

        assert account.balance == Decimal('1000')
        assert account.withdrawn == Decimal('0')
