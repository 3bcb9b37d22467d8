"""PaymentValidator: balance, allowance and relayer funding checks."""

import pytest

from arthub.application.services.payment_validator import PaymentValidator
from arthub.domain.exceptions import (
    InsufficientAllowanceException,
    InsufficientBalanceException,
    RelayerUnderfundedException,
)
from tests.fakes import COLLECTOR, SIGNER, TOKEN, FakeChainGateway


async def test_validate_passes_when_balance_and_allowance_cover_total() -> None:
    gateway = FakeChainGateway(balance=10_000_000, allowance=10_000_000)
    result = await PaymentValidator(gateway, 1).validate(COLLECTOR, 10_000_000)
    assert result.balance_base_units == 10_000_000
    assert result.allowance_base_units == 10_000_000


async def test_insufficient_balance_is_checked_before_allowance() -> None:
    gateway = FakeChainGateway(balance=9_999_999, allowance=0)
    with pytest.raises(InsufficientBalanceException):
        await PaymentValidator(gateway, 1).validate(COLLECTOR, 10_000_000)
    assert gateway.calls == ["read_balance"]


async def test_insufficient_allowance_names_signer_as_spender() -> None:
    gateway = FakeChainGateway(balance=10_000_000, allowance=5)
    with pytest.raises(InsufficientAllowanceException) as exc_info:
        await PaymentValidator(gateway, 1).validate(COLLECTOR, 10_000_000)
    assert exc_info.value.approval_data() == {
        "tokenAddress": TOKEN,
        "spender": SIGNER,
        "amount": "10000000",
    }
    assert "send_transaction" not in gateway.calls


async def test_check_relayer_funds() -> None:
    gateway = FakeChainGateway(native_balance=10**15)
    assert await PaymentValidator(gateway, 10**15).check_relayer_funds() == 10**15
    with pytest.raises(RelayerUnderfundedException) as exc_info:
        await PaymentValidator(gateway, 10**15 + 1).check_relayer_funds()
    assert exc_info.value.details["signer_address"] == SIGNER
