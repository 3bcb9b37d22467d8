"""Payment validator: read-only funds and authorization checks before any transfer."""

import logging

from arthub.application.dtos.settlement import ValidationResult
from arthub.application.interfaces.services import IChainGateway
from arthub.domain.exceptions import (
    InsufficientAllowanceException,
    InsufficientBalanceException,
    RelayerUnderfundedException,
)

logger = logging.getLogger(__name__)


class PaymentValidator:
    """Checks collector balance and allowance, and the signer's gas balance (IPaymentValidator).

    Never writes to the chain. The allowance is checked against the signer,
    since the signer is the spender of both transferFrom calls.
    """

    def __init__(self, gateway: IChainGateway, min_relayer_balance_wei: int) -> None:
        self.gateway = gateway
        self.min_relayer_balance_wei = min_relayer_balance_wei

    async def validate(self, collector: str, total_base_units: int) -> ValidationResult:
        """Verify the collector can pay total_base_units through the signer.

        Args:
            collector: Checksummed collector address.
            total_base_units: Amount that still has to be pulled.

        Returns:
            ValidationResult with the balance and allowance read.

        Raises:
            InsufficientBalanceException: Balance below total.
            InsufficientAllowanceException: Allowance to the signer below total;
                carries the approval instruction for the client.
        """
        balance = await self.gateway.read_balance(collector)
        if balance < total_base_units:
            logger.info(
                "Rejecting collect: balance %s < required %s for %s",
                balance,
                total_base_units,
                collector,
            )
            raise InsufficientBalanceException(balance, total_base_units)

        spender = self.gateway.signer_address
        allowance = await self.gateway.read_allowance(collector, spender)
        if allowance < total_base_units:
            logger.info(
                "Rejecting collect: allowance %s < required %s for %s",
                allowance,
                total_base_units,
                collector,
            )
            raise InsufficientAllowanceException(
                token_address=self.gateway.token_address,
                spender=spender,
                amount_base_units=total_base_units,
                allowance_base_units=allowance,
            )
        return ValidationResult(balance_base_units=balance, allowance_base_units=allowance)

    async def check_relayer_funds(self) -> int:
        """Return the signer's native balance; raise if it is below the minimum."""
        signer = self.gateway.signer_address
        balance = await self.gateway.get_native_balance(signer)
        if balance < self.min_relayer_balance_wei:
            logger.error(
                "Signer %s underfunded: %s wei < %s wei",
                signer,
                balance,
                self.min_relayer_balance_wei,
            )
            raise RelayerUnderfundedException(signer, balance, self.min_relayer_balance_wei)
        return balance
