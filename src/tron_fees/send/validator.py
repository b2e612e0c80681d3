"""Pre-signing affordability check for a transfer."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Protocol, Sequence

from ..amounts import Numeric, to_decimal
from ..encoding import is_base58_address, is_hex_address
from ..errors import ErrorCode, FeeError, SendErrorCode
from ..fees.calculator import FeeCalculator, native_total
from ..networks import network_info, parse_asset_id
from ..types import Account, AssetBalance, AssetRef, SendResult
from .builder import TransactionBuilder

logger = logging.getLogger(__name__)

SUPPORTED_NAMESPACES = ("slip44", "trc10", "trc20")


class AccountsSource(Protocol):
    async def find_by_id(self, account_id: str) -> Optional[Account]: ...


class BalancesSource(Protocol):
    async def get_balances(
        self, account_id: str, asset_ids: Sequence[str]
    ) -> Sequence[Optional[AssetBalance]]: ...


def _ui(balance: Optional[AssetBalance]) -> Decimal:
    return balance.ui_amount if balance is not None else Decimal(0)


def _units(balance: Optional[AssetBalance]) -> int:
    return balance.raw_amount if balance is not None else 0


class SendValidator:
    """Checks, in order, the asset balance and then native balance against amount plus fees.

    The asset balance check runs before any fee computation so an obviously
    unaffordable transfer costs no remote calls.
    """

    def __init__(
        self,
        accounts: AccountsSource,
        balances: BalancesSource,
        fee_calculator: FeeCalculator,
        builder: Optional[TransactionBuilder] = None,
    ):
        self.accounts = accounts
        self.balances = balances
        self.fee_calculator = fee_calculator
        self.builder = builder or TransactionBuilder()

    async def validate_send(
        self,
        scope: Any,
        from_account_id: str,
        to_address: str,
        asset: AssetRef,
        amount: Optional[Numeric],
    ) -> SendResult:
        if amount is None or amount == "" or not to_address:
            return SendResult.failure(SendErrorCode.REQUIRED)
        try:
            amount_ui = to_decimal(amount)
        except FeeError:
            return SendResult.failure(SendErrorCode.INVALID)
        if amount_ui < 0:
            return SendResult.failure(SendErrorCode.INVALID)
        if not (is_base58_address(to_address) or is_hex_address(to_address)):
            return SendResult.failure(SendErrorCode.INVALID)
        try:
            asset_network, namespace, _ = parse_asset_id(asset.asset_id)
        except FeeError:
            return SendResult.failure(SendErrorCode.INVALID)
        info = network_info(scope)
        if asset_network != info.scope:
            logger.warning(f"asset {asset.asset_id} is not on {info.scope.value}")
            return SendResult.failure(SendErrorCode.INVALID)
        if namespace not in SUPPORTED_NAMESPACES:
            logger.warning(f"unsupported asset namespace {namespace}")
            return SendResult.failure(SendErrorCode.INVALID)

        account = await self.accounts.find_by_id(from_account_id)
        if account is None:
            raise FeeError(ErrorCode.ACCOUNT_NOT_FOUND, f"account {from_account_id} not found")

        asset_ids = [
            asset.asset_id,
            info.native_token.asset_id,
            info.bandwidth.asset_id,
            info.energy.asset_id,
        ]
        balances = list(await self.balances.get_balances(account.id, asset_ids))
        balances += [None] * (len(asset_ids) - len(balances))
        asset_balance, native_balance, bandwidth_balance, energy_balance = balances[:4]

        if _ui(asset_balance) < amount_ui:
            logger.info(f"insufficient {asset.symbol}: have {_ui(asset_balance)}, need {amount_ui}")
            return SendResult.failure(SendErrorCode.INSUFFICIENT_BALANCE)

        transaction = self.builder.transfer(account.address, to_address, asset, amount_ui)
        breakdown = await self.fee_calculator.compute_fee(
            info.scope,
            transaction,
            available_energy=_units(energy_balance),
            available_bandwidth=_units(bandwidth_balance),
        )

        is_native = asset.asset_id == info.native_token.asset_id
        required = (amount_ui if is_native else Decimal(0)) + native_total(breakdown)
        if _ui(native_balance) < required:
            logger.info(f"insufficient TRX for fees: have {_ui(native_balance)}, need {required}")
            return SendResult.failure(SendErrorCode.INSUFFICIENT_BALANCE_TO_COVER_FEE)

        return SendResult.ok()
