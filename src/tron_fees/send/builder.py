"""Offline construction of representative transfer transactions.

The result is never broadcast; it exists so bandwidth can be sized from real
`raw_data` bytes and energy can be simulated with a real call payload.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Callable, Optional

from ..amounts import to_raw_amount
from ..config import DEFAULT_FEE_LIMIT_SUN, EXPIRATION_WINDOW_MS, TRX_DECIMALS
from ..encoding import encode_raw_data, to_hex_address, transaction_id
from ..errors import ErrorCode, FeeError
from ..networks import parse_asset_id
from ..types import AssetRef, ContractInvocation, ContractType, Transaction

logger = logging.getLogger(__name__)

TRC20_TRANSFER_SELECTOR = "a9059cbb"

# Placeholder reference block; only its length matters for sizing.
REF_BLOCK_BYTES = bytes(2)
REF_BLOCK_HASH = bytes(8)


def _now_ms() -> int:
    return int(time.time() * 1000)


def encode_trc20_transfer(to_address: str, amount: int) -> str:
    """`transfer(address,uint256)` call data: selector + two 32-byte words."""
    if amount < 0 or amount >= 1 << 256:
        raise FeeError(ErrorCode.INVALID_AMOUNT, "amount does not fit in uint256")
    # ABI addresses drop the 0x41 network prefix
    address_word = to_hex_address(to_address)[2:].rjust(64, "0")
    return TRC20_TRANSFER_SELECTOR + address_word + format(amount, "064x")


class TransactionBuilder:
    def __init__(
        self,
        clock_ms: Callable[[], int] = _now_ms,
        fee_limit: int = DEFAULT_FEE_LIMIT_SUN,
    ):
        self.clock_ms = clock_ms
        self.fee_limit = fee_limit

    def _finish(self, contract: ContractInvocation, fee_limit: Optional[int] = None) -> Transaction:
        timestamp = self.clock_ms()
        raw = encode_raw_data(
            [contract],
            ref_block_bytes=REF_BLOCK_BYTES,
            ref_block_hash=REF_BLOCK_HASH,
            expiration=timestamp + EXPIRATION_WINDOW_MS,
            timestamp=timestamp,
            fee_limit=fee_limit,
        )
        return Transaction(contracts=[contract], raw_data_hex=raw.hex(), txid=transaction_id(raw))

    def native_transfer(self, from_address: str, to_address: str, amount_sun: int) -> Transaction:
        contract = ContractInvocation(
            type=ContractType.TRANSFER.value,
            parameter={
                "owner_address": to_hex_address(from_address),
                "to_address": to_hex_address(to_address),
                "amount": amount_sun,
            },
        )
        return self._finish(contract)

    def trc10_transfer(self, from_address: str, to_address: str, token_id: str, amount: int) -> Transaction:
        contract = ContractInvocation(
            type=ContractType.TRANSFER_ASSET.value,
            parameter={
                "asset_name": token_id,
                "owner_address": to_hex_address(from_address),
                "to_address": to_hex_address(to_address),
                "amount": amount,
            },
        )
        return self._finish(contract)

    def trc20_transfer(
        self, from_address: str, to_address: str, contract_address: str, amount: int
    ) -> Transaction:
        contract = ContractInvocation(
            type=ContractType.TRIGGER_SMART_CONTRACT.value,
            parameter={
                "owner_address": to_hex_address(from_address),
                "contract_address": to_hex_address(contract_address),
                "data": encode_trc20_transfer(to_address, amount),
            },
        )
        return self._finish(contract, fee_limit=self.fee_limit)

    def transfer(self, from_address: str, to_address: str, asset: AssetRef, amount: Decimal) -> Transaction:
        """Dispatch on the asset namespace; `amount` is in display units."""
        _, namespace, reference = parse_asset_id(asset.asset_id)
        if namespace == "slip44":
            logger.debug(f"building TRX transfer of {amount}")
            return self.native_transfer(from_address, to_address, to_raw_amount(amount, TRX_DECIMALS))
        if namespace == "trc10":
            logger.debug(f"building TRC10 {reference} transfer of {amount}")
            return self.trc10_transfer(
                from_address, to_address, reference, to_raw_amount(amount, asset.decimals)
            )
        if namespace == "trc20":
            logger.debug(f"building TRC20 {reference} transfer of {amount}")
            return self.trc20_transfer(
                from_address, to_address, reference, to_raw_amount(amount, asset.decimals)
            )
        raise FeeError(ErrorCode.UNSUPPORTED_ASSET, f"unsupported asset namespace: {namespace}")
