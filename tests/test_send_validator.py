"""Send affordability checks."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from tron_fees.clients.chain_parameters import StaticChainParameterSource
from tron_fees.errors import ErrorCode, FeeError, SendErrorCode
from tron_fees.fees.calculator import FeeCalculator
from tron_fees.networks import Network, network_info
from tron_fees.send.builder import TransactionBuilder
from tron_fees.send.validator import SendValidator
from tron_fees.test_accounts import ALICE, BOB, USDT_CONTRACT, fixed_clock
from tron_fees.types import Account, AssetBalance, AssetRef, SendResult

from conftest import FailingChainParameters, FakeAccounts, FakeBalances

SCOPE = Network.MAINNET
INFO = network_info(SCOPE)
ACCOUNT_ID = "550e8400-e29b-41d4-a716-446655440000"

TRX = AssetRef(INFO.native_token.asset_id, "TRX", 6)
USDT = AssetRef(f"{SCOPE.value}/trc20:{USDT_CONTRACT}", "USDT", 6)
TRC10 = AssetRef(f"{SCOPE.value}/trc10:1002000", "BTT", 6)


def _balances(asset: AssetRef = None, asset_ui: str = "0", trx: str = "0", bandwidth: int = 0, energy: int = 0):
    out = {
        INFO.native_token.asset_id: AssetBalance(INFO.native_token.asset_id, int(Decimal(trx) * 10**6), 6),
        INFO.bandwidth.asset_id: AssetBalance(INFO.bandwidth.asset_id, bandwidth),
        INFO.energy.asset_id: AssetBalance(INFO.energy.asset_id, energy),
    }
    if asset is not None and asset != TRX:
        out[asset.asset_id] = AssetBalance(asset.asset_id, int(Decimal(asset_ui) * 10**asset.decimals), asset.decimals)
    return FakeBalances(out)


def _validator(balances, source=None, energy_used: int = 65_000) -> SendValidator:
    source = source or StaticChainParameterSource(energy_used=energy_used)
    return SendValidator(
        FakeAccounts(Account(ACCOUNT_ID, ALICE)),
        balances,
        FeeCalculator(source),
        TransactionBuilder(clock_ms=fixed_clock),
    )


def _validate(validator: SendValidator, asset: AssetRef, amount, to_address: str = BOB) -> SendResult:
    return asyncio.run(validator.validate_send(SCOPE, ACCOUNT_ID, to_address, asset, amount))


def test_native_send_with_free_bandwidth() -> None:
    result = _validate(_validator(_balances(trx="2", bandwidth=600)), TRX, "1.5")
    assert result == SendResult.ok()


def test_balances_fetched_in_order() -> None:
    balances = _balances(USDT, asset_ui="5", trx="100")
    _validate(_validator(balances), USDT, "1")
    assert balances.calls == [
        (
            ACCOUNT_ID,
            [USDT.asset_id, INFO.native_token.asset_id, INFO.bandwidth.asset_id, INFO.energy.asset_id],
        )
    ]


def test_insufficient_asset_short_circuits() -> None:
    failing = FailingChainParameters()
    result = _validate(_validator(_balances(trx="1"), source=failing), TRX, "2")
    assert result == SendResult.failure(SendErrorCode.INSUFFICIENT_BALANCE)
    assert failing.fetches == 0


def test_native_amount_plus_fee_exceeds_balance() -> None:
    # no bandwidth: the whole transfer is paid in TRX (~0.267)
    result = _validate(_validator(_balances(trx="2")), TRX, "2")
    assert result == SendResult.failure(SendErrorCode.INSUFFICIENT_BALANCE_TO_COVER_FEE)


def test_native_exact_balance_minus_fee() -> None:
    # 133 raw bytes + 134 overhead = 267 bandwidth at 1000 sun
    result = _validate(_validator(_balances(trx="2")), TRX, "1.733")
    assert result.valid
    result = _validate(_validator(_balances(trx="2")), TRX, "1.733001")
    assert result.error_code == SendErrorCode.INSUFFICIENT_BALANCE_TO_COVER_FEE


def test_token_send_needs_trx_for_energy() -> None:
    balances = _balances(USDT, asset_ui="10", trx="1", bandwidth=1_000, energy=0)
    result = _validate(_validator(balances, energy_used=65_000), USDT, "10")
    # 65000 energy * 100 sun = 6.5 TRX
    assert result.error_code == SendErrorCode.INSUFFICIENT_BALANCE_TO_COVER_FEE

    balances = _balances(USDT, asset_ui="10", trx="6.5", bandwidth=1_000, energy=0)
    assert _validate(_validator(balances, energy_used=65_000), USDT, "10").valid


def test_token_send_covered_by_resources() -> None:
    balances = _balances(USDT, asset_ui="10", trx="0", bandwidth=1_000, energy=65_000)
    assert _validate(_validator(balances, energy_used=65_000), USDT, "10").valid


def test_trc20_transfer_simulates_transfer_to_recipient() -> None:
    source = StaticChainParameterSource(energy_used=30_000)
    balances = _balances(USDT, asset_ui="10", trx="100")
    _validate(_validator(balances, source=source), USDT, "2.5")
    (request,) = source.requests
    assert request.function_selector == "transfer(address,uint256)"
    assert request.parameter == "0" * 24 + "b2" * 20 + format(2_500_000, "064x")


def test_trc10_send() -> None:
    balances = _balances(TRC10, asset_ui="3", trx="0", bandwidth=1_000)
    assert _validate(_validator(balances), TRC10, "3").valid


def test_missing_balances_count_as_zero() -> None:
    result = _validate(_validator(FakeBalances({})), USDT, "1")
    assert result.error_code == SendErrorCode.INSUFFICIENT_BALANCE


def test_zero_amount_only_needs_fees() -> None:
    assert _validate(_validator(_balances(trx="1")), TRX, "0").valid


@pytest.mark.parametrize(
    "amount, to_address, code",
    [
        (None, BOB, SendErrorCode.REQUIRED),
        ("", BOB, SendErrorCode.REQUIRED),
        ("1", "", SendErrorCode.REQUIRED),
        ("-1", BOB, SendErrorCode.INVALID),
        ("abc", BOB, SendErrorCode.INVALID),
        ("1", "T-not-an-address", SendErrorCode.INVALID),
    ],
)
def test_form_errors(amount, to_address, code) -> None:
    result = _validate(_validator(_balances(trx="100")), TRX, amount, to_address)
    assert result == SendResult.failure(code)


def test_unsupported_namespace_is_invalid() -> None:
    nft = AssetRef(f"{SCOPE.value}/trc721:{USDT_CONTRACT}", "NFT", 0)
    assert _validate(_validator(_balances(trx="100")), nft, "1").error_code == SendErrorCode.INVALID


def test_asset_from_another_network_is_invalid() -> None:
    nile_trx = AssetRef(network_info(Network.NILE).native_token.asset_id, "TRX", 6)
    balances = _balances(trx="5")
    assert _validate(_validator(balances), nile_trx, "5") == SendResult.failure(SendErrorCode.INVALID)
    assert balances.calls == []


def test_unknown_account_raises() -> None:
    validator = SendValidator(FakeAccounts(), FakeBalances({}), FeeCalculator(StaticChainParameterSource()))
    with pytest.raises(FeeError) as exc:
        asyncio.run(validator.validate_send(SCOPE, "missing", BOB, TRX, "1"))
    assert exc.value.code == ErrorCode.ACCOUNT_NOT_FOUND


def test_dependency_failure_propagates() -> None:
    validator = _validator(_balances(trx="100"), source=FailingChainParameters())
    with pytest.raises(FeeError) as exc:
        asyncio.run(validator.validate_send(SCOPE, ACCOUNT_ID, BOB, TRX, "1"))
    assert exc.value.code == ErrorCode.DEPENDENCY_UNAVAILABLE
