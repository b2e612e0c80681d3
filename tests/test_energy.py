"""Energy estimation and simulation fallbacks."""

from __future__ import annotations

import asyncio

from tron_fees.clients.chain_parameters import StaticChainParameterSource
from tron_fees.config import FALLBACK_ENERGY
from tron_fees.fees.energy import EnergyEstimator
from tron_fees.networks import Network
from tron_fees.send.builder import encode_trc20_transfer
from tron_fees.test_accounts import ALICE, BOB, USDT_CONTRACT
from tron_fees.types import ContractInvocation, Transaction

from conftest import FailingChainParameters

SCOPE = Network.MAINNET


def _call(data: str = None, **extra) -> ContractInvocation:
    parameter = {"owner_address": ALICE, "contract_address": USDT_CONTRACT}
    if data is not None:
        parameter["data"] = data
    parameter.update(extra)
    return ContractInvocation("TriggerSmartContract", parameter)


def _energy(source, *contracts: ContractInvocation) -> int:
    tx = Transaction(contracts=list(contracts), raw_data_hex="")
    return asyncio.run(EnergyEstimator(source).calculate_energy(SCOPE, tx))


def test_transfers_cost_no_energy() -> None:
    source = StaticChainParameterSource(energy_used=99)
    native = ContractInvocation("TransferContract", {"amount": 1})
    trc10 = ContractInvocation("TransferAssetContract", {"asset_name": "1002000"})
    assert _energy(source, native, trc10) == 0
    assert source.requests == []


def test_no_contracts_is_zero(caplog) -> None:
    caplog.set_level("INFO")
    assert _energy(StaticChainParameterSource()) == 0
    assert "no contracts" in caplog.text


def test_simulated_energy_returned_verbatim() -> None:
    source = StaticChainParameterSource(energy_used=29_631)
    data = encode_trc20_transfer(BOB, 10)
    assert _energy(source, _call(data)) == 29_631

    (request,) = source.requests
    assert request.function_selector == "transfer(address,uint256)"
    assert request.parameter == data[8:]
    assert request.owner_address == ALICE
    assert request.contract_address == USDT_CONTRACT
    assert request.call_value is None


def test_call_value_forwarded() -> None:
    source = StaticChainParameterSource(energy_used=1)
    _energy(source, _call("d0e30db0", call_value=5_000_000))
    assert source.requests[0].function_selector == "deposit()"
    assert source.requests[0].call_value == 5_000_000


def test_unknown_selector_simulated_as_transfer() -> None:
    source = StaticChainParameterSource(energy_used=40_000)
    assert _energy(source, _call("deadbeef" + "00" * 32)) == 40_000
    assert source.requests[0].function_selector == "transfer(address,uint256)"


def test_fallbacks() -> None:
    assert _energy(StaticChainParameterSource(energy_used=50_000), _call()) == FALLBACK_ENERGY
    assert _energy(StaticChainParameterSource(energy_used=None), _call("a9059cbb")) == FALLBACK_ENERGY
    assert _energy(StaticChainParameterSource(energy_used=0), _call("a9059cbb")) == FALLBACK_ENERGY
    assert _energy(FailingChainParameters(), _call("a9059cbb")) == FALLBACK_ENERGY


def test_unknown_contract_kind_is_conservative(caplog) -> None:
    other = ContractInvocation("FreezeBalanceV2Contract", {})
    assert _energy(StaticChainParameterSource(), other) == FALLBACK_ENERGY
    assert "unknown contract type" in caplog.text


def test_energy_sums_over_invocations() -> None:
    source = StaticChainParameterSource(energy_used=10_000)
    native = ContractInvocation("TransferContract", {"amount": 1})
    assert _energy(source, _call("a9059cbb"), native, _call("095ea7b3")) == 20_000


def test_estimate_is_deterministic() -> None:
    source = StaticChainParameterSource(energy_used=12_345)
    assert _energy(source, _call("a9059cbb")) == _energy(source, _call("a9059cbb"))


def test_malformed_call_parameters_fall_back(caplog) -> None:
    source = StaticChainParameterSource(energy_used=29_631)
    assert _energy(source, _call(12345)) == FALLBACK_ENERGY
    assert _energy(source, _call("a9059cbb", call_value="0x10")) == FALLBACK_ENERGY
    assert _energy(source, _call("a9059cbb", call_value="ten")) == FALLBACK_ENERGY
    assert source.requests == []
    assert "energy simulation failed" in caplog.text
