"""Pytest hooks, fake collaborators and fixture generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest

from tron_fees.networks import Network, network_info
from tron_fees.scenario import FeeScenario, breakdown_to_list
from tron_fees.send.builder import TransactionBuilder
from tron_fees.test_accounts import fixed_clock
from tron_fees.types import Account, AssetBalance, ChainParameter, FeeBreakdown

_FEE_CASES: dict[str, list[dict[str, Any]]] = {}


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated fixtures",
    )


class FakeAccounts:
    def __init__(self, *accounts: Account):
        self.accounts = {a.id: a for a in accounts}

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)


class FakeBalances:
    """Balances keyed by asset id; records every lookup."""

    def __init__(self, balances: dict[str, AssetBalance]):
        self.balances = balances
        self.calls: list[tuple[str, list[str]]] = []

    async def get_balances(self, account_id: str, asset_ids: Sequence[str]) -> list[Optional[AssetBalance]]:
        self.calls.append((account_id, list(asset_ids)))
        return [self.balances.get(asset_id) for asset_id in asset_ids]


class FailingChainParameters:
    """Chain parameter fetch always fails; simulation reports no energy."""

    def __init__(self, exc: Optional[Exception] = None):
        self.exc = exc or ConnectionError("node unreachable")
        self.fetches = 0

    async def get_chain_parameters(self, scope: Any) -> list[ChainParameter]:
        self.fetches += 1
        raise self.exc

    async def trigger_constant_contract(self, scope: Any, request: Any) -> Any:
        raise self.exc


@pytest.fixture
def mainnet():
    return network_info(Network.MAINNET)


@pytest.fixture
def builder() -> TransactionBuilder:
    return TransactionBuilder(clock_ms=fixed_clock)


@pytest.fixture
def fee_vector() -> Callable[[str, FeeScenario, FeeBreakdown], None]:
    """Collect a computed breakdown under a fixture path."""

    def _fee_vector(rel_path: str, scenario: FeeScenario, breakdown: FeeBreakdown) -> None:
        _FEE_CASES.setdefault(rel_path, []).append(
            {
                "name": scenario.name,
                "network": scenario.network.value,
                "transaction": {
                    "raw_data_hex": scenario.transaction.raw_data_hex,
                    "contracts": [
                        {"type": c.type, "parameter": c.parameter}
                        for c in scenario.transaction.contracts
                    ],
                },
                "available": {
                    "energy": scenario.available_energy,
                    "bandwidth": scenario.available_bandwidth,
                },
                "chain_parameters": {p.key: p.value for p in scenario.chain_parameters},
                "simulation": {"energy_used": scenario.energy_used},
                "fee_limit": scenario.fee_limit,
                "expected": breakdown_to_list(breakdown),
            }
        )

    return _fee_vector


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir:
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for rel_path, cases in _FEE_CASES.items():
        if not cases:
            continue
        target = out / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps({"cases": cases}, indent=2))
