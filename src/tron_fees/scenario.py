"""YAML fee scenarios shared by the CLI, the test vectors and the fixture tools.

A scenario document looks like::

    name: trc20-partial-energy
    network: tron:728126428
    transaction:
      raw_data_hex: 0a02...
      contracts:            # optional, decoded from raw_data_hex when absent
        - type: TriggerSmartContract
          parameter: {owner_address: 41..., contract_address: 41..., data: a9059cbb...}
    available: {energy: 30000, bandwidth: 1000000}
    chain_parameters: {getTransactionFee: 1000, getEnergyFee: 100}
    simulation: {energy_used: 50000}
    fee_limit: 100000000
    expected:
      - {resource: energy, amount: "30000"}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .clients.chain_parameters import StaticChainParameterSource
from .encoding import decode_contracts
from .errors import ErrorCode, FeeError
from .networks import Network, parse_network
from .types import ChainParameter, ContractInvocation, FeeBreakdown, Transaction


@dataclass
class FeeScenario:
    name: str
    network: Network
    transaction: Transaction
    available_energy: int = 0
    available_bandwidth: int = 0
    chain_parameters: list[ChainParameter] = field(default_factory=list)
    energy_used: Optional[int] = None
    fee_limit: Optional[int] = None
    expected: Optional[list[dict[str, Any]]] = None

    def static_source(self) -> StaticChainParameterSource:
        return StaticChainParameterSource(list(self.chain_parameters), self.energy_used)


def _transaction_from_dict(data: dict[str, Any]) -> Transaction:
    raw_data_hex = data.get("raw_data_hex")
    if not isinstance(raw_data_hex, str):
        raise FeeError(ErrorCode.INVALID_FORMAT, "transaction.raw_data_hex is required")
    if "contracts" in data:
        contracts = [
            ContractInvocation(type=c["type"], parameter=dict(c.get("parameter") or {}))
            for c in data["contracts"] or []
        ]
    else:
        contracts = decode_contracts(raw_data_hex)
    return Transaction(contracts=contracts, raw_data_hex=raw_data_hex, txid=data.get("txid"))


def scenario_from_dict(data: dict[str, Any], default_name: str = "scenario") -> FeeScenario:
    if not isinstance(data, dict) or "transaction" not in data:
        raise FeeError(ErrorCode.INVALID_FORMAT, "scenario must be a mapping with a transaction")
    available = data.get("available") or {}
    params = data.get("chain_parameters") or {}
    simulation = data.get("simulation") or {}
    return FeeScenario(
        name=str(data.get("name", default_name)),
        network=parse_network(data.get("network", Network.MAINNET.value)),
        transaction=_transaction_from_dict(data["transaction"]),
        available_energy=int(available.get("energy", 0)),
        available_bandwidth=int(available.get("bandwidth", 0)),
        chain_parameters=[ChainParameter(k, v) for k, v in params.items()],
        energy_used=simulation.get("energy_used"),
        fee_limit=data.get("fee_limit"),
        expected=data.get("expected"),
    )


def load_scenarios(path: Path) -> list[FeeScenario]:
    """Load every document of a (possibly multi-document) YAML file."""
    with open(path) as f:
        docs = [d for d in yaml.safe_load_all(f) if d is not None]
    return [scenario_from_dict(d, default_name=f"{path.stem}[{i}]") for i, d in enumerate(docs)]


def breakdown_to_list(breakdown: FeeBreakdown) -> list[dict[str, Any]]:
    return [c.to_dict() for c in breakdown]


def matches_expected(breakdown: FeeBreakdown, expected: list[dict[str, Any]]) -> bool:
    """Compare only the keys the expectation names, in order."""
    actual = breakdown_to_list(breakdown)
    if len(actual) != len(expected):
        return False
    return all(
        all(str(a.get(k)) == str(v) for k, v in e.items())
        for a, e in zip(actual, expected)
    )
