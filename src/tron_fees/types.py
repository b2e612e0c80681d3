"""Core types for the Tron fee engine.

Only the surface the fee engine reads is modelled here: contract
invocations, the serialized raw data used for bandwidth sizing, account
resources, chain parameters and the resulting fee components.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from .errors import SendErrorCode


class ContractType(str, Enum):
    TRANSFER = "TransferContract"
    TRANSFER_ASSET = "TransferAssetContract"
    TRIGGER_SMART_CONTRACT = "TriggerSmartContract"


# Protobuf `Transaction.Contract.ContractType` numbers
CONTRACT_TYPE_IDS = {
    ContractType.TRANSFER: 1,
    ContractType.TRANSFER_ASSET: 2,
    ContractType.TRIGGER_SMART_CONTRACT: 31,
}


class ResourceKind(str, Enum):
    ENERGY = "energy"
    BANDWIDTH = "bandwidth"
    NATIVE_CURRENCY = "native_currency"


@dataclass
class ContractInvocation:
    type: str
    parameter: dict[str, Any] = field(default_factory=dict)

    @property
    def contract_type(self) -> Optional[ContractType]:
        try:
            return ContractType(self.type)
        except ValueError:
            return None


@dataclass
class Transaction:
    contracts: list[ContractInvocation]
    raw_data_hex: str
    txid: Optional[str] = None


@dataclass
class AccountResources:
    available_energy: int = 0
    available_bandwidth: int = 0

    @classmethod
    def from_account_resource(cls, data: dict[str, Any]) -> "AccountResources":
        """Derive free resources from a `wallet/getaccountresource` response."""
        free_net = int(data.get("freeNetLimit", 0)) - int(data.get("freeNetUsed", 0))
        staked_net = int(data.get("NetLimit", 0)) - int(data.get("NetUsed", 0))
        energy = int(data.get("EnergyLimit", 0)) - int(data.get("EnergyUsed", 0))
        return cls(
            available_energy=max(energy, 0),
            available_bandwidth=max(free_net, 0) + max(staked_net, 0),
        )


@dataclass(frozen=True)
class ChainParameter:
    key: str
    value: Optional[int] = None


@dataclass(frozen=True)
class FeeComponent:
    resource: ResourceKind
    amount: str
    unit: str
    asset_id: str
    icon_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "resource": self.resource.value,
            "amount": self.amount,
            "unit": self.unit,
            "asset_id": self.asset_id,
        }
        if self.icon_url is not None:
            out["icon_url"] = self.icon_url
        return out


FeeBreakdown = list[FeeComponent]


@dataclass(frozen=True)
class TriggerConstantContractRequest:
    owner_address: str
    contract_address: str
    function_selector: str
    parameter: str = ""
    call_value: Optional[int] = None


@dataclass
class TriggerConstantContractResponse:
    energy_used: Optional[int] = None
    result: bool = False
    message: Optional[str] = None
    constant_result: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AssetRef:
    """The asset a user asked to send."""

    asset_id: str
    symbol: str
    decimals: int


@dataclass
class AssetBalance:
    asset_id: str
    raw_amount: int
    decimals: int = 0

    @property
    def ui_amount(self) -> Decimal:
        return Decimal(self.raw_amount).scaleb(-self.decimals)


@dataclass
class Account:
    id: str
    address: str


@dataclass(frozen=True)
class SendResult:
    valid: bool
    error_code: Optional[SendErrorCode] = None

    @classmethod
    def ok(cls) -> "SendResult":
        return cls(True, None)

    @classmethod
    def failure(cls, code: SendErrorCode) -> "SendResult":
        return cls(False, code)
