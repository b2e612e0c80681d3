"""Supported Tron networks and their fee-relevant asset metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import TRX_DECIMALS
from .errors import ErrorCode, FeeError

TRON_ICON_URL = (
    "https://raw.githubusercontent.com/trustwallet/assets/master/blockchains/tron/info/logo.png"
)


class Network(str, Enum):
    MAINNET = "tron:728126428"
    NILE = "tron:3448148188"
    SHASTA = "tron:2494104990"


@dataclass(frozen=True)
class AssetMetadata:
    asset_id: str
    symbol: str
    name: str
    decimals: int
    icon_url: str = TRON_ICON_URL


@dataclass(frozen=True)
class NetworkInfo:
    scope: Network
    name: str
    native_token: AssetMetadata
    energy: AssetMetadata
    bandwidth: AssetMetadata


def _network_info(scope: Network, name: str) -> NetworkInfo:
    prefix = scope.value
    return NetworkInfo(
        scope=scope,
        name=name,
        native_token=AssetMetadata(f"{prefix}/slip44:195", "TRX", "Tron", TRX_DECIMALS),
        energy=AssetMetadata(f"{prefix}/slip44:energy", "ENERGY", "Energy", 0),
        bandwidth=AssetMetadata(f"{prefix}/slip44:bandwidth", "BANDWIDTH", "Bandwidth", 0),
    )


NETWORKS: dict[Network, NetworkInfo] = {
    Network.MAINNET: _network_info(Network.MAINNET, "Tron Mainnet"),
    Network.NILE: _network_info(Network.NILE, "Tron Nile"),
    Network.SHASTA: _network_info(Network.SHASTA, "Tron Shasta"),
}


def parse_network(scope: object) -> Network:
    if isinstance(scope, Network):
        return scope
    try:
        return Network(str(scope))
    except ValueError:
        raise FeeError(ErrorCode.UNSUPPORTED_NETWORK, f"unsupported network: {scope}") from None


def network_info(scope: object) -> NetworkInfo:
    return NETWORKS[parse_network(scope)]


def parse_asset_id(asset_id: str) -> tuple[Network, str, str]:
    """Split a CAIP-19 id into (network, namespace, reference).

    `tron:728126428/trc20:TR7NHq...` -> (MAINNET, "trc20", "TR7NHq...")
    """
    chain, sep, asset = asset_id.partition("/")
    namespace, sep2, reference = asset.partition(":")
    if not sep or not sep2 or not namespace or not reference:
        raise FeeError(ErrorCode.UNSUPPORTED_ASSET, f"malformed asset id: {asset_id}")
    return parse_network(chain), namespace, reference
