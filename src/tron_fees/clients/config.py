"""
Configuration for the Tron HTTP clients.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS, DEFAULT_HTTP_TIMEOUT_SECONDS
from ..networks import Network

DEFAULT_URLS = {
    Network.MAINNET: "https://api.trongrid.io",
    Network.NILE: "https://nile.trongrid.io",
    Network.SHASTA: "https://api.shasta.trongrid.io",
}

_URL_ENV = {
    Network.MAINNET: "TRON_HTTP_URL_MAINNET",
    Network.NILE: "TRON_HTTP_URL_NILE",
    Network.SHASTA: "TRON_HTTP_URL_SHASTA",
}

API_KEY_HEADER = "TRON-PRO-API-KEY"


@dataclass
class NetworkEndpoint:
    """Full-node HTTP endpoint for a single network."""
    network: Network
    base_url: str
    enabled: bool = True


@dataclass
class ClientSettings:
    """Settings shared by the HTTP client and the chain parameter cache."""
    endpoints: Dict[Network, NetworkEndpoint] = field(default_factory=dict)
    api_key: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    chain_parameters_ttl: float = DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS
    verbose: bool = False

    @classmethod
    def defaults(cls) -> "ClientSettings":
        return cls(
            endpoints={
                network: NetworkEndpoint(network=network, base_url=url)
                for network, url in DEFAULT_URLS.items()
            }
        )

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Load settings from environment variables."""
        settings = cls.defaults()

        for network, var in _URL_ENV.items():
            url = os.environ.get(var)
            if url:
                settings.endpoints[network] = NetworkEndpoint(
                    network=network, base_url=url.rstrip("/")
                )

        settings.api_key = os.environ.get("TRON_API_KEY") or None
        settings.timeout = float(
            os.environ.get("TRON_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS)
        )
        settings.chain_parameters_ttl = float(
            os.environ.get("TRON_CHAIN_PARAMETERS_TTL", DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS)
        )
        settings.verbose = os.environ.get("TRON_FEES_VERBOSE", "").lower() in ("true", "1", "yes")

        return settings

    def endpoint_for(self, network: Network) -> Optional[NetworkEndpoint]:
        endpoint = self.endpoints.get(network)
        if endpoint is None or not endpoint.enabled:
            return None
        return endpoint

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers[API_KEY_HEADER] = self.api_key
        return headers
