"""
HTTP client for the Tron full-node `/wallet/*` API.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import aiohttp

from ..encoding import is_base58_address, to_base58_address
from ..errors import ErrorCode, FeeError
from ..networks import parse_network
from ..types import (
    AccountResources,
    ChainParameter,
    TriggerConstantContractRequest,
    TriggerConstantContractResponse,
)
from .config import ClientSettings

logger = logging.getLogger(__name__)


class TronHttpClient:
    """One session shared across networks; the base URL is picked per scope."""

    def __init__(self, settings: ClientSettings):
        self.settings = settings
        self.session: Optional[aiohttp.ClientSession] = None

    async def connect(self) -> None:
        """Initialize HTTP session."""
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
        self.session = aiohttp.ClientSession(timeout=timeout, headers=self.settings.headers())

    async def close(self) -> None:
        """Close HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def __aenter__(self) -> "TronHttpClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _base_url(self, scope: Any) -> str:
        network = parse_network(scope)
        endpoint = self.settings.endpoint_for(network)
        if endpoint is None:
            raise FeeError(ErrorCode.UNSUPPORTED_NETWORK, f"no endpoint configured for {network.value}")
        return endpoint.base_url

    async def _post(self, scope: Any, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._base_url(scope)}{path}"
        if self.session is None:
            await self.connect()
        logger.debug(f"POST {url} {body}")
        try:
            async with self.session.post(url, json=body) as resp:
                if resp.status < 200 or resp.status >= 300:
                    text = await resp.text()
                    raise FeeError(ErrorCode.HTTP_ERROR, f"{path} returned {resp.status}: {text[:200]}")
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{path} request failed: {e}")
            raise FeeError(ErrorCode.HTTP_ERROR, f"{path} request failed: {e}") from e

    async def get_chain_parameters(self, scope: Any) -> List[ChainParameter]:
        data = await self._post(scope, "/wallet/getchainparameters", {})
        raw = data.get("chainParameter") or []
        if not raw:
            logger.warning("getchainparameters returned no parameters")
        return [ChainParameter(key=p["key"], value=p.get("value")) for p in raw]

    async def get_next_maintenance_time(self, scope: Any) -> int:
        """Next maintenance time in milliseconds since the epoch."""
        data = await self._post(scope, "/wallet/getnextmaintenancetime", {})
        return int(data.get("num", 0))

    async def trigger_constant_contract(
        self, scope: Any, request: TriggerConstantContractRequest
    ) -> TriggerConstantContractResponse:
        body = {k: v for k, v in asdict(request).items() if v is not None}
        # visible=true makes the node read every address as base58
        for key in ("owner_address", "contract_address"):
            if body.get(key):
                body[key] = to_base58_address(body[key])
        body["visible"] = True
        data = await self._post(scope, "/wallet/triggerconstantcontract", body)
        result = data.get("result") or {}
        return TriggerConstantContractResponse(
            energy_used=data.get("energy_used"),
            result=bool(result.get("result", False)),
            message=result.get("message"),
            constant_result=list(data.get("constant_result") or []),
        )

    async def get_account_resources(self, scope: Any, address: str) -> AccountResources:
        body = {"address": address, "visible": is_base58_address(address)}
        data = await self._post(scope, "/wallet/getaccountresource", body)
        return AccountResources.from_account_resource(data)
