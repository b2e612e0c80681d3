"""Chain parameter sources: the collaborator protocol, a caching wrapper and a static source."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

from ..cache import Cache, InMemoryCache
from ..config import DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS
from ..networks import parse_network
from ..types import ChainParameter, TriggerConstantContractRequest, TriggerConstantContractResponse

logger = logging.getLogger(__name__)


class ChainParameterSource(Protocol):
    async def get_chain_parameters(self, scope: Any) -> list[ChainParameter]: ...

    async def trigger_constant_contract(
        self, scope: Any, request: TriggerConstantContractRequest
    ) -> TriggerConstantContractResponse: ...


def cache_key(scope: Any) -> str:
    return f"chain_parameters:{parse_network(scope).value}"


class CachedChainParameterSource:
    """Caches chain parameters per network until the next maintenance period.

    Prices only change at maintenance boundaries, so the cache entry lives
    until the chain's reported next maintenance time. When that time is
    unavailable or already past, `ttl_seconds` is used instead.
    """

    def __init__(
        self,
        client: ChainParameterSource,
        cache: Optional[Cache] = None,
        ttl_seconds: float = DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS,
        wall_clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.cache = cache if cache is not None else InMemoryCache()
        self.ttl_seconds = ttl_seconds
        self.wall_clock = wall_clock

    async def get_chain_parameters(self, scope: Any) -> list[ChainParameter]:
        key = cache_key(scope)
        try:
            cached = await self.cache.get(key)
        except Exception as e:
            logger.warning(f"cache read failed for {key}: {e}")
            cached = None
        if cached is not None:
            logger.debug(f"chain parameters cache hit for {key}")
            return cached

        params = await self.client.get_chain_parameters(scope)
        ttl = await self._ttl_until_maintenance(scope)
        try:
            await self.cache.set(key, params, ttl)
        except Exception as e:
            logger.warning(f"cache write failed for {key}: {e}")
        return params

    async def trigger_constant_contract(
        self, scope: Any, request: TriggerConstantContractRequest
    ) -> TriggerConstantContractResponse:
        return await self.client.trigger_constant_contract(scope, request)

    async def invalidate(self, scope: Any) -> None:
        await self.cache.delete(cache_key(scope))

    async def _ttl_until_maintenance(self, scope: Any) -> float:
        get_next = getattr(self.client, "get_next_maintenance_time", None)
        if get_next is None:
            return self.ttl_seconds
        try:
            next_ms = await get_next(scope)
        except Exception as e:
            logger.warning(f"next maintenance time unavailable, using {self.ttl_seconds}s ttl: {e}")
            return self.ttl_seconds
        remaining = next_ms / 1000 - self.wall_clock()
        if remaining <= 0:
            return self.ttl_seconds
        return remaining


@dataclass
class StaticChainParameterSource:
    """Fixed parameters and simulation results; no network access."""

    parameters: list[ChainParameter] = field(default_factory=list)
    energy_used: Optional[int] = None
    simulation_error: Optional[Exception] = None
    requests: list[TriggerConstantContractRequest] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, prices: dict[str, int], energy_used: Optional[int] = None) -> "StaticChainParameterSource":
        return cls([ChainParameter(k, v) for k, v in prices.items()], energy_used)

    async def get_chain_parameters(self, scope: Any) -> list[ChainParameter]:
        parse_network(scope)
        return list(self.parameters)

    async def trigger_constant_contract(
        self, scope: Any, request: TriggerConstantContractRequest
    ) -> TriggerConstantContractResponse:
        self.requests.append(request)
        if self.simulation_error is not None:
            raise self.simulation_error
        return TriggerConstantContractResponse(energy_used=self.energy_used, result=self.energy_used is not None)
