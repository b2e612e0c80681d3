"""Fee breakdown for a pending transaction.

Bandwidth is all-or-nothing: if the account cannot cover the whole
transaction from its bandwidth, nothing is consumed and every byte is paid
for in TRX. Energy is consumed partially and only the shortfall is burned.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

from ..amounts import format_trx, format_units
from ..clients.chain_parameters import ChainParameterSource
from ..config import (
    BANDWIDTH_PRICE_KEY,
    DEFAULT_BANDWIDTH_PRICE_SUN,
    DEFAULT_ENERGY_PRICE_SUN,
    ENERGY_PRICE_KEY,
    SUN_PER_TRX,
)
from ..errors import ErrorCode, FeeError
from ..networks import NetworkInfo, network_info
from ..types import ChainParameter, FeeBreakdown, FeeComponent, ResourceKind, Transaction
from .bandwidth import calculate_bandwidth
from .energy import EnergyEstimator

logger = logging.getLogger(__name__)


def parameter_value(params: list[ChainParameter], key: str, default: int) -> int:
    """Value of `key`; a missing or non-integer entry yields `default`."""
    for p in params:
        if p.key == key and p.value is not None:
            try:
                return int(p.value)
            except (TypeError, ValueError):
                logger.warning(f"chain parameter {key} has non-integer value {p.value!r}, using {default}")
                return default
    logger.debug(f"chain parameter {key} missing, using {default}")
    return default


def native_total(breakdown: FeeBreakdown) -> Decimal:
    """Sum of the NativeCurrency components, in TRX."""
    return sum(
        (Decimal(c.amount) for c in breakdown if c.resource == ResourceKind.NATIVE_CURRENCY),
        Decimal(0),
    )


def _component(resource: ResourceKind, amount: str, info: NetworkInfo) -> FeeComponent:
    asset = {
        ResourceKind.ENERGY: info.energy,
        ResourceKind.BANDWIDTH: info.bandwidth,
        ResourceKind.NATIVE_CURRENCY: info.native_token,
    }[resource]
    return FeeComponent(resource, amount, asset.symbol, asset.asset_id, asset.icon_url)


class FeeCalculator:
    def __init__(self, source: ChainParameterSource, energy_estimator: Optional[EnergyEstimator] = None):
        self.source = source
        self.energy_estimator = energy_estimator or EnergyEstimator(source)

    async def compute_fee(
        self,
        scope: Any,
        transaction: Transaction,
        available_energy: int,
        available_bandwidth: int,
        fee_limit: Optional[int] = None,
    ) -> FeeBreakdown:
        info = network_info(scope)
        if available_energy < 0 or available_bandwidth < 0:
            raise FeeError(ErrorCode.INVALID_AMOUNT, "available resources must be non-negative")

        bandwidth_needed = calculate_bandwidth(transaction)
        energy_needed = await self.energy_estimator.calculate_energy(info.scope, transaction)

        if available_bandwidth >= bandwidth_needed:
            bandwidth_consumed, bandwidth_overage = bandwidth_needed, 0
        else:
            bandwidth_consumed, bandwidth_overage = 0, bandwidth_needed
        energy_consumed = min(energy_needed, available_energy)
        energy_overage = max(energy_needed - available_energy, 0)

        logger.debug(
            f"bandwidth {bandwidth_needed} (overage {bandwidth_overage}), "
            f"energy {energy_needed} (overage {energy_overage})"
        )

        cost_trx = Decimal(0)
        if bandwidth_overage > 0 or energy_overage > 0:
            try:
                params = await self.source.get_chain_parameters(info.scope)
            except Exception as e:
                logger.error(f"chain parameters unavailable for {info.scope.value}: {e}")
                raise FeeError(ErrorCode.DEPENDENCY_UNAVAILABLE, f"chain parameters unavailable: {e}") from e

            bandwidth_price = parameter_value(params, BANDWIDTH_PRICE_KEY, DEFAULT_BANDWIDTH_PRICE_SUN)
            energy_price = parameter_value(params, ENERGY_PRICE_KEY, DEFAULT_ENERGY_PRICE_SUN)
            cost_sun = bandwidth_overage * bandwidth_price + energy_overage * energy_price
            cost_trx = Decimal(cost_sun) / SUN_PER_TRX

            if fee_limit is not None and cost_sun > fee_limit:
                logger.warning(f"estimated burn {cost_sun} sun exceeds fee limit {fee_limit} sun")

        breakdown: FeeBreakdown = []
        if energy_consumed > 0:
            breakdown.append(_component(ResourceKind.ENERGY, format_units(energy_consumed), info))
        if bandwidth_consumed > 0:
            breakdown.append(_component(ResourceKind.BANDWIDTH, format_units(bandwidth_consumed), info))
        if cost_trx > 0:
            breakdown.append(_component(ResourceKind.NATIVE_CURRENCY, format_trx(cost_trx), info))
        return breakdown
