"""Energy estimation for the contract invocations of a transaction."""

from __future__ import annotations

import logging
from typing import Any

from ..clients.chain_parameters import ChainParameterSource
from ..config import FALLBACK_ENERGY
from ..types import ContractInvocation, ContractType, Transaction, TriggerConstantContractRequest
from .selectors import decode_selector, lookup_signature, split_call_data

logger = logging.getLogger(__name__)


class EnergyEstimator:
    """Sums per-invocation energy; smart contract calls are simulated remotely.

    Estimation never fails: an unreachable simulator, a missing result or an
    unknown contract kind degrade to FALLBACK_ENERGY.
    """

    def __init__(self, source: ChainParameterSource):
        self.source = source

    async def calculate_energy(self, scope: Any, transaction: Transaction) -> int:
        if not transaction.contracts:
            logger.info("transaction has no contracts, energy is 0")
            return 0

        total = 0
        for invocation in transaction.contracts:
            total += await self._invocation_energy(scope, invocation)
        return total

    async def _invocation_energy(self, scope: Any, invocation: ContractInvocation) -> int:
        contract_type = invocation.contract_type
        if contract_type in (ContractType.TRANSFER, ContractType.TRANSFER_ASSET):
            return 0
        if contract_type == ContractType.TRIGGER_SMART_CONTRACT:
            return await self.estimate_smart_contract_energy(scope, invocation)
        logger.warning(f"unknown contract type {invocation.type}, assuming {FALLBACK_ENERGY} energy")
        return FALLBACK_ENERGY

    async def estimate_smart_contract_energy(self, scope: Any, invocation: ContractInvocation) -> int:
        params = invocation.parameter
        data = params.get("data")
        if not data:
            logger.warning(f"smart contract call without data, assuming {FALLBACK_ENERGY} energy")
            return FALLBACK_ENERGY

        try:
            selector, arguments = split_call_data(data)
            if lookup_signature(selector) is None:
                logger.info(f"unknown selector {selector}, simulating as transfer")
            call_value = params.get("call_value")
            request = TriggerConstantContractRequest(
                owner_address=params.get("owner_address", ""),
                contract_address=params.get("contract_address", ""),
                function_selector=decode_selector(selector),
                parameter=arguments,
                call_value=int(call_value) if call_value else None,
            )
            response = await self.source.trigger_constant_contract(scope, request)
        except Exception as e:
            logger.warning(f"energy simulation failed, assuming {FALLBACK_ENERGY} energy: {e}")
            return FALLBACK_ENERGY

        if response.energy_used is not None and response.energy_used > 0:
            logger.debug(f"simulated {request.function_selector}: {response.energy_used} energy")
            return int(response.energy_used)

        logger.warning(f"simulation returned no energy_used, assuming {FALLBACK_ENERGY} energy")
        return FALLBACK_ENERGY
