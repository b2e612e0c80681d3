"""Known 4-byte function selectors.

The table is used to give the simulator a readable signature. Selectors that
are not listed are simulated as `transfer(address,uint256)`, which is an
approximation: a novel contract call can be simulated as the wrong function
and come back with a plausible but wrong energy figure.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ..config import DEFAULT_FUNCTION_SIGNATURE, SELECTOR_HEX_LENGTH

KNOWN_SELECTORS: Mapping[str, str] = MappingProxyType({
    # TRC20
    "a9059cbb": "transfer(address,uint256)",
    "095ea7b3": "approve(address,uint256)",
    "23b872dd": "transferFrom(address,address,uint256)",
    "70a08231": "balanceOf(address)",
    "dd62ed3e": "allowance(address,address)",
    "18160ddd": "totalSupply()",
    "313ce567": "decimals()",
    "95d89b41": "symbol()",
    "06fdde03": "name()",
    "39509351": "increaseAllowance(address,uint256)",
    "a457c2d7": "decreaseAllowance(address,uint256)",
    # mint / burn
    "40c10f19": "mint(address,uint256)",
    "42966c68": "burn(uint256)",
    "79cc6790": "burnFrom(address,uint256)",
    # wrapped TRX
    "d0e30db0": "deposit()",
    "2e1a7d4d": "withdraw(uint256)",
    # DEX routers
    "38ed1739": "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)",
    "8803dbee": "swapTokensForExactTokens(uint256,uint256,address[],address,uint256)",
    "7ff36ab5": "swapExactETHForTokens(uint256,address[],address,uint256)",
    "18cbafe5": "swapExactTokensForETH(uint256,uint256,address[],address,uint256)",
    "e8e33700": "addLiquidity(address,address,uint256,uint256,uint256,uint256,address,uint256)",
    "baa2abde": "removeLiquidity(address,address,uint256,uint256,uint256,address,uint256)",
    # staking / lending
    "a694fc3a": "stake(uint256)",
    "2e17de78": "unstake(uint256)",
    "3d18b912": "getReward()",
    "e9fad8ee": "exit()",
    "a0712d68": "mint(uint256)",
    "db006a75": "redeem(uint256)",
    "852a12e3": "redeemUnderlying(uint256)",
    "c5ebeaec": "borrow(uint256)",
    "0e752702": "repayBorrow(uint256)",
})


def split_call_data(data: str) -> tuple[str, str]:
    """`a9059cbb0000...` -> ("a9059cbb", "0000...")."""
    hex_str = data[2:] if data[:2] in ("0x", "0X") else data
    return hex_str[:SELECTOR_HEX_LENGTH].lower(), hex_str[SELECTOR_HEX_LENGTH:]


def lookup_signature(selector: str) -> Optional[str]:
    return KNOWN_SELECTORS.get(selector.lower())


def decode_selector(selector: str) -> str:
    return lookup_signature(selector) or DEFAULT_FUNCTION_SIGNATURE
