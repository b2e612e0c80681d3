"""Bandwidth sizing from serialized transaction bytes."""

from __future__ import annotations

import logging

from ..config import BANDWIDTH_OVERHEAD_BYTES
from ..types import Transaction

logger = logging.getLogger(__name__)


def raw_data_size(raw_data_hex: str) -> int:
    hex_str = raw_data_hex[2:] if raw_data_hex[:2] in ("0x", "0X") else raw_data_hex
    try:
        return len(bytes.fromhex(hex_str))
    except ValueError:
        logger.warning(f"raw_data_hex is not valid hex, sizing from string length ({len(hex_str)} chars)")
        return len(hex_str) // 2


def calculate_bandwidth(transaction: Transaction) -> int:
    """Raw data bytes plus signature and protocol framing."""
    return raw_data_size(transaction.raw_data_hex) + BANDWIDTH_OVERHEAD_BYTES
