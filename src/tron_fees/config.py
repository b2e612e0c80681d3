"""Tron fee engine configuration constants.

Keep this file aligned with the java-tron defaults in
`chainbase/src/main/java/org/tron/core/store/DynamicPropertiesStore.java`.
"""

# Units
TRX_DECIMALS = 6
SUN_PER_TRX = 10**TRX_DECIMALS

# Chain parameter keys (wallet/getchainparameters)
BANDWIDTH_PRICE_KEY = "getTransactionFee"
ENERGY_PRICE_KEY = "getEnergyFee"

# Fallback prices when a key is missing from the chain parameters (sun per unit)
DEFAULT_BANDWIDTH_PRICE_SUN = 1000
DEFAULT_ENERGY_PRICE_SUN = 100

# Bandwidth sizing: one ECDSA signature plus protobuf framing of the signed tx
SIGNATURE_BYTES = 65
PROTOCOL_OVERHEAD_BYTES = 69
BANDWIDTH_OVERHEAD_BYTES = SIGNATURE_BYTES + PROTOCOL_OVERHEAD_BYTES  # 134

# Energy estimation
FALLBACK_ENERGY = 130_000
SELECTOR_HEX_LENGTH = 8
DEFAULT_FUNCTION_SIGNATURE = "transfer(address,uint256)"

# Transaction building
DEFAULT_FEE_LIMIT_SUN = 100 * SUN_PER_TRX
EXPIRATION_WINDOW_MS = 60_000
HEX_ADDRESS_PREFIX = "41"
HEX_ADDRESS_LENGTH = 42
BASE58_ADDRESS_LENGTH = 34

# Chain parameter cache lifetime when the next maintenance time is unknown
DEFAULT_CHAIN_PARAMETERS_TTL_SECONDS = 300
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
