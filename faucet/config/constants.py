"""
Application constants.

Centralized constants for chain clients.
"""

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

# Blockchain operation timeouts (in seconds)
BLOCKCHAIN_TIMEOUT = 30.0  # Single RPC round trip (balance, transfer submission)
BLOCKCHAIN_RPC_TIMEOUT = 30  # HTTP provider timeout
BLOCKCHAIN_CONNECT_TIMEOUT = 15.0  # Reachability check at client construction
BLOCKCHAIN_EXECUTOR_WORKERS = 4  # Thread pool size for sync Web3 calls

# Confirmation polling
CONFIRMATION_POLL_INTERVAL = 5.0  # Fixed interval between receipt lookups

# ========================================================================
# TOKEN UNITS
# ========================================================================

DEFAULT_TOKEN_DECIMALS = 18

# Cairo uint256 is encoded as two 128-bit words (low, high)
UINT128_BITS = 128
UINT128_MAX = (1 << UINT128_BITS) - 1
UINT256_MAX = (1 << 256) - 1

# ========================================================================
# GAS (EVM)
# ========================================================================

DEFAULT_NATIVE_GAS_LIMIT = 21000  # Standard native ETH transfer
GAS_LIMIT_MULTIPLIER = 1.2  # Safety buffer for gas estimation
