"""
Core system constants shared across all modules.

These define fundamental system behavior and rarely change.
Addresses are the Polygon mainnet deployments.
"""

# ============================================================================
# Contracts
# ============================================================================

GHST_CONTRACT_ADDRESS = '0x385Eeac5cB85A38A9a07A70c73e0a3271CfB54A7'
"""GHST ERC-20 token"""

CONTRACT_ADDRESS = '0x86935F11C86623deC8a25696E1C19a8659CbF95d'
"""Aavegotchi diamond, exposes batchTransferEscrow"""

POLYGON_CHAIN_ID = 137

# ============================================================================
# Precision
# ============================================================================

DEFAULT_TOKEN_DECIMALS = 18
"""GHST and most ERC-20 tokens use 18 decimals"""

MAX_TOKEN_DECIMALS = 77
"""10**77 is the largest power of ten that fits in a uint256"""

BALANCE_DISPLAY_PLACES = 2

# ============================================================================
# Withdrawal Form Options
# ============================================================================

TOKEN_OPTION_GHST = 'ghst'
TOKEN_OPTION_CUSTOM = 'custom'
SELECT_ALL = 'all'

# ============================================================================
# Display Defaults
# ============================================================================

ADDRESS_DISPLAY_CHARS = 8
"""format_address keeps '0x' plus the first six hex digits"""
