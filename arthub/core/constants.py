"""Core constants: token units, settlement defaults, and network tables.

Single source of truth for chain ids and deployed contract addresses per
network. Settings may override any address; these are the defaults.
"""

from dataclasses import dataclass

# USDC uses 6 decimals on every supported network.
USDC_DECIMALS = 6
BPS_DENOMINATOR = 10_000

DEFAULT_TREASURY_FEE_BPS = 500  # 5%
DEFAULT_ROYALTY_BPS = 250  # 2.5%
DEFAULT_COLLECTION_SYMBOL = "CLCT"
SALE_TYPE_GALLERY_COLLECT = "gallery_collect"

# Lease / lock key layout (redis or in-process)
LOCK_PREFIX_SETTLEMENT = "settlement-lease"
LOCK_KEY_SEP = ":"


@dataclass(frozen=True)
class NetworkConfig:
    """Chain id, default RPC endpoint, and deployed contract addresses for a network."""

    name: str
    chain_id: int
    display_name: str
    default_rpc_url: str
    usdc_address: str
    factory_address: str


NETWORKS: dict[str, NetworkConfig] = {
    "base": NetworkConfig(
        name="base",
        chain_id=8453,
        display_name="Base",
        default_rpc_url="https://mainnet.base.org",
        usdc_address="0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        factory_address="0x8E8f86a2e5BCb6436474833764B3C68cEF89D18D",
    ),
    "base-sepolia": NetworkConfig(
        name="base-sepolia",
        chain_id=84532,
        display_name="Base Sepolia",
        default_rpc_url="https://sepolia.base.org",
        usdc_address="0x036CbD53842c5426634e7929541eC2318f3dCF7e",
        factory_address="0x87DfC71B55a41825fe8EAA8a8724D8982b92DeBe",
    ),
}
