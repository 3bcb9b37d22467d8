"""Minimal ABIs of the contracts the settlement consumes.

Only the functions and events the service calls or decodes are listed.
"""

from typing import Any

ERC20_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "allowance",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "approve",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "transferFrom",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]

NFT_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "createCollection",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "symbol", "type": "string"},
            {"name": "baseURI", "type": "string"},
            {"name": "artist", "type": "address"},
            {"name": "royaltyBps", "type": "uint96"},
            {"name": "recipient", "type": "address"},
        ],
        "outputs": [
            {"name": "collection", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
    },
    {
        "type": "event",
        "name": "CollectionCreated",
        "anonymous": False,
        "inputs": [
            {"name": "collection", "type": "address", "indexed": True},
            {"name": "artist", "type": "address", "indexed": True},
            {"name": "recipient", "type": "address", "indexed": True},
            {"name": "tokenId", "type": "uint256", "indexed": False},
        ],
    },
]

ABIS: dict[str, list[dict[str, Any]]] = {
    "erc20": ERC20_ABI,
    "factory": NFT_FACTORY_ABI,
}
