"""EVM mechanism constants - network chain ids, EIP-712 types, defaults."""

# Scheme identifier
SCHEME_EXACT = "exact"

# Only protocol version accepted by the verifier
X402_VERSION = 1

# Default token decimals for USDC
DEFAULT_DECIMALS = 6

# EIP-712 domain defaults when requirements.extra omits them
DEFAULT_DOMAIN_NAME = "USD Coin"
DEFAULT_DOMAIN_VERSION = "2"

# Seconds before now used for valid_after (clock skew)
DEFAULT_VALIDITY_BUFFER = 60

# Network name to chain ID mapping. Clients sign and facilitators verify against
# the same table; a mismatch makes every signature fail to recover.
NETWORK_CHAIN_IDS: dict[str, int] = {
    "base-sepolia": 84532,
    "base": 8453,
    "ethereum": 1,
    "sepolia": 11155111,
    "avalanche-fuji": 43113,
    "avalanche": 43114,
    "polygon": 137,
    "polygon-amoy": 80002,
}

# EIP-3009 typed data
PRIMARY_TYPE_TRANSFER_WITH_AUTHORIZATION = "TransferWithAuthorization"

TRANSFER_WITH_AUTHORIZATION_TYPES: dict[str, list[dict[str, str]]] = {
    "TransferWithAuthorization": [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "validAfter", "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce", "type": "bytes32"},
    ]
}
