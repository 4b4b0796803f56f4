"""EVM mechanism: chain ids, EIP-712 helpers and signers."""

from .constants import (
    DEFAULT_DECIMALS,
    DEFAULT_DOMAIN_NAME,
    DEFAULT_DOMAIN_VERSION,
    NETWORK_CHAIN_IDS,
    SCHEME_EXACT,
    TRANSFER_WITH_AUTHORIZATION_TYPES,
    X402_VERSION,
)
from .types import ClientEvmSigner, TypedDataDomain
from .utils import (
    bytes_to_hex,
    create_nonce,
    format_amount,
    get_evm_chain_id,
    hex_to_bytes,
    is_supported_network,
    normalize_address,
    normalize_nonce,
)

__all__ = [
    "DEFAULT_DECIMALS",
    "DEFAULT_DOMAIN_NAME",
    "DEFAULT_DOMAIN_VERSION",
    "NETWORK_CHAIN_IDS",
    "SCHEME_EXACT",
    "TRANSFER_WITH_AUTHORIZATION_TYPES",
    "X402_VERSION",
    "ClientEvmSigner",
    "TypedDataDomain",
    "bytes_to_hex",
    "create_nonce",
    "format_amount",
    "get_evm_chain_id",
    "hex_to_bytes",
    "is_supported_network",
    "normalize_address",
    "normalize_nonce",
]
