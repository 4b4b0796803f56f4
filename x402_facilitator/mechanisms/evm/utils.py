"""EVM utility functions for chain id, address, amount, and nonce handling."""

import os

from eth_utils import to_checksum_address

from ...schemas.errors import UnsupportedNetworkError
from .constants import NETWORK_CHAIN_IDS


def get_evm_chain_id(network: str) -> int:
    """Resolve the chain ID for a network name or CAIP-2 identifier.

    Accepts names from NETWORK_CHAIN_IDS (e.g., "base-sepolia") and
    "eip155:CHAIN_ID" identifiers.

    Args:
        network: Network identifier.

    Returns:
        Numeric chain ID.

    Raises:
        UnsupportedNetworkError: If the network is unknown. There is no
            fallback chain.
    """
    if network in NETWORK_CHAIN_IDS:
        return NETWORK_CHAIN_IDS[network]

    if network.startswith("eip155:"):
        try:
            chain_id = int(network.split(":")[1])
        except (IndexError, ValueError) as e:
            raise UnsupportedNetworkError(network) from e
        if chain_id > 0:
            return chain_id

    raise UnsupportedNetworkError(network)


def is_supported_network(network: str) -> bool:
    """Check if a chain ID can be resolved for the network."""
    try:
        get_evm_chain_id(network)
        return True
    except UnsupportedNetworkError:
        return False


def create_nonce() -> str:
    """Generate random 32-byte nonce as hex string (0x...).

    Returns:
        Hex string with 0x prefix.
    """
    return "0x" + os.urandom(32).hex()


def normalize_nonce(nonce: str) -> str:
    """Canonical form of a bytes32 nonce: lower-case with 0x prefix.

    Hex case does not change the signed bytes, so ledger lookups must not
    depend on it.
    """
    return "0x" + nonce.lower().removeprefix("0x")


def normalize_address(address: str) -> str:
    """Normalize Ethereum address to checksummed format.

    Args:
        address: Ethereum address (with or without 0x prefix).

    Returns:
        Checksummed address.

    Raises:
        ValueError: If address is invalid.
    """
    addr = address.lower().removeprefix("0x")

    if len(addr) != 40:
        raise ValueError(f"Invalid address length: {len(addr)}")

    try:
        int(addr, 16)
    except ValueError as e:
        raise ValueError(f"Invalid hex in address: {address}") from e

    return to_checksum_address("0x" + addr)


def format_amount(amount: int | str, decimals: int) -> str:
    """Convert smallest unit to a fixed-point decimal string.

    format_amount("1000000", 6) == "1.000000"
    """
    value = int(amount)
    sign = "-" if value < 0 else ""
    integer_part, fractional_part = divmod(abs(value), 10**decimals)
    if decimals == 0:
        return f"{sign}{integer_part}"
    return f"{sign}{integer_part}.{str(fractional_part).zfill(decimals)}"


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string to bytes (handles 0x prefix)."""
    return bytes.fromhex(hex_str.removeprefix("0x"))


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()
