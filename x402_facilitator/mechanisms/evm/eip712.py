"""EIP-712 typed data for EIP-3009 transferWithAuthorization.

The client signs and the facilitator verifies the structure produced here, so
both sides bind the same domain (token name/version, chain id, contract) and
the same six message fields.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_DOMAIN_NAME, DEFAULT_DOMAIN_VERSION
from .types import TypedDataDomain
from .utils import get_evm_chain_id, hex_to_bytes, normalize_address

if TYPE_CHECKING:
    from ...schemas import PaymentRequirements


def build_transfer_domain(requirements: PaymentRequirements) -> TypedDataDomain:
    """Build the EIP-712 domain for a requirement.

    Raises:
        UnsupportedNetworkError: If the requirement's network is unknown.
        ValueError: If the asset is not a valid address.
    """
    extra = requirements.extra or {}
    return TypedDataDomain(
        name=extra.get("name") or DEFAULT_DOMAIN_NAME,
        version=extra.get("version") or DEFAULT_DOMAIN_VERSION,
        chain_id=get_evm_chain_id(requirements.network),
        verifying_contract=normalize_address(requirements.asset),
    )


def build_transfer_message(
    from_: str,
    to: str,
    value: str | int,
    valid_after: int,
    valid_before: int,
    nonce: str,
) -> dict[str, Any]:
    """Build the TransferWithAuthorization message in its typed form."""
    return {
        "from": normalize_address(from_),
        "to": normalize_address(to),
        "value": int(value),
        "validAfter": int(valid_after),
        "validBefore": int(valid_before),
        "nonce": hex_to_bytes(nonce),
    }
