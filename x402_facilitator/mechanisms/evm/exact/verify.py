"""Signature verification for exact EVM payments."""

import logging

from eth_account import Account
from eth_account.messages import encode_typed_data

from ....schemas import ExactEvmAuthorization, PaymentRequirements
from ..constants import TRANSFER_WITH_AUTHORIZATION_TYPES
from ..eip712 import build_transfer_domain, build_transfer_message

logger = logging.getLogger(__name__)


def recover_authorization_signer(
    authorization: ExactEvmAuthorization, requirements: PaymentRequirements
) -> str:
    """Recover the address that signed an authorization.

    The typed data is rebuilt from the requirement (domain) and the
    authorization (message), so any change to either after signing recovers a
    different address.

    Raises:
        UnsupportedNetworkError: If the requirement's network is unknown.
        ValueError: On malformed addresses, nonce or signature.
    """
    domain = build_transfer_domain(requirements)
    message = build_transfer_message(
        authorization.from_,
        authorization.to,
        authorization.value,
        authorization.valid_after,
        authorization.valid_before,
        authorization.nonce,
    )
    signable = encode_typed_data(
        domain_data=domain.to_dict(),
        message_types=TRANSFER_WITH_AUTHORIZATION_TYPES,
        message_data=message,
    )
    return Account.recover_message(signable, signature=authorization.signature)


def verify_authorization_signature(
    authorization: ExactEvmAuthorization, requirements: PaymentRequirements
) -> bool:
    """Check that the authorization was signed by its ``from`` address.

    Returns False on any recovery failure instead of raising.
    """
    try:
        recovered = recover_authorization_signer(authorization, requirements)
    except Exception as e:
        logger.debug(f"Signature recovery failed for {authorization.from_}: {e}")
        return False

    return recovered.lower() == authorization.from_.lower()
