"""Exact EVM client scheme: builds and signs transfer authorizations."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from eth_account.signers.local import LocalAccount

from ....encoding import encode_payment
from ....schemas import ExactEvmAuthorization, ExactPaymentPayload, PaymentRequirements
from ..constants import (
    DEFAULT_VALIDITY_BUFFER,
    PRIMARY_TYPE_TRANSFER_WITH_AUTHORIZATION,
    SCHEME_EXACT,
    TRANSFER_WITH_AUTHORIZATION_TYPES,
    X402_VERSION,
)
from ..eip712 import build_transfer_domain, build_transfer_message
from ..signers import EthAccountSigner
from ..utils import bytes_to_hex, create_nonce

if TYPE_CHECKING:
    from ..types import ClientEvmSigner


class ExactEvmScheme:
    """Client scheme for exact EVM payments.

    Args:
        signer: A ClientEvmSigner, or an eth_account LocalAccount which is
            wrapped in an EthAccountSigner.
    """

    scheme = SCHEME_EXACT

    def __init__(self, signer: ClientEvmSigner | LocalAccount):
        if isinstance(signer, LocalAccount):
            signer = EthAccountSigner(signer)
        self._signer = signer

    def create_payment_payload(
        self,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> ExactPaymentPayload:
        """Create a signed payment payload for the given requirements.

        The authorization is valid from one minute before ``now`` until
        ``now + max_timeout_seconds``. A server-chosen nonce on the
        requirement is used as-is, otherwise a random one is generated.

        Args:
            requirements: Requirement to pay.
            now: Unix timestamp to build the validity window from.

        Returns:
            Signed ExactPaymentPayload.
        """
        if now is None:
            now = int(time.time())

        valid_after = now - DEFAULT_VALIDITY_BUFFER
        valid_before = now + requirements.max_timeout_seconds
        nonce = requirements.nonce or create_nonce()

        domain = build_transfer_domain(requirements)
        message = build_transfer_message(
            self._signer.address,
            requirements.pay_to,
            requirements.max_amount_required,
            valid_after,
            valid_before,
            nonce,
        )
        signature = self._signer.sign_typed_data(
            domain,
            TRANSFER_WITH_AUTHORIZATION_TYPES,
            PRIMARY_TYPE_TRANSFER_WITH_AUTHORIZATION,
            message,
        )

        authorization = ExactEvmAuthorization(
            from_=self._signer.address,
            to=requirements.pay_to,
            value=requirements.max_amount_required,
            valid_after=valid_after,
            valid_before=valid_before,
            nonce=nonce,
            signature=bytes_to_hex(signature),
        )
        return ExactPaymentPayload(
            x402_version=X402_VERSION,
            scheme=SCHEME_EXACT,
            network=requirements.network,
            payload=authorization,
        )

    def create_payment_header(
        self,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> str:
        """Create a signed payment payload and encode it as a header value."""
        return encode_payment(self.create_payment_payload(requirements, now))
