"""Checks a decoded payment against the requirement it claims to pay."""

from .mechanisms.evm.constants import X402_VERSION
from .schemas import (
    ERR_AMOUNT_MISMATCH,
    ERR_EXPIRED,
    ERR_RECIPIENT_MISMATCH,
    ERR_SCHEME_OR_NETWORK_MISMATCH,
    ERR_UNSUPPORTED_VERSION,
    PaymentPayload,
    PaymentRequirements,
    VerifyResponse,
)


def match_requirements(
    payload: PaymentPayload,
    requirements: PaymentRequirements,
    now: int,
) -> VerifyResponse:
    """Match a payment payload against a requirement.

    Checks run in a fixed order and stop at the first failure:
    version, scheme and network, amount, recipient, expiry.

    The amount must equal ``max_amount_required`` exactly as a string. The
    recipient compares case-insensitively. ``valid_before == now`` is still
    valid; ``valid_after`` is not checked.

    Args:
        payload: Decoded payment payload.
        requirements: Requirement the payment is for.
        now: Current Unix time in seconds.

    Returns:
        VerifyResponse with is_valid=True, or is_valid=False and the reason.
    """
    authorization = payload.payload

    if payload.x402_version != X402_VERSION:
        return _invalid(ERR_UNSUPPORTED_VERSION, authorization.from_)

    if payload.scheme != requirements.scheme or payload.network != requirements.network:
        return _invalid(ERR_SCHEME_OR_NETWORK_MISMATCH, authorization.from_)

    if authorization.value != requirements.max_amount_required:
        return _invalid(ERR_AMOUNT_MISMATCH, authorization.from_)

    if authorization.to.lower() != requirements.pay_to.lower():
        return _invalid(ERR_RECIPIENT_MISMATCH, authorization.from_)

    if authorization.valid_before < now:
        return _invalid(ERR_EXPIRED, authorization.from_)

    return VerifyResponse(is_valid=True, payer=authorization.from_)


def _invalid(reason: str, payer: str) -> VerifyResponse:
    return VerifyResponse(is_valid=False, invalid_reason=reason, payer=payer)
