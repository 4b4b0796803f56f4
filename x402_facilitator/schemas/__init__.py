"""Wire models, reason codes and exceptions for the x402 facilitator core."""

from .base import BaseCompoundType
from .errors import (
    ERR_AMOUNT_MISMATCH,
    ERR_BAD_SIGNATURE,
    ERR_EXPIRED,
    ERR_MALFORMED,
    ERR_NONCE_REUSED,
    ERR_RECIPIENT_MISMATCH,
    ERR_SCHEME_OR_NETWORK_MISMATCH,
    ERR_SUBMISSION_ERROR,
    ERR_UNSUPPORTED_VERSION,
    SETTLE_REASONS,
    VERIFY_REASONS,
    DecodeError,
    SubmissionError,
    UnsupportedNetworkError,
    X402FacilitatorError,
)
from .hooks import SettleResultContext, VerifyResultContext
from .payments import (
    PAYLOAD_TYPES,
    ExactEvmAuthorization,
    ExactPaymentPayload,
    PaymentPayload,
    PaymentRequirements,
    SupportedKind,
    SupportedResponse,
)
from .responses import SettleResponse, VerifyResponse

__all__ = [
    "BaseCompoundType",
    # Reason codes
    "ERR_AMOUNT_MISMATCH",
    "ERR_BAD_SIGNATURE",
    "ERR_EXPIRED",
    "ERR_MALFORMED",
    "ERR_NONCE_REUSED",
    "ERR_RECIPIENT_MISMATCH",
    "ERR_SCHEME_OR_NETWORK_MISMATCH",
    "ERR_SUBMISSION_ERROR",
    "ERR_UNSUPPORTED_VERSION",
    "SETTLE_REASONS",
    "VERIFY_REASONS",
    # Exceptions
    "DecodeError",
    "SubmissionError",
    "UnsupportedNetworkError",
    "X402FacilitatorError",
    # Payments
    "PAYLOAD_TYPES",
    "ExactEvmAuthorization",
    "ExactPaymentPayload",
    "PaymentPayload",
    "PaymentRequirements",
    "SupportedKind",
    "SupportedResponse",
    # Responses
    "SettleResponse",
    "VerifyResponse",
    # Hooks
    "SettleResultContext",
    "VerifyResultContext",
]
