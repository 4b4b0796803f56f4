"""x402 facilitator core: payment verification, replay protection and settlement."""

# Types
from .schemas import (
    DecodeError,
    ExactEvmAuthorization,
    ExactPaymentPayload,
    PaymentPayload,
    PaymentRequirements,
    SettleResponse,
    SubmissionError,
    SupportedKind,
    SupportedResponse,
    UnsupportedNetworkError,
    VerifyResponse,
    X402FacilitatorError,
)

# Codec
from .encoding import (
    decode_payment,
    decode_settle_response,
    encode_payment,
    encode_settle_response,
)

# Core components
from .config import FacilitatorConfig
from .facilitator import x402Facilitator
from .interfaces import ChainSubmitter, SubmissionResult
from .ledger import NonceLedger
from .matcher import match_requirements
from .submitters import SimulatedSubmitter

__all__ = [
    # Types
    "DecodeError",
    "ExactEvmAuthorization",
    "ExactPaymentPayload",
    "PaymentPayload",
    "PaymentRequirements",
    "SettleResponse",
    "SubmissionError",
    "SupportedKind",
    "SupportedResponse",
    "UnsupportedNetworkError",
    "VerifyResponse",
    "X402FacilitatorError",
    # Codec
    "decode_payment",
    "decode_settle_response",
    "encode_payment",
    "encode_settle_response",
    # Core
    "ChainSubmitter",
    "FacilitatorConfig",
    "NonceLedger",
    "SimulatedSubmitter",
    "SubmissionResult",
    "match_requirements",
    "x402Facilitator",
]

__version__ = "0.1.0"
