"""Reason codes and exceptions shared by verification and settlement."""

# Verification reason codes
ERR_UNSUPPORTED_VERSION = "unsupportedVersion"
ERR_SCHEME_OR_NETWORK_MISMATCH = "schemeOrNetworkMismatch"
ERR_AMOUNT_MISMATCH = "amountMismatch"
ERR_RECIPIENT_MISMATCH = "recipientMismatch"
ERR_EXPIRED = "expired"
ERR_NONCE_REUSED = "nonceReused"
ERR_BAD_SIGNATURE = "badSignature"
ERR_MALFORMED = "malformed"

# Settlement reason codes
ERR_SUBMISSION_ERROR = "submissionError"

VERIFY_REASONS = (
    ERR_UNSUPPORTED_VERSION,
    ERR_SCHEME_OR_NETWORK_MISMATCH,
    ERR_AMOUNT_MISMATCH,
    ERR_RECIPIENT_MISMATCH,
    ERR_EXPIRED,
    ERR_NONCE_REUSED,
    ERR_BAD_SIGNATURE,
    ERR_MALFORMED,
)

SETTLE_REASONS = VERIFY_REASONS + (ERR_SUBMISSION_ERROR,)


class X402FacilitatorError(Exception):
    """Base class for facilitator errors."""


class DecodeError(X402FacilitatorError):
    """Raised when a payment header cannot be decoded into a payload."""


class UnsupportedNetworkError(X402FacilitatorError, ValueError):
    """Raised when a network has no known chain id."""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Unsupported network: {network}")


class SubmissionError(X402FacilitatorError):
    """Raised by a chain submitter when a transfer could not be submitted."""
