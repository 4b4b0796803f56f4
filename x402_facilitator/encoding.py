"""Transport encoding for payment headers.

A payment header is base64 of the camelCase JSON of a payment payload:
``{x402Version, scheme, network, payload}``.
"""

import base64
import json
from typing import Union

from pydantic import ValidationError

from .schemas import PAYLOAD_TYPES, DecodeError, PaymentPayload, SettleResponse

# A signed exact payload encodes to well under 1 KiB. Anything far larger is
# rejected before parsing, which also bounds JSON nesting depth.
MAX_PAYMENT_HEADER_LENGTH = 8192


def safe_base64_encode(data: Union[str, bytes]) -> str:
    """Safely encode string or bytes to base64 string.

    Args:
        data: String or bytes to encode

    Returns:
        Base64 encoded string
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def safe_base64_decode(data: str) -> str:
    """Decode a base64 string to a utf-8 string.

    Non-alphabet characters are rejected rather than skipped.

    Raises:
        binascii.Error: On malformed base64.
        UnicodeDecodeError: If the decoded bytes are not utf-8.
    """
    return base64.b64decode(data, validate=True).decode("utf-8")


def encode_payment(payload: PaymentPayload) -> str:
    """Encode a payment payload into a header value."""
    return safe_base64_encode(payload.model_dump_json(by_alias=True, exclude_none=True))


def decode_payment(header: str) -> PaymentPayload:
    """Decode a header value into the payload variant for its scheme.

    Raises:
        DecodeError: If the header is not base64, not utf-8 JSON, not an
            object, names an unknown scheme, fails field validation, or is
            longer than MAX_PAYMENT_HEADER_LENGTH.
    """
    if not isinstance(header, str) or not header:
        raise DecodeError("Payment header must be a non-empty string")
    _check_length(header)

    try:
        document = json.loads(safe_base64_decode(header))
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Payment header is not base64 encoded JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError("Payment header must encode a JSON object")

    scheme = document.get("scheme")
    payload_type = PAYLOAD_TYPES.get(scheme) if isinstance(scheme, str) else None
    if payload_type is None:
        raise DecodeError(f"Unsupported payment scheme: {scheme!r}")

    try:
        return payload_type.model_validate(document)
    except (ValidationError, RecursionError) as e:
        raise DecodeError(f"Invalid {scheme} payment payload: {e}") from e


def encode_settle_response(response: SettleResponse) -> str:
    """Encode a settlement result as an X-PAYMENT-RESPONSE header value."""
    return safe_base64_encode(response.model_dump_json(by_alias=True, exclude_none=True))


def decode_settle_response(header: str) -> SettleResponse:
    """Decode an X-PAYMENT-RESPONSE header value.

    Raises:
        DecodeError: If the header is not a base64 encoded settlement result.
    """
    _check_length(header)
    try:
        return SettleResponse.model_validate_json(safe_base64_decode(header))
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Invalid payment response header: {e}") from e


def _check_length(header: str) -> None:
    if len(header) > MAX_PAYMENT_HEADER_LENGTH:
        raise DecodeError(
            f"Header is {len(header)} characters, limit is {MAX_PAYMENT_HEADER_LENGTH}"
        )
