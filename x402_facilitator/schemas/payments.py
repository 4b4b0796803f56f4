import re
from typing import Any, Literal, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from ..mechanisms.evm.constants import SCHEME_EXACT
from .base import BaseCompoundType

NONCE_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


class PaymentRequirements(BaseCompoundType):
    """Price requirement issued by a resource owner for one challenge."""

    scheme: str
    network: str
    max_amount_required: str
    pay_to: str
    asset: str
    max_timeout_seconds: int
    extra: Optional[dict[str, Any]] = None
    nonce: Optional[str] = None
    resource: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("max_amount_required")
    def validate_max_amount_required(cls, v):
        try:
            int(v)
        except ValueError:
            raise ValueError("max_amount_required must be an integer encoded as a string")
        return v


class ExactEvmAuthorization(BaseCompoundType):
    """Signed EIP-3009 transferWithAuthorization body of an exact payment."""

    from_: str = Field(alias="from")
    to: str
    value: str
    valid_after: int
    valid_before: int
    nonce: str
    signature: str

    model_config = ConfigDict(frozen=True)

    @field_validator("value")
    def validate_value(cls, v):
        try:
            int(v)
        except ValueError:
            raise ValueError("value must be an integer encoded as a string")
        return v

    @field_validator("nonce")
    def validate_nonce(cls, v):
        if not NONCE_RE.match(v):
            raise ValueError("nonce must be a 32-byte hex string")
        return v


class ExactPaymentPayload(BaseCompoundType):
    x402_version: int
    scheme: Literal["exact"] = SCHEME_EXACT
    network: str
    payload: ExactEvmAuthorization

    @property
    def authorization(self) -> ExactEvmAuthorization:
        return self.payload


# One variant per scheme; decoding dispatches on the scheme tag.
PAYLOAD_TYPES: dict[str, type[BaseCompoundType]] = {
    SCHEME_EXACT: ExactPaymentPayload,
}

PaymentPayload = Union[ExactPaymentPayload]


class SupportedKind(BaseCompoundType):
    x402_version: int
    scheme: str
    network: str


class SupportedResponse(BaseCompoundType):
    kinds: list[SupportedKind]
