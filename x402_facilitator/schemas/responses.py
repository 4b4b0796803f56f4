from typing import Optional

from pydantic import Field

from .base import BaseCompoundType


class VerifyResponse(BaseCompoundType):
    is_valid: bool = Field(alias="isValid")
    invalid_reason: Optional[str] = Field(None, alias="invalidReason")
    payer: Optional[str] = None


class SettleResponse(BaseCompoundType):
    success: bool
    error_reason: Optional[str] = None
    transaction: Optional[str] = None
    network: Optional[str] = None
    payer: Optional[str] = None
