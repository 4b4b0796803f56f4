"""Context objects handed to facilitator lifecycle hooks."""

from __future__ import annotations

from dataclasses import dataclass

from .payments import PaymentPayload, PaymentRequirements
from .responses import SettleResponse, VerifyResponse


@dataclass
class VerifyResultContext:
    payment_payload: PaymentPayload | None
    requirements: PaymentRequirements
    result: VerifyResponse


@dataclass
class SettleResultContext:
    payment_payload: PaymentPayload | None
    requirements: PaymentRequirements
    result: SettleResponse
