"""Collaborator interfaces for the facilitator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .schemas import ExactEvmAuthorization, PaymentRequirements


@dataclass(frozen=True)
class SubmissionResult:
    """Reference to a submitted transfer."""

    transaction: str
    network: str


class ChainSubmitter(Protocol):
    """Submits a verified authorization to a chain.

    Implementations own their own timeouts and finality policy. Failure is
    signalled by raising, typically SubmissionError.
    """

    def submit(
        self,
        authorization: ExactEvmAuthorization,
        requirements: PaymentRequirements,
    ) -> SubmissionResult: ...
