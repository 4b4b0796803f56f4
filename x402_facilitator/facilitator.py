"""x402Facilitator - Payment verification and settlement component.

Verification is read-only and can be repeated freely. Settlement re-verifies,
commits the authorization nonce to the ledger exactly once, and hands the
transfer to a chain submitter.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from typing_extensions import Self

from .config import FacilitatorConfig
from .encoding import decode_payment
from .interfaces import ChainSubmitter
from .ledger import NonceLedger
from .matcher import match_requirements
from .mechanisms.evm.constants import SCHEME_EXACT
from .mechanisms.evm.exact.verify import verify_authorization_signature
from .schemas import (
    ERR_BAD_SIGNATURE,
    ERR_MALFORMED,
    ERR_NONCE_REUSED,
    ERR_SUBMISSION_ERROR,
    DecodeError,
    PaymentPayload,
    PaymentRequirements,
    SettleResponse,
    SettleResultContext,
    SupportedKind,
    SupportedResponse,
    VerifyResponse,
    VerifyResultContext,
)
from .submitters import SimulatedSubmitter

logger = logging.getLogger(__name__)

# ============================================================================
# Type Aliases
# ============================================================================

AfterVerifyHook = Callable[[VerifyResultContext], None]
OnVerifyFailureHook = Callable[[VerifyResultContext], None]

AfterSettleHook = Callable[[SettleResultContext], None]
OnSettleFailureHook = Callable[[SettleResultContext], None]


# ============================================================================
# x402Facilitator
# ============================================================================


class x402Facilitator:
    """Payment verification and settlement component.

    Owns its nonce ledger and chain submitter; pass them in to share a
    ledger between facilitators or to isolate one per test.

    Example:
        ```python
        from x402_facilitator import NonceLedger, x402Facilitator

        facilitator = x402Facilitator(ledger=NonceLedger())

        result = facilitator.verify_payment(header, requirements)
        if result.is_valid:
            settlement = facilitator.settle_payment(header, requirements)
        ```

    Args:
        ledger: Nonce ledger. A new empty ledger if None.
        submitter: Chain submitter. A SimulatedSubmitter if None.
        config: Facilitator configuration. Defaults if None.
        clock: Returns the current Unix time; used when ``now`` is not given.
    """

    def __init__(
        self,
        ledger: NonceLedger | None = None,
        submitter: ChainSubmitter | None = None,
        config: FacilitatorConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ledger = ledger if ledger is not None else NonceLedger()
        self._submitter = submitter if submitter is not None else SimulatedSubmitter()
        self._config = config if config is not None else FacilitatorConfig()
        self._clock = clock

        # Hooks
        self._after_verify_hooks: list[AfterVerifyHook] = []
        self._on_verify_failure_hooks: list[OnVerifyFailureHook] = []

        self._after_settle_hooks: list[AfterSettleHook] = []
        self._on_settle_failure_hooks: list[OnSettleFailureHook] = []

    @property
    def ledger(self) -> NonceLedger:
        return self._ledger

    @property
    def config(self) -> FacilitatorConfig:
        return self._config

    # ========================================================================
    # Hook Registration
    # ========================================================================

    def on_after_verify(self, hook: AfterVerifyHook) -> Self:
        """Register hook to run after successful verification.

        Args:
            hook: Hook function.

        Returns:
            Self for chaining.
        """
        self._after_verify_hooks.append(hook)
        return self

    def on_verify_failure(self, hook: OnVerifyFailureHook) -> Self:
        """Register hook to run when verification rejects a payment.

        Args:
            hook: Hook function.

        Returns:
            Self for chaining.
        """
        self._on_verify_failure_hooks.append(hook)
        return self

    def on_after_settle(self, hook: AfterSettleHook) -> Self:
        """Register hook to run after successful settlement.

        Args:
            hook: Hook function.

        Returns:
            Self for chaining.
        """
        self._after_settle_hooks.append(hook)
        return self

    def on_settle_failure(self, hook: OnSettleFailureHook) -> Self:
        """Register hook to run when settlement fails.

        Args:
            hook: Hook function.

        Returns:
            Self for chaining.
        """
        self._on_settle_failure_hooks.append(hook)
        return self

    # ========================================================================
    # Supported
    # ========================================================================

    def get_supported(self) -> SupportedResponse:
        """List the (version, scheme, network) kinds this facilitator accepts."""
        return SupportedResponse(
            kinds=[
                SupportedKind(
                    x402_version=self._config.x402_version,
                    scheme=SCHEME_EXACT,
                    network=network,
                )
                for network in self._config.networks
            ]
        )

    # ========================================================================
    # Verify
    # ========================================================================

    def verify_payment(
        self,
        header: str,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> VerifyResponse:
        """Verify an encoded payment header against a requirement.

        Never consumes the nonce; calling it again with the same inputs gives
        the same answer until the payment is settled.

        Args:
            header: Base64 payment header value.
            requirements: Requirement the payment is for.
            now: Unix time to check expiry against. Defaults to the clock.

        Returns:
            VerifyResponse with is_valid=True, or is_valid=False and a reason.
        """
        try:
            payload = decode_payment(header)
        except DecodeError as e:
            logger.info(f"Rejected malformed payment header: {e}")
            result = VerifyResponse(is_valid=False, invalid_reason=ERR_MALFORMED)
            self._run_verify_hooks(None, requirements, result)
            return result

        return self.verify(payload, requirements, now)

    def verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> VerifyResponse:
        """Verify a decoded payment payload against a requirement."""
        result = self._verify(payload, requirements, self._now(now))
        self._run_verify_hooks(payload, requirements, result)
        return result

    def _verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
        now: int,
    ) -> VerifyResponse:
        authorization = payload.payload

        if self._ledger.contains(authorization.nonce):
            result = VerifyResponse(
                is_valid=False,
                invalid_reason=ERR_NONCE_REUSED,
                payer=authorization.from_,
            )
        else:
            result = match_requirements(payload, requirements, now)
            if result.is_valid and not verify_authorization_signature(
                authorization, requirements
            ):
                result = VerifyResponse(
                    is_valid=False,
                    invalid_reason=ERR_BAD_SIGNATURE,
                    payer=authorization.from_,
                )

        if not result.is_valid:
            logger.info(
                f"Rejected payment from {authorization.from_} "
                f"(nonce {authorization.nonce}): {result.invalid_reason}"
            )
        return result

    # ========================================================================
    # Settle
    # ========================================================================

    def settle_payment(
        self,
        header: str,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> SettleResponse:
        """Verify and settle an encoded payment header.

        Args:
            header: Base64 payment header value.
            requirements: Requirement the payment is for.
            now: Unix time to check expiry against. Defaults to the clock.

        Returns:
            SettleResponse with the transaction reference on success, or
            success=False and a reason.
        """
        try:
            payload = decode_payment(header)
        except DecodeError as e:
            logger.info(f"Cannot settle malformed payment header: {e}")
            return self._settle_failure(None, requirements, ERR_MALFORMED, None)

        return self.settle(payload, requirements, now)

    def settle(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> SettleResponse:
        """Verify and settle a decoded payment payload.

        The nonce is committed only after verification passes and before the
        submitter is called. It stays consumed if submission fails.
        """
        now = self._now(now)
        authorization = payload.payload

        if self._config.prune_expired_nonces:
            self._ledger.prune(now)

        verification = self._verify(payload, requirements, now)
        if not verification.is_valid:
            return self._settle_failure(
                payload, requirements, verification.invalid_reason, authorization.from_
            )

        if not self._ledger.try_consume(authorization.nonce, expires_at=authorization.valid_before):
            logger.info(f"Nonce {authorization.nonce} could not be consumed")
            return self._settle_failure(
                payload, requirements, ERR_NONCE_REUSED, authorization.from_
            )

        try:
            submission = self._submitter.submit(authorization, requirements)
        except Exception as e:
            logger.error(
                f"Error submitting payment from {authorization.from_} on {requirements.network}: {e}",
                exc_info=True,
            )
            return self._settle_failure(
                payload, requirements, ERR_SUBMISSION_ERROR, authorization.from_
            )

        result = SettleResponse(
            success=True,
            transaction=submission.transaction,
            network=submission.network,
            payer=authorization.from_,
        )
        logger.info(
            f"Settled {authorization.value} from {authorization.from_} to {authorization.to} "
            f"on {submission.network}: {submission.transaction}"
        )

        context = SettleResultContext(
            payment_payload=payload, requirements=requirements, result=result
        )
        for hook in self._after_settle_hooks:
            hook(context)

        return result

    # ========================================================================
    # Internal
    # ========================================================================

    def _now(self, now: int | None) -> int:
        return int(self._clock()) if now is None else now

    def _run_verify_hooks(
        self,
        payload: PaymentPayload | None,
        requirements: PaymentRequirements,
        result: VerifyResponse,
    ) -> None:
        context = VerifyResultContext(
            payment_payload=payload, requirements=requirements, result=result
        )
        hooks = self._after_verify_hooks if result.is_valid else self._on_verify_failure_hooks
        for hook in hooks:
            hook(context)

    def _settle_failure(
        self,
        payload: PaymentPayload | None,
        requirements: PaymentRequirements,
        reason: str | None,
        payer: str | None,
    ) -> SettleResponse:
        result = SettleResponse(
            success=False,
            error_reason=reason,
            network=requirements.network,
            payer=payer,
        )
        context = SettleResultContext(
            payment_payload=payload, requirements=requirements, result=result
        )
        for hook in self._on_settle_failure_hooks:
            hook(context)
        return result
