"""Tests for x402Facilitator."""

import logging

import pytest

from x402_facilitator import (
    FacilitatorConfig,
    NonceLedger,
    SettleResponse,
    VerifyResponse,
    x402Facilitator,
)
from x402_facilitator.encoding import safe_base64_encode
from x402_facilitator.schemas import (
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
    SubmissionError,
)

from ..conftest import NETWORK, NOW, build_requirements, replace_authorization
from ..mocks import FailingSubmitter, RecordingSubmitter

# ============================================================================
# Helpers
# ============================================================================


def build_facilitator(**kwargs) -> x402Facilitator:
    kwargs.setdefault("clock", lambda: NOW)
    return x402Facilitator(**kwargs)


# ============================================================================
# Construction Tests
# ============================================================================


class TestFacilitatorConstruction:
    def test_defaults(self):
        facilitator = x402Facilitator()

        assert isinstance(facilitator.ledger, NonceLedger)
        assert len(facilitator.ledger) == 0
        assert facilitator.config == FacilitatorConfig()

    def test_uses_given_ledger(self):
        ledger = NonceLedger()

        assert x402Facilitator(ledger=ledger).ledger is ledger

    def test_hook_registration_chains(self):
        facilitator = x402Facilitator()

        result = (
            facilitator.on_after_verify(lambda ctx: None)
            .on_verify_failure(lambda ctx: None)
            .on_after_settle(lambda ctx: None)
            .on_settle_failure(lambda ctx: None)
        )

        assert result is facilitator


# ============================================================================
# Verify Tests
# ============================================================================


class TestVerify:
    def test_valid_payment(self, facilitator, header, requirements, account):
        result = facilitator.verify_payment(header, requirements)

        assert isinstance(result, VerifyResponse)
        assert result.is_valid is True
        assert result.invalid_reason is None
        assert result.payer == account.address

    def test_verify_does_not_consume_nonce(self, facilitator, header, requirements):
        """Verification can be repeated without changing the ledger."""
        first = facilitator.verify_payment(header, requirements)
        second = facilitator.verify_payment(header, requirements)

        assert first == second
        assert first.is_valid is True
        assert len(facilitator.ledger) == 0

    def test_verify_decoded_payload(self, facilitator, payload, requirements):
        assert facilitator.verify(payload, requirements).is_valid is True

    def test_explicit_now_overrides_clock(self, facilitator, header, requirements, payload):
        result = facilitator.verify_payment(
            header, requirements, now=payload.payload.valid_before + 1
        )

        assert result.invalid_reason == ERR_EXPIRED

    def test_clock_is_used_when_now_omitted(self, header, requirements, payload):
        facilitator = build_facilitator(clock=lambda: payload.payload.valid_before + 0.5)

        # valid_before == int(clock()) is still valid
        assert facilitator.verify_payment(header, requirements).is_valid is True


class TestVerifyRejections:
    def test_malformed_header(self, facilitator, requirements):
        result = facilitator.verify_payment("not base64!!", requirements)

        assert result.is_valid is False
        assert result.invalid_reason == ERR_MALFORMED
        assert result.payer is None

    def test_deeply_nested_header_is_malformed(self, facilitator, requirements):
        header = safe_base64_encode("[" * 120_000 + "]" * 120_000)

        result = facilitator.verify_payment(header, requirements)

        assert result.is_valid is False
        assert result.invalid_reason == ERR_MALFORMED

    def test_unsupported_version(self, facilitator, payload, requirements):
        result = facilitator.verify(payload.model_copy(update={"x402_version": 2}), requirements)

        assert result.invalid_reason == ERR_UNSUPPORTED_VERSION

    def test_network_mismatch(self, facilitator, header):
        result = facilitator.verify_payment(header, build_requirements(network="base"))

        assert result.invalid_reason == ERR_SCHEME_OR_NETWORK_MISMATCH

    def test_amount_mismatch(self, facilitator, header):
        result = facilitator.verify_payment(
            header, build_requirements(max_amount_required="999999")
        )

        assert result.invalid_reason == ERR_AMOUNT_MISMATCH

    def test_recipient_mismatch(self, facilitator, header):
        result = facilitator.verify_payment(
            header, build_requirements(pay_to="0x1111111111111111111111111111111111111111")
        )

        assert result.invalid_reason == ERR_RECIPIENT_MISMATCH

    def test_expired(self, facilitator, header, requirements, payload):
        result = facilitator.verify_payment(
            header, requirements, now=payload.payload.valid_before + 3600
        )

        assert result.invalid_reason == ERR_EXPIRED

    def test_bad_signature(self, facilitator, payload, requirements):
        """An authorization altered after signing no longer matches its payer."""
        tampered = replace_authorization(payload, valid_before=payload.payload.valid_before + 1)

        result = facilitator.verify(tampered, requirements)

        assert result.invalid_reason == ERR_BAD_SIGNATURE
        assert result.payer == payload.payload.from_

    def test_unknown_network_is_bad_signature(self, facilitator, payload):
        """A network with no chain id cannot be verified and is rejected."""
        unknown = payload.model_copy(update={"network": "unknown-chain"})

        result = facilitator.verify(unknown, build_requirements(network="unknown-chain"))

        assert result.invalid_reason == ERR_BAD_SIGNATURE

    def test_reasons_are_from_closed_set(self, facilitator, header, requirements):
        results = [
            facilitator.verify_payment("", requirements),
            facilitator.verify_payment(header, build_requirements(network="base")),
            facilitator.verify_payment(header, requirements, now=NOW + 10_000),
        ]

        assert all(r.invalid_reason in VERIFY_REASONS for r in results)

    def test_logs_rejection(self, facilitator, header, caplog):
        with caplog.at_level(logging.INFO, logger="x402_facilitator.facilitator"):
            facilitator.verify_payment(header, build_requirements(max_amount_required="1"))

        assert ERR_AMOUNT_MISMATCH in caplog.text


# ============================================================================
# Settle Tests
# ============================================================================


class TestSettle:
    def test_settles_valid_payment(self, header, requirements, account):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        result = facilitator.settle_payment(header, requirements)

        assert isinstance(result, SettleResponse)
        assert result.success is True
        assert result.error_reason is None
        assert result.transaction == submitter.transaction
        assert result.network == NETWORK
        assert result.payer == account.address

    def test_submitter_receives_authorization(self, payload, header, requirements):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        facilitator.settle_payment(header, requirements)

        assert len(submitter.calls) == 1
        authorization, submitted_requirements = submitter.calls[0]
        assert authorization == payload.payload
        assert submitted_requirements == requirements

    def test_settle_consumes_nonce(self, header, requirements, payload):
        facilitator = build_facilitator(submitter=RecordingSubmitter())

        facilitator.settle_payment(header, requirements)

        assert facilitator.ledger.contains(payload.payload.nonce)

    def test_replay_is_rejected(self, header, requirements):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        assert facilitator.settle_payment(header, requirements).success is True

        verify_again = facilitator.verify_payment(header, requirements)
        settle_again = facilitator.settle_payment(header, requirements)

        assert verify_again.is_valid is False
        assert verify_again.invalid_reason == ERR_NONCE_REUSED
        assert settle_again.success is False
        assert settle_again.error_reason == ERR_NONCE_REUSED
        assert len(submitter.calls) == 1

    def test_invalid_payment_is_not_consumed(self, header, payload):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        result = facilitator.settle_payment(
            header, build_requirements(max_amount_required="999999")
        )

        assert result.success is False
        assert result.error_reason == ERR_AMOUNT_MISMATCH
        assert result.network == NETWORK
        assert result.payer == payload.payload.from_
        assert result.transaction is None
        assert len(facilitator.ledger) == 0
        assert submitter.calls == []

    def test_malformed_header(self, requirements):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        result = facilitator.settle_payment("", requirements)

        assert result.success is False
        assert result.error_reason == ERR_MALFORMED
        assert result.payer is None
        assert submitter.calls == []

    def test_deeply_nested_header_is_malformed(self, requirements):
        submitter = RecordingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        result = facilitator.settle_payment(
            safe_base64_encode("[" * 120_000 + "]" * 120_000), requirements
        )

        assert result.success is False
        assert result.error_reason == ERR_MALFORMED
        assert submitter.calls == []

    def test_default_submitter_is_simulated(self, facilitator, header, requirements):
        result = facilitator.settle_payment(header, requirements)

        assert result.success is True
        assert result.transaction.startswith("0x")
        assert len(result.transaction) == 66


class TestSettleSubmissionFailure:
    def test_submission_error(self, header, requirements, payload):
        submitter = FailingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        result = facilitator.settle_payment(header, requirements)

        assert result.success is False
        assert result.error_reason == ERR_SUBMISSION_ERROR
        assert result.transaction is None
        assert submitter.calls == 1

    def test_nonce_stays_consumed_after_failure(self, header, requirements, payload):
        """A failed submission cannot be retried with the same authorization."""
        submitter = FailingSubmitter()
        facilitator = build_facilitator(submitter=submitter)

        facilitator.settle_payment(header, requirements)
        retry = facilitator.settle_payment(header, requirements)

        assert facilitator.ledger.contains(payload.payload.nonce)
        assert retry.error_reason == ERR_NONCE_REUSED
        assert submitter.calls == 1

    def test_any_exception_is_submission_error(self, header, requirements):
        facilitator = build_facilitator(submitter=FailingSubmitter(RuntimeError("boom")))

        result = facilitator.settle_payment(header, requirements)

        assert result.error_reason == ERR_SUBMISSION_ERROR
        assert result.error_reason in SETTLE_REASONS

    def test_logs_submission_error(self, header, requirements, caplog):
        facilitator = build_facilitator(submitter=FailingSubmitter(SubmissionError("rpc down")))

        with caplog.at_level(logging.ERROR, logger="x402_facilitator.facilitator"):
            facilitator.settle_payment(header, requirements)

        assert "rpc down" in caplog.text


class TestNonceRetention:
    def test_expired_entry_is_pruned_on_settle(self, client, requirements):
        facilitator = build_facilitator(submitter=RecordingSubmitter())
        old = client.create_payment_payload(requirements, now=NOW)
        facilitator.settle(old, requirements, now=NOW)

        later = NOW + 3600
        fresh = client.create_payment_payload(requirements, now=later)
        assert facilitator.settle(fresh, requirements, now=later).success is True

        assert not facilitator.ledger.contains(old.payload.nonce)
        assert facilitator.ledger.contains(fresh.payload.nonce)
        # Replaying the pruned authorization is still rejected, as expired
        assert facilitator.verify(old, requirements, now=later).invalid_reason == ERR_EXPIRED

    def test_pruning_can_be_disabled(self, client, requirements):
        facilitator = build_facilitator(
            submitter=RecordingSubmitter(),
            config=FacilitatorConfig(prune_expired_nonces=False),
        )
        old = client.create_payment_payload(requirements, now=NOW)
        facilitator.settle(old, requirements, now=NOW)

        later = NOW + 3600
        facilitator.settle(client.create_payment_payload(requirements, now=later), requirements, now=later)

        assert facilitator.ledger.contains(old.payload.nonce)
        assert facilitator.verify(old, requirements, now=later).invalid_reason == ERR_NONCE_REUSED

    def test_shared_ledger(self, header, requirements):
        """Facilitators sharing a ledger see each other's settlements."""
        ledger = NonceLedger()
        first = build_facilitator(ledger=ledger, submitter=RecordingSubmitter())
        second = build_facilitator(ledger=ledger, submitter=RecordingSubmitter())

        assert first.settle_payment(header, requirements).success is True

        assert second.verify_payment(header, requirements).invalid_reason == ERR_NONCE_REUSED

    def test_separate_ledgers_are_isolated(self, header, requirements):
        first = build_facilitator(submitter=RecordingSubmitter())
        second = build_facilitator(submitter=RecordingSubmitter())

        first.settle_payment(header, requirements)

        assert second.verify_payment(header, requirements).is_valid is True


# ============================================================================
# Hook Tests
# ============================================================================


class TestHooks:
    def test_after_verify_hook(self, facilitator, header, requirements, payload):
        contexts = []
        facilitator.on_after_verify(contexts.append)

        facilitator.verify_payment(header, requirements)

        assert len(contexts) == 1
        assert contexts[0].payment_payload == payload
        assert contexts[0].requirements == requirements
        assert contexts[0].result.is_valid is True

    def test_verify_failure_hook(self, facilitator, header):
        succeeded, failed = [], []
        facilitator.on_after_verify(succeeded.append).on_verify_failure(failed.append)

        facilitator.verify_payment(header, build_requirements(network="base"))

        assert succeeded == []
        assert len(failed) == 1
        assert failed[0].result.invalid_reason == ERR_SCHEME_OR_NETWORK_MISMATCH

    def test_verify_failure_hook_on_malformed_header(self, facilitator, requirements):
        failed = []
        facilitator.on_verify_failure(failed.append)

        facilitator.verify_payment("garbage", requirements)

        assert len(failed) == 1
        assert failed[0].payment_payload is None
        assert failed[0].result.invalid_reason == ERR_MALFORMED

    def test_after_settle_hook(self, header, requirements):
        facilitator = build_facilitator(submitter=RecordingSubmitter())
        settled = []
        facilitator.on_after_settle(settled.append)

        facilitator.settle_payment(header, requirements)

        assert len(settled) == 1
        assert settled[0].result.success is True
        assert settled[0].result.transaction == "0x" + "ab" * 32

    def test_settle_failure_hook(self, header, requirements):
        facilitator = build_facilitator(submitter=FailingSubmitter())
        settled, failed = [], []
        facilitator.on_after_settle(settled.append).on_settle_failure(failed.append)

        facilitator.settle_payment(header, requirements)

        assert settled == []
        assert len(failed) == 1
        assert failed[0].result.error_reason == ERR_SUBMISSION_ERROR

    def test_hook_errors_propagate(self, facilitator, header, requirements):
        def broken(ctx):
            raise RuntimeError("hook failed")

        facilitator.on_after_verify(broken)

        with pytest.raises(RuntimeError, match="hook failed"):
            facilitator.verify_payment(header, requirements)


# ============================================================================
# Supported Tests
# ============================================================================


class TestGetSupported:
    def test_lists_configured_networks(self):
        facilitator = x402Facilitator(config=FacilitatorConfig(networks=["base-sepolia", "base"]))

        supported = facilitator.get_supported()

        assert [(k.x402_version, k.scheme, k.network) for k in supported.kinds] == [
            (1, "exact", "base-sepolia"),
            (1, "exact", "base"),
        ]

    def test_serializes_camel_case(self):
        facilitator = x402Facilitator(config=FacilitatorConfig(networks=["base"]))

        assert facilitator.get_supported().model_dump(by_alias=True) == {
            "kinds": [{"x402Version": 1, "scheme": "exact", "network": "base"}]
        }

    def test_default_lists_every_known_network(self):
        networks = {k.network for k in x402Facilitator().get_supported().kinds}

        assert {"base-sepolia", "base", "ethereum", "polygon"} <= networks


def test_client_header_is_accepted(client, requirements):
    """The header a client builds is accepted unchanged."""
    header = client.create_payment_header(requirements, now=NOW)

    assert build_facilitator().verify_payment(header, requirements).is_valid is True
