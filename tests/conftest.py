"""Shared test fixtures."""

import pytest
from eth_account import Account

from x402_facilitator import PaymentRequirements, encode_payment, x402Facilitator
from x402_facilitator.mechanisms.evm.exact import ExactEvmClientScheme

# ============================================================================
# Shared constants
# ============================================================================

NOW = 1_700_000_000
NETWORK = "base-sepolia"
ASSET = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
PAY_TO = "0xabcdefabcdefabcdefabcdefabcdefabcdef0123"
AMOUNT = "1000000"
TIMEOUT = 60


def build_requirements(**overrides) -> PaymentRequirements:
    fields = {
        "scheme": "exact",
        "network": NETWORK,
        "max_amount_required": AMOUNT,
        "pay_to": PAY_TO,
        "asset": ASSET,
        "max_timeout_seconds": TIMEOUT,
        "extra": {"name": "USDC", "version": "2"},
    }
    fields.update(overrides)
    return PaymentRequirements(**fields)


def replace_authorization(payload, **updates):
    """Copy a payload with authorization fields changed after signing."""
    return payload.model_copy(update={"payload": payload.payload.model_copy(update=updates)})


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def account():
    return Account.create()


@pytest.fixture
def client(account):
    return ExactEvmClientScheme(account)


@pytest.fixture
def requirements():
    return build_requirements()


@pytest.fixture
def payload(client, requirements):
    return client.create_payment_payload(requirements, now=NOW)


@pytest.fixture
def header(payload):
    return encode_payment(payload)


@pytest.fixture
def facilitator():
    return x402Facilitator(clock=lambda: NOW)
