"""Chain submitter implementations."""

import logging
import secrets

from .interfaces import SubmissionResult
from .mechanisms.evm.constants import DEFAULT_DECIMALS
from .mechanisms.evm.utils import format_amount
from .schemas import ExactEvmAuthorization, PaymentRequirements

logger = logging.getLogger(__name__)


class SimulatedSubmitter:
    """Submitter that settles without touching a chain.

    Returns a random 32-byte transaction hash on the requirement's network.
    Used when no real submitter is configured.
    """

    def submit(
        self,
        authorization: ExactEvmAuthorization,
        requirements: PaymentRequirements,
    ) -> SubmissionResult:
        tx_hash = "0x" + secrets.token_hex(32)

        logger.info(f"Simulated settlement on {requirements.network}: {tx_hash}")
        logger.info(
            f"Amount: {format_amount(authorization.value, DEFAULT_DECIMALS)} "
            f"({authorization.value} smallest unit), "
            f"from {authorization.from_} to {authorization.to}"
        )

        return SubmissionResult(transaction=tx_hash, network=requirements.network)
