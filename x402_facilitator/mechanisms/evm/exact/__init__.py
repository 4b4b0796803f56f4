"""Exact EVM payment scheme for x402."""

from .client import ExactEvmScheme as ExactEvmClientScheme
from .verify import recover_authorization_signer, verify_authorization_signature

__all__ = [
    "ExactEvmClientScheme",
    "recover_authorization_signer",
    "verify_authorization_signature",
]
