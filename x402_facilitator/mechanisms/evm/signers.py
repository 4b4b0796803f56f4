"""Client signers backed by eth_account."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .types import TypedDataDomain

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount


class EthAccountSigner:
    """Signs transfer authorizations with an in-process eth_account key.

    Example:
        ```python
        from eth_account import Account
        from x402_facilitator.mechanisms.evm.exact import ExactEvmClientScheme

        signer = EthAccountSigner(Account.from_key("0x..."))
        header = ExactEvmClientScheme(signer).create_payment_header(requirements)
        ```
    """

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def sign_typed_data(
        self,
        domain: TypedDataDomain,
        types: dict[str, list[dict[str, str]]],
        primary_type: str,
        message: dict[str, Any],
    ) -> bytes:
        """Sign EIP-712 typed data and return the 65-byte (r, s, v) signature.

        ``primary_type`` must be one of ``types``; eth_account derives it from
        the type graph, so it is only checked here.
        """
        if primary_type not in types:
            raise ValueError(f"Primary type {primary_type} is not defined in types")

        signed = self._account.sign_typed_data(
            domain_data=domain.to_dict(),
            message_types=types,
            message_data=message,
        )
        return bytes(signed.signature)
