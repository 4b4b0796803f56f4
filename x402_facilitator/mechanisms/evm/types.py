"""EVM signing types and the client signer protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class TypedDataDomain:
    """EIP-712 domain separator fields."""

    name: str
    version: str
    chain_id: int
    verifying_contract: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


class ClientEvmSigner(Protocol):
    """Anything that can sign EIP-712 typed data for a fixed address."""

    @property
    def address(self) -> str: ...

    def sign_typed_data(
        self,
        domain: TypedDataDomain,
        types: dict[str, list[dict[str, str]]],
        primary_type: str,
        message: dict[str, Any],
    ) -> bytes: ...
