"""Facilitator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .mechanisms.evm.constants import NETWORK_CHAIN_IDS, X402_VERSION
from .mechanisms.evm.utils import get_evm_chain_id

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class FacilitatorConfig:
    """Configuration for x402Facilitator.

    Attributes:
        networks: Networks advertised by get_supported().
        x402_version: Protocol version advertised by get_supported().
        prune_expired_nonces: Drop ledger entries past their valid_before on
            each settlement.
    """

    networks: list[str] = field(default_factory=lambda: list(NETWORK_CHAIN_IDS))
    x402_version: int = X402_VERSION
    prune_expired_nonces: bool = True

    def __post_init__(self) -> None:
        for network in self.networks:
            get_evm_chain_id(network)

    @classmethod
    def from_env(cls, prefix: str = "X402_") -> FacilitatorConfig:
        """Build a config from environment variables.

        Reads ``{prefix}NETWORKS`` (comma separated) and
        ``{prefix}PRUNE_EXPIRED_NONCES`` (1/true/yes/on or 0/false/no/off).
        Unset variables keep their defaults.

        Raises:
            UnsupportedNetworkError: If a listed network is unknown.
            ValueError: If the prune flag is not a boolean word.
        """
        kwargs: dict = {}

        networks = os.environ.get(f"{prefix}NETWORKS")
        if networks:
            kwargs["networks"] = [n.strip() for n in networks.split(",") if n.strip()]

        prune = os.environ.get(f"{prefix}PRUNE_EXPIRED_NONCES")
        if prune is not None:
            value = prune.strip().lower()
            if value in _TRUE_VALUES:
                kwargs["prune_expired_nonces"] = True
            elif value in _FALSE_VALUES:
                kwargs["prune_expired_nonces"] = False
            else:
                raise ValueError(f"Invalid {prefix}PRUNE_EXPIRED_NONCES value: {prune}")

        return cls(**kwargs)
