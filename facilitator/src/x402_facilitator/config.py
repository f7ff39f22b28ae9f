# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class FacilitatorConfig(BaseModel):
    """Startup configuration, read from the environment once and never mutated."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    kora_rpc_url: str = Field(
        default_factory=lambda: os.getenv("KORA_RPC_URL", "http://localhost:8090")
    )
    kora_api_key: str = Field(
        default_factory=lambda: os.getenv("KORA_API_KEY", "kora_facilitator_api_key")
    )
    kora_timeout_s: float = Field(default_factory=lambda: float(os.getenv("KORA_TIMEOUT_S", "15")))
    solana_rpc_url: str = Field(
        default_factory=lambda: os.getenv("SOLANA_RPC_URL", "https://api.devnet.solana.com")
    )
    network: str = Field(default_factory=lambda: os.getenv("NETWORK", "solana-devnet"))
    usdc_mint: str = Field(
        default_factory=lambda: os.getenv("USDC_MINT", "Gh9ZwEmdLJ8DscKNTkTqPbNwLNNBjuSzaG9Vp2KGtKJr")
    )
    mock_mode: bool = Field(default_factory=lambda: _env_flag("MOCK_MODE"))
    # Fee payer advertised by /supported when running against the mock relay
    mock_fee_payer: Optional[str] = Field(default_factory=lambda: os.getenv("KORA_SIGNER_ADDRESS") or None)
    max_body_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))
    )

    @property
    def explorer_cluster(self) -> str:
        return self.network.replace("solana-", "", 1)