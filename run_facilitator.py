#!/usr/bin/env python3
# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""
Standalone runner for the x402 Facilitator.

Env:
  - PORT (default: 3001)
  - HOST (default: 0.0.0.0)
  - KORA_RPC_URL (default: http://localhost:8090)
  - KORA_API_KEY
  - KORA_TIMEOUT_S (default: 15)
  - SOLANA_RPC_URL (default: https://api.devnet.solana.com)
  - NETWORK (default: solana-devnet)
  - USDC_MINT
  - MOCK_MODE (default: false)
  - KORA_SIGNER_ADDRESS (fee payer advertised in mock mode)
  - LOG_LEVEL (default: INFO)
"""

import logging
import os
import sys

repo_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(repo_root, 'facilitator', 'src'))

# Load .env BEFORE building the config so env vars are visible to it
from dotenv import load_dotenv  # type: ignore
load_dotenv()

from x402_facilitator import FacilitatorConfig, build_app


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

cfg = FacilitatorConfig()
app = build_app(cfg)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("run_facilitator:app", host=cfg.host, port=cfg.port, log_level="info")
