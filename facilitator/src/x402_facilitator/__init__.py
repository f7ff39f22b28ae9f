# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""x402 Facilitator

FastAPI service implementing x402 verify/settle/supported for Solana
payments, delegating co-signing and broadcast to a Kora gasless relay.

Usage:
    from x402_facilitator import build_app, FacilitatorConfig

    app = build_app(FacilitatorConfig())
"""

from .app import build_app
from .config import FacilitatorConfig
from .decoder import DecodedTransaction, TransactionFormat, decode_transaction
from .handler import HandlerResult, PaymentFacilitator
from .models import (
    DirectPaymentRequest,
    DirectPaymentResponse,
    HealthResponse,
    PaymentMetadata,
    PaymentPayload,
    SettleResponse,
    SupportedResponse,
    TokenInfo,
    VerifyResponse,
)
from .relay import (
    KoraRelayClient,
    MockRelayClient,
    RelayClient,
    RelayError,
    build_relay_client,
)
from .routes import router
from .validation import (
    PaymentValidationError,
    StructuralReason,
    parse_amount,
    validate_settle_request,
    validate_verify_request,
)

__version__ = "0.0.1"

__all__ = [
    "build_app",
    "router",
    "FacilitatorConfig",
    "PaymentFacilitator",
    "HandlerResult",
    "PaymentPayload",
    "PaymentMetadata",
    "VerifyResponse",
    "SettleResponse",
    "SupportedResponse",
    "TokenInfo",
    "HealthResponse",
    "DirectPaymentRequest",
    "DirectPaymentResponse",
    "TransactionFormat",
    "DecodedTransaction",
    "decode_transaction",
    "PaymentValidationError",
    "StructuralReason",
    "parse_amount",
    "validate_verify_request",
    "validate_settle_request",
    "RelayClient",
    "KoraRelayClient",
    "MockRelayClient",
    "RelayError",
    "build_relay_client",
]
