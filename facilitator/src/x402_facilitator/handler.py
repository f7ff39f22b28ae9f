# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Verify / settle / supported decision logic.

Each action is a short linear pipeline with no retries. Outcomes are
returned as ``HandlerResult`` so the HTTP layer only has to serialize them:

- structural problems with the payload map to 400 before the relay is called;
- a relay rejection during verify is a well-formed ``isValid: false``;
- a relay failure during settle is a 500, there is no partial settlement;
- a failed fee-payer lookup degrades to ``UNKNOWN_FEE_PAYER``.
"""
from __future__ import annotations

import logging
import uuid
from typing import NamedTuple

from pydantic import BaseModel

from .config import FacilitatorConfig
from .decoder import decode_transaction
from .models import (
    DirectPaymentRequest,
    DirectPaymentResponse,
    HealthResponse,
    PaymentPayload,
    SettleResponse,
    SupportedResponse,
    TokenInfo,
    VerifyResponse,
)
from .relay import RelayClient, RelayError
from .validation import PaymentValidationError, validate_settle_request, validate_verify_request

logger = logging.getLogger(__name__)

FACILITATOR_VERSION = "0.0.1"
SERVICE_NAME = "spl-8004-x402-facilitator"
PAYMENT_SCHEME = "exact"
UNKNOWN_FEE_PAYER = "UnknownPayerAddress"
VALIDATION_FAILED = "Transaction validation failed"


class HandlerResult(NamedTuple):
    status_code: int
    body: BaseModel


class PaymentFacilitator:
    def __init__(self, cfg: FacilitatorConfig, relay: RelayClient):
        self.cfg = cfg
        self.relay = relay

    def explorer_url(self, signature: str) -> str:
        return f"https://explorer.solana.com/tx/{signature}?cluster={self.cfg.explorer_cluster}"

    async def verify(self, payload: PaymentPayload) -> HandlerResult:
        try:
            validate_verify_request(payload)
        except PaymentValidationError as e:
            logger.info(f"Verify rejected: {e}")
            return HandlerResult(400, VerifyResponse(isValid=False, error=str(e)))

        decoded = decode_transaction(payload.transaction)

        try:
            await self.relay.sign(payload.transaction)
        except RelayError as e:
            logger.error(f"Relay verification failed: {e}")
            return HandlerResult(
                200,
                VerifyResponse(
                    isValid=False,
                    error=VALIDATION_FAILED,
                    details=str(e) if self.cfg.mock_mode else None,
                ),
            )

        logger.info(f"Payment verified (format={decoded.format.value})")
        return HandlerResult(
            200,
            VerifyResponse(
                isValid=True,
                network=payload.network,
                amount=payload.metadata.amount,
                recipient=payload.metadata.recipient,
                parsed=decoded.parsed,
            ),
        )

    async def settle(self, payload: PaymentPayload) -> HandlerResult:
        try:
            validate_settle_request(payload)
        except PaymentValidationError as e:
            return HandlerResult(400, SettleResponse(success=False, error=str(e)))

        try:
            signature = await self.relay.sign_and_send(payload.transaction)
        except RelayError as e:
            logger.error(f"Settlement failed: {e}")
            return HandlerResult(500, SettleResponse(success=False, error=str(e)))

        logger.info(f"Payment settled: {signature}")
        return HandlerResult(
            200,
            SettleResponse(
                success=True,
                signature=signature,
                network=payload.network,
                explorerUrl=self.explorer_url(signature),
            ),
        )

    async def fee_payer(self) -> str:
        try:
            return await self.relay.get_fee_payer_address()
        except RelayError as e:
            logger.warning(f"Fee payer lookup failed, advertising placeholder: {e}")
            return UNKNOWN_FEE_PAYER

    async def supported(self) -> HandlerResult:
        return HandlerResult(
            200,
            SupportedResponse(
                version=FACILITATOR_VERSION,
                network=self.cfg.network,
                paymentScheme=PAYMENT_SCHEME,
                feePayer=await self.fee_payer(),
                tokens=[TokenInfo(mint=self.cfg.usdc_mint, symbol="USDC", decimals=6)],
                endpoints={"verify": "/verify", "settle": "/settle"},
            ),
        )

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            mockMode=self.cfg.mock_mode,
            network=self.cfg.network,
        )

    def direct_payment(self, req: DirectPaymentRequest) -> HandlerResult:
        """Test-only payment stub; never touches the relay."""
        if not req.recipient or not req.amount:
            return HandlerResult(400, DirectPaymentResponse(success=False, error="Missing recipient or amount"))

        signature = f"Mock{uuid.uuid4().hex}"
        logger.info(f"Payment processed (mock): {signature}")
        return HandlerResult(
            200,
            DirectPaymentResponse(
                success=True,
                signature=signature,
                network=self.cfg.network,
                amount=req.amount,
                recipient=req.recipient,
                memo=req.memo or "",
                explorerUrl=self.explorer_url(signature),
            ),
        )
