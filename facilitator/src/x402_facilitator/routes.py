# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .handler import HandlerResult, PaymentFacilitator
from .models import (
    DirectPaymentRequest,
    DirectPaymentResponse,
    HealthResponse,
    PaymentPayload,
    SettleResponse,
    SupportedResponse,
    VerifyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["x402-facilitator"])

# Failure flag each route puts in an error body
DISCRIMINANTS = {"/verify": "isValid", "/settle": "success", "/payment": "success"}


def get_facilitator(request: Request) -> PaymentFacilitator:
    return request.app.state.facilitator


def _json(result: HandlerResult, req_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=result.status_code,
        content=result.body.model_dump(exclude_none=True),
        headers={"X-Request-ID": req_id},
    )


def _fault_response(path: str, e: Exception, req_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={DISCRIMINANTS[path]: False, "error": str(e)},
        headers={"X-Request-ID": req_id},
    )


@router.post("/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify(body: Optional[PaymentPayload] = None, facilitator: PaymentFacilitator = Depends(get_facilitator)):
    """Verify a payment transaction without broadcasting it."""
    req_id = uuid.uuid4().hex
    body = body or PaymentPayload()
    logger.info(f"[{req_id}] Verifying payment: {body.metadata}")
    try:
        result = await facilitator.verify(body)
    except Exception as e:
        logger.exception(f"[{req_id}] Verification error")
        return _fault_response("/verify", e, req_id)
    return _json(result, req_id)


@router.post("/settle", response_model=SettleResponse, response_model_exclude_none=True)
async def settle(body: Optional[PaymentPayload] = None, facilitator: PaymentFacilitator = Depends(get_facilitator)):
    """Co-sign and broadcast a payment transaction through the relay."""
    req_id = uuid.uuid4().hex
    body = body or PaymentPayload()
    logger.info(f"[{req_id}] Settling payment: {body.metadata}")
    try:
        result = await facilitator.settle(body)
    except Exception as e:
        logger.exception(f"[{req_id}] Settlement error")
        return _fault_response("/settle", e, req_id)
    return _json(result, req_id)


@router.get("/supported", response_model=SupportedResponse)
async def supported(facilitator: PaymentFacilitator = Depends(get_facilitator)):
    """Advertise network, token and fee payer."""
    result = await facilitator.supported()
    return _json(result, uuid.uuid4().hex)


@router.get("/health", response_model=HealthResponse)
async def health(facilitator: PaymentFacilitator = Depends(get_facilitator)) -> HealthResponse:
    return facilitator.health()


@router.post("/payment", response_model=DirectPaymentResponse, response_model_exclude_none=True)
async def payment(body: Optional[DirectPaymentRequest] = None, facilitator: PaymentFacilitator = Depends(get_facilitator)):
    """Direct payment stub for local testing."""
    req_id = uuid.uuid4().hex
    body = body or DirectPaymentRequest()
    logger.info(f"[{req_id}] Direct payment request: recipient={body.recipient} amount={body.amount}")
    try:
        result = facilitator.direct_payment(body)
    except Exception as e:
        logger.exception(f"[{req_id}] Payment error")
        return _fault_response("/payment", e, req_id)
    return _json(result, req_id)
