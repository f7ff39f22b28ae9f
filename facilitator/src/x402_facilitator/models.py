# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# -------------------------------
# Requests
# -------------------------------


class PaymentMetadata(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    endpoint: Optional[str] = None
    amount: Optional[str] = Field(None, description="Decimal amount, e.g. '1.5'")
    recipient: Optional[str] = None


class PaymentPayload(BaseModel):
    version: Optional[Union[str, int]] = Field(None, description="x402 protocol version (informational)")
    network: Optional[str] = None
    transaction: Optional[str] = Field(None, description="base64 signed transaction")
    metadata: Optional[PaymentMetadata] = None


class DirectPaymentRequest(BaseModel):
    recipient: Optional[str] = None
    amount: Optional[Union[str, float, int]] = None
    memo: Optional[str] = None


# -------------------------------
# Responses
# -------------------------------


class VerifyResponse(BaseModel):
    isValid: bool
    network: Optional[str] = None
    amount: Optional[str] = None
    recipient: Optional[str] = None
    parsed: Optional[bool] = None
    error: Optional[str] = None
    details: Optional[str] = None


class SettleResponse(BaseModel):
    success: bool
    signature: Optional[str] = None
    network: Optional[str] = None
    explorerUrl: Optional[str] = None
    error: Optional[str] = None


class TokenInfo(BaseModel):
    mint: str
    symbol: str
    decimals: int


class SupportedResponse(BaseModel):
    version: str
    network: str
    paymentScheme: str = "exact"
    feePayer: str
    tokens: List[TokenInfo]
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    mockMode: bool
    network: str


class DirectPaymentResponse(BaseModel):
    success: bool
    signature: Optional[str] = None
    network: Optional[str] = None
    amount: Optional[Union[str, float, int]] = None
    recipient: Optional[str] = None
    memo: Optional[str] = None
    explorerUrl: Optional[str] = None
    error: Optional[str] = None
