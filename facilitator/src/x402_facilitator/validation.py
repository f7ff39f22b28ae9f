# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from .models import PaymentPayload


class StructuralReason(str, Enum):
    missing_transaction = "Missing transaction data"
    missing_metadata = "Missing payment metadata"
    invalid_amount = "Invalid payment amount"


class PaymentValidationError(ValueError):
    def __init__(self, reason: StructuralReason):
        super().__init__(reason.value)
        self.reason = reason


def _require(cond: bool, reason: StructuralReason) -> None:
    if not cond:
        raise PaymentValidationError(reason)


def parse_amount(value: Any) -> Optional[float]:
    """Parse a declared payment amount; None when it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def validate_settle_request(payload: PaymentPayload) -> None:
    _require(bool(payload.transaction), StructuralReason.missing_transaction)


def validate_verify_request(payload: PaymentPayload) -> None:
    """Check a verify payload, stopping at the first failure.

    Order: transaction bytes, metadata, then a strictly positive amount.
    """
    validate_settle_request(payload)
    _require(payload.metadata is not None, StructuralReason.missing_metadata)
    amount = parse_amount(payload.metadata.amount)
    _require(amount is not None and amount > 0, StructuralReason.invalid_amount)
