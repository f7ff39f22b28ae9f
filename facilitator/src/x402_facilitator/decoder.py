# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
"""Best-effort sniffing of the Solana transaction envelope.

The result is advisory: an unrecognized payload is still forwarded to the
relay, which remains the authority on whether the transaction is valid.
"""
from __future__ import annotations

import base64
import binascii
import logging
from enum import Enum
from typing import NamedTuple, Optional

from solders.transaction import Transaction, VersionedTransaction

logger = logging.getLogger(__name__)

# High bit of the first message byte marks a versioned message
_VERSION_PREFIX_MASK = 0x80


class TransactionFormat(str, Enum):
    legacy = "legacy"
    versioned = "versioned"
    unrecognized = "unrecognized"


class DecodedTransaction(NamedTuple):
    format: TransactionFormat

    @property
    def parsed(self) -> bool:
        return self.format is not TransactionFormat.unrecognized


def _b64_to_bytes(encoded: str) -> Optional[bytes]:
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError):
        return None


def _is_legacy(raw: bytes) -> bool:
    try:
        tx = Transaction.from_bytes(raw)
    except Exception:
        return False
    return not (tx.message.header.num_required_signatures & _VERSION_PREFIX_MASK)


def _is_versioned(raw: bytes) -> bool:
    try:
        VersionedTransaction.from_bytes(raw)
    except Exception:
        return False
    return True


def decode_transaction(encoded: str) -> DecodedTransaction:
    """Classify a base64 transaction as legacy, versioned or unrecognized.

    Legacy is tried first, then versioned. Never raises.
    """
    raw = _b64_to_bytes(encoded or "")
    if raw:
        if _is_legacy(raw):
            return DecodedTransaction(TransactionFormat.legacy)
        if _is_versioned(raw):
            return DecodedTransaction(TransactionFormat.versioned)
    logger.warning("Could not parse transaction locally, deferring to relay validation")
    return DecodedTransaction(TransactionFormat.unrecognized)
