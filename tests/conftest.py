# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
import base64
import os
import sys
from typing import List, Optional

import httpx
import pytest


def _add_source_root_to_syspath() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    for path in (root, os.path.join(root, "facilitator", "src"), os.path.dirname(__file__)):
        if path not in sys.path:
            sys.path.insert(0, path)


_add_source_root_to_syspath()


# Import after adding to syspath
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message, MessageV0
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction, VersionedTransaction

from mock_relay import build_mock_relay
from x402_facilitator import FacilitatorConfig, KoraRelayClient, RelayClient, RelayError

RELAY_URL = "http://kora.test/"
RELAY_API_KEY = "test-api-key"
FEE_PAYER = "FeePayer1111111111111111111111111111111111"
USDC_MINT = "Gh9ZwEmdLJ8DscKNTkTqPbNwLNNBjuSzaG9Vp2KGtKJr"
GARBAGE_TX = base64.b64encode(b"hello world").decode()


def _transfer_ix(payer: Keypair) -> Instruction:
    return transfer(TransferParams(from_pubkey=payer.pubkey(), to_pubkey=Keypair().pubkey(), lamports=1_000))


@pytest.fixture
def legacy_tx_b64() -> str:
    """A signed legacy SOL transfer, base64 encoded."""
    payer = Keypair()
    blockhash = Hash.default()
    msg = Message.new_with_blockhash([_transfer_ix(payer)], payer.pubkey(), blockhash)
    tx = Transaction([payer], msg, blockhash)
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def versioned_tx_b64() -> str:
    """A signed v0 SOL transfer, base64 encoded."""
    payer = Keypair()
    msg = MessageV0.try_compile(payer.pubkey(), [_transfer_ix(payer)], [], Hash.default())
    tx = VersionedTransaction(msg, [payer])
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def test_env(monkeypatch) -> None:
    """Set up test environment variables."""
    monkeypatch.setenv("KORA_RPC_URL", RELAY_URL)
    monkeypatch.setenv("KORA_API_KEY", RELAY_API_KEY)
    monkeypatch.setenv("KORA_TIMEOUT_S", "5")
    monkeypatch.setenv("NETWORK", "solana-devnet")
    monkeypatch.setenv("USDC_MINT", USDC_MINT)
    monkeypatch.setenv("MOCK_MODE", "false")
    monkeypatch.delenv("KORA_SIGNER_ADDRESS", raising=False)


@pytest.fixture
def cfg(test_env) -> FacilitatorConfig:
    return FacilitatorConfig()


@pytest.fixture
def mock_cfg(test_env) -> FacilitatorConfig:
    return FacilitatorConfig(mock_mode=True)


@pytest.fixture
def sample_metadata() -> dict:
    return {"endpoint": "/x", "amount": "1.5", "recipient": "Rcp1xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx"}


@pytest.fixture
def sample_verify_payload(legacy_tx_b64: str, sample_metadata: dict) -> dict:
    return {
        "version": "0.0.1",
        "network": "solana-devnet",
        "transaction": legacy_tx_b64,
        "metadata": sample_metadata,
    }


class RecordingRelay(RelayClient):
    """In-process relay double that records calls and can be told to fail."""

    def __init__(self, fail_with: Optional[Exception] = None, fee_payer: str = FEE_PAYER):
        self.calls: List[str] = []
        self.fail_with = fail_with
        self.fee_payer = fee_payer

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def sign(self, transaction: str) -> str:
        self.calls.append("sign")
        self._maybe_fail()
        return "sig-verify"

    async def sign_and_send(self, transaction: str) -> str:
        self.calls.append("sign_and_send")
        self._maybe_fail()
        return "sig-settle"

    async def get_fee_payer_address(self) -> str:
        self.calls.append("get_fee_payer_address")
        self._maybe_fail()
        return self.fee_payer


@pytest.fixture
def recording_relay() -> RecordingRelay:
    return RecordingRelay()


@pytest.fixture
def failing_relay() -> RecordingRelay:
    return RecordingRelay(fail_with=RelayError("insufficient funds for fee payer"))


@pytest.fixture
def make_relay():
    return RecordingRelay


@pytest.fixture
def mock_relay_app():
    """Live-mode relay backed by the in-process mock Kora app."""
    return build_mock_relay(api_key=RELAY_API_KEY, fee_payer=FEE_PAYER)


@pytest.fixture
def kora_relay(mock_relay_app) -> KoraRelayClient:
    return KoraRelayClient(
        RELAY_URL,
        RELAY_API_KEY,
        timeout_s=5.0,
        transport=httpx.ASGITransport(app=mock_relay_app),
    )


@pytest.fixture
def garbage_tx_b64() -> str:
    """Valid base64 that is neither a legacy nor a versioned transaction."""
    return GARBAGE_TX


@pytest.fixture
def fee_payer() -> str:
    return FEE_PAYER
