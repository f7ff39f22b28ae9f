# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import abc
import itertools
import logging
import uuid
from typing import Any, Dict, Optional

import httpx

from .config import FacilitatorConfig

logger = logging.getLogger(__name__)

MOCK_FEE_PAYER = "MockPayerAddress11111111111111111111111111"


class RelayError(RuntimeError):
    """The relay rejected a request or could not be reached."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class RelayClient(abc.ABC):
    """Contract the facilitator expects from a gasless relay."""

    @abc.abstractmethod
    async def sign(self, transaction: str) -> str:
        """Validate and co-sign without broadcasting. Returns the signature."""

    @abc.abstractmethod
    async def sign_and_send(self, transaction: str) -> str:
        """Co-sign and broadcast. Returns the transaction signature."""

    @abc.abstractmethod
    async def get_fee_payer_address(self) -> str:
        """Address of the account sponsoring fees."""


class KoraRelayClient(RelayClient):
    """JSON-RPC client for a Kora node."""

    def __init__(
        self,
        rpc_url: str,
        api_key: Optional[str] = None,
        timeout_s: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not rpc_url:
            raise ValueError("rpc_url required for KoraRelayClient")
        self.rpc_url = rpc_url
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._transport = transport
        self._ids = itertools.count(1)

    def _headers(self) -> Dict[str, str]:
        return {"x-api-key": self.api_key} if self.api_key else {}

    async def _call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        req_json = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                resp = await client.post(self.rpc_url, json=req_json, headers=self._headers())
        except httpx.TimeoutException as e:
            raise RelayError(f"Kora {method} timed out after {self.timeout_s}s") from e
        except httpx.HTTPError as e:
            raise RelayError(f"Kora {method} request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise RelayError(f"Kora {method} returned HTTP {resp.status_code}: {resp.text}")

        err = data.get("error")
        if err:
            if isinstance(err, dict):
                raise RelayError(str(err.get("message") or err), code=err.get("code"))
            raise RelayError(str(err))
        if resp.status_code != 200:
            raise RelayError(f"Kora {method} returned HTTP {resp.status_code}: {resp.text}")

        result = data.get("result")
        if not isinstance(result, dict):
            raise RelayError(f"Kora {method} returned no result")
        return result

    @staticmethod
    def _field(result: Dict[str, Any], key: str, method: str) -> str:
        value = result.get(key)
        if not isinstance(value, str) or not value:
            raise RelayError(f"Kora {method} response missing '{key}'")
        return value

    async def sign(self, transaction: str) -> str:
        result = await self._call("signTransaction", {"transaction": transaction})
        return self._field(result, "signature", "signTransaction")

    async def sign_and_send(self, transaction: str) -> str:
        result = await self._call("signAndSendTransaction", {"transaction": transaction})
        return self._field(result, "signature", "signAndSendTransaction")

    async def get_fee_payer_address(self) -> str:
        result = await self._call("getPayerSigner", {})
        return self._field(result, "signer_address", "getPayerSigner")


class MockRelayClient(RelayClient):
    """Offline stand-in that fabricates successful relay responses."""

    def __init__(self, fee_payer: Optional[str] = None):
        self.fee_payer = fee_payer or MOCK_FEE_PAYER

    @staticmethod
    def _signature() -> str:
        return f"Mock{uuid.uuid4().hex}"

    async def sign(self, transaction: str) -> str:
        logger.info("[MOCK] signTransaction")
        return self._signature()

    async def sign_and_send(self, transaction: str) -> str:
        logger.info("[MOCK] signAndSendTransaction")
        return self._signature()

    async def get_fee_payer_address(self) -> str:
        return self.fee_payer


def build_relay_client(
    cfg: FacilitatorConfig, transport: Optional[httpx.AsyncBaseTransport] = None
) -> RelayClient:
    if cfg.mock_mode:
        return MockRelayClient(cfg.mock_fee_payer)
    return KoraRelayClient(cfg.kora_rpc_url, cfg.kora_api_key, cfg.kora_timeout_s, transport=transport)
