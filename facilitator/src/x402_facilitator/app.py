# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from .config import FacilitatorConfig
from .handler import PaymentFacilitator
from .middleware import BodySizeLimitMiddleware
from .relay import RelayClient, build_relay_client
from .routes import DISCRIMINANTS, router

logger = logging.getLogger(__name__)


def _log_banner(cfg: FacilitatorConfig) -> None:
    logger.info("SPL-8004 X402 Facilitator")
    logger.info(f"Listening on http://{cfg.host}:{cfg.port}")
    logger.info(f"Network: {cfg.network}")
    logger.info(f"Solana RPC: {cfg.solana_rpc_url}")
    logger.info(f"Kora RPC: {cfg.kora_rpc_url}")
    logger.info(f"Mock mode: {'ENABLED' if cfg.mock_mode else 'DISABLED'}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: FacilitatorConfig = app.state.cfg
    _log_banner(cfg)
    # Held for future on-chain checks; verification is delegated to the relay
    app.state.connection = AsyncClient(cfg.solana_rpc_url, commitment=Confirmed)
    try:
        yield
    finally:
        await app.state.connection.close()


def build_app(cfg: Optional[FacilitatorConfig] = None, relay: Optional[RelayClient] = None) -> FastAPI:
    cfg = cfg or FacilitatorConfig()
    app = FastAPI(
        title="SPL-8004 X402 Facilitator",
        description="x402 verify/settle facilitator backed by a Kora gasless relay",
        version="0.0.1",
        lifespan=lifespan,
    )
    app.state.cfg = cfg
    app.state.facilitator = PaymentFacilitator(cfg, relay or build_relay_client(cfg))

    # Registered before CORS so 413 responses still get CORS headers
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=cfg.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        content = {"error": "Invalid request body"}
        if cfg.mock_mode:
            content["message"] = str(exc.errors())
        flag = DISCRIMINANTS.get(request.url.path)
        if flag:
            content = {flag: False, **content}
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})

    app.include_router(router)

    logger.info("Facilitator app initialized")
    return app
