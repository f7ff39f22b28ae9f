# Copyright 2025 t54 labs
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

from .routes import DISCRIMINANTS

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_body_bytes`` with a 413.

    The declared Content-Length is checked first. Chunked requests carry no
    Content-Length, so the streamed body is also counted as it arrives and
    reading stops as soon as the limit is passed. An accepted body is
    replayed to the app as a single message.
    """

    def __init__(self, app, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def _reject(self, scope, receive, send, size: int) -> None:
        logger.warning(f"Request body too large on {scope['path']}: {size} bytes (limit: {self.max_body_bytes})")
        content = {"error": "Request body too large"}
        flag = DISCRIMINANTS.get(scope["path"])
        if flag:
            content = {flag: False, **content}
        response = JSONResponse(status_code=413, content=content)
        await response(scope, receive, send)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_body_bytes:
            await self._reject(scope, receive, send, int(length))
            return

        chunks = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before the body was complete
                return
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.max_body_bytes:
                await self._reject(scope, receive, send, size)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay():
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)
