"""
tests.test_middleware

Security headers, CORS, request ids and body limits.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI, Request

from mongo_api.api.app import create_app
from mongo_api.api.middleware import BodySizeLimitMiddleware
from mongo_api.settings import Settings


@pytest.mark.asyncio
async def test_security_headers_and_request_id(settings: Settings) -> None:
    app = create_app(settings=settings)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/healthz", headers={"x-request-id": "req-123"})

    assert r.headers["x-request-id"] == "req-123"
    assert r.headers["x-content-type-options"] == "nosniff"
    assert r.headers["cross-origin-resource-policy"] == "cross-origin"
    assert r.headers["x-frame-options"] == "SAMEORIGIN"
    assert "content-security-policy" not in r.headers


@pytest.mark.asyncio
async def test_content_security_policy_is_opt_in(settings: Settings) -> None:
    app = create_app(
        settings=settings.model_copy(update={"content_security_policy": "default-src 'self'"})
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/healthz")
    assert r.headers["content-security-policy"] == "default-src 'self'"


@pytest.mark.asyncio
async def test_cors_allows_any_origin_by_default(settings: Settings) -> None:
    app = create_app(settings=settings)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.options(
            "/assets",
            headers={
                "origin": "https://elsewhere.example",
                "access-control-request-method": "POST",
            },
        )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_declared_body_over_limit_is_rejected(settings: Settings) -> None:
    app = create_app(settings=settings.model_copy(update={"body_limit_bytes": 64}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.post("/assets", files={"file": ("big.bin", b"x" * 1024)})
    assert r.status_code == 413


@pytest.mark.asyncio
async def test_streamed_body_over_limit_is_rejected() -> None:
    app = FastAPI()

    @app.post("/echo")
    async def echo(request: Request) -> dict[str, int]:
        return {"size": len(await request.body())}

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=10)

    async def chunks():
        for _ in range(4):
            yield b"12345"

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        small = await client.post("/echo", content=b"12345")
        big = await client.post("/echo", content=chunks())

    assert small.json() == {"size": 5}
    assert big.status_code == 413
