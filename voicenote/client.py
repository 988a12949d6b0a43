"""
voicenote.client - Shared httpx client handling.

Stages accept an injected AsyncClient (owned and closed by the caller) or
open a short-lived one per call.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

# Transcribing a long recording can take minutes server-side.
TRANSCRIPTION_TIMEOUT = httpx.Timeout(
    connect=10.0,
    read=300.0,
    write=60.0,
    pool=5.0,
)

POST_PROCESSING_TIMEOUT = httpx.Timeout(
    connect=10.0,
    read=120.0,
    write=10.0,
    pool=5.0,
)


@asynccontextmanager
async def client_session(
    client: httpx.AsyncClient | None,
    timeout: httpx.Timeout,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a fresh one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as session:
        yield session


def bearer_headers(api_key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}
