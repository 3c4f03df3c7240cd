"""BLAKE3 integrity tokens for in-memory payloads."""
import asyncio

from blake3 import blake3

INTEGRITY_PREFIX = "blake3-"


async def blake3_bytes(data: bytes) -> str:
    """Calculate BLAKE3 hex digest asynchronously (non-blocking)."""
    def _hash():
        return blake3(data).hexdigest()

    # Large payloads would otherwise stall the event loop
    return await asyncio.to_thread(_hash)


async def integrity_token(data: bytes) -> str:
    return f"{INTEGRITY_PREFIX}{await blake3_bytes(data)}"
