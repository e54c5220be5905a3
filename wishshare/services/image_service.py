"""
Image normalization - turn a remote image URL into a bounded inline JPEG.
Downloads are capped at settings.image_max_bytes; output fits inside
image_max_dimension x image_max_dimension and is re-encoded at reduced quality.
Any fetch or decode failure yields None (logged), never an exception.
"""

import base64
import io
import logging

import httpx
from fastapi.concurrency import run_in_threadpool
from PIL import Image

from wishshare.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class ImageTooLarge(Exception):
    pass


async def _download(client: httpx.AsyncClient, url: str, max_bytes: int) -> bytes:
    """Stream the body so an oversized download is aborted, not buffered."""
    async with client.stream("GET", url, follow_redirects=True) as response:
        response.raise_for_status()
        declared = response.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            raise ImageTooLarge(f"declared {declared} bytes")
        chunks = bytearray()
        async for chunk in response.aiter_bytes():
            chunks.extend(chunk)
            if len(chunks) > max_bytes:
                raise ImageTooLarge(f"more than {max_bytes} bytes")
        return bytes(chunks)


def _reencode(raw: bytes, max_dimension: int, quality: int) -> bytes:
    with Image.open(io.BytesIO(raw)) as img:
        img = img.convert("RGB")
        # thumbnail() keeps aspect ratio and never enlarges
        img.thumbnail((max_dimension, max_dimension))
        out = io.BytesIO()
        img.save(out, format="JPEG", quality=quality)
        return out.getvalue()


async def normalize_image(url: str, client: httpx.AsyncClient | None = None) -> str | None:
    """
    Fetch `url` and return a `data:image/jpeg;base64,...` URI, or None on failure.
    A client can be injected (tests pass one built on httpx.MockTransport).
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.image_fetch_timeout_seconds)
    try:
        raw = await _download(client, url, settings.image_max_bytes)
        # Decode and encode are CPU-bound; keep them off the event loop
        encoded = await run_in_threadpool(
            _reencode, raw, settings.image_max_dimension, settings.image_jpeg_quality
        )
    except Exception as e:
        logger.warning("normalize_image failed: url=%r error=%s", url, e)
        return None
    finally:
        if owns_client:
            await client.aclose()
    return "data:image/jpeg;base64," + base64.b64encode(encoded).decode("ascii")
