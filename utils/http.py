"""
HTTP helpers for handlers that call external APIs.
"""

import asyncio
from typing import Any, NamedTuple, Optional

import aiohttp

from utils.logger import get_logger

logger = get_logger("HTTP")

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=10)


class JsonResponse(NamedTuple):
    """Outcome of a JSON GET request."""

    success: bool
    status: int
    data: Optional[Any] = None


async def get_json(url: str, timeout: aiohttp.ClientTimeout = DEFAULT_TIMEOUT) -> JsonResponse:
    """
    GET a URL and decode the JSON body.

    Network errors and undecodable bodies are reported as an unsuccessful
    response with status 0 (or the HTTP status), never raised.

    Args:
        url: Absolute URL
        timeout: Total request timeout

    Returns:
        JsonResponse with the decoded body on 2xx
    """
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as resp:
                if resp.status >= 400:
                    return JsonResponse(False, resp.status)
                return JsonResponse(True, resp.status, await resp.json(content_type=None))
    except (aiohttp.ClientError, ValueError, asyncio.TimeoutError) as e:
        logger.warning(f"GET {url} failed: {e}")
        return JsonResponse(False, 0)
