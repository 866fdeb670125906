"""TikTok download through the public tikwm.com API (experimental).

The API resolves a TikTok share link to a direct video URL which Telegram
can fetch itself, so nothing is downloaded locally.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import InvalidMediaURL, TikTokError

logger = logging.getLogger("blitz.media.tiktok")

DEFAULT_API_URL = "https://www.tikwm.com/api/"


@dataclass
class TikTokVideo:
    play_url: str
    title: str


async def fetch_tiktok(
    link: str,
    api_url: str = DEFAULT_API_URL,
    timeout: float = 15.0,
    client: Optional[httpx.AsyncClient] = None,
) -> TikTokVideo:
    """Resolve a TikTok link to a playable video URL.

    Args:
        link: TikTok share link
        api_url: tikwm-compatible endpoint
        timeout: Request timeout in seconds
        client: Optional client (tests inject one with a mock transport)

    Raises:
        TikTokError: the API answered without a video (its ``msg`` is kept)
        httpx.HTTPError: network failure or non-2xx status
    """
    if not link or not link.startswith(("http://", "https://")):
        raise InvalidMediaURL("Please provide a TikTok video link.")

    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=timeout)
    try:
        response = await client.get(api_url, params={"url": link}, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    finally:
        if own_client:
            await client.aclose()

    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, dict) and data.get("play"):
        return TikTokVideo(play_url=data["play"], title=data.get("title") or "TikTok Video")

    if isinstance(payload, dict) and payload.get("msg"):
        logger.info(f"tikwm rejected {link}: {payload['msg']}")
        raise TikTokError(f"Could not fetch TikTok video. API says: {payload['msg']}")

    raise TikTokError(
        "Could not fetch TikTok video. The API might be down, the link invalid/private, "
        "or the format isn't supported by this method."
    )
