"""Error classification for user-facing messages."""

import asyncio

import httpx
from PIL import UnidentifiedImageError
from telegram.error import TelegramError
from yt_dlp.utils import DownloadError

from ..media.errors import MediaError


def classify_error(e: Exception) -> str:
    """Classify a command failure into a short message for the chat.

    Provider errors that already carry friendly text pass it through;
    everything else maps to a generic line by exception type.
    """
    # 1: Our own provider errors carry user-facing text
    if isinstance(e, MediaError):
        return str(e)

    # 2: yt-dlp failures (private, age-restricted, removed, bad link)
    if isinstance(e, DownloadError):
        detail = str(e).replace("ERROR: ", "")[:100]
        return (
            "Sorry, I couldn't download that. The video might be private, "
            f"age-restricted, or the link is invalid. Error: {detail}"
        )

    # 3: Not an image
    if isinstance(e, UnidentifiedImageError):
        return "Sorry, I couldn't process that image for upscaling."

    # 4: httpx HTTP status errors
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code == 429:
            return "The remote service is rate limiting us. Please wait a moment and try again."
        if 500 <= code < 600:
            return "The remote service is having server issues. Please try again later."
        return f"The remote service returned HTTP {code}. Please try again later."

    # 5: Network / timeout errors
    if isinstance(e, httpx.TimeoutException) or isinstance(e, asyncio.TimeoutError):
        return "Request timed out. Please try again."
    if isinstance(e, httpx.TransportError):
        return "Cannot reach the remote service. Please try again later."

    # 6: Telegram refused the upload or message
    if isinstance(e, TelegramError):
        return f"Telegram rejected the request: {e.message[:100]}"

    # 7: Bad input that slipped through validation
    if isinstance(e, ValueError):
        return f"Sorry, that didn't work: {str(e)[:100]}"

    # 8: Fallback: include type name for debugging
    type_name = type(e).__name__
    return f"Oops! Something went wrong ({type_name}). Please try again. ⚡"
