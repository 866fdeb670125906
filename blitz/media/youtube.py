"""YouTube search and download via yt-dlp.

yt-dlp is synchronous, so every call runs in a worker thread to keep the
bot's event loop responsive. Files are written to a caller-provided
directory; the caller uploads and deletes them.
"""

import asyncio
import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

import yt_dlp

from .errors import InvalidMediaURL, MediaNotFound, MediaTooLarge

logger = logging.getLogger("blitz.media.youtube")

_YOUTUBE_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.|m\.|music\.)?"
    r"(?:youtube\.com/(?:watch\?(?:.*&)?v=|shorts/|embed/|live/)|youtu\.be/)"
    r"[\w-]{11}"
)
_UNSAFE_TITLE_CHARS = re.compile(r'[<>:"/\\|?*]+')

AUDIO_FORMAT = "bestaudio[ext=m4a]/bestaudio/best"
VIDEO_FORMAT = "best[ext=mp4][vcodec!=none][acodec!=none]/best"

# Telegram Bot API upload limit
DEFAULT_MAX_BYTES = 50 * 1024 * 1024


@dataclass
class VideoInfo:
    url: str
    title: str
    duration: Optional[int] = None

    @property
    def timestamp(self) -> str:
        """Duration as m:ss or h:mm:ss ("?" when unknown)."""
        if self.duration is None:
            return "?"
        hours, rest = divmod(int(self.duration), 3600)
        minutes, seconds = divmod(rest, 60)
        if hours:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


@dataclass
class DownloadedMedia:
    path: str
    title: str
    duration: Optional[int]
    kind: str

    @property
    def filename(self) -> str:
        ext = os.path.splitext(self.path)[1]
        return f"{self.title}{ext}"


def is_youtube_url(url: str) -> bool:
    return bool(url) and bool(_YOUTUBE_URL_RE.match(url.strip()))


def sanitize_title(title: str) -> str:
    """Drop characters that are unsafe in file names."""
    cleaned = _UNSAFE_TITLE_CHARS.sub("", title or "").strip()
    return cleaned or "media"


def _base_opts() -> dict:
    return {
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
    }


def _extract(target: str, opts: dict, download: bool) -> dict:
    with yt_dlp.YoutubeDL(opts) as ydl:
        info = ydl.extract_info(target, download=download)
        if download and info is not None:
            info["_filename"] = ydl.prepare_filename(info)
        return info


async def fetch_info(url: str) -> VideoInfo:
    """Fetch title and duration without downloading."""
    if not is_youtube_url(url):
        raise InvalidMediaURL("Please provide a valid YouTube link.")
    info = await asyncio.to_thread(_extract, url, _base_opts(), False)
    if not info:
        raise MediaNotFound("Couldn't read that video.")
    return VideoInfo(
        url=info.get("webpage_url") or url,
        title=sanitize_title(info.get("title", "")),
        duration=info.get("duration"),
    )


async def search_first(query: str) -> Optional[VideoInfo]:
    """Return the top YouTube search hit for ``query``, or None."""
    opts = _base_opts()
    opts["extract_flat"] = "in_playlist"
    info = await asyncio.to_thread(_extract, f"ytsearch1:{query}", opts, False)
    entries = [e for e in (info or {}).get("entries") or [] if e]
    if not entries:
        logger.info(f"No search results for {query!r}")
        return None
    top = entries[0]
    url = top.get("url") or top.get("webpage_url")
    if url and not url.startswith("http"):
        url = f"https://www.youtube.com/watch?v={top.get('id')}"
    return VideoInfo(url=url, title=top.get("title") or query, duration=top.get("duration"))


async def download(url: str, kind: str, dest_dir: str, max_bytes: int = DEFAULT_MAX_BYTES) -> DownloadedMedia:
    """Download ``url`` as ``kind`` ("audio" or "video") into ``dest_dir``.

    Raises:
        MediaTooLarge: the file exceeds ``max_bytes`` (the file is removed).
        MediaNotFound: yt-dlp finished but produced no file.
    """
    if kind not in ("audio", "video"):
        raise ValueError(f"Unknown media kind: {kind}")

    os.makedirs(dest_dir, exist_ok=True)
    opts = _base_opts()
    opts.update({
        "format": AUDIO_FORMAT if kind == "audio" else VIDEO_FORMAT,
        "outtmpl": os.path.join(dest_dir, "%(id)s.%(ext)s"),
        "max_filesize": max_bytes,
    })

    info = await asyncio.to_thread(_extract, url, opts, True)
    path = (info or {}).get("_filename")
    if not path or not os.path.exists(path):
        # max_filesize makes yt-dlp skip the download instead of failing
        size = (info or {}).get("filesize") or (info or {}).get("filesize_approx")
        if size and size > max_bytes:
            raise MediaTooLarge(int(size), max_bytes)
        raise MediaNotFound("Download failed or file not found.")

    size = os.path.getsize(path)
    if size > max_bytes:
        os.remove(path)
        raise MediaTooLarge(size, max_bytes)

    logger.info(f"Downloaded {kind}: {path} ({size} bytes)")
    return DownloadedMedia(
        path=path,
        title=sanitize_title(info.get("title", "")),
        duration=info.get("duration"),
        kind=kind,
    )
