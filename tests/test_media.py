"""Tests for media providers (YouTube helpers, TikTok API client, image upscale)."""

import io
import os

import httpx
import pytest
from PIL import Image, UnidentifiedImageError
from unittest.mock import patch

from blitz.media import image, tiktok, youtube
from blitz.media.errors import InvalidMediaURL, MediaNotFound, MediaTooLarge, TikTokError


def _png(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


# ── Image ───────────────────────────────────────────────────

class TestUpscale:
    def test_doubles_dimensions(self):
        result = image.upscale(_png(10, 6))
        with Image.open(io.BytesIO(result)) as img:
            assert img.size == (20, 12)
            assert img.format == "JPEG"

    def test_custom_factor(self):
        with Image.open(io.BytesIO(image.upscale(_png(4, 4), factor=3))) as img:
            assert img.size == (12, 12)

    def test_not_an_image(self):
        with pytest.raises(UnidentifiedImageError):
            image.upscale(b"definitely not a picture")

    def test_too_large_for_telegram(self):
        with pytest.raises(ValueError, match="too large"):
            image.upscale(_png(5001, 1))

    def test_bad_factor(self):
        with pytest.raises(ValueError):
            image.upscale(_png(2, 2), factor=0)


# ── TikTok ──────────────────────────────────────────────────

def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestTikTok:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url.params.get("url")
            return httpx.Response(200, json={"code": 0, "data": {"play": "https://cdn/v.mp4", "title": "dance"}})

        async with _client(handler) as client:
            video = await tiktok.fetch_tiktok("https://vm.tiktok.com/abc/", client=client)

        assert video.play_url == "https://cdn/v.mp4"
        assert video.title == "dance"
        assert seen["url"] == "https://vm.tiktok.com/abc/"

    @pytest.mark.asyncio
    async def test_default_title(self):
        handler = lambda request: httpx.Response(200, json={"data": {"play": "https://cdn/v.mp4"}})
        async with _client(handler) as client:
            video = await tiktok.fetch_tiktok("https://vm.tiktok.com/abc/", client=client)
        assert video.title == "TikTok Video"

    @pytest.mark.asyncio
    async def test_api_message(self):
        handler = lambda request: httpx.Response(200, json={"code": -1, "msg": "Url parsing is failed!"})
        async with _client(handler) as client:
            with pytest.raises(TikTokError, match="Url parsing is failed!"):
                await tiktok.fetch_tiktok("https://vm.tiktok.com/abc/", client=client)

    @pytest.mark.asyncio
    async def test_empty_payload(self):
        handler = lambda request: httpx.Response(200, json={})
        async with _client(handler) as client:
            with pytest.raises(TikTokError, match="API might be down"):
                await tiktok.fetch_tiktok("https://vm.tiktok.com/abc/", client=client)

    @pytest.mark.asyncio
    async def test_http_error(self):
        handler = lambda request: httpx.Response(503)
        async with _client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await tiktok.fetch_tiktok("https://vm.tiktok.com/abc/", client=client)

    @pytest.mark.asyncio
    async def test_rejects_non_url(self):
        with pytest.raises(InvalidMediaURL):
            await tiktok.fetch_tiktok("not a link")


# ── YouTube ─────────────────────────────────────────────────

class TestYouTubeHelpers:
    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://m.youtube.com/shorts/dQw4w9WgXcQ",
        "youtube.com/watch?v=dQw4w9WgXcQ",
    ])
    def test_valid_urls(self, url):
        assert youtube.is_youtube_url(url)

    @pytest.mark.parametrize("url", [
        "", "https://vimeo.com/123", "https://www.youtube.com/", "never gonna give you up",
    ])
    def test_invalid_urls(self, url):
        assert not youtube.is_youtube_url(url)

    def test_sanitize_title(self):
        assert youtube.sanitize_title('AC/DC: "Back In Black"?') == "ACDC Back In Black"
        assert youtube.sanitize_title("???") == "media"

    @pytest.mark.parametrize("seconds,expected", [(None, "?"), (5, "0:05"), (212, "3:32"), (3725, "1:02:05")])
    def test_timestamp(self, seconds, expected):
        assert youtube.VideoInfo(url="u", title="t", duration=seconds).timestamp == expected


class TestYouTubeProvider:
    @pytest.mark.asyncio
    async def test_fetch_info(self):
        info = {"title": "Song: Live", "duration": 200, "webpage_url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}
        with patch("blitz.media.youtube._extract", return_value=info) as extract:
            result = await youtube.fetch_info("https://youtu.be/dQw4w9WgXcQ")
        assert result.title == "Song Live"
        assert result.duration == 200
        assert extract.call_args.args[2] is False

    @pytest.mark.asyncio
    async def test_fetch_info_rejects_other_sites(self):
        with pytest.raises(InvalidMediaURL):
            await youtube.fetch_info("https://vimeo.com/123")

    @pytest.mark.asyncio
    async def test_search_first(self):
        results = {"entries": [{"id": "dQw4w9WgXcQ", "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
                                "title": "Never Gonna Give You Up", "duration": 213}]}
        with patch("blitz.media.youtube._extract", return_value=results) as extract:
            video = await youtube.search_first("rick astley")
        assert extract.call_args.args[0] == "ytsearch1:rick astley"
        assert video.title == "Never Gonna Give You Up"
        assert video.timestamp == "3:33"

    @pytest.mark.asyncio
    async def test_search_builds_url_from_id(self):
        results = {"entries": [{"id": "dQw4w9WgXcQ", "url": "dQw4w9WgXcQ", "title": "x"}]}
        with patch("blitz.media.youtube._extract", return_value=results):
            video = await youtube.search_first("x")
        assert video.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    @pytest.mark.asyncio
    async def test_search_no_results(self):
        with patch("blitz.media.youtube._extract", return_value={"entries": []}):
            assert await youtube.search_first("zzzz") is None

    @pytest.mark.asyncio
    async def test_download(self, tmp_path):
        target = tmp_path / "abc.m4a"

        def fake_extract(url, opts, download):
            assert opts["format"] == youtube.AUDIO_FORMAT
            target.write_bytes(b"\x00" * 1024)
            return {"title": "My/Song", "duration": 61, "_filename": str(target)}

        with patch("blitz.media.youtube._extract", side_effect=fake_extract):
            media = await youtube.download("https://youtu.be/dQw4w9WgXcQ", "audio", str(tmp_path))

        assert media.path == str(target)
        assert media.filename == "MySong.m4a"
        assert media.duration == 61

    @pytest.mark.asyncio
    async def test_download_too_large_removes_file(self, tmp_path):
        target = tmp_path / "abc.mp4"

        def fake_extract(url, opts, download):
            target.write_bytes(b"\x00" * 2048)
            return {"title": "big", "_filename": str(target)}

        with patch("blitz.media.youtube._extract", side_effect=fake_extract):
            with pytest.raises(MediaTooLarge):
                await youtube.download("https://youtu.be/dQw4w9WgXcQ", "video", str(tmp_path), max_bytes=1024)
        assert not os.path.exists(target)

    @pytest.mark.asyncio
    async def test_download_skipped_by_size_limit(self, tmp_path):
        info = {"title": "big", "filesize": 10 ** 9, "_filename": str(tmp_path / "missing.mp4")}
        with patch("blitz.media.youtube._extract", return_value=info):
            with pytest.raises(MediaTooLarge):
                await youtube.download("https://youtu.be/dQw4w9WgXcQ", "video", str(tmp_path))

    @pytest.mark.asyncio
    async def test_download_missing_file(self, tmp_path):
        info = {"title": "gone", "_filename": str(tmp_path / "missing.mp4")}
        with patch("blitz.media.youtube._extract", return_value=info):
            with pytest.raises(MediaNotFound):
                await youtube.download("https://youtu.be/dQw4w9WgXcQ", "video", str(tmp_path))

    @pytest.mark.asyncio
    async def test_unknown_kind(self, tmp_path):
        with pytest.raises(ValueError):
            await youtube.download("https://youtu.be/dQw4w9WgXcQ", "gif", str(tmp_path))
