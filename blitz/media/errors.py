"""Media provider errors."""


class MediaError(Exception):
    """Base class for download/search/image failures with a user-facing message."""


class InvalidMediaURL(MediaError):
    pass


class MediaNotFound(MediaError):
    pass


class MediaTooLarge(MediaError):
    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File too large ({size_bytes / (1024 * 1024):.1f} MB). "
            f"Telegram limit is {limit_bytes // (1024 * 1024)} MB."
        )


class TikTokError(MediaError):
    pass
