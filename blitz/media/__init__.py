"""Media providers: YouTube (yt-dlp), TikTok (tikwm API), image resize (Pillow).

Each provider is a thin one-shot wrapper: no retries, caching or transcoding.
"""
