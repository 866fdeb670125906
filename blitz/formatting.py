"""Telegram HTML helpers.

Telegram supports a limited HTML subset:
  <b>bold</b>, <i>italic</i>, <code>inline code</code>, <pre>code block</pre>,
  <a href="url">link</a>

Rich payloads are sent with ``parse_mode="HTML"``; every piece of user
supplied text (display names, video titles) must go through ``escape``.
"""

import html as _html
import re


def escape(text: str) -> str:
    """Escape HTML special characters in plain text segments."""
    return _html.escape(text or "", quote=False)


def bold(text: str) -> str:
    return f"<b>{escape(text)}</b>"


def code(text: str) -> str:
    return f"<code>{escape(text)}</code>"


def pre(text: str) -> str:
    return f"<pre>{escape(text)}</pre>"


def strip_html(text: str) -> str:
    """Best-effort plain-text fallback for a rich payload."""
    return _html.unescape(re.sub(r"<[^>]+>", "", text or ""))
