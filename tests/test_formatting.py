"""Tests for the Telegram HTML helpers."""

import blitz.communication as communication
from blitz import formatting
from blitz.formatting import bold, code, escape, pre, strip_html


class TestFormatting:
    def test_escape(self):
        assert escape("<b> & co") == "&lt;b&gt; &amp; co"
        assert escape(None) == ""

    def test_wrappers_escape_content(self):
        assert bold("a<b") == "<b>a&lt;b</b>"
        assert code(".ttt move 1") == "<code>.ttt move 1</code>"
        assert pre("1 | 2") == "<pre>1 | 2</pre>"

    def test_strip_html(self):
        assert strip_html("<b>alice</b> &amp; <code>bob</code>") == "alice & bob"

    def test_communication_reexports_helpers(self):
        assert communication.escape is formatting.escape
        assert communication.strip_html is formatting.strip_html
