"""Base64 codec for the GitHub contents API."""

from __future__ import annotations

import base64


def encode_content(text: str) -> str:
    """UTF-8 encode *text* and return it as a base64 string."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(encoded: str) -> str:
    """Decode a base64 payload as returned by GitHub.

    GitHub wraps the payload at 60 columns, so embedded newlines are
    stripped first.  Invalid UTF-8 (binary files) is replaced rather than
    raised.
    """
    raw = base64.b64decode(encoded.replace("\n", ""))
    return raw.decode("utf-8", errors="replace")
