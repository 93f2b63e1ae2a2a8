"""Helpers for interpreting small response bodies (errors, sentinels)."""

import json

_MAX_MESSAGE_LENGTH = 300
_MESSAGE_KEYS = ("message", "detail", "error")


def extract_message(body: bytes) -> str:
    """Return the service-provided message in ``body``, or '' when there is none.

    JSON objects contribute their ``message``/``detail``/``error`` field, JSON
    strings are used as-is, and short plain text is taken verbatim. Markup
    (proxy error pages) is never treated as a message.
    """
    text = body.decode("utf-8", errors="replace").strip()
    if not text:
        return ""
    try:
        data = json.loads(text)
    except ValueError:
        if text.startswith("<") or len(text) > _MAX_MESSAGE_LENGTH:
            return ""
        return text
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, dict):
        for key in _MESSAGE_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return ""


def is_empty_payload(body: bytes, sentinel: str | None) -> bool:
    """True when ``body`` is the service's empty-input sentinel, bare or JSON-quoted."""
    if not sentinel:
        return False
    text = body.decode("utf-8", errors="replace").strip()
    if text == sentinel:
        return True
    try:
        return json.loads(text) == sentinel
    except ValueError:
        return False
