"""Line tokenizer shared by the instance and solution parsers."""

from __future__ import annotations

import re

_LINE_BREAKS = re.compile(r"[\r\n]+")


def split_lines(text: str) -> list[str]:
    return re.split(r"\r?\n", text or "")


def token_and_value(line: str) -> list[str]:
    """Split ``TOKEN: value`` into ``[token, value]``, or ``[token]`` without a colon.

    Never raises: blank input yields ``[""]`` and malformed content is left for
    the caller to reject.
    """
    cleaned = _LINE_BREAKS.sub(" ", (line or "").replace("\t", "")).strip()
    parts = cleaned.split(":", 1)
    if len(parts) == 1:
        return [parts[0].strip()]
    return [parts[0].strip(), _LINE_BREAKS.sub(" ", parts[1]).strip()]
