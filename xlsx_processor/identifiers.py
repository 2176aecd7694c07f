"""
Identifier list handling.

Users paste one identifier per line, or upload a plain-text file holding the
same thing. Uploaded files may arrive in any legacy encoding.
"""

from __future__ import annotations

import logging
from typing import List

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"


def parse_identifier_text(text: str) -> List[str]:
    """
    Split free text into identifiers: one per line, stripped, blanks dropped.

    Duplicates are kept; only membership matters downstream.
    """
    return [line.strip() for line in text.split("\n") if line.strip()]


def decode_text_bytes(raw: bytes) -> str:
    """
    Decode uploaded text bytes.

    Rules:
    - A UTF-8 BOM means utf-8-sig.
    - Otherwise use charset-normalizer's best guess, then plain UTF-8.
    - If nothing decodes cleanly, decode UTF-8 with replacement characters.
    """
    if raw.startswith(UTF8_BOM):
        return raw.decode("utf-8-sig", errors="replace")

    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None

    for encoding in (detected, "utf-8"):
        if encoding is None:
            continue
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("decode with %s failed", encoding)

    logger.warning("falling back to utf-8 with replacement characters")
    return raw.decode("utf-8", errors="replace")
