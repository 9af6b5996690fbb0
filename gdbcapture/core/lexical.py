"""
Lexical helpers shared by the extractors.
"""

from __future__ import annotations

import re

_ADDRESS_RE = re.compile(r"0[xX]([0-9a-fA-F]+)")
_LINE_PREFIX_RE = re.compile(r"^\s*(\d+)(?::|(?=\s)|$)\s*")

# Characters that end a token in addition to whitespace.
TOKEN_PUNCTUATION = "(),;:<>\"'"


def parse_address(token: str | None) -> int | None:
    """Parse a ``0x``-prefixed hexadecimal token.

    Only the leading run of hex digits counts, so ``"0x401136."`` and
    ``"0x401136,"`` both parse.  Anything without the prefix is not an
    address.
    """
    if not token:
        return None
    m = _ADDRESS_RE.match(token.strip())
    if not m:
        return None
    return int(m.group(1), 16)


def find_address(text: str | None, start: int = 0) -> int | None:
    """Return the first hexadecimal address found anywhere after ``start``."""
    if not text:
        return None
    m = _ADDRESS_RE.search(text, start)
    if not m:
        return None
    return int(m.group(1), 16)


def address_after(text: str, marker: str) -> int | None:
    """Parse the token that immediately follows ``marker``, if present."""
    index = text.find(marker)
    if index < 0:
        return None
    token, _ = next_token(text, index + len(marker))
    return parse_address(token)


def next_token(text: str, start: int = 0, punctuation: str = TOKEN_PUNCTUATION) -> tuple[str, int]:
    """Return the next whitespace/punctuation-delimited token and its end offset.

    Leading whitespace is skipped.  An empty token is returned when the text is
    exhausted.
    """
    i = start
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    j = i
    while j < n and not text[j].isspace() and text[j] not in punctuation:
        j += 1
    return text[i:j], j


def strip_line_prefix(line: str) -> tuple[int | None, str]:
    """Split a leading line number (``42``, ``42:``) from the rest of the line.

    Returns ``(None, line.lstrip())`` when the line does not start with a
    number.
    """
    m = _LINE_PREFIX_RE.match(line)
    if not m:
        return None, line.lstrip()
    return int(m.group(1)), line[m.end():]


def format_address(value: int) -> str:
    return f"0x{value:x}"
