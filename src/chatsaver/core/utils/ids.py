"""Stable conversation identifiers derived from the source name and page URL"""

import string
from urllib.parse import urlsplit


_BASE36 = string.digits + string.ascii_lowercase

# Path segments that are route names rather than conversation ids
_ROUTE_SEGMENTS = {
    "chatgpt": {"c", "g", "chat"},
    "claude": {"chat", "new"},
}
_MIN_ID_LENGTH = 9


def _path_segments(url: str) -> list[str]:
    try:
        parts = urlsplit(url)
    except ValueError:
        return []
    if not parts.scheme:
        return []
    return [p for p in parts.path.split("/") if p]


def string_hash(text: str) -> int:
    """Signed 32-bit `h * 31 + unit` hash over UTF-16 code units (JavaScript/Java style)."""
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(source: str, url: str) -> str:
    """`<source>_<conversation id from the URL path>`, else `<source>_<base36 hash of source_url>`."""
    skip = _ROUTE_SEGMENTS.get(source)
    if skip is not None:
        for segment in _path_segments(url):
            if len(segment) >= _MIN_ID_LENGTH and segment not in skip:
                return f"{source}_{segment}"

    return f"{source}_{to_base36(abs(string_hash(f'{source}_{url}')))}"
