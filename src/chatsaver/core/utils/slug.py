"""Filesystem-safe names for exported conversations"""

import re


_UNSAFE_RE = re.compile(r'[<>:"/\\|?*]')


def safe_filename(title: str, default: str = "conversation") -> str:
    """Replace characters that are invalid in file names with '_'."""
    title = (title or "").strip()
    return _UNSAFE_RE.sub("_", title) if title else default
