import os
import re
import secrets
import time

MAX_BASE_LEN = 60
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def sanitize_base(filename: str) -> str:
    """'My Photo (1).JPG' -> 'myphoto1'. Never empty."""
    stem, _ = os.path.splitext(os.path.basename(filename or ""))
    base = _NON_ALNUM.sub("", stem.lower())[:MAX_BASE_LEN]
    return base or "file"


def file_extension(filename: str) -> str:
    """'.jpg' (lowercased, with dot) or '' when there is none."""
    _, ext = os.path.splitext(os.path.basename(filename or ""))
    ext = ext.lower()
    return ext if re.fullmatch(r"\.[a-z0-9]{1,10}", ext) else ""


def unique_object_name(filename: str, *, now_ms: int | None = None) -> str:
    """
    '<ms timestamp>-<random token>-<sanitized base><ext>'.
    Two calls with the same filename never collide, even within the same millisecond.
    """
    ts = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{ts}-{secrets.token_hex(6)}-{sanitize_base(filename)}{file_extension(filename)}"
