from __future__ import annotations
import os
from datetime import datetime
from typing import Optional


def format_bytes(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}" if u != "B" else f"{int(x)} {u}"
        x /= 1024.0
    return f"{x:.2f} PB"


def format_timestamp(ts: Optional[float]) -> str:
    if not ts:
        return ""
    try:
        return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return ""


def display_path(path: str) -> str:
    """Printable form of a path; undecodable bytes become ``\\xNN`` escapes."""
    return os.fsencode(path).decode("utf-8", "backslashreplace")


def root_label(root: str) -> str:
    """Short filesystem-safe tag for a root, e.g. ``C`` for ``C:\\`` or ``home_user`` for ``/home/user``."""
    drive, tail = os.path.splitdrive(os.path.abspath(root))
    parts = [drive.rstrip(":")] if drive else []
    parts += [p for p in tail.replace("\\", "/").split("/") if p]
    label = "_".join(parts)
    safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in label)
    return safe or "root"
