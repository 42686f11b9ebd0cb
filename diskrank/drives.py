from __future__ import annotations
import logging
import os
from typing import Dict, List, Optional

import psutil

from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)


def list_drives() -> List[Dict[str, object]]:
    drives = []
    seen = set()
    for p in psutil.disk_partitions(all=False):
        mp = p.mountpoint
        if not mp:
            continue
        mp_norm = os.path.abspath(mp)
        if mp_norm in seen:
            continue
        seen.add(mp_norm)
        try:
            u = psutil.disk_usage(mp_norm)
        except OSError as e:
            logger.debug("no usage for %s: %s", mp_norm, e)
            continue
        drives.append({
            "mountpoint": mp_norm,
            "fstype": p.fstype,
            "total": int(u.total),
            "used": int(u.used),
            "free": int(u.free),
            "percent": float(u.percent),
        })
    drives.sort(key=lambda d: d["mountpoint"].lower())
    return drives


def _pick(index: int, drives: List[Dict[str, object]]) -> str:
    if not 1 <= index <= len(drives):
        raise InvalidConfiguration(f"no drive number {index} (1..{len(drives)})")
    return str(drives[index - 1]["mountpoint"])


def parse_selection(text: Optional[str], drives: List[Dict[str, object]]) -> List[str]:
    """Turn operator input into root paths.

    Accepts ``all``/``*``, drive numbers from the listing (``1,3``, ``2-4``),
    and literal paths. Duplicates are dropped, first mention wins.
    """
    text = (text or "").strip()
    if not text:
        raise InvalidConfiguration("nothing selected")
    if text.lower() in ("all", "*"):
        return [str(d["mountpoint"]) for d in drives]

    out: List[str] = []
    for token in (t.strip() for t in text.split(",")):
        if not token:
            continue
        if token.isdigit():
            picked = [_pick(int(token), drives)]
        elif "-" in token and all(part.strip().isdigit() for part in token.split("-", 1)):
            lo, hi = (int(part) for part in token.split("-", 1))
            if lo > hi:
                raise InvalidConfiguration(f"bad range: {token}")
            picked = [_pick(i, drives) for i in range(lo, hi + 1)]
        elif os.path.isabs(token) or os.path.exists(token):
            picked = [token]
        else:
            raise InvalidConfiguration(f"cannot understand selection: {token!r}")
        for p in picked:
            if p not in out:
                out.append(p)
    if not out:
        raise InvalidConfiguration("nothing selected")
    return out
