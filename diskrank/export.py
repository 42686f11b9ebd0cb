from __future__ import annotations
import csv
import json
import logging
import os
import tempfile
import time
from typing import Dict, Iterable, List

from .models import FileRecord, RankedResult, RootReport
from .utils import display_path, format_bytes, format_timestamp, root_label

logger = logging.getLogger(__name__)

CSV_HEADER = ["Rank", "Size", "SizeBytes", "Path", "Parent", "LastModified"]
STAMP_FORMAT = "%Y%m%d_%H%M%S"


def to_rows(result: RankedResult) -> List[Dict[str, object]]:
    rows = []
    for rank, rec in enumerate(result.records, 1):
        rows.append({
            "rank": rank,
            "size_human": format_bytes(rec.size),
            "size_bytes": rec.size,
            "path": display_path(rec.path),
            "parent": display_path(rec.parent) if isinstance(rec, FileRecord) else "N/A",
            "last_modified": format_timestamp(rec.mtime),
        })
    return rows


def _write_csv(path: str, result: RankedResult) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(CSV_HEADER)
        for row in to_rows(result):
            w.writerow([row["rank"], row["size_human"], row["size_bytes"],
                        row["path"], row["parent"], row["last_modified"]])


def _free_label(directory: str, label: str, stamp: str, prefixes: List[str]) -> str:
    # разные корни могут дать одинаковую метку (/a/b и /a_b)
    candidate = label
    n = 1
    while any(os.path.exists(os.path.join(directory, f"{p}_{candidate}_{stamp}.csv")) for p in prefixes):
        n += 1
        candidate = f"{label}-{n}"
    return candidate


def export_csv(report: RootReport, directory: str) -> List[str]:
    """Write LargestFiles_/LargestFolders_ CSV files for one root; returns written paths."""
    os.makedirs(directory, exist_ok=True)
    stamp = report.scanned_at.strftime(STAMP_FORMAT)
    results = [(prefix, result) for prefix, result in
               (("LargestFiles", report.files), ("LargestFolders", report.folders))
               if result is not None]
    label = _free_label(directory, root_label(report.root), stamp, [p for p, _ in results])
    written = []
    for prefix, result in results:
        path = os.path.join(directory, f"{prefix}_{label}_{stamp}.csv")
        _write_csv(path, result)
        logger.info("exported %d rows to %s", len(result), path)
        written.append(path)
    return written


def report_to_dict(report: RootReport) -> Dict[str, object]:
    d: Dict[str, object] = {
        "root": display_path(report.root),
        "scanned_at": report.scanned_at.isoformat(),
        "elapsed_sec": round(report.elapsed_sec, 3),
        "cancelled": report.cancelled,
        "error": display_path(report.error) if report.error else None,
    }
    for key, result in (("files", report.files), ("folders", report.folders)):
        d[key] = to_rows(result) if result is not None else None
    return d


def export_json(reports: Iterable[RootReport], path: str) -> None:
    data = [report_to_dict(r) for r in reports]
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".diskrank-", suffix=".json", dir=parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump({"created": time.time(), "roots": data}, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        os.unlink(tmp)
        raise
