from __future__ import annotations
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Iterator, Optional

from .errors import InvalidConfiguration, RootUnavailable
from .folders import aggregate_folders
from .models import DEFAULT_TOP_N, RootReport, ScanRequest
from .scanner import scan_files

logger = logging.getLogger(__name__)

ProgressCb = Callable[[str, int, int], None]  # (root, completed, total)


@dataclass
class ScanConfig:
    top_n: int = DEFAULT_TOP_N
    include_folders: bool = False
    deep_folders: bool = False
    follow_symlinks: bool = False
    one_file_system: bool = False
    workers: int = 1
    started_at: datetime = field(default_factory=lambda: datetime.now().replace(microsecond=0))

    def validate(self) -> "ScanConfig":
        if not isinstance(self.top_n, int) or isinstance(self.top_n, bool) or self.top_n < 1:
            raise InvalidConfiguration(f"top must be an integer >= 1, got {self.top_n!r}")
        if not isinstance(self.workers, int) or self.workers < 1:
            raise InvalidConfiguration(f"workers must be an integer >= 1, got {self.workers!r}")
        if self.deep_folders and not self.include_folders:
            raise InvalidConfiguration("deep folder mode requires folder ranking to be enabled")
        return self

    def request_for(self, root: str) -> ScanRequest:
        return ScanRequest(
            root=root,
            top_n=self.top_n,
            include_folders=self.include_folders,
            deep_folders=self.deep_folders,
            follow_symlinks=self.follow_symlinks,
            one_file_system=self.one_file_system,
        )


def scan_root(root: str,
              config: ScanConfig,
              progress: Optional[ProgressCb] = None,
              cancel_flag: Optional[Callable[[], bool]] = None,
              scandir=os.scandir) -> RootReport:
    t0 = time.time()
    request = config.request_for(root)
    report = RootReport(root=root, scanned_at=config.started_at)
    try:
        report.files = scan_files(request, cancel_flag=cancel_flag, scandir=scandir)
        if request.include_folders and not (cancel_flag and cancel_flag()):
            def tick(done: int, total: int):
                if progress:
                    progress(root, done, total)
            report.folders = aggregate_folders(request, progress=tick, cancel_flag=cancel_flag,
                                               workers=config.workers, scandir=scandir)
    except RootUnavailable as e:
        logger.warning("skipping root %s", e)
        report.error = str(e)
    report.cancelled = bool(cancel_flag and cancel_flag())
    report.elapsed_sec = time.time() - t0
    return report


def run_scan(roots: Iterable[str],
             config: ScanConfig,
             progress: Optional[ProgressCb] = None,
             cancel_flag: Optional[Callable[[], bool]] = None,
             scandir=os.scandir) -> Iterator[RootReport]:
    """Scan each root in turn, yielding one RootReport per root in input order.

    Configuration is checked before the first traversal. An unavailable root
    yields a report with ``error`` set and does not stop the remaining roots.
    """
    config.validate()
    roots = list(roots)

    def reports() -> Iterator[RootReport]:
        for root in roots:
            if cancel_flag and cancel_flag():
                break
            yield scan_root(root, config, progress=progress, cancel_flag=cancel_flag, scandir=scandir)
    return reports()
