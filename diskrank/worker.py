from __future__ import annotations
import logging
from typing import List, Optional

from PySide6.QtCore import QThread, Signal

from .orchestrator import ScanConfig, run_scan

logger = logging.getLogger(__name__)


class CancelFlag:
    def __init__(self):
        self._cancel = False

    def cancel(self):
        self._cancel = True

    def __call__(self):
        return self._cancel


class ScanThread(QThread):
    progress = Signal(str, int, int)  # root, completed, total
    report = Signal(object)           # RootReport, по одному на корень
    done = Signal()
    error = Signal(str)

    def __init__(self, roots: List[str], config: Optional[ScanConfig] = None):
        super().__init__()
        self.roots = roots
        self.config = config or ScanConfig()
        self.cancel_flag = CancelFlag()

    def run(self):
        try:
            def prog(root: str, completed: int, total: int):
                self.progress.emit(root, completed, total)
            for rep in run_scan(self.roots, self.config, progress=prog, cancel_flag=self.cancel_flag):
                self.report.emit(rep)
            self.done.emit()
        except Exception as e:
            logger.exception("scan thread failed")
            self.error.emit(str(e))
