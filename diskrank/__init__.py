from __future__ import annotations

from .errors import DiskRankError, InvalidConfiguration, RootUnavailable
from .models import DirectoryRef, FileRecord, FolderRecord, RankedResult, RootReport, ScanRequest
from .orchestrator import ScanConfig, run_scan

__version__ = "0.3.0"

__all__ = [
    "DiskRankError",
    "InvalidConfiguration",
    "RootUnavailable",
    "DirectoryRef",
    "FileRecord",
    "FolderRecord",
    "RankedResult",
    "RootReport",
    "ScanRequest",
    "ScanConfig",
    "run_scan",
]
