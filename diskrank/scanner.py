from __future__ import annotations
import logging
import os
from typing import Callable, Optional

from .models import FileRecord, RankedResult, ScanRequest
from .topn import TopN
from .walker import check_root, root_device, walk

logger = logging.getLogger(__name__)


def scan_files(request: ScanRequest,
               cancel_flag: Optional[Callable[[], bool]] = None,
               scandir=os.scandir) -> RankedResult:
    root = check_root(request.root)
    top: TopN[FileRecord] = TopN(request.top_n)
    device = root_device(root) if request.one_file_system else None
    files = 0
    bytes_seen = 0
    for item in walk(root, follow_symlinks=request.follow_symlinks,
                     cancel_flag=cancel_flag, scandir=scandir, device=device):
        if not isinstance(item, FileRecord):
            continue
        files += 1
        bytes_seen += item.size
        top.offer(item.size, item)

    logger.info("%s: %d files, %d bytes", root, files, bytes_seen)
    return RankedResult(kind="files", records=top.drain(),
                        entries_seen=files, bytes_seen=bytes_seen)
