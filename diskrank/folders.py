from __future__ import annotations
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional

from .models import DirectoryRef, FileRecord, FolderRecord, RankedResult, ScanRequest
from .topn import TopN
from .walker import check_root, list_subdirectories, root_device, walk

logger = logging.getLogger(__name__)

ProgressCb = Callable[[int, int], None]  # (completed, total)


def folder_size(path: str,
                follow_symlinks: bool = False,
                cancel_flag: Optional[Callable[[], bool]] = None,
                scandir=os.scandir,
                device: Optional[int] = None) -> int:
    total = 0
    for item in walk(path, follow_symlinks=follow_symlinks,
                     cancel_flag=cancel_flag, scandir=scandir, device=device):
        if isinstance(item, FileRecord):
            total += item.size
    return total


def nested_folder_sizes(ref: DirectoryRef,
                        follow_symlinks: bool = False,
                        cancel_flag: Optional[Callable[[], bool]] = None,
                        scandir=os.scandir,
                        device: Optional[int] = None) -> List[FolderRecord]:
    """One walk over ``ref``: a FolderRecord for it and for every directory below.

    Records come in walk (pre-) order, ``ref`` first.
    """
    top = os.path.abspath(ref.path)
    order: List[DirectoryRef] = []
    totals: Dict[str, int] = {top: 0}
    for item in walk(top, follow_symlinks=follow_symlinks,
                     cancel_flag=cancel_flag, scandir=scandir, device=device):
        if isinstance(item, DirectoryRef):
            order.append(item)
            totals[item.path] = 0
        else:
            totals[item.parent] = totals.get(item.parent, 0) + item.size

    # потомки идут после родителя, поэтому обратный порядок = снизу вверх
    for d in reversed(order):
        totals[d.parent] = totals.get(d.parent, 0) + totals[d.path]

    out = [FolderRecord(path=ref.path, size=totals[top], mtime=ref.mtime)]
    out.extend(FolderRecord(path=d.path, size=totals[d.path], mtime=d.mtime) for d in order)
    return out


def aggregate_folders(request: ScanRequest,
                      progress: Optional[ProgressCb] = None,
                      cancel_flag: Optional[Callable[[], bool]] = None,
                      workers: int = 1,
                      scandir=os.scandir) -> RankedResult:
    root = check_root(request.root)
    top: TopN[FolderRecord] = TopN(request.top_n)
    # подпапки меряем относительно устройства корня, а не своего
    device = root_device(root) if request.one_file_system else None
    subdirs = list_subdirectories(root, follow_symlinks=request.follow_symlinks,
                                  scandir=scandir, device=device)
    total = len(subdirs)
    if progress:
        progress(0, total)

    def measure(ref: DirectoryRef) -> List[FolderRecord]:
        if request.deep_folders:
            return nested_folder_sizes(ref, request.follow_symlinks, cancel_flag, scandir, device)
        size = folder_size(ref.path, request.follow_symlinks, cancel_flag, scandir, device)
        return [FolderRecord(path=ref.path, size=size, mtime=ref.mtime)]

    candidates = 0
    bytes_seen = 0

    def consume(results: Iterable[List[FolderRecord]]):
        nonlocal candidates, bytes_seen
        for done, records in enumerate(results, 1):
            bytes_seen += records[0].size
            for rec in records:
                candidates += 1
                top.offer(rec.size, rec)
            if progress:
                progress(done, total)
            if cancel_flag and cancel_flag():
                break

    if workers > 1 and total > 1:
        # суммы независимы; в селектор кладём из этого потока, в порядке подпапок
        with ThreadPoolExecutor(max_workers=min(workers, total)) as pool:
            consume(pool.map(measure, subdirs))
    else:
        consume(measure(ref) for ref in subdirs)

    logger.info("%s: %d folder candidates from %d subdirectories", root, candidates, total)
    return RankedResult(kind="folders", records=top.drain(),
                        entries_seen=candidates, bytes_seen=bytes_seen)
