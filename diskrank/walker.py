from __future__ import annotations
import logging
import os
import stat as statmod
from typing import Callable, Iterator, List, Optional, Set, Tuple, Union

from .errors import RootUnavailable
from .models import DirectoryRef, FileRecord

logger = logging.getLogger(__name__)

CancelCb = Callable[[], bool]
Entry = Union[FileRecord, DirectoryRef]
DirId = Tuple[int, int]


def check_root(root: str) -> str:
    """Return the absolute form of ``root`` or raise RootUnavailable."""
    if not root:
        raise RootUnavailable(str(root), "empty path")
    path = os.path.abspath(root)
    if not os.path.exists(path):
        raise RootUnavailable(path, "does not exist")
    if not os.path.isdir(path):
        raise RootUnavailable(path, "not a directory")
    return path


def _list_dir(dir_path: str, scandir) -> List[os.DirEntry]:
    entries = []
    try:
        with scandir(dir_path) as it:
            for entry in it:
                entries.append(entry)
    except OSError as e:
        if not entries:
            raise
        logger.debug("partial listing of %s: %s", dir_path, e)
    entries.sort(key=lambda e: e.name)
    return entries


def _dir_identity(path: str, st: os.stat_result, follow_symlinks: bool) -> DirId:
    # На Windows DirEntry.stat() отдаёт st_ino/st_dev = 0
    if st.st_ino == 0 and st.st_dev == 0:
        st = os.stat(path, follow_symlinks=follow_symlinks)
    return (st.st_dev, st.st_ino)


def _iter_dir(dir_path: str,
              visited: Set[DirId],
              follow_symlinks: bool,
              scandir,
              cancel_flag: Optional[CancelCb],
              device: Optional[int] = None) -> Iterator[Entry]:
    try:
        entries = _list_dir(dir_path, scandir)
    except OSError as e:
        logger.debug("skipping unreadable directory %s: %s", dir_path, e)
        return

    for entry in entries:
        if cancel_flag and cancel_flag():
            return
        try:
            if entry.is_symlink() and not follow_symlinks:
                continue
            st = entry.stat(follow_symlinks=follow_symlinks)
        except OSError as e:
            logger.debug("cannot stat %s: %s", entry.path, e)
            continue

        mode = st.st_mode
        if statmod.S_ISDIR(mode):
            try:
                ident = _dir_identity(entry.path, st, follow_symlinks)
            except OSError as e:
                logger.debug("cannot identify %s: %s", entry.path, e)
                continue
            if device is not None and ident[0] != device:
                logger.debug("other filesystem, not descending: %s", entry.path)
                continue
            if ident in visited:
                logger.debug("already visited, not descending: %s", entry.path)
                continue
            visited.add(ident)
            yield DirectoryRef(path=entry.path, parent=dir_path, mtime=st.st_mtime)
        elif statmod.S_ISREG(mode):
            yield FileRecord(path=entry.path, size=int(st.st_size or 0),
                             parent=dir_path, mtime=st.st_mtime)


def _root_identity(root: str, follow_symlinks: bool) -> Optional[DirId]:
    try:
        st = os.stat(root)
    except OSError as e:
        logger.debug("cannot stat root %s: %s", root, e)
        return None
    return _dir_identity(root, st, follow_symlinks)


def root_device(root: str) -> Optional[int]:
    """st_dev of the filesystem holding ``root``, or None if it cannot be stat'ed."""
    ident = _root_identity(os.path.abspath(root), True)
    return ident[0] if ident else None


def walk(root: str,
         follow_symlinks: bool = False,
         cancel_flag: Optional[CancelCb] = None,
         scandir=os.scandir,
         device: Optional[int] = None) -> Iterator[Entry]:
    """Depth-first walk under ``root`` yielding FileRecord and DirectoryRef values.

    Entries of a directory come in name order and before the contents of its
    subdirectories. Directories that cannot be listed are skipped along with
    their subtree; a directory identity (st_dev, st_ino) is entered at most once.
    With ``device`` set, directories on any other filesystem are not entered.
    """
    root = os.path.abspath(root)
    root_id = _root_identity(root, follow_symlinks)
    if root_id is None:
        return
    visited: Set[DirId] = {root_id}
    stack = [root]
    while stack:
        if cancel_flag and cancel_flag():
            return
        dir_path = stack.pop()
        subdirs = []
        for item in _iter_dir(dir_path, visited, follow_symlinks, scandir, cancel_flag, device):
            if isinstance(item, DirectoryRef):
                subdirs.append(item.path)
            yield item
        stack.extend(reversed(subdirs))


def list_subdirectories(root: str,
                        follow_symlinks: bool = False,
                        scandir=os.scandir,
                        device: Optional[int] = None) -> List[DirectoryRef]:
    root = os.path.abspath(root)
    root_id = _root_identity(root, follow_symlinks)
    visited: Set[DirId] = {root_id} if root_id else set()
    return [e for e in _iter_dir(root, visited, follow_symlinks, scandir, None, device)
            if isinstance(e, DirectoryRef)]


def iter_files(root: str, **kw) -> Iterator[FileRecord]:
    for item in walk(root, **kw):
        if isinstance(item, FileRecord):
            yield item
