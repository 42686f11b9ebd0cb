from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional, Union

DEFAULT_TOP_N = 20


@dataclass(frozen=True)
class FileRecord:
    path: str
    size: int
    parent: str
    mtime: float = 0.0


@dataclass(frozen=True)
class DirectoryRef:
    path: str
    parent: str
    mtime: float = 0.0


@dataclass(frozen=True)
class FolderRecord:
    path: str
    size: int  # сумма всех читаемых файлов поддерева
    mtime: float = 0.0


Record = Union[FileRecord, FolderRecord]


@dataclass(frozen=True)
class ScanRequest:
    root: str
    top_n: int = DEFAULT_TOP_N
    include_folders: bool = False
    deep_folders: bool = False
    follow_symlinks: bool = False
    one_file_system: bool = False


@dataclass
class RankedResult:
    kind: str                      # "files" | "folders"
    records: List[Record] = field(default_factory=list)  # size desc, stable
    entries_seen: int = 0
    bytes_seen: int = 0

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def sizes(self) -> List[int]:
        return [r.size for r in self.records]


@dataclass
class RootReport:
    root: str
    scanned_at: datetime
    files: Optional[RankedResult] = None
    folders: Optional[RankedResult] = None
    error: Optional[str] = None
    cancelled: bool = False
    elapsed_sec: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None
