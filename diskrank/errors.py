from __future__ import annotations


class DiskRankError(Exception):
    pass


class InvalidConfiguration(DiskRankError, ValueError):
    pass


class RootUnavailable(DiskRankError):
    """The requested root does not exist, is not a directory or cannot be listed."""

    def __init__(self, path: str, reason: str = "not a directory"):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
