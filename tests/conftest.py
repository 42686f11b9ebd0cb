import contextlib
import os

import pytest


class BrokenStatEntry:
    """DirEntry stand-in whose stat() fails, as if the file vanished after listing."""

    def __init__(self, entry):
        self._entry = entry
        self.name = entry.name
        self.path = entry.path

    def is_symlink(self):
        return self._entry.is_symlink()

    def stat(self, follow_symlinks=True):
        raise FileNotFoundError(2, "No such file or directory", self.path)


class OtherDeviceEntry:
    """DirEntry stand-in that reports a different st_dev, like a mount point."""

    def __init__(self, entry):
        self._entry = entry
        self.name = entry.name
        self.path = entry.path

    def is_symlink(self):
        return self._entry.is_symlink()

    def stat(self, follow_symlinks=True):
        st = self._entry.stat(follow_symlinks=follow_symlinks)
        fields = list(st[:10])
        fields[2] = st.st_dev + 1
        return os.stat_result(fields)


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a {relative_path: size} mapping; a size of None makes a directory."""
    def make(spec, base=None):
        base = base or tmp_path
        for rel, size in spec.items():
            p = base / rel
            if size is None:
                p.mkdir(parents=True, exist_ok=True)
            else:
                p.parent.mkdir(parents=True, exist_ok=True)
                p.write_bytes(b"x" * size)
        return base
    return make


@pytest.fixture
def failing_scandir():
    """scandir replacement that cannot list ``unreadable`` dirs nor stat ``vanished`` files.

    Entries named in ``mounted`` report another device.
    """
    def factory(unreadable=(), vanished=(), mounted=()):
        bad_dirs = {os.path.abspath(str(p)) for p in unreadable}
        gone = {os.path.abspath(str(p)) for p in vanished}
        other_dev = {os.path.abspath(str(p)) for p in mounted}

        def wrap(e):
            p = os.path.abspath(e.path)
            if p in gone:
                return BrokenStatEntry(e)
            if p in other_dev:
                return OtherDeviceEntry(e)
            return e

        @contextlib.contextmanager
        def scandir(path):
            if os.path.abspath(path) in bad_dirs:
                raise PermissionError(13, "Permission denied", path)
            with os.scandir(path) as it:
                yield [wrap(e) for e in it]
        return scandir
    return factory
