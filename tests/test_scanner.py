import os

import pytest

from diskrank.errors import RootUnavailable
from diskrank.models import ScanRequest
from diskrank.scanner import scan_files


def test_scenario_ties_keep_first_encounter(tmp_path, make_tree):
    make_tree({"a.bin": 10, "b.bin": 5, "c.bin": 100, "d.bin": 1, "e.bin": 100})
    res = scan_files(ScanRequest(root=str(tmp_path), top_n=3))
    assert res.kind == "files"
    assert res.sizes() == [100, 100, 10]
    assert [os.path.basename(r.path) for r in res] == ["c.bin", "e.bin", "a.bin"]
    assert res.entries_seen == 5
    assert res.bytes_seen == 216


def test_top_one(tmp_path, make_tree):
    make_tree({"x/small": 2, "y/big": 50, "z": 7})
    res = scan_files(ScanRequest(root=str(tmp_path), top_n=1))
    assert res.sizes() == [50]


def test_top_larger_than_file_count_returns_all_sorted(tmp_path, make_tree):
    make_tree({"a": 3, "b/c": 9, "d": 0})
    res = scan_files(ScanRequest(root=str(tmp_path), top_n=50))
    assert res.sizes() == [9, 3, 0]
    assert len(res) == 3


def test_empty_root(tmp_path):
    res = scan_files(ScanRequest(root=str(tmp_path), top_n=5))
    assert len(res) == 0
    assert res.entries_seen == 0


def test_idempotent(tmp_path, make_tree):
    make_tree({"a/1": 4, "a/2": 4, "b/3": 4, "c": 1})
    req = ScanRequest(root=str(tmp_path), top_n=3)
    assert scan_files(req).records == scan_files(req).records


def test_unreadable_subdir_same_as_absent(tmp_path, make_tree, failing_scandir):
    make_tree({"one/a": 30, "two/b": 20, "three/c": 10})
    make_tree({"bad/huge": 999, "bad/deeper/x": 500})
    scandir = failing_scandir(unreadable=[tmp_path / "bad"])
    with_bad = scan_files(ScanRequest(root=str(tmp_path), top_n=10), scandir=scandir)

    other = tmp_path.parent / (tmp_path.name + "_clean")
    other.mkdir()
    make_tree({"one/a": 30, "two/b": 20, "three/c": 10}, base=other)
    clean = scan_files(ScanRequest(root=str(other), top_n=10))
    assert with_bad.sizes() == clean.sizes() == [30, 20, 10]
    assert [os.path.relpath(r.path, tmp_path) for r in with_bad] == \
        [os.path.relpath(r.path, other) for r in clean]


def test_missing_root_raises(tmp_path):
    with pytest.raises(RootUnavailable):
        scan_files(ScanRequest(root=str(tmp_path / "nope")))


def test_one_file_system_skips_mounted_subtree(tmp_path, make_tree, failing_scandir):
    make_tree({"home/a.bin": 40, "media/usb/film.mkv": 9000})
    scandir = failing_scandir(mounted=[tmp_path / "media" / "usb"])
    crossing = scan_files(ScanRequest(root=str(tmp_path), top_n=5), scandir=scandir)
    assert crossing.sizes() == [9000, 40]
    staying = scan_files(ScanRequest(root=str(tmp_path), top_n=5, one_file_system=True),
                         scandir=scandir)
    assert staying.sizes() == [40]
