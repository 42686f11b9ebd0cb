import pytest

QtCore = pytest.importorskip("PySide6.QtCore")

from diskrank.orchestrator import ScanConfig  # noqa: E402
from diskrank.worker import CancelFlag, ScanThread  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])


def test_cancel_flag():
    flag = CancelFlag()
    assert not flag()
    flag.cancel()
    assert flag()


def test_scan_thread_emits_reports(qapp, tmp_path, make_tree):
    make_tree({"a/f.bin": 9, "b/g.bin": 4})
    thread = ScanThread([str(tmp_path), str(tmp_path / "missing")],
                        ScanConfig(top_n=5, include_folders=True))
    reports, ticks, finished, errors = [], [], [], []
    thread.report.connect(lambda rep: reports.append(rep))
    thread.progress.connect(lambda root, done, total: ticks.append((done, total)))
    thread.done.connect(lambda: finished.append(True))
    thread.error.connect(lambda msg: errors.append(msg))

    thread.run()  # синхронно, без запуска потока

    assert errors == []
    assert finished == [True]
    assert [r.ok for r in reports] == [True, False]
    assert reports[0].files.sizes() == [9, 4]
    assert ticks[-1] == (2, 2)


def test_scan_thread_reports_bad_config(qapp):
    thread = ScanThread(["/"], ScanConfig(top_n=0))
    errors = []
    thread.error.connect(lambda msg: errors.append(msg))
    thread.run()
    assert errors and "top" in errors[0]
