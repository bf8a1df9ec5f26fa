import threading
from pathlib import Path

import pytest

pytest.importorskip("pytestqt")

from PyQt6 import QtWidgets

from byteshift import gui
from byteshift.transform import ErrorKind, ShiftMode, TransformResult


def test_worker_emits_progress_and_result(qtbot, tmp_path):
    src = tmp_path / "f.txt"
    src.write_bytes(b"abcdef")
    worker = gui.TransformWorker(src, ShiftMode.ENCRYPT, chunk_size=4)
    progress, results = [], []
    worker.progress.connect(lambda done, total: progress.append((done, total)))
    worker.done.connect(results.append)

    # run() on the calling thread delivers signals directly
    worker.run()

    assert progress == [(0, 6), (4, 6), (6, 6)]
    assert len(results) == 1 and results[0].ok
    assert (tmp_path / "f.txt.encrypted").read_bytes() == b"bcdefg"


def test_window_runs_transform_on_worker(qtbot, tmp_path, monkeypatch):
    src = tmp_path / "f.txt"
    src.write_bytes(b"abc")
    shown = []
    monkeypatch.setattr(QtWidgets.QMessageBox, "information", lambda *args: shown.append(args[1:]))
    window = gui.MainWindow(chunk_size=2)
    qtbot.addWidget(window)
    window.input_path.setText(str(src))

    window.start(ShiftMode.ENCRYPT)
    assert not window.encrypt_btn.isEnabled()
    qtbot.waitUntil(lambda: window.worker is None, timeout=5000)

    assert window.encrypt_btn.isEnabled()
    assert window.progress.isHidden()
    assert shown[0][0] == "Encryption"
    assert "File encrypted successfully!" in shown[0][1]
    assert (tmp_path / "f.txt.encrypted").read_bytes() == b"bcd"


def test_window_reports_failure(qtbot, monkeypatch):
    shown = []
    monkeypatch.setattr(QtWidgets.QMessageBox, "critical", lambda *args: shown.append(args[1:]))
    window = gui.MainWindow()
    qtbot.addWidget(window)

    window.on_done(TransformResult(ShiftMode.DECRYPT, Path("x"), error=ErrorKind.SOURCE_OPEN_FAILED, message="gone"))

    assert shown == [("Decryption", "Failed to open file for reading.\ngone")]


def test_start_without_path_cancelled_dialog(qtbot, monkeypatch):
    monkeypatch.setattr(QtWidgets.QFileDialog, "getOpenFileName", lambda *args: ("", ""))
    window = gui.MainWindow()
    qtbot.addWidget(window)

    window.start(ShiftMode.DECRYPT)

    assert window.worker is None
    assert window.decrypt_btn.isEnabled()


def test_progress_scales_large_files(qtbot):
    window = gui.MainWindow()
    qtbot.addWidget(window)

    window.on_progress(3 * 2**30, 6 * 2**30)

    assert window.progress.maximum() == 100
    assert window.progress.value() == 50


def test_finished_worker_does_not_release_newer_worker(qtbot, tmp_path, monkeypatch):
    src = tmp_path / "f.txt"
    src.write_bytes(b"abc")
    release = threading.Event()
    real_transform = gui.transform_file

    def slow_transform(*args, **kwargs):
        release.wait(5)
        return real_transform(*args, **kwargs)

    monkeypatch.setattr(gui, "transform_file", slow_transform)
    monkeypatch.setattr(QtWidgets.QMessageBox, "information", lambda *args: None)
    window = gui.MainWindow()
    qtbot.addWidget(window)
    window.input_path.setText(str(src))

    window.start(ShiftMode.ENCRYPT)
    first = window.worker
    released = []
    first.finished.connect(lambda: released.append(True))
    newer = gui.TransformWorker(src, ShiftMode.ENCRYPT, parent=window)
    window.worker = newer
    release.set()
    qtbot.waitUntil(lambda: bool(released), timeout=5000)

    assert window.worker is newer
    assert not newer.isRunning()
