"""
Byteshift GUI
- Desktop front end using PyQt6
- Encrypt: writes <file>.encrypted with every byte shifted by +1
- Decrypt: strips ".encrypted" from the name and shifts every byte by -1

The transform runs on a worker thread; progress and the result come back as
signals so the window stays responsive.
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

from PyQt6 import QtCore, QtGui, QtWidgets

from byteshift.transform import CHUNK_SIZE, SUFFIX, ShiftMode, TransformResult, transform_file

logger = logging.getLogger(__name__)

SETTINGS_ORG = "byteshift"
SETTINGS_APP = "byteshift"
LAST_DIR_KEY = "last_dir"


class TransformWorker(QtCore.QThread):
    progress = QtCore.pyqtSignal(object, object)  # processed, total; may exceed int32
    done = QtCore.pyqtSignal(object)  # TransformResult

    def __init__(self, source: Path, mode: ShiftMode, chunk_size: int = CHUNK_SIZE, parent=None):
        super().__init__(parent)
        self.source = source
        self.mode = mode
        self.chunk_size = chunk_size

    def run(self):
        result = transform_file(self.source, self.mode, progress_cb=self.progress.emit, chunk_size=self.chunk_size)
        self.done.emit(result)


class DropLineEdit(QtWidgets.QLineEdit):
    def __init__(self, placeholder: str = "", parent=None):
        super().__init__(parent)
        self.setPlaceholderText(placeholder)
        self.setAcceptDrops(True)

    def dragEnterEvent(self, event: QtGui.QDragEnterEvent):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dropEvent(self, event: QtGui.QDropEvent):
        urls = event.mimeData().urls()
        if urls:
            self.setText(urls[0].toLocalFile())
        else:
            super().dropEvent(event)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, chunk_size: int = CHUNK_SIZE):
        super().__init__()
        self.setWindowTitle("Byteshift - File Encryption/Decryption")
        self.resize(560, 200)
        self.chunk_size = chunk_size
        self.worker: Optional[TransformWorker] = None
        self.settings = QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)
        self._build_ui()

        self.setStyleSheet(
            """
            QLineEdit { padding: 8px; }
            QPushButton { padding: 8px 12px; }
            QProgressBar { height: 18px; }
            """
        )

    def _build_ui(self):
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)

        self.input_path = DropLineEdit("Drop a file here or Browse…")
        browse_btn = QtWidgets.QPushButton("Browse…")
        browse_btn.clicked.connect(self.browse_file)
        hl = QtWidgets.QHBoxLayout()
        hl.addWidget(self.input_path)
        hl.addWidget(browse_btn)

        self.encrypt_btn = QtWidgets.QPushButton("Encrypt")
        self.encrypt_btn.clicked.connect(lambda: self.start(ShiftMode.ENCRYPT))
        self.decrypt_btn = QtWidgets.QPushButton("Decrypt")
        self.decrypt_btn.clicked.connect(lambda: self.start(ShiftMode.DECRYPT))
        buttons = QtWidgets.QHBoxLayout()
        buttons.addWidget(self.encrypt_btn)
        buttons.addWidget(self.decrypt_btn)

        layout.addWidget(QtWidgets.QLabel("File:"))
        layout.addLayout(hl)
        layout.addSpacing(8)
        layout.addLayout(buttons)
        layout.addStretch(1)
        self.setCentralWidget(central)

        self.progress = QtWidgets.QProgressBar(self)
        self.progress.setVisible(False)
        self.statusBar().addWidget(self.progress, 1)

    def _last_dir(self) -> str:
        return str(self.settings.value(LAST_DIR_KEY, str(Path.home())))

    def _pick_file(self, mode: ShiftMode) -> Optional[Path]:
        title = "Select File" if mode is ShiftMode.ENCRYPT else "Select Encrypted File"
        filters = "All Files (*)" if mode is ShiftMode.ENCRYPT else f"Encrypted Files (*{SUFFIX});;All Files (*)"
        f, _ = QtWidgets.QFileDialog.getOpenFileName(self, title, self._last_dir(), filters)
        if not f:
            return None
        self.settings.setValue(LAST_DIR_KEY, str(Path(f).parent))
        self.input_path.setText(f)
        return Path(f)

    def browse_file(self):
        self._pick_file(ShiftMode.ENCRYPT)

    def start(self, mode: ShiftMode):
        text = self.input_path.text().strip()
        source = Path(text) if text else self._pick_file(mode)
        if source is None:
            return

        logger.debug("GUI requested %s of %s", mode.verb, source)
        self._set_busy(True)
        self.worker = TransformWorker(source, mode, self.chunk_size, parent=self)
        self.worker.progress.connect(self.on_progress)
        self.worker.done.connect(self.on_done)
        self.worker.finished.connect(self._on_worker_finished)
        self.worker.start()

    def _set_busy(self, busy: bool):
        self.encrypt_btn.setEnabled(not busy)
        self.decrypt_btn.setEnabled(not busy)
        self.input_path.setEnabled(not busy)
        self.progress.setValue(0)
        self.progress.setVisible(busy)

    def on_progress(self, processed: int, total: int):
        # QProgressBar is int32; scale large files down to a percentage
        if total > 0x7FFFFFFF:
            self.progress.setRange(0, 100)
            self.progress.setValue(int(processed * 100 / total))
        else:
            self.progress.setRange(0, max(total, 1))
            self.progress.setValue(processed if total else 1)

    def on_done(self, result: TransformResult):
        self._set_busy(False)
        title = result.mode.verb.capitalize() + "ion"
        if result.ok:
            QtWidgets.QMessageBox.information(self, title, f"{result.user_message()}\n{result.output_path}")
        else:
            QtWidgets.QMessageBox.critical(self, title, f"{result.user_message()}\n{result.message}")

    def _on_worker_finished(self):
        worker = self.sender()
        if worker is None:
            return
        if worker is self.worker:
            self.worker = None
        worker.wait()
        worker.deleteLater()

    def closeEvent(self, event: QtGui.QCloseEvent):
        if self.worker is not None:
            self.worker.wait()
        event.accept()


def main(chunk_size: int = CHUNK_SIZE) -> int:
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    w = MainWindow(chunk_size=chunk_size)
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
