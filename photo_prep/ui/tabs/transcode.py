"""Controller for the upload-prep tab."""
from __future__ import annotations

import threading
from pathlib import Path

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QFileDialog, QMessageBox

from ...core.config import DEFAULT_CONFIG, BudgetConfig
from ...core.constants import ONE_MB, OUTPUT_DIR_NAME
from ...core.files import collect_sources
from ...qt.signals import Signals
from ...services.transcode import TranscodeImageTask, plan_jobs
from .common import ProgressTracker, append_log, should_log


class TranscodeTabController:
    def __init__(self, window, thread_pool, config: BudgetConfig = DEFAULT_CONFIG) -> None:
        self.window = window
        self.pool = thread_pool
        self.base_config = config

        self.directory: Path | None = None
        self.output_dir: Path | None = None

        self.progress = ProgressTracker()
        self.stop_event = threading.Event()
        self.signals = Signals()
        self.signals.one_done.connect(self._on_one_done)
        self.signals.all_done.connect(self._on_all_done)

        self.window.labelPath.setAlignment(Qt.AlignLeft)
        self.window.labelPath.setText("Select a folder")
        self.window.threadLabel.setAlignment(Qt.AlignRight)
        self.window.threadLabel.setText(f"Threads: {self.pool.maxThreadCount()}")
        self.window.progressBar.setRange(0, 100)
        self.window.progressBar.setValue(0)
        self.window.progressBar.setFormat("%p%")
        self.window.textLog.setReadOnly(True)
        self.window.textLog.setPlaceholderText("Conversion log appears here...")

        self.window.spinTargetMb.setValue(config.target_bytes / ONE_MB)
        self.window.spinMaxDimension.setValue(config.max_dimension)

        self.window.btnSelect.clicked.connect(self._select_directory)
        self.window.btnRun.clicked.connect(self._run_parallel)
        self.window.btnStop.clicked.connect(self._stop_all)
        self.window.btnRun.setEnabled(False)
        self.window.btnStop.setEnabled(False)

    # UI helpers ---------------------------------------------------------------
    def _toggle_ui(self, running: bool) -> None:
        self.window.btnSelect.setEnabled(not running)
        self.window.btnRun.setEnabled((not running) and self.directory is not None)
        self.window.btnStop.setEnabled(running)
        self.window.spinTargetMb.setEnabled(not running)
        self.window.spinMaxDimension.setEnabled(not running)

    def _current_config(self) -> BudgetConfig:
        return self.base_config.with_overrides(
            target_bytes=int(round(self.window.spinTargetMb.value() * ONE_MB)),
            max_dimension=int(self.window.spinMaxDimension.value()),
        )

    def _select_directory(self) -> None:
        directory = QFileDialog.getExistingDirectory(self.window, "Select folder")
        if not directory:
            return

        self.directory = Path(directory)
        self.output_dir = (self.directory / OUTPUT_DIR_NAME).resolve()
        self.window.labelPath.setText(f"Input: {self.directory}\nOutput: {self.output_dir}")
        self.window.progressBar.setValue(0)
        self.window.textLog.clear()
        append_log(self.window.textLog, "Ready. Press 'Convert' to start.")
        self.window.btnRun.setEnabled(True)

    def _run_parallel(self) -> None:
        if not self.directory or not self.output_dir:
            QMessageBox.warning(self.window, "Warning", "Select a folder first.")
            return

        try:
            config = self._current_config()
        except ValueError as exc:
            QMessageBox.warning(self.window, "Invalid settings", str(exc))
            return

        self.stop_event.clear()
        jobs = plan_jobs(collect_sources(self.directory), self.output_dir, config)

        self.progress.reset(len(jobs))
        if self.progress.total == 0:
            append_log(self.window.textLog, "No images to convert.")
            return

        self.output_dir.mkdir(parents=True, exist_ok=True)
        append_log(
            self.window.textLog,
            f"Converting {self.progress.total} images "
            f"(target {config.target_bytes:,} bytes, max side {config.max_dimension}px) ...",
        )
        self._toggle_ui(True)

        for job in jobs:
            self.pool.start(TranscodeImageTask(job, self.stop_event, self.signals))

    def _stop_all(self) -> None:
        if not self.window.btnStop.isEnabled():
            return
        self.stop_event.set()
        append_log(self.window.textLog, "Stop requested... (images in progress will finish)")

    # Signal callbacks --------------------------------------------------------
    def _on_one_done(self, ok: bool, message: str) -> None:
        self.progress.update(ok)
        if should_log(ok, message, self.progress.done):
            append_log(self.window.textLog, message)
        self.window.progressBar.setValue(self.progress.percent())

        if self.progress.finished:
            self.signals.all_done.emit()

    def _on_all_done(self) -> None:
        self._toggle_ui(False)
        self.window.progressBar.setValue(100)
        append_log(
            self.window.textLog,
            f"Done: total {self.progress.total} | ok {self.progress.success} | failed {self.progress.failed}",
        )

        if self.stop_event.is_set():
            QMessageBox.information(
                self.window,
                "Stopped",
                f"Stopped on request.\nok {self.progress.success} / failed {self.progress.failed} / total {self.progress.total}",
            )
        elif self.progress.failed == 0:
            QMessageBox.information(
                self.window,
                "Done",
                f"All images ({self.progress.success}/{self.progress.total}) are ready for upload.",
            )
        else:
            QMessageBox.warning(
                self.window,
                "Done (with failures)",
                f"{self.progress.success}/{self.progress.total} ok, {self.progress.failed} failed. Check the log.",
            )
