"""Qt main window wiring for the application."""
from __future__ import annotations

import os

from PyQt5.QtCore import QThreadPool
from PyQt5.QtWidgets import (
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QTabWidget,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from ..core.config import DEFAULT_CONFIG, BudgetConfig
from ..core.constants import MAX_THREADS_CAP, MIN_DIMENSION
from .tabs.transcode import TranscodeTabController


class MainWindow(QWidget):
    def __init__(self, config: BudgetConfig = DEFAULT_CONFIG) -> None:
        super().__init__()

        self.pool = QThreadPool.globalInstance()
        self.pool.setMaxThreadCount(min(MAX_THREADS_CAP, os.cpu_count() or 4))

        self.setWindowTitle("Photo Upload Prep")
        self.resize(860, 640)

        self._build_ui()
        self.transcode_tab = TranscodeTabController(self, self.pool, config)

    # Internal ----------------------------------------------------------------
    def _build_ui(self) -> None:
        tabs = QTabWidget()
        page = QWidget()
        layout = QVBoxLayout(page)

        self.labelPath = QLabel()

        form = QFormLayout()
        self.spinTargetMb = QDoubleSpinBox()
        self.spinTargetMb.setRange(0.1, 50.0)
        self.spinTargetMb.setSingleStep(0.5)
        self.spinTargetMb.setSuffix(" MB")
        self.spinMaxDimension = QSpinBox()
        self.spinMaxDimension.setRange(MIN_DIMENSION + 1, 20000)
        self.spinMaxDimension.setSuffix(" px")
        form.addRow("Target size", self.spinTargetMb)
        form.addRow("Max side", self.spinMaxDimension)

        buttons = QHBoxLayout()
        self.btnSelect = QPushButton("Select folder")
        self.btnRun = QPushButton("Convert (parallel)")
        self.btnStop = QPushButton("Stop")
        buttons.addWidget(self.btnSelect)
        buttons.addWidget(self.btnRun)
        buttons.addWidget(self.btnStop)

        self.progressBar = QProgressBar()
        self.threadLabel = QLabel()
        self.textLog = QTextEdit()

        layout.addWidget(self.labelPath)
        layout.addLayout(form)
        layout.addLayout(buttons)
        layout.addWidget(self.progressBar)
        layout.addWidget(self.threadLabel)
        layout.addWidget(self.textLog)

        tabs.addTab(page, "Upload prep")
        root = QVBoxLayout(self)
        root.addWidget(tabs)
