"""Shared helpers for tab controllers."""
from __future__ import annotations

from dataclasses import dataclass
from PyQt5.QtWidgets import QTextEdit

from ...core.constants import LOG_EVERY_N


@dataclass
class ProgressTracker:
    total: int = 0
    done: int = 0
    success: int = 0
    failed: int = 0

    def reset(self, total: int) -> None:
        self.total = total
        self.done = self.success = self.failed = 0

    def update(self, ok: bool) -> None:
        self.done += 1
        if ok:
            self.success += 1
        else:
            self.failed += 1

    def percent(self) -> int:
        if self.total <= 0:
            return 100
        return int(self.done * 100 / self.total)

    @property
    def finished(self) -> bool:
        return self.done >= self.total


def should_log(ok: bool, message: str, done: int) -> bool:
    # failures and skips always; successes for the first 100 and every LOG_EVERY_N
    return (not ok) or message.startswith("[SKIP]") or done <= 100 or done % LOG_EVERY_N == 0


def append_log(text_edit: QTextEdit, message: str) -> None:
    text_edit.append(message)
    text_edit.verticalScrollBar().setValue(text_edit.verticalScrollBar().maximum())
