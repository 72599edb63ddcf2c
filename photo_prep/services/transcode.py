"""GUI 스레드 풀에서 사용하는 업로드용 사진 변환 워커."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from PyQt5.QtCore import QRunnable

from ..core.codec import ImageCodec
from ..core.config import DEFAULT_CONFIG, BudgetConfig
from ..core.constants import OUTPUT_EXTENSION
from ..core.errors import TranscodeError
from ..core.files import read_source, write_result
from ..core.packaging import output_filename
from ..core.pipeline import transcode_source
from ..qt.signals import Signals


@dataclass(frozen=True)
class TranscodeJob:
    """단일 변환 작업을 표현합니다.

    Attributes:
        source: 입력 이미지 경로.
        output_dir: 결과를 저장할 폴더.
        config: 예산 설정.
        output_name: 출력 파일명. 비어 있으면 원본 이름에서 만듭니다.
    """

    source: Path
    output_dir: Path
    config: BudgetConfig = field(default=DEFAULT_CONFIG)
    output_name: str = ""

    @property
    def destination(self) -> Path:
        return self.output_dir / (self.output_name or output_filename(self.source.name))


def plan_jobs(
    sources: Iterable[Path],
    output_dir: Path,
    config: BudgetConfig = DEFAULT_CONFIG,
) -> list[TranscodeJob]:
    """원본마다 겹치지 않는 출력 파일명을 정해 작업 목록을 만듭니다.

    `a.jpg` 와 `a.png` 처럼 이름만 같은 원본은 같은 `a.webp` 를 가리키게 되므로,
    먼저 나온 원본이 `a.webp` 를 쓰고 나머지는 원본 확장자를 붙인 `a-png.webp`
    (그래도 겹치면 `a-png-2.webp`) 를 씁니다. 대소문자를 구분하지 않는
    파일 시스템을 고려해 소문자로 비교합니다.

    Args:
        sources: 입력 이미지 경로. 정렬된 순서로 넘기면 재실행 시에도 이름이 같습니다.
        output_dir: 결과를 저장할 폴더.
        config: 예산 설정.

    Returns:
        작업 목록.
    """
    taken: set[str] = set()
    jobs: list[TranscodeJob] = []
    for src in sources:
        name = output_filename(src.name)
        if name.lower() in taken:
            stem = name[: -len(OUTPUT_EXTENSION)]
            base = f"{stem}-{src.suffix.lstrip('.').lower() or 'src'}"
            name = f"{base}{OUTPUT_EXTENSION}"
            counter = 2
            while name.lower() in taken:
                name = f"{base}-{counter}{OUTPUT_EXTENSION}"
                counter += 1
        taken.add(name.lower())
        jobs.append(TranscodeJob(src, output_dir, config, name))
    return jobs


class TranscodeImageTask(QRunnable):
    """백그라운드 스레드에서 사진 한 장을 변환하는 Qt Runnable."""

    def __init__(
        self,
        job: TranscodeJob,
        stop_event: threading.Event,
        signals: Signals,
        codec: Optional[ImageCodec] = None,
    ) -> None:
        """작업 인스턴스를 초기화합니다."""
        super().__init__()
        self.job = job
        self.stop_event = stop_event
        self.signals = signals
        self.codec = codec

    # Helper -----------------------------------------------------------------
    def _emit(self, ok: bool, message: str) -> None:
        """UI로 진행/결과 메시지를 전송합니다."""
        if self.signals:
            self.signals.one_done.emit(ok, message)

    # QRunnable ---------------------------------------------------------------
    def run(self) -> None:
        """작업 실행 진입점."""
        name = self.job.source.name
        if self.stop_event.is_set():
            self._emit(False, f"[STOPPED] {name}")
            return

        try:
            if self.job.destination.exists():
                self._emit(True, f"[SKIP] exists: {self.job.destination.name}")
                return

            source = read_source(self.job.source)
            result = transcode_source(source, self.job.config, self.codec)
            saved = write_result(result, self.job.output_dir, self.job.destination.name)

            self._emit(
                True,
                f"[OK] {saved.name} {result.width}x{result.height} "
                f"q={result.quality:.2f} {result.byte_length:,} bytes "
                f"({result.attempts} tries)",
            )

        except TranscodeError as exc:
            self._emit(False, f"[FAIL] {name} - {exc.user_message()}")
        except Exception as exc:  # pragma: no cover - 방어적 처리
            self._emit(False, f"[FAIL] {name} - {exc}")
