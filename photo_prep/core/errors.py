"""사진 변환 파이프라인의 오류 분류.

모든 오류는 호출 단위로 치명적이며 자동 재시도하지 않습니다.
각 오류는 한도 값과 실제 값을 그대로 들고 있어 호출 측에서 정확한
안내 문구를 만들 수 있습니다.
"""

from __future__ import annotations

from typing import Iterable

from .constants import FORMAT_LABEL_BY_MIME_TYPE, ONE_MB


def _megabytes(value: int) -> str:
    return f"{value / ONE_MB:.0f}MB"


def _format_labels(accepted: Iterable[str]) -> str:
    labels = [FORMAT_LABEL_BY_MIME_TYPE.get(mime, mime) for mime in sorted(accepted)]
    if len(labels) <= 1:
        return "".join(labels)
    return f"{', '.join(labels[:-1])}, or {labels[-1]}"


class TranscodeError(Exception):
    """변환 파이프라인 오류의 공통 기반 클래스."""

    def user_message(self) -> str:
        return str(self)


class UnsupportedFormat(TranscodeError):
    """선언된 MIME 타입이 허용 목록에 없음."""

    def __init__(self, mime_type: str, accepted: Iterable[str]) -> None:
        self.mime_type = mime_type
        self.accepted = frozenset(accepted)
        super().__init__(
            f"unsupported MIME type {mime_type!r}; accepted: {', '.join(sorted(self.accepted))}"
        )

    def user_message(self) -> str:
        return f"Unsupported format. Please use {_format_labels(self.accepted)}."


class SourceTooLarge(TranscodeError):
    """원본 바이트 크기가 한도를 초과함."""

    def __init__(self, actual: int, limit: int) -> None:
        self.actual = actual
        self.limit = limit
        super().__init__(f"source is {actual} bytes; limit is {limit} bytes")

    def user_message(self) -> str:
        return f"The selected file is too large. Choose a file under {_megabytes(self.limit)}."


class DecodeFailure(TranscodeError):
    """바이트를 래스터 이미지로 해석하지 못했거나 크기가 유효하지 않음."""

    def __init__(
        self,
        reason: str,
        *,
        width: int | None = None,
        height: int | None = None,
    ) -> None:
        self.reason = reason
        self.width = width
        self.height = height
        super().__init__(reason)

    def user_message(self) -> str:
        if self.width is not None or self.height is not None:
            return "Unable to read this image's dimensions."
        return "Unable to read this image file."


class BudgetExceeded(TranscodeError):
    """품질과 해상도를 모두 줄여도 크기 예산을 맞추지 못함.

    Attributes:
        target: 크기 예산(바이트).
        actual: 마지막 시도의 결과 크기(바이트).
        attempts: 마지막(최저 해상도) 시도를 포함한 총 인코딩 횟수.
        width, height, quality: 마지막 시도의 설정.
    """

    def __init__(
        self,
        target: int,
        actual: int,
        attempts: int,
        width: int,
        height: int,
        quality: float,
    ) -> None:
        self.target = target
        self.actual = actual
        self.attempts = attempts
        self.width = width
        self.height = height
        self.quality = quality
        super().__init__(
            f"could not meet {target} bytes after {attempts} attempts; "
            f"last attempt {width}x{height} q={quality:.2f} produced {actual} bytes"
        )

    def user_message(self) -> str:
        return (
            "Unable to reduce this image enough for upload. "
            f"Please choose a smaller image (target {_megabytes(self.target)})."
        )
