"""변환 파이프라인의 데이터 모델.

모든 모델은 한 번의 변환 호출 안에서 만들어지고 버려집니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import DecodeFailure


@dataclass(frozen=True)
class SourceImage:
    """업로드 요청으로 들어온 원본.

    Attributes:
        data: 원본 바이트.
        mime_type: 선언된 MIME 타입.
        filename: 원본 파일명.
    """

    data: bytes
    mime_type: str
    filename: str

    @property
    def byte_length(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class RasterImage:
    """디코딩된 픽셀 버퍼와 원본 크기.

    `image` 는 코덱이 다루는 객체(기본 구현에서는 PIL 이미지)입니다.
    컨텍스트 매니저로 사용하면 블록을 벗어날 때 버퍼를 해제합니다.
    """

    image: Any
    width: int
    height: int

    def __post_init__(self) -> None:
        if not self.width or not self.height or self.width < 0 or self.height < 0:
            raise DecodeFailure(
                f"invalid decoded dimensions {self.width}x{self.height}",
                width=self.width,
                height=self.height,
            )

    def close(self) -> None:
        close = getattr(self.image, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "RasterImage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class EncodeAttempt:
    """한 번의 (width, height, quality) 인코딩 시도와 그 결과."""

    width: int
    height: int
    quality: float
    data: bytes = field(repr=False)

    @property
    def byte_length(self) -> int:
        return len(self.data)

    def fits(self, target_bytes: int) -> bool:
        return self.byte_length <= target_bytes


@dataclass(frozen=True)
class TranscodeResult:
    """저장(업로드) 단계로 넘기는 최종 결과."""

    data: bytes = field(repr=False)
    mime_type: str
    filename: str
    width: int
    height: int
    created_at: datetime
    quality: float
    attempts: int

    @property
    def byte_length(self) -> int:
        return len(self.data)
