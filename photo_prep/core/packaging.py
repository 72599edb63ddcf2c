"""최종 인코딩 결과를 업로드용 결과물로 포장합니다."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional

from .constants import FALLBACK_STEM, OUTPUT_EXTENSION, OUTPUT_MIME_TYPE
from .models import EncodeAttempt, TranscodeResult


def output_filename(original_name: str, extension: str = OUTPUT_EXTENSION) -> str:
    """원본 파일명의 확장자를 출력 포맷 확장자로 바꿉니다.

    디렉터리 부분은 버리고, 쓸 만한 이름이 없으면 `FALLBACK_STEM` 을 사용합니다.

    Examples:
        >>> output_filename("IMG_0001.JPG")
        'IMG_0001.webp'
        >>> output_filename(".jpg")
        'photo.webp'
    """
    # 업로드 측이 경로째 넘기는 경우가 있어 양쪽 구분자를 모두 처리
    name = PureWindowsPath(PurePosixPath(original_name or "").name).name.strip()
    stem, dot, _ = name.rpartition(".")
    if not dot:
        stem = name
    stem = stem.strip()
    return f"{stem or FALLBACK_STEM}{extension}"


def package_result(
    attempt: EncodeAttempt,
    original_name: str,
    attempts: int = 1,
    created_at: Optional[datetime] = None,
) -> TranscodeResult:
    """예산을 만족한 시도를 `TranscodeResult` 로 만듭니다."""
    return TranscodeResult(
        data=attempt.data,
        mime_type=OUTPUT_MIME_TYPE,
        filename=output_filename(original_name),
        width=attempt.width,
        height=attempt.height,
        created_at=created_at or datetime.now(timezone.utc),
        quality=attempt.quality,
        attempts=attempts,
    )
