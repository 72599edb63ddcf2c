"""검증 → 디코딩 → 해상도 계획 → 예산 탐색 → 포장 순서의 변환 파이프라인."""

from __future__ import annotations

import logging
from typing import Optional

from .budget import AttemptCallback, fit_to_budget
from .codec import ImageCodec
from .config import DEFAULT_CONFIG, BudgetConfig
from .imaging import PillowCodec
from .models import SourceImage, TranscodeResult
from .packaging import package_result
from .planning import plan_dimensions
from .validation import validate_source

logger = logging.getLogger(__name__)


def transcode_source(
    source: SourceImage,
    config: BudgetConfig = DEFAULT_CONFIG,
    codec: Optional[ImageCodec] = None,
    on_attempt: Optional[AttemptCallback] = None,
) -> TranscodeResult:
    """원본 하나를 업로드 가능한 크기의 결과물로 변환합니다.

    호출 사이에 공유하는 상태가 없으므로 서로 다른 이미지는 병렬로 처리해도
    안전합니다. 디코딩된 래스터는 성공/실패와 무관하게 반환 전에 해제됩니다.

    Args:
        source: 업로드 요청으로 들어온 원본.
        config: 예산 설정.
        codec: 디코드/인코드 구현. 생략하면 `PillowCodec`.
        on_attempt: 인코딩 시도마다 호출되는 콜백(선택).

    Returns:
        `TranscodeResult`.

    Raises:
        UnsupportedFormat, SourceTooLarge: 검증 단계 실패. 디코딩은 수행하지 않습니다.
        DecodeFailure: 바이트를 해석하지 못한 경우.
        BudgetExceeded: 탐색 범위 안에서 예산을 맞추지 못한 경우.
    """
    validate_source(source.mime_type, source.byte_length, config)
    codec = codec if codec is not None else PillowCodec()

    with codec.decode(source.data) as raster:
        start_size = plan_dimensions(raster.width, raster.height, config.max_dimension)
        logger.debug(
            "%s: decoded %dx%d, starting at %dx%d",
            source.filename, raster.width, raster.height, *start_size,
        )
        outcome = fit_to_budget(codec, raster, start_size, config, on_attempt)

    return package_result(outcome.attempt, source.filename, attempts=outcome.attempts)


def transcode(
    data: bytes,
    mime_type: str,
    filename: str,
    config: BudgetConfig = DEFAULT_CONFIG,
    codec: Optional[ImageCodec] = None,
) -> TranscodeResult:
    """바이트/MIME/파일명으로 바로 호출하는 `transcode_source` 단축 함수."""
    return transcode_source(SourceImage(data, mime_type, filename), config, codec)
