"""크기 예산을 맞추는 인코딩 탐색 루프.

한 해상도 단계에서 품질을 `initial_quality` 부터 `min_quality` 까지 먼저
모두 시도하고, 그래도 예산을 넘으면 해상도를 `scale_step` 배로 줄인 뒤
품질을 다시 `initial_quality` 로 되돌립니다. 긴 변이 `min_dimension` 이하가
되면 탐색을 끝내고 `BudgetExceeded` 를 발생시킵니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .codec import ImageCodec
from .config import BudgetConfig
from .errors import BudgetExceeded
from .models import EncodeAttempt, RasterImage
from .planning import (
    can_lower_quality,
    can_scale_down,
    max_attempts,
    quality_at,
    scale_dimensions,
)

logger = logging.getLogger(__name__)

AttemptCallback = Callable[[EncodeAttempt], None]


@dataclass(frozen=True)
class BudgetOutcome:
    """예산을 만족한 시도와 그때까지의 총 시도 횟수."""

    attempt: EncodeAttempt
    attempts: int


def fit_to_budget(
    codec: ImageCodec,
    raster: RasterImage,
    start_size: tuple[int, int],
    config: BudgetConfig,
    on_attempt: Optional[AttemptCallback] = None,
) -> BudgetOutcome:
    """예산 이하가 되는 첫 (width, height, quality) 조합을 찾습니다.

    Args:
        codec: 래스터를 인코딩할 코덱.
        raster: 디코딩된 원본.
        start_size: 해상도 계획 단계에서 정한 시작 (width, height).
        config: 예산과 탐색 범위 설정.
        on_attempt: 각 시도 직후 호출되는 콜백(선택).

    Returns:
        예산을 만족한 `BudgetOutcome`.

    Raises:
        BudgetExceeded: 품질과 해상도를 모두 소진한 경우. 마지막 시도도 횟수에 포함됩니다.
    """
    width, height = start_size
    step_index = 0
    attempts = 0
    ceiling = max_attempts(width, height, config)

    while True:
        quality = quality_at(step_index, config)
        attempt = EncodeAttempt(
            width=width,
            height=height,
            quality=quality,
            data=codec.encode(raster, width, height, quality),
        )
        attempts += 1
        logger.debug(
            "attempt %d: %dx%d q=%.2f -> %d bytes",
            attempts, width, height, quality, attempt.byte_length,
        )
        if on_attempt is not None:
            on_attempt(attempt)

        if attempt.fits(config.target_bytes):
            logger.info(
                "fit %dx%d q=%.2f (%d bytes) after %d attempts",
                width, height, quality, attempt.byte_length, attempts,
            )
            return BudgetOutcome(attempt=attempt, attempts=attempts)

        if attempts >= ceiling:
            break

        if can_lower_quality(step_index, config):
            step_index += 1
            continue

        if not can_scale_down(width, height, config):
            break

        next_size = scale_dimensions(width, height, config.scale_step)
        if next_size == (width, height):
            break
        width, height = next_size
        step_index = 0

    logger.warning(
        "budget of %d bytes not met after %d attempts (last %dx%d q=%.2f, %d bytes)",
        config.target_bytes, attempts, width, height, attempt.quality, attempt.byte_length,
    )
    raise BudgetExceeded(
        target=config.target_bytes,
        actual=attempt.byte_length,
        attempts=attempts,
        width=width,
        height=height,
        quality=attempt.quality,
    )
