"""해상도 계획과 탐색 범위(품질 단계, 해상도 단계) 계산."""

from __future__ import annotations

import math

from .config import BudgetConfig
from .constants import QUALITY_DIGITS


def round_half_up(value: float) -> int:
    """0.5 를 올림하는 반올림. (파이썬 `round` 는 짝수 쪽으로 반올림함)"""
    return int(math.floor(value + 0.5))


def scale_dimensions(width: int, height: int, factor: float) -> tuple[int, int]:
    """두 변에 같은 배율을 적용합니다. 각 변은 최소 1px 입니다."""
    return (
        max(1, round_half_up(width * factor)),
        max(1, round_half_up(height * factor)),
    )


def plan_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """긴 변이 `max_dimension` 을 넘지 않도록 시작 해상도를 계산합니다.

    Args:
        width: 원본 너비.
        height: 원본 높이.
        max_dimension: 긴 변 상한.

    Returns:
        종횡비를 유지한 (width, height). 상한 이하이면 원본 크기 그대로.
    """
    largest_side = max(width, height)
    if largest_side <= max_dimension:
        return width, height
    return scale_dimensions(width, height, max_dimension / largest_side)


def can_scale_down(width: int, height: int, config: BudgetConfig) -> bool:
    return max(width, height) > config.min_dimension


def quality_at(step_index: int, config: BudgetConfig) -> float:
    """시작 품질에서 `step_index` 단계 내려간 품질 값."""
    return round(config.initial_quality - step_index * config.quality_step, QUALITY_DIGITS)


def can_lower_quality(step_index: int, config: BudgetConfig) -> bool:
    """한 단계 더 품질을 낮춰도 `min_quality` 이상인지 확인합니다."""
    return quality_at(step_index + 1, config) >= round(config.min_quality, QUALITY_DIGITS)


def quality_levels(config: BudgetConfig) -> list[float]:
    """한 해상도 단계 안에서 시도하는 품질 목록 (높은 순)."""
    levels = [quality_at(0, config)]
    step_index = 0
    while can_lower_quality(step_index, config):
        step_index += 1
        levels.append(quality_at(step_index, config))
    return levels


def dimension_tiers(width: int, height: int, config: BudgetConfig) -> list[tuple[int, int]]:
    """시작 해상도부터 축소를 멈출 때까지 거치는 해상도 단계 목록."""
    tiers = [(width, height)]
    while can_scale_down(width, height, config):
        next_size = scale_dimensions(width, height, config.scale_step)
        if next_size == (width, height):
            # 배율을 적용해도 더 줄지 않는 크기
            break
        width, height = next_size
        tiers.append(next_size)
    return tiers


def max_attempts(width: int, height: int, config: BudgetConfig) -> int:
    """시작 해상도에서 탐색 루프가 수행할 수 있는 최대 인코딩 횟수."""
    return len(quality_levels(config)) * len(dimension_tiers(width, height, config))
