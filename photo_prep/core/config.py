"""변환 예산 설정 값 모듈."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Mapping

from .constants import (
    ACCEPTED_MIME_TYPES,
    INITIAL_QUALITY,
    MAX_DIMENSION,
    MAX_SOURCE_BYTES,
    MIN_DIMENSION,
    MIN_QUALITY,
    QUALITY_STEP,
    SCALE_STEP,
    TARGET_BYTES,
)


@dataclass(frozen=True)
class BudgetConfig:
    """사진 변환 파이프라인 설정 값.

    Attributes:
        accepted_mime_types: 허용하는 원본 MIME 타입 집합.
        max_source_bytes: 원본 최대 크기(바이트).
        target_bytes: 출력 크기 예산(바이트).
        max_dimension: 출력 긴 변 상한(px).
        min_dimension: 축소를 멈추는 긴 변 하한(px).
        initial_quality: 각 해상도 단계의 시작 품질 (0~1].
        min_quality: 허용하는 최저 품질 (0~1].
        quality_step: 품질 감소 폭.
        scale_step: 해상도 축소 배율 (0~1).
    """

    accepted_mime_types: frozenset[str] = field(default=ACCEPTED_MIME_TYPES)
    max_source_bytes: int = MAX_SOURCE_BYTES
    target_bytes: int = TARGET_BYTES
    max_dimension: int = MAX_DIMENSION
    min_dimension: int = MIN_DIMENSION
    initial_quality: float = INITIAL_QUALITY
    min_quality: float = MIN_QUALITY
    quality_step: float = QUALITY_STEP
    scale_step: float = SCALE_STEP

    def __post_init__(self) -> None:
        # set/list 로 넘겨도 불변 집합으로 고정
        object.__setattr__(
            self,
            "accepted_mime_types",
            frozenset(mime.lower() for mime in self.accepted_mime_types),
        )
        self._validate()

    def _validate(self) -> None:
        """설정 불변식을 검사합니다.

        Raises:
            ValueError: 불변식을 하나라도 위반한 경우.
        """
        if not self.accepted_mime_types:
            raise ValueError("accepted_mime_types must not be empty")
        if self.max_source_bytes <= 0:
            raise ValueError(f"max_source_bytes must be positive, got {self.max_source_bytes}")
        if self.target_bytes <= 0:
            raise ValueError(f"target_bytes must be positive, got {self.target_bytes}")
        if not 0 < self.initial_quality <= 1:
            raise ValueError(f"initial_quality must be in (0, 1], got {self.initial_quality}")
        if not 0 < self.min_quality <= 1:
            raise ValueError(f"min_quality must be in (0, 1], got {self.min_quality}")
        if self.min_quality >= self.initial_quality:
            raise ValueError(
                f"min_quality ({self.min_quality}) must be lower than "
                f"initial_quality ({self.initial_quality})"
            )
        if self.quality_step <= 0:
            raise ValueError(f"quality_step must be positive, got {self.quality_step}")
        if not 0 < self.scale_step < 1:
            raise ValueError(f"scale_step must be in (0, 1), got {self.scale_step}")
        if self.min_dimension < 1:
            raise ValueError(f"min_dimension must be at least 1, got {self.min_dimension}")
        if self.min_dimension >= self.max_dimension:
            raise ValueError(
                f"min_dimension ({self.min_dimension}) must be lower than "
                f"max_dimension ({self.max_dimension})"
            )

    # Overrides ---------------------------------------------------------------
    def with_overrides(self, **changes: Any) -> "BudgetConfig":
        """일부 값만 바꾼 새 설정을 반환합니다(검증 포함)."""
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], *, strict: bool = True) -> "BudgetConfig":
        """딕셔너리 형태의 설정으로부터 인스턴스를 만듭니다.

        Args:
            values: 필드명 → 값 매핑. 없는 필드는 기본값을 사용합니다.
            strict: True 면 알 수 없는 키가 있을 때 예외를 발생시킵니다.

        Returns:
            검증된 `BudgetConfig`.

        Raises:
            ValueError: strict 모드에서 알 수 없는 키가 있거나 값이 불변식을 위반한 경우.
        """
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown and strict:
            raise ValueError(f"unknown BudgetConfig keys: {', '.join(unknown)}")

        kwargs = {key: value for key, value in values.items() if key in known}
        if "accepted_mime_types" in kwargs:
            kwargs["accepted_mime_types"] = _as_mime_set(kwargs["accepted_mime_types"])
        return cls(**kwargs)

    # Helpers -----------------------------------------------------------------
    def accepts(self, mime_type: str) -> bool:
        return mime_type.lower() in self.accepted_mime_types

    def accept_string(self) -> str:
        """파일 선택기 accept 속성 형식의 문자열을 반환합니다."""
        return ",".join(sorted(self.accepted_mime_types))


def _as_mime_set(value: str | Iterable[str]) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset(part.strip() for part in value.split(",") if part.strip())
    return frozenset(value)


DEFAULT_CONFIG = BudgetConfig()
