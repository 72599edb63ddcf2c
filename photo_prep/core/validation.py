"""디코딩 전에 수행하는 원본 형식/크기 검증."""

from __future__ import annotations

from .config import BudgetConfig
from .errors import SourceTooLarge, UnsupportedFormat


def validate_source(mime_type: str, byte_length: int, config: BudgetConfig) -> None:
    """선언된 MIME 타입과 바이트 크기를 검사합니다.

    MIME 타입을 먼저 확인하므로 두 조건을 모두 위반하면 `UnsupportedFormat` 이
    발생합니다.

    Args:
        mime_type: 업로드 측에서 선언한 MIME 타입.
        byte_length: 원본 바이트 크기.
        config: 허용 목록과 크기 한도를 담은 설정.

    Raises:
        UnsupportedFormat: 허용 목록에 없는 MIME 타입인 경우.
        SourceTooLarge: `byte_length` 가 `max_source_bytes` 를 넘는 경우.
    """
    if not config.accepts(mime_type or ""):
        raise UnsupportedFormat(mime_type, config.accepted_mime_types)

    if byte_length > config.max_source_bytes:
        raise SourceTooLarge(actual=byte_length, limit=config.max_source_bytes)
