"""탐색 루프가 의존하는 이미지 코덱 인터페이스."""

from __future__ import annotations

from typing import Protocol

from .models import RasterImage


class ImageCodec(Protocol):
    """호스트 플랫폼이 제공하는 디코드/인코드 기능.

    탐색 루프는 이 인터페이스에만 의존하므로 테스트에서는 기록용 스텁을,
    실제 환경에서는 `PillowCodec` 을 주입합니다.
    """

    def decode(self, data: bytes) -> RasterImage:
        """바이트를 래스터 이미지로 디코딩합니다.

        Raises:
            DecodeFailure: 해석할 수 없는 바이트이거나 크기가 0인 경우.
        """
        ...

    def encode(self, raster: RasterImage, width: int, height: int, quality: float) -> bytes:
        """래스터를 (width, height) 로 그린 뒤 quality 로 인코딩합니다."""
        ...
