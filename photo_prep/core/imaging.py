"""Pillow 기반 이미지 유틸리티와 기본 코덱 구현."""

from __future__ import annotations

import io
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import OUTPUT_FORMAT, WEBP_ENCODE_PARAMS
from .errors import DecodeFailure
from .models import RasterImage


def get_resample_filter() -> int:
    """Pillow 9/10 모두에서 동작하는 고품질 리샘플링 필터를 반환합니다."""
    try:
        return Image.Resampling.LANCZOS  # Pillow >= 10
    except AttributeError:  # pragma: no cover - Pillow < 10
        return Image.LANCZOS


RESAMPLE = get_resample_filter()

# 디코딩 중 Pillow 가 던질 수 있는 입력 오류들
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
)


def ensure_output_mode(image: Image.Image) -> Image.Image:
    """WebP 인코딩이 가능한 색공간(RGB 또는 RGBA)으로 정규화합니다.

    투명도가 있는 이미지는 알파 채널을 유지합니다.

    Args:
        image: 입력 PIL 이미지.

    Returns:
        RGB 또는 RGBA 이미지. (이미 해당 모드면 그대로 반환)
    """
    if image.mode in {"RGB", "RGBA"}:
        return image
    if image.mode in {"LA", "PA"} or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def reduce_for_speed(image: Image.Image, target_size: tuple[int, int]) -> Image.Image:
    """리사이즈 전 초대형 이미지를 2의 거듭제곱 스케일로 다운샘플합니다.

    Args:
        image: 입력 PIL 이미지.
        target_size: (width, height) 타깃 크기.

    Returns:
        다운샘플된 이미지(필요 시) 또는 원본 이미지.
    """
    width, height = image.size
    target_w, target_h = target_size

    factor = 1
    while (
        (width // (factor * 2)) > (target_w * 2)
        and (height // (factor * 2)) > (target_h * 2)
    ):
        factor *= 2

    if factor > 1:
        return image.reduce(factor)
    return image


def rasterize(image: Image.Image, size: tuple[int, int]) -> Image.Image:
    """이미지를 정확히 `size` 로 그립니다. 크기가 같으면 원본을 그대로 반환합니다."""
    if image.size == size:
        return image
    reduced = reduce_for_speed(image, size)
    return reduced.resize(size, RESAMPLE)


def to_encoder_quality(quality: float) -> int:
    """0~1 품질 값을 Pillow 의 0~100 정수 품질로 변환합니다."""
    return max(1, min(100, int(round(quality * 100))))


def encode_image(image: Image.Image, quality: float, fmt: str = OUTPUT_FORMAT) -> bytes:
    """이미지를 메모리 버퍼에 인코딩해 바이트로 반환합니다."""
    buffer = io.BytesIO()
    params: dict[str, Any] = dict(WEBP_ENCODE_PARAMS) if fmt == "WEBP" else {}
    image.save(buffer, format=fmt, quality=to_encoder_quality(quality), **params)
    return buffer.getvalue()


def decode_image(data: bytes) -> Image.Image:
    """바이트를 완전히 디코딩된 PIL 이미지로 변환합니다.

    EXIF 회전 정보를 적용해 사용자가 보는 방향의 크기를 갖도록 합니다.

    Raises:
        DecodeFailure: 비어 있거나 해석할 수 없는 바이트인 경우.
    """
    if not data:
        raise DecodeFailure("source buffer is empty")

    try:
        with Image.open(io.BytesIO(data)) as opened:
            opened.load()
            image = ImageOps.exif_transpose(opened)
            if image is opened:
                image = opened.copy()
    except _DECODE_ERRORS as exc:
        raise DecodeFailure(f"could not decode image: {exc}") from exc

    return ensure_output_mode(image)


class PillowCodec:
    """Pillow 로 구현한 기본 `ImageCodec`."""

    def __init__(self, fmt: str = OUTPUT_FORMAT) -> None:
        self.fmt = fmt

    def decode(self, data: bytes) -> RasterImage:
        image = decode_image(data)
        width, height = image.size
        return RasterImage(image=image, width=width, height=height)

    def encode(self, raster: RasterImage, width: int, height: int, quality: float) -> bytes:
        frame = rasterize(raster.image, (width, height))
        try:
            return encode_image(frame, quality, self.fmt)
        finally:
            if frame is not raster.image:
                frame.close()
