from __future__ import annotations

import io
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from photo_prep.core.models import RasterImage


class _Buffer:
    """Stands in for a decoded pixel buffer and remembers whether it was released."""

    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class RecordingCodec:
    """Codec stub that records every (width, height, quality) it is asked to encode."""

    def __init__(
        self,
        size_fn: Callable[[int, int, float], int],
        width: int = 4000,
        height: int = 3000,
    ) -> None:
        self.size_fn = size_fn
        self.width = width
        self.height = height
        self.decoded = 0
        self.calls: list[tuple[int, int, float]] = []
        self.buffers: list[_Buffer] = []

    def decode(self, data: bytes) -> RasterImage:
        self.decoded += 1
        buffer = _Buffer()
        self.buffers.append(buffer)
        return RasterImage(image=buffer, width=self.width, height=self.height)

    def encode(self, raster: RasterImage, width: int, height: int, quality: float) -> bytes:
        self.calls.append((width, height, quality))
        return b"\0" * self.size_fn(width, height, quality)


@pytest.fixture
def recording_codec():
    return RecordingCodec


@pytest.fixture
def encode_bytes():
    def _encode(image: Image.Image, fmt: str, **params) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format=fmt, **params)
        return buffer.getvalue()

    return _encode


@pytest.fixture
def noise_image():
    def _make(width: int, height: int, mode: str = "RGB", seed: int = 0) -> Image.Image:
        rng = np.random.default_rng(seed)
        channels = len(mode)
        pixels = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
        return Image.fromarray(pixels)

    return _make


@pytest.fixture
def gradient_image():
    def _make(width: int, height: int) -> Image.Image:
        x = np.linspace(0, 255, width, dtype=np.float32)
        y = np.linspace(0, 255, height, dtype=np.float32)
        red = np.tile(x, (height, 1))
        green = np.tile(y[:, None], (1, width))
        blue = (red + green) / 2
        pixels = np.stack([red, green, blue], axis=-1).astype(np.uint8)
        return Image.fromarray(pixels)

    return _make
