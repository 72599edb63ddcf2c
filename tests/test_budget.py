from __future__ import annotations

import pytest

from photo_prep.core.config import BudgetConfig
from photo_prep.core.errors import BudgetExceeded
from photo_prep.core.models import RasterImage
from photo_prep.core.pipeline import transcode
from photo_prep.core.planning import max_attempts, plan_dimensions, quality_levels
from photo_prep.core.budget import fit_to_budget

CONFIG = BudgetConfig()


def test_compliant_first_attempt_returns_immediately(recording_codec):
    codec = recording_codec(lambda w, h, q: 10)

    result = transcode(b"jpeg", "image/jpeg", "me.jpg", CONFIG, codec)

    assert codec.calls == [(2200, 1650, CONFIG.initial_quality)]
    assert result.quality == CONFIG.initial_quality
    assert (result.width, result.height) == (2200, 1650)
    assert result.attempts == 1


def test_large_but_compressible_lowers_quality_twice(recording_codec):
    # 2200x1650 only drops under 2 MB at q=0.80
    codec = recording_codec(lambda w, h, q: int(w * h * q * 0.66))

    result = transcode(b"jpeg", "image/jpeg", "me.jpg", CONFIG, codec)

    assert [call[:2] for call in codec.calls] == [(2200, 1650)] * 3
    assert result.quality == pytest.approx(CONFIG.initial_quality - 2 * CONFIG.quality_step)
    assert result.width == 2200
    assert result.byte_length <= CONFIG.target_bytes
    assert result.attempts == 3


def test_budget_exceeded_after_exhausting_every_tier(recording_codec):
    config = CONFIG.with_overrides(target_bytes=1000)
    codec = recording_codec(lambda w, h, q: config.target_bytes + 1)

    with pytest.raises(BudgetExceeded) as excinfo:
        transcode(b"jpeg", "image/jpeg", "me.jpg", config, codec)

    expected = max_attempts(2200, 1650, config)
    assert expected == 28
    assert len(codec.calls) == expected
    assert excinfo.value.attempts == expected
    assert excinfo.value.actual == config.target_bytes + 1
    assert excinfo.value.target == config.target_bytes

    last_width, last_height, last_quality = codec.calls[-1]
    assert max(last_width, last_height) <= config.min_dimension
    assert (excinfo.value.width, excinfo.value.height) == (last_width, last_height)
    assert excinfo.value.quality == pytest.approx(last_quality)


def test_quality_exhausted_before_dimensions_shrink(recording_codec):
    config = CONFIG.with_overrides(target_bytes=1000)
    codec = recording_codec(lambda w, h, q: config.target_bytes + 1)

    with pytest.raises(BudgetExceeded):
        transcode(b"jpeg", "image/jpeg", "me.jpg", config, codec)

    levels = quality_levels(config)
    assert levels == pytest.approx([0.92, 0.86, 0.80, 0.74])

    tiers: dict[tuple[int, int], list[float]] = {}
    for width, height, quality in codec.calls:
        tiers.setdefault((width, height), []).append(quality)

    sizes = list(tiers)
    assert sizes == [
        (2200, 1650),
        (1870, 1403),
        (1590, 1193),
        (1352, 1014),
        (1149, 862),
        (977, 733),
        (830, 623),
    ]
    for qualities in tiers.values():
        assert qualities == pytest.approx(levels)
    # each tier is strictly smaller than the previous one
    for bigger, smaller in zip(sizes, sizes[1:]):
        assert smaller[0] < bigger[0] and smaller[1] < bigger[1]


def test_dimensions_never_exceed_source_or_cap(recording_codec):
    codec = recording_codec(lambda w, h, q: w * h, width=1200, height=3000)
    config = CONFIG.with_overrides(target_bytes=1_000_000)

    result = transcode(b"png", "image/png", "tall.png", config, codec)

    assert result.width <= min(1200, config.max_dimension)
    assert result.height <= min(3000, config.max_dimension)
    assert all(w <= 1200 and h <= 3000 for w, h, _ in codec.calls)


def test_small_source_at_floor_gets_one_tier(recording_codec):
    codec = recording_codec(lambda w, h, q: 10**7, width=800, height=600)

    with pytest.raises(BudgetExceeded) as excinfo:
        transcode(b"png", "image/png", "small.png", CONFIG, codec)

    assert {call[:2] for call in codec.calls} == {(800, 600)}
    assert excinfo.value.attempts == len(quality_levels(CONFIG)) == 4


def test_loop_terminates_when_scaling_cannot_shrink():
    config = BudgetConfig(
        target_bytes=1,
        max_dimension=10,
        min_dimension=1,
        scale_step=0.9,
    )
    calls = []

    class _Codec:
        def encode(self, raster, width, height, quality):
            calls.append((width, height))
            return b"\0" * 2

    raster = RasterImage(image=None, width=3, height=1)
    with pytest.raises(BudgetExceeded) as excinfo:
        fit_to_budget(_Codec(), raster, (3, 1), config)

    assert excinfo.value.attempts == len(calls) == max_attempts(3, 1, config)


def test_attempt_callback_sees_every_attempt(recording_codec):
    codec = recording_codec(lambda w, h, q: int(w * h * q * 0.66))
    raster = codec.decode(b"")
    seen = []

    outcome = fit_to_budget(
        codec,
        raster,
        plan_dimensions(raster.width, raster.height, CONFIG.max_dimension),
        CONFIG,
        on_attempt=seen.append,
    )

    assert [(a.width, a.height, a.quality) for a in seen] == codec.calls
    assert seen[-1] is outcome.attempt
    assert outcome.attempts == len(seen)


def test_raster_released_on_failure(recording_codec):
    codec = recording_codec(lambda w, h, q: 10**7, width=500, height=500)

    with pytest.raises(BudgetExceeded):
        transcode(b"png", "image/png", "x.png", CONFIG, codec)

    assert codec.buffers and all(buffer.closed for buffer in codec.buffers)


def test_raster_released_on_success(recording_codec):
    codec = recording_codec(lambda w, h, q: 1)

    transcode(b"png", "image/png", "x.png", CONFIG, codec)

    assert all(buffer.closed for buffer in codec.buffers)
