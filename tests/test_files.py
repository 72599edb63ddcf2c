from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from photo_prep.core import files
from photo_prep.core.files import collect_sources, guess_mime_type, read_source, write_result
from photo_prep.core.models import TranscodeResult


def test_collect_sources_sorted_and_filtered(tmp_path):
    for name in ("b.JPG", "a.png", "c.webp", "notes.txt", "d.gif"):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "e.jpg").write_bytes(b"x")

    names = [path.name for path in collect_sources(tmp_path)]

    assert names == ["a.png", "b.JPG", "c.webp", "d.gif"]


def test_collect_sources_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        collect_sources(tmp_path / "missing")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.jpeg", "image/jpeg"),
        ("a.JPG", "image/jpeg"),
        ("a.png", "image/png"),
        ("a.gif", "image/gif"),
        ("a.heic", "application/octet-stream"),
    ],
)
def test_guess_mime_type(name, expected):
    assert guess_mime_type(Path(name)) == expected


def test_read_and_write_round_trip(tmp_path):
    src = tmp_path / "me.png"
    src.write_bytes(b"pngbytes")

    source = read_source(src)
    assert (source.mime_type, source.filename, source.byte_length) == ("image/png", "me.png", 8)

    result = TranscodeResult(
        data=b"webp",
        mime_type="image/webp",
        filename="me.webp",
        width=1,
        height=1,
        created_at=datetime.now(timezone.utc),
        quality=0.92,
        attempts=1,
    )
    saved = write_result(result, tmp_path / "out")
    assert saved == tmp_path / "out" / "me.webp"
    assert saved.read_bytes() == b"webp"


def _result(data: bytes = b"webp") -> TranscodeResult:
    return TranscodeResult(
        data=data,
        mime_type="image/webp",
        filename="me.webp",
        width=1,
        height=1,
        created_at=datetime.now(timezone.utc),
        quality=0.92,
        attempts=1,
    )


def test_write_result_explicit_name_replaces_existing(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "me-png.webp").write_bytes(b"old")

    saved = write_result(_result(b"new"), out, "me-png.webp")

    assert saved == out / "me-png.webp"
    assert saved.read_bytes() == b"new"
    assert sorted(path.name for path in out.iterdir()) == ["me-png.webp"]


def test_interrupted_write_leaves_no_partial_output(tmp_path, monkeypatch):
    out = tmp_path / "out"

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(files.os, "replace", _fail)

    with pytest.raises(OSError, match="disk full"):
        write_result(_result(), out)

    assert not (out / "me.webp").exists()
    assert list(out.iterdir()) == []
