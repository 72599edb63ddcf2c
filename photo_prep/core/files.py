"""파일 시스템 관련 유틸리티 함수 모음."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .constants import MIME_TYPE_BY_EXTENSION, UNKNOWN_MIME_TYPE
from .models import SourceImage, TranscodeResult


def iter_image_files(path: Path) -> Iterable[Path]:
    """
    지정된 경로 바로 아래의 이미지 후보 파일을 반환합니다.

    허용 여부는 검증 단계에서 MIME 타입으로 판단하므로, 알려진 이미지 확장자를
    모두 후보로 돌려줍니다.

    Args:
        path (Path): 이미지 파일 또는 디렉토리 경로.

    Yields:
        Path: 발견된 이미지 파일 경로.

    Raises:
        FileNotFoundError: 입력 경로가 유효한 이미지 파일/폴더가 아닐 경우.
    """
    if path.is_dir():
        for candidate in path.iterdir():
            if candidate.is_file() and candidate.suffix.lower() in MIME_TYPE_BY_EXTENSION:
                yield candidate
    elif path.is_file() and path.suffix.lower() in MIME_TYPE_BY_EXTENSION:
        yield path
    else:
        raise FileNotFoundError(f"이미지/폴더 경로 오류: {path}")


def collect_sources(path: Path) -> List[Path]:
    """
    이미지 후보 파일을 정렬된 리스트로 반환합니다.

    Args:
        path (Path): 이미지 파일 또는 디렉토리 경로.

    Returns:
        List[Path]: 정렬된 이미지 파일 경로 리스트.
    """
    files = list(iter_image_files(path))
    files.sort()
    return files


def guess_mime_type(path: Path) -> str:
    """확장자로 MIME 타입을 추정합니다. 모르는 확장자는 `UNKNOWN_MIME_TYPE`."""
    return MIME_TYPE_BY_EXTENSION.get(path.suffix.lower(), UNKNOWN_MIME_TYPE)


def read_source(path: Path) -> SourceImage:
    """파일을 읽어 `SourceImage` 를 만듭니다."""
    return SourceImage(
        data=path.read_bytes(),
        mime_type=guess_mime_type(path),
        filename=path.name,
    )


def write_result(
    result: TranscodeResult,
    out_dir: Path,
    filename: Optional[str] = None,
) -> Path:
    """
    변환 결과를 `out_dir / (filename or result.filename)` 에 저장합니다.

    같은 폴더의 임시 파일에 먼저 쓴 뒤 `os.replace` 로 교체하므로, 중간에
    끊기더라도 잘린 결과 파일이 최종 경로에 남지 않습니다.

    Args:
        result (TranscodeResult): 저장할 변환 결과.
        out_dir (Path): 출력 폴더.
        filename (str | None): 저장 파일명. 생략하면 `result.filename`.

    Returns:
        Path: 저장된 파일 경로.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    destination = out_dir / (filename or result.filename)

    fd, tmp_name = tempfile.mkstemp(dir=out_dir, prefix=f".{destination.name}.", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(result.data)
        os.replace(tmp_name, destination)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return destination
