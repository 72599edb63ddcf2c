"""업로드용 사진 변환 파이프라인이 공유하는 기본 상수 모듈.

크기 예산, 해상도 범위, 품질 탐색 단계, 출력 포맷과 스레딩/로깅 설정을
한곳에 모아 둡니다. 값을 바꾸려면 `BudgetConfig` 를 새로 만들어 덮어쓰세요.
"""

from __future__ import annotations

from typing import Final

ONE_MB: Final[int] = 1_000_000

# === 입력 검증 ===
# 업로드 가능한 원본 MIME 타입
ACCEPTED_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/webp"}
)

# 디코딩 전에 거부하는 원본 최대 크기(바이트)
MAX_SOURCE_BYTES: Final[int] = 10 * ONE_MB

# === 출력 예산 ===
# 변환 결과가 넘지 말아야 하는 크기(바이트)
TARGET_BYTES: Final[int] = 2 * ONE_MB

# === 해상도 범위 ===
# 긴 변 상한. 이보다 크면 종횡비를 유지하며 축소합니다.
MAX_DIMENSION: Final[int] = 2200

# 긴 변이 이 값 이하가 되면 더 이상 축소하지 않습니다.
MIN_DIMENSION: Final[int] = 960

# === 품질 탐색 ===
INITIAL_QUALITY: Final[float] = 0.92
MIN_QUALITY: Final[float] = 0.72
QUALITY_STEP: Final[float] = 0.06

# 품질을 모두 소진했을 때 적용하는 해상도 배율 (0~1)
SCALE_STEP: Final[float] = 0.85

# 부동소수 누적 오차 방지를 위한 품질 반올림 자릿수
QUALITY_DIGITS: Final[int] = 6

# === 출력 포맷 ===
# 입력 포맷과 무관하게 항상 하나의 포맷으로 내보냅니다.
OUTPUT_MIME_TYPE: Final[str] = "image/webp"
OUTPUT_FORMAT: Final[str] = "WEBP"
OUTPUT_EXTENSION: Final[str] = ".webp"

# 원본 파일명에서 쓸 만한 이름을 얻지 못했을 때 사용하는 이름
FALLBACK_STEM: Final[str] = "photo"

# 확장자 → MIME 타입 / 사용자 표시용 이름
MIME_TYPE_BY_EXTENSION: Final[dict[str, str]] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}

FORMAT_LABEL_BY_MIME_TYPE: Final[dict[str, str]] = {
    "image/jpeg": "JPG",
    "image/png": "PNG",
    "image/webp": "WebP",
}

# 알 수 없는 확장자에 부여하는 MIME 타입 (검증 단계에서 거부됨)
UNKNOWN_MIME_TYPE: Final[str] = "application/octet-stream"

# === 저장 옵션 ===
# Pillow WEBP 인코더에 그대로 전달하는 부가 옵션.
# quality 는 탐색 루프가 매 시도마다 지정합니다.
WEBP_ENCODE_PARAMS: Final[dict[str, int | bool]] = {
    "method": 4,       # 속도와 압축률의 균형값 (0=빠름, 6=느림)
    "lossless": False,
}

# === 스레딩 / 로깅 설정 ===
# 작업자 스레드 상한
MAX_THREADS_CAP: Final[int] = 32

# 진행 상황 로깅 간격 (N개마다 1회 로깅)
LOG_EVERY_N: Final[int] = 100

# 일괄 변환 결과 폴더 이름
OUTPUT_DIR_NAME: Final[str] = "upload_ready"
