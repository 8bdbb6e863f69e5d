"""
ID 생성: 세션 id, 이미지 핸들 id, 다운로드 파일명.

모든 값은 `secrets` (암호학적으로 안전한 난수) 사용.
"""

import secrets

from src.domain.constants import (
    DOWNLOAD_EXTENSION,
    DOWNLOAD_PREFIX,
    DOWNLOAD_RANDOM_BYTES,
)


def generate_random_hex(num_bytes: int) -> str:
    """
    랜덤 hex 문자열.

    Args:
        num_bytes: 랜덤 바이트 수 (출력 길이는 2배)

    Returns:
        소문자 hex 문자열
    """
    return secrets.token_hex(num_bytes)


def generate_download_filename(
    prefix: str = DOWNLOAD_PREFIX,
    extension: str = DOWNLOAD_EXTENSION,
) -> str:
    """
    저장 파일명.

    형식: {prefix}{16 hex}{extension}, 예: povistka_3fa94c01d2b7e865.png
    """
    return f"{prefix}{generate_random_hex(DOWNLOAD_RANDOM_BYTES)}{extension}"


def generate_session_id() -> str:
    """브라우저 세션 id (쿠키 값)."""
    return secrets.token_urlsafe(24)


def generate_handle_id() -> str:
    """
    이미지 핸들 id.

    이미지 URL에 쓰이므로 다른 세션에서 추측 불가해야 함.
    """
    return secrets.token_urlsafe(16)
