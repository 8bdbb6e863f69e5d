"""
데이터 스키마.

- GenerateRequest: 생성 서비스 입력 (name, address, issuer)
- RenderState: Idle / Loading / Success / Error, 항상 정확히 하나
- ImageHandle: 생성된 이미지 바이트의 임시 참조
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import FIELD_MAX_BYTES
from .errors import ErrorCodes, GenerateError

# =============================================================================
# Generation Request
# =============================================================================

@dataclass
class GenerateRequest:
    """повістка 템플릿에 그려지는 필드."""
    name: str = ""
    address: str = ""
    issuer: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "GenerateRequest":
        """
        디코딩된 JSON 본문으로 생성.

        모르는 키는 무시. 없는 키는 "" → validate()에서 거부.

        Raises:
            GenerateError: INVALID_INPUT (본문이 객체가 아니거나 필드가 문자열이 아님)
        """
        if not isinstance(data, dict):
            raise GenerateError(ErrorCodes.INVALID_INPUT, "Invalid input data")

        values: dict[str, str] = {}
        for key in ("name", "address", "issuer"):
            value = data.get(key, "")
            if not isinstance(value, str):
                raise GenerateError(ErrorCodes.INVALID_INPUT, "Invalid input data")
            values[key] = value
        return cls(**values)

    def sanitize(self) -> None:
        """모든 필드 앞뒤 공백 제거."""
        self.name = self.name.strip()
        self.address = self.address.strip()
        self.issuer = self.issuer.strip()

    def validate(self) -> None:
        """
        Raises:
            GenerateError: VALIDATION_ERROR (첫 번째 빈 필드 또는 길이 초과 필드)
        """
        for key in ("name", "address", "issuer"):
            if not getattr(self, key).strip():
                raise GenerateError(
                    ErrorCodes.VALIDATION_ERROR, f"{key.capitalize()} cannot be empty"
                )

        # 제한은 문자 수가 아닌 인코딩 바이트 기준
        for key, limit in FIELD_MAX_BYTES.items():
            if len(getattr(self, key).encode("utf-8")) > limit:
                raise GenerateError(
                    ErrorCodes.VALIDATION_ERROR, f"{key.capitalize()} is too long"
                )


@dataclass(frozen=True)
class FieldPosition:
    """템플릿 위 텍스트 좌상단 기준점 (픽셀)."""
    x: float
    y: float


# =============================================================================
# Image Handle
# =============================================================================

@dataclass
class ImageHandle:
    """
    이미지 바이트의 임시 참조.

    lease가 1개 이상일 때만 유효. 표시 영역이 표시 중 lease 1개,
    저장 다운로드가 응답 전송 완료까지 1개씩 추가 보유.
    """
    handle_id: str
    data: bytes
    media_type: str
    leases: int = 1

    @property
    def released(self) -> bool:
        return self.leases <= 0


@dataclass(frozen=True)
class Download:
    """저장 액션 결과."""
    handle_id: str
    filename: str
    data: bytes
    media_type: str


# =============================================================================
# Render State
# =============================================================================

class RenderStateKind(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Idle:
    kind: RenderStateKind = field(default=RenderStateKind.IDLE, init=False)


@dataclass(frozen=True)
class Loading:
    message: str
    kind: RenderStateKind = field(default=RenderStateKind.LOADING, init=False)


@dataclass(frozen=True)
class Success:
    handle: ImageHandle
    image_url: str
    kind: RenderStateKind = field(default=RenderStateKind.SUCCESS, init=False)


@dataclass(frozen=True)
class Error:
    message: str
    kind: RenderStateKind = field(default=RenderStateKind.ERROR, init=False)


RenderState = Idle | Loading | Success | Error


# =============================================================================
# Form Inputs
# =============================================================================

@dataclass(frozen=True)
class TextInput:
    """폼 페이지의 텍스트 필드 1개 (name, label, placeholder)."""
    name: str
    placeholder: str = ""
    label: str = ""
