"""
에러 정의.

두 계열:
- GenerateError: 생성 서비스에서 발생, JSON {"error": ..., "success": false}
  + 매핑된 HTTP status로 응답
- ControllerError: 폼 컨트롤러 내부에서 발생, 항상 Error 렌더 상태로 변환
  (페이지에 치명적이지 않음)
"""

from typing import Any

# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """생성 서비스 에러 코드."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    GENERATION_ERROR = "GENERATION_ERROR"
    INITIALIZATION_ERROR = "INITIALIZATION_ERROR"


ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: 400,
    ErrorCodes.INVALID_INPUT: 400,
    ErrorCodes.GENERATION_ERROR: 500,
    ErrorCodes.INITIALIZATION_ERROR: 500,
}


# =============================================================================
# Generation Service Errors
# =============================================================================

class GenerateError(Exception):
    """
    생성 서비스 실패.

    사용법:
        raise GenerateError(ErrorCodes.VALIDATION_ERROR, "Name cannot be empty")
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    @property
    def status_code(self) -> int:
        return ERROR_STATUS.get(self.code, 500)

    def to_dict(self) -> dict[str, Any]:
        """응답 본문."""
        return {
            "error": self.message,
            "success": False,
        }


# =============================================================================
# Controller Errors
# =============================================================================

class ControllerError(Exception):
    """제출 사이클 1회 안에서의 실패 기본 클래스."""


class ValidationError(ControllerError):
    """필수 필드 누락 또는 공백. 네트워크 호출 전에 검출."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class TransportError(ControllerError):
    """요청 전송 불가 또는 연결 실패."""


class ServiceError(ControllerError):
    """비성공 HTTP status. 메시지는 서버가 준 사유."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


class ParsingError(ControllerError):
    """응답 본문을 기대한 형태로 읽지 못함."""
