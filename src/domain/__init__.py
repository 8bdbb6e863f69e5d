"""Domain layer: 에러, 스키마, 상수."""

from .errors import (
    ControllerError,
    ErrorCodes,
    GenerateError,
    ParsingError,
    ServiceError,
    TransportError,
    ValidationError,
)
from .schemas import (
    Download,
    Error,
    GenerateRequest,
    Idle,
    ImageHandle,
    Loading,
    RenderState,
    Success,
    TextInput,
)

__all__ = [
    # errors
    "ErrorCodes",
    "GenerateError",
    "ControllerError",
    "ValidationError",
    "TransportError",
    "ServiceError",
    "ParsingError",
    # schemas
    "GenerateRequest",
    "ImageHandle",
    "Download",
    "TextInput",
    "RenderState",
    "Idle",
    "Loading",
    "Success",
    "Error",
]
