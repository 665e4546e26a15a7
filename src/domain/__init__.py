"""Domain layer: errors and schemas."""

from .errors import CompositionError, ErrorCodes
from .schemas import (
    CompositionRequest,
    CompositionResult,
    Frame,
    RequestLog,
    UploadedImage,
)

__all__ = [
    "CompositionError",
    "ErrorCodes",
    "Frame",
    "UploadedImage",
    "CompositionRequest",
    "CompositionResult",
    "RequestLog",
]
