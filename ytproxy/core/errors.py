from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Classification of extractor failures"""
    NETWORK = "network"
    PARSE = "parse"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class ExtractionError(Exception):
    """Raised by extractor implementations when metadata or stream access fails"""

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"[{kind.value}] {message}")


class ServiceError(Exception):
    """Base for errors that map to a plain-text HTTP response"""

    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class InvalidRequest(ServiceError):
    """Missing or invalid caller-supplied parameters"""

    status_code = 400


class UpstreamError(ServiceError):
    """Any failure coming from the extractor"""

    status_code = 500

    def __init__(self, detail: str, kind: ErrorKind = ErrorKind.UNKNOWN, cause: Optional[str] = None):
        super().__init__(detail)
        self.kind = kind
        self.cause = cause

    @classmethod
    def from_exception(cls, detail: str, exc: Exception) -> "UpstreamError":
        if isinstance(exc, ExtractionError):
            return cls(detail, kind=exc.kind, cause=exc.message)
        return cls(detail, kind=ErrorKind.UNKNOWN, cause=str(exc))
