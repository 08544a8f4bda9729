from .errors import ErrorKind, ExtractionError, InvalidRequest, UpstreamError

__all__ = ["ErrorKind", "ExtractionError", "InvalidRequest", "UpstreamError"]
