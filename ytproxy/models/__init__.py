from .internal import SourceFormat, VideoMetadata
from .request import DownloadRequest
from .response import FormatKind, VideoFormat

__all__ = ["DownloadRequest", "FormatKind", "SourceFormat", "VideoFormat", "VideoMetadata"]
