"""Test doubles shared by the API and service tests"""
from typing import List, Optional, Sequence

from ytproxy.models.internal import SourceFormat, VideoMetadata


def make_format(itag: int, has_audio: bool = True, has_video: bool = True, **kwargs) -> SourceFormat:
    defaults = {
        "quality_label": "720p" if has_video else None,
        "resolution": "1280x720" if has_video else None,
        "mime_type": 'video/mp4; codecs="avc1.64001F, mp4a.40.2"' if has_video else 'audio/webm; codecs="opus"',
        "container": "mp4" if has_video else "webm",
    }
    defaults.update(kwargs)
    return SourceFormat(itag=itag, has_audio=has_audio, has_video=has_video, **defaults)


class FakeExtractor:
    """In-memory extractor double"""

    def __init__(
        self,
        metadata: Optional[VideoMetadata] = None,
        chunks: Sequence[bytes] = (b"chunk-1", b"chunk-2"),
        info_error: Optional[Exception] = None,
        open_error: Optional[Exception] = None,
        stream_error: Optional[Exception] = None,
        fail_at: Optional[int] = None,
    ):
        self.metadata = metadata or VideoMetadata(title="Test Video", formats=[make_format(18)])
        self.chunks = list(chunks)
        self.info_error = info_error
        self.open_error = open_error
        self.stream_error = stream_error
        self.fail_at = fail_at
        self.info_calls: List[str] = []
        self.opened: List[tuple] = []
        self.closed = False

    async def fetch_info(self, url: str) -> VideoMetadata:
        self.info_calls.append(url)
        if self.info_error:
            raise self.info_error
        return self.metadata

    async def open_stream(self, url: str, fmt: SourceFormat):
        self.opened.append((url, fmt.itag))
        if self.open_error:
            raise self.open_error
        return self._stream()

    async def _stream(self):
        try:
            for index, chunk in enumerate(self.chunks):
                if self.fail_at == index:
                    raise self.stream_error
                yield chunk
        finally:
            self.closed = True
