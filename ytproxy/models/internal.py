from pydantic import BaseModel
from typing import List, Optional

class SourceFormat(BaseModel):
    """One format as reported by the extractor"""
    itag: int
    format_id: Optional[str] = None
    quality_label: Optional[str] = None
    has_audio: bool = False
    has_video: bool = False
    resolution: Optional[str] = None
    mime_type: str = ""
    container: Optional[str] = None

class VideoMetadata(BaseModel):
    """Video metadata as reported by the extractor"""
    title: str
    formats: List[SourceFormat] = []

    def find_format(self, itag: int) -> Optional[SourceFormat]:
        return next((f for f in self.formats if f.itag == itag), None)
