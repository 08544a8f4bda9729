from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FormatKind(str, Enum):
    VIDEO = "Video"
    AUDIO = "Audio"


class VideoFormat(BaseModel):
    """Format entry returned by /formats"""
    model_config = ConfigDict(populate_by_name=True)

    itag: int
    quality: str
    kind: FormatKind = Field(alias="type")
    resolution: str
    mime_type: str = Field(alias="mimeType")
