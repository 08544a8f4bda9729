from pydantic import BaseModel, Field

class DownloadRequest(BaseModel):
    url: str = Field(..., min_length=1, description="Video URL")
    itag: int = Field(..., description="Format identifier")
