from typing import AsyncGenerator, Protocol, runtime_checkable
from ytproxy.models.internal import SourceFormat, VideoMetadata

@runtime_checkable
class Extractor(Protocol):
    """
    Extraction collaborator.
    Implementations raise ExtractionError with a classified ErrorKind on failure.
    """

    async def fetch_info(self, url: str) -> VideoMetadata:
        """Resolve url into its title and ordered format list"""
        ...

    async def open_stream(self, url: str, fmt: SourceFormat) -> AsyncGenerator[bytes, None]:
        """
        Open a byte stream for exactly fmt.
        Closing the returned generator releases the upstream connection.
        """
        ...
