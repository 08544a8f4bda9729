from typing import List
from ytproxy.core.errors import UpstreamError
from ytproxy.models.internal import SourceFormat
from ytproxy.models.response import FormatKind, VideoFormat
from ytproxy.services.extractor import Extractor
from ytproxy.i18n import i18n
import functools

AUDIO_ONLY_LABEL = "Audio only"
NO_RESOLUTION = "N/A"

class FormatService:
    """Format listing service"""

    @staticmethod
    def project(fmt: SourceFormat) -> VideoFormat:
        """Simplify one extractor format for the /formats response"""
        return VideoFormat(
            itag=fmt.itag,
            quality=fmt.quality_label or AUDIO_ONLY_LABEL,
            kind=FormatKind.VIDEO if fmt.has_audio and fmt.has_video else FormatKind.AUDIO,
            resolution=fmt.resolution or NO_RESOLUTION,
            mime_type=fmt.mime_type,
        )

    @staticmethod
    async def list_formats(extractor: Extractor, url: str, locale: str) -> List[VideoFormat]:
        """Fetch metadata and project every format, keeping extractor order"""
        _ = functools.partial(i18n.get, locale=locale)

        try:
            metadata = await extractor.fetch_info(url)
        except Exception as e:
            raise UpstreamError.from_exception(_("error.formats_failed"), e) from e

        return [FormatService.project(f) for f in metadata.formats]
