from typing import AsyncGenerator, AsyncIterator, Dict, Tuple
from fastapi import Request
from ytproxy.core.errors import InvalidRequest, UpstreamError
from ytproxy.core.logging import log_error, log_info, log_warning
from ytproxy.models.request import DownloadRequest
from ytproxy.services.extractor import Extractor
from ytproxy.utils.filename import attachment_disposition, sanitize_title
from ytproxy.utils.locale import safe_url_for_log
from ytproxy.i18n import i18n
import functools

DEFAULT_CONTAINER = "mp4"

class DownloadService:
    """Single-format download relay"""

    @staticmethod
    async def prepare(
        extractor: Extractor,
        download_request: DownloadRequest,
        locale: str,
        request: Request
    ) -> Tuple[AsyncIterator[bytes], Dict[str, str]]:
        """
        Resolve the format, open the upstream stream and read its first chunk.
        Returns (generator, headers). Anything failing up to the first chunk
        raises before response headers are committed.
        """
        _ = functools.partial(i18n.get, locale=locale)
        url = download_request.url

        try:
            metadata = await extractor.fetch_info(url)
        except Exception as e:
            raise UpstreamError.from_exception(_("error.download_failed"), e) from e

        fmt = metadata.find_format(download_request.itag)
        if fmt is None:
            raise InvalidRequest(_("error.invalid_itag"))

        filename = f"{sanitize_title(metadata.title)}.{fmt.container or DEFAULT_CONTAINER}"
        log_info(request, i18n.get("log.starting_download", itag=fmt.itag, url=safe_url_for_log(url)))

        try:
            source = await extractor.open_stream(url, fmt)
        except Exception as e:
            raise UpstreamError.from_exception(_("error.download_failed"), e) from e

        try:
            first_chunk = await source.__anext__()
        except StopAsyncIteration:
            first_chunk = b""
        except Exception as e:
            await source.aclose()
            raise UpstreamError.from_exception(_("error.download_failed"), e) from e

        headers = {
            'Content-Disposition': attachment_disposition(filename),
            'X-Content-Type-Options': 'nosniff',
            'Cache-Control': 'no-cache',
        }

        return DownloadService.relay(source, first_chunk, request), headers

    @staticmethod
    async def relay(
        source: AsyncGenerator[bytes, None],
        first_chunk: bytes,
        request: Request
    ) -> AsyncGenerator[bytes, None]:
        """
        Forward source bytes as they arrive.
        Upstream errors after the first chunk are logged and re-raised so the
        server aborts the response; early close (client gone) closes the source.
        """
        finished = False
        failed = False
        try:
            if first_chunk:
                yield first_chunk
            async for chunk in source:
                yield chunk
            finished = True
            log_info(request, i18n.get("log.download_finished"))
        except Exception as e:
            failed = True
            log_error(request, i18n.get("log.download_aborted", reason=str(e)))
            raise
        finally:
            if not finished and not failed:
                log_warning(request, i18n.get("log.client_disconnected"))
            await source.aclose()
