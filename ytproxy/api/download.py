from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from ytproxy.core.errors import InvalidRequest
from ytproxy.core.state import get_extractor
from ytproxy.models.request import DownloadRequest
from ytproxy.services.download import DownloadService
from ytproxy.services.extractor import Extractor
from ytproxy.utils.locale import get_locale
from ytproxy.i18n import i18n
import functools

router = APIRouter()

@router.get("/download")
async def download_video(
    request: Request,
    url: Optional[str] = Query(None, description="Video URL"),
    itag: Optional[str] = Query(None, description="Format identifier"),
    extractor: Extractor = Depends(get_extractor),
):
    """Stream one format of a video as an attachment"""

    locale = get_locale(request.headers.get("accept-language"))
    _ = functools.partial(i18n.get, locale=locale)

    if not url or not itag:
        raise InvalidRequest(_("error.missing_download_params"))

    try:
        download_request = DownloadRequest(url=url, itag=itag)
    except ValidationError:
        raise InvalidRequest(_("error.invalid_itag"))

    generator, headers = await DownloadService.prepare(extractor, download_request, locale, request)

    return StreamingResponse(
        generator,
        media_type='application/octet-stream',
        headers=headers
    )
