from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from ytproxy.core.errors import InvalidRequest
from ytproxy.core.logging import log_info
from ytproxy.core.state import get_extractor
from ytproxy.models.response import VideoFormat
from ytproxy.services.extractor import Extractor
from ytproxy.services.formats import FormatService
from ytproxy.utils.locale import get_locale, safe_url_for_log
from ytproxy.i18n import i18n
import functools

router = APIRouter()

@router.get("/formats", response_model=List[VideoFormat])
async def list_formats(
    request: Request,
    url: Optional[str] = Query(None, description="Video URL"),
    extractor: Extractor = Depends(get_extractor),
):
    """List the available formats of a video"""

    locale = get_locale(request.headers.get("accept-language"))
    _ = functools.partial(i18n.get, locale=locale)

    if not url:
        raise InvalidRequest(_("error.missing_url"))

    safe_url = safe_url_for_log(url)
    log_info(request, i18n.get("log.fetching_formats", url=safe_url))

    formats = await FormatService.list_formats(extractor, url, locale)
    log_info(request, i18n.get("log.formats_retrieved", count=len(formats), url=safe_url))
    return formats
