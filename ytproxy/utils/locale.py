from typing import List, Optional, Tuple
from urllib.parse import urlparse
from ytproxy.config.settings import config

def _parse_accept_language(header: str) -> List[str]:
    """Primary language tags ordered by q-value, highest first"""
    weighted: List[Tuple[float, int, str]] = []
    for position, item in enumerate(header.split(",")):
        tag, _, params = item.strip().partition(";")
        if not tag:
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        weighted.append((-quality, position, tag.split("-")[0].lower()))
    return [tag for _, _, tag in sorted(weighted)]

def get_locale(accept_language: Optional[str] = None) -> str:
    """Pick the best supported locale from an Accept-Language header"""
    if accept_language:
        for locale in _parse_accept_language(accept_language):
            if locale in config.i18n.supported_locales:
                return locale
    return config.i18n.default_locale

def safe_url_for_log(url: str) -> str:
    """URL without its query string, for log lines"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "invalid_url"

    base_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    if config.logging.level == "DEBUG" and parsed.query:
        return f"{base_url}?..."
    return base_url
