from .filename import attachment_disposition, sanitize_title
from .locale import get_locale, safe_url_for_log

__all__ = ["attachment_disposition", "get_locale", "safe_url_for_log", "sanitize_title"]
