import re

# ASCII classes: unlike a JS \s, Unicode spaces such as U+2003 become "_",
# which keeps the header value latin-1 encodable.
UNSAFE_TITLE_CHARS = re.compile(r'[^\w\s.-]', re.ASCII)
HEADER_WHITESPACE = re.compile(r'[^\S ]', re.ASCII)


def sanitize_title(title: str) -> str:
    """Replace characters unsafe for an HTTP header value with underscores"""
    return UNSAFE_TITLE_CHARS.sub('_', title)


def attachment_disposition(filename: str) -> str:
    # header values cannot carry tabs or line breaks
    return f'attachment; filename="{HEADER_WHITESPACE.sub(" ", filename)}"'
