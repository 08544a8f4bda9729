import pytest

from ytproxy.utils.filename import attachment_disposition, sanitize_title

SAMPLES = [
    "",
    "Test Video",
    "My:Video/Title?.mp4",
    "already_safe-name.v2",
    'quotes "inside" and \\backslash',
    "tabs\tand\nnewlines",
    "emoji 🎬 and ünïcödé",
    "____",
    "a*b<c>d|e",
    "日本語のタイトル",
]


def test_sanitize_replaces_unsafe_characters():
    assert sanitize_title("My:Video/Title?.mp4") == "My_Video_Title_.mp4"


def test_sanitize_keeps_allowed_characters():
    assert sanitize_title("Test Video - part_2.final") == "Test Video - part_2.final"


def test_sanitize_does_not_collapse_underscores():
    assert sanitize_title("a??b") == "a__b"


def test_sanitize_replaces_non_ascii_per_character():
    assert sanitize_title("café") == "caf_"


@pytest.mark.parametrize("title", SAMPLES)
def test_sanitize_is_idempotent(title):
    once = sanitize_title(title)
    assert sanitize_title(once) == once


@pytest.mark.parametrize("title", SAMPLES)
def test_sanitize_preserves_length(title):
    assert len(sanitize_title(title)) == len(title)


def test_disposition_quotes_filename():
    assert attachment_disposition("Test Video.webm") == 'attachment; filename="Test Video.webm"'


def test_disposition_flattens_control_whitespace():
    assert attachment_disposition("a\tb\r\nc.mp4") == 'attachment; filename="a b  c.mp4"'


def test_sanitize_replaces_unicode_whitespace():
    assert sanitize_title("a\u2003b c") == "a_b c"
