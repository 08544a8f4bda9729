from types import SimpleNamespace

import pytest

from tests.helpers import FakeExtractor
from ytproxy.main import create_app


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def app(extractor):
    return create_app(extractor=extractor)


@pytest.fixture
def fake_request():
    """Stand-in for a starlette Request in service-level tests"""
    return SimpleNamespace(state=SimpleNamespace(request_id="test"))
