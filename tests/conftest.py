"""
Shared fixtures for converter tests.

Network access is replaced by httpx.MockTransport and images are generated with Pillow.
"""
import httpx
import pytest

from tests.guide_factory import NOW, RecordingTransport
from xmltv_converter.services import HttpImageFetcher, ImageResolver, ReplacementRegistry
from xmltv_converter.utils.file_operations import PosterCache
from xmltv_converter.utils.timezone import ConversionWindow


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def window(now):
    return ConversionWindow.starting_at(now, 8)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def http_client(transport):
    with httpx.Client(transport=httpx.MockTransport(transport)) as client:
        yield client


@pytest.fixture
def cache_dir(tmp_path):
    directory = tmp_path / "cachedposters"
    directory.mkdir()
    return directory


@pytest.fixture
def resolver(cache_dir, http_client):
    return ImageResolver(PosterCache(cache_dir), HttpImageFetcher(http_client))


@pytest.fixture
def empty_registry():
    return ReplacementRegistry()
