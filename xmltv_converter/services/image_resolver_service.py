"""
Image Resolver Service

Resolves an episode's preview through replacement override, then an in-memory
URL map, then the on-disk poster cache, then a network fetch that populates the cache.
"""
from __future__ import annotations

import hashlib
import logging
from typing import Protocol

from xmltv_converter.exceptions import CacheWriteFailed, ImageFetchFailed
from xmltv_converter.models import Episode
from xmltv_converter.services.replacement_service import Replacement
from xmltv_converter.utils.file_operations import PosterCache


logger = logging.getLogger(__name__)


class ImageFetcher(Protocol):
    def fetch(self, url: str) -> bytes:
        """Return image bytes or raise ImageFetchFailed."""
        ...


def cache_key(url: str) -> str:
    """SHA-256 of the UTF-8 URL, lowercase hex"""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class ImageResolver:
    """Owns the per-run URL -> bytes map; each URL is fetched at most once."""

    def __init__(self, cache: PosterCache, fetcher: ImageFetcher) -> None:
        self.cache = cache
        self.fetcher = fetcher
        # None marks a URL whose fetch already failed this run
        self._known: dict[str, bytes | None] = {}
        self.memory_hits = 0
        self.cache_hits = 0
        self.fetches = 0
        self.failures = 0

    def resolve(self, url: str) -> bytes | None:
        """Return thumbnail bytes for URL, or None when it cannot be obtained"""
        if url in self._known:
            self.memory_hits += 1
            return self._known[url]

        key = cache_key(url)
        image = self._read_cached(key, url)
        if image is None:
            image = self._fetch(key, url)

        self._known[url] = image
        return image

    def _read_cached(self, key: str, url: str) -> bytes | None:
        if not self.cache.contains(key):
            return None
        try:
            image = self.cache.read(key)
        except OSError as e:
            logger.warning(f"Cached poster {key} for {url} is unreadable, refetching: {e}")
            return None
        self.cache_hits += 1
        logger.debug(f"Poster cache hit for {url}")
        return image

    def _fetch(self, key: str, url: str) -> bytes | None:
        self.fetches += 1
        try:
            image = self.fetcher.fetch(url)
        except ImageFetchFailed as e:
            self.failures += 1
            logger.warning(f"Preview image unavailable, episode keeps no thumbnail: {e}")
            return None

        try:
            self.cache.write(key, image)
        except CacheWriteFailed as e:
            logger.warning(f"{e} - using downloaded image without caching")
        return image

    def apply_preview(
        self,
        episode: Episode,
        replacement: Replacement | None,
        icon_url: str | None,
        description: str | None
    ) -> None:
        """
        Fill plot and thumbnail of an episode

        A replacement supplies both and the icon and desc are ignored.
        Otherwise the icon URL is resolved and desc becomes the plot.
        """
        if replacement is not None:
            episode.plot = replacement.plot
            episode.thumbnail = replacement.image
            return

        if icon_url is not None:
            episode.preview_url = icon_url
            episode.thumbnail = self.resolve(icon_url)

        if description is not None:
            episode.plot = description
