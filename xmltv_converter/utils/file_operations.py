"""
File and network operation utilities

This module handles the poster cache directory, single-attempt image downloads
and writing the final guide files.
"""
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from xmltv_converter.exceptions import CacheWriteFailed, ImageFetchFailed


logger = logging.getLogger(__name__)

GUIDE_JSON_FILENAME = "guide.json"
GUIDE_IMAGE_FILENAME = "guide.jpg"


class PosterCache:
    """
    On-disk poster cache addressed by key, stored as '<key>.jpg'

    The directory is listed once at construction; keys written afterwards
    are tracked in memory so the directory is never rescanned.
    """

    suffix = ".jpg"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self._keys = {
            path.stem for path in self.directory.glob(f"*{self.suffix}") if path.is_file()
        } if self.directory.is_dir() else set()
        logger.debug(f"Poster cache {self.directory}: {len(self._keys)} cached posters")

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}{self.suffix}"

    def keys(self) -> set[str]:
        return set(self._keys)

    def contains(self, key: str) -> bool:
        return key in self._keys

    def read(self, key: str) -> bytes:
        return self.path_for(key).read_bytes()

    def write(self, key: str, data: bytes) -> None:
        """
        Store poster bytes under key

        Raises:
            CacheWriteFailed: If the directory or file cannot be written
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.path_for(key).write_bytes(data)
        except OSError as e:
            raise CacheWriteFailed(f"Cannot write poster cache entry {key}: {e}") from e
        self._keys.add(key)


class HttpImageFetcher:
    """Downloads preview images with a single attempt per call."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def fetch(self, url: str) -> bytes:
        """
        Download image bytes from URL

        Raises:
            ImageFetchFailed: On any transport error or non-2xx response
        """
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ImageFetchFailed(f"HTTP {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise ImageFetchFailed(f"{type(e).__name__} while fetching {url}: {e}") from e

        logger.debug(f"Downloaded {len(response.content) / 1024:.1f} KB from {url}")
        return response.content


def download_bytes(client: httpx.Client, url: str) -> bytes:
    """
    Download a document from URL

    Raises:
        httpx.HTTPError: If the download fails
    """
    logger.info(f"Downloading file from {url}...")
    response = client.get(url)
    response.raise_for_status()

    file_size = len(response.content) / (1024 * 1024)
    logger.info(f"Downloaded {file_size:.2f} MB")
    return response.content


def write_guide_files(output_dir: Path | str, schedule_json: str, mosaic_jpeg: bytes) -> tuple[Path, Path]:
    """
    Write guide.json and guide.jpg into output_dir

    Returns:
        Tuple of (json_path, image_path)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / GUIDE_JSON_FILENAME
    image_path = output_dir / GUIDE_IMAGE_FILENAME

    image_path.write_bytes(mosaic_jpeg)
    json_path.write_text(schedule_json, encoding="utf-8")

    logger.info(f"Wrote {json_path} ({len(schedule_json)} chars) and {image_path} ({len(mosaic_jpeg) / 1024:.1f} KB)")
    return json_path, image_path


def dump_json(payload: Any) -> str:
    """Indented UTF-8 JSON text"""
    return json.dumps(payload, indent=2, ensure_ascii=False)
