"""
Replacement Service

Operator-supplied overrides mapping an exact programme title to a fixed
plot and poster image.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from xmltv_converter.exceptions import ReplacementConfigInvalid, ReplacementImageUnreadable
from xmltv_converter.schemas import ReplacementFile


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Replacement:
    name: str
    plot: str
    image: bytes


class ReplacementRegistry:
    """Exact-title lookup table, read-only once built."""

    def __init__(self, replacements: Iterable[Replacement] = ()) -> None:
        self._by_name: dict[str, Replacement] = {}
        for replacement in replacements:
            if replacement.name in self._by_name:
                logger.warning("Duplicate replacement for '%s' ignored, first entry wins", replacement.name)
                continue
            self._by_name[replacement.name] = replacement

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, str, Path | str]]) -> ReplacementRegistry:
        """
        Build the registry reading every poster eagerly

        Args:
            entries: (name, description, image_path) tuples

        Raises:
            ReplacementImageUnreadable: If any poster cannot be read
        """
        replacements = []
        for name, description, image_path in entries:
            try:
                image = Path(image_path).read_bytes()
            except OSError as e:
                logger.error(f"Replacement poster for '{name}' is unreadable: {image_path}")
                raise ReplacementImageUnreadable(
                    f"Cannot read replacement poster '{image_path}' for '{name}': {e}"
                ) from e
            replacements.append(Replacement(name=name, plot=description, image=image))

        return cls(replacements)

    def lookup(self, title: str) -> Replacement | None:
        return self._by_name.get(title)

    def __len__(self) -> int:
        return len(self._by_name)


def load_replacements(json_path: Path | str, posters_dir: Path | str) -> ReplacementRegistry:
    """
    Load the replacements JSON file and its posters

    A missing file means no replacements are configured.

    Args:
        json_path: Path to replacements JSON ([{"name", "description", "poster"}])
        posters_dir: Folder the poster filenames are relative to

    Raises:
        ReplacementConfigInvalid: If the file is not a valid replacements list
        ReplacementImageUnreadable: If a referenced poster cannot be read
    """
    json_path = Path(json_path)
    if not json_path.is_file():
        logger.info(f"No replacements file at {json_path}, continuing without replacements")
        return ReplacementRegistry()

    try:
        entries = ReplacementFile.validate_json(json_path.read_bytes())
    except (OSError, ValidationError) as e:
        logger.error(f"Invalid replacements file {json_path}: {e}")
        raise ReplacementConfigInvalid(f"Invalid replacements file {json_path}: {e}") from e

    posters_dir = Path(posters_dir)
    registry = ReplacementRegistry.from_entries(
        (entry.name, entry.description, posters_dir / entry.poster) for entry in entries
    )
    logger.info(f"Loaded {len(registry)} replacements from {json_path}")
    return registry
