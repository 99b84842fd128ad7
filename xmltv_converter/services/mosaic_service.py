"""
Mosaic Service

Packs deduplicated thumbnails into a single fixed-size sprite sheet and
assigns each show title a 1-based slot index.
"""
from __future__ import annotations

import io
import logging
from collections.abc import Iterable

from PIL import Image, UnidentifiedImageError

from xmltv_converter.models import Channel, Episode
from xmltv_converter.utils.logging_helpers import log_mosaic_stats


logger = logging.getLogger(__name__)

MOSAIC_COLUMNS = 8
MOSAIC_ROWS = 8
TILE_SIZE = 256


class MosaicPacker:
    """
    Fixed-capacity sprite sheet

    Slots are handed out in walk order. Once a new title does not fit the
    packer latches and never creates another slot, while titles that already
    own a slot keep resolving to it.
    """

    def __init__(
        self,
        columns: int = MOSAIC_COLUMNS,
        rows: int = MOSAIC_ROWS,
        tile_size: int = TILE_SIZE,
    ) -> None:
        self.columns = columns
        self.tile_size = tile_size
        self.capacity = columns * rows
        self.canvas = Image.new("RGB", (columns * tile_size, rows * tile_size), "white")
        self.used_slots = 0
        self.can_pack_more = True
        self._slots: dict[str, int] = {}
        self.unplaced = 0

    def pack_channels(self, channels: Iterable[Channel]) -> None:
        """Assign slots walking channels in order and each channel in start order"""
        for channel in channels:
            for episode in channel.episodes:
                self.pack_episode(episode)

        log_mosaic_stats(logger, self.used_slots, self.capacity, self.unplaced)

    def pack_episode(self, episode: Episode) -> int | None:
        """Assign a slot to an episode holding a thumbnail; returns the slot or None"""
        if not episode.has_preview:
            return None

        known_slot = self._slots.get(episode.show_title)
        if known_slot is not None:
            episode.slot_index = known_slot
            return known_slot

        if self.used_slots + 1 > self.capacity:
            if self.can_pack_more:
                logger.warning(
                    f"Mosaic full ({self.capacity} slots), '{episode.show_title}' and later new titles get no image"
                )
            self.can_pack_more = False

        if not self.can_pack_more or episode.thumbnail is None:
            self.unplaced += 1
            return None

        try:
            tile = self._render_tile(episode.thumbnail)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Thumbnail for '{episode.show_title}' could not be decoded, skipping: {e}")
            self.unplaced += 1
            return None

        row, col = divmod(self.used_slots, self.columns)
        self.canvas.paste(tile, (col * self.tile_size, row * self.tile_size))
        self.used_slots += 1
        self._slots[episode.show_title] = self.used_slots
        episode.slot_index = self.used_slots
        return self.used_slots

    def slot_for(self, show_title: str) -> int | None:
        return self._slots.get(show_title)

    def _render_tile(self, thumbnail: bytes) -> Image.Image:
        # Stretch to the tile, aspect ratio is not preserved
        with Image.open(io.BytesIO(thumbnail)) as img:
            return img.convert("RGB").resize((self.tile_size, self.tile_size), Image.Resampling.LANCZOS)

    def to_jpeg(self, quality: int = 90) -> bytes:
        buffer = io.BytesIO()
        self.canvas.save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()
