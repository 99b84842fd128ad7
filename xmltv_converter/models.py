"""
In-memory guide model built during ingestion and consumed by packing and serialization.
"""
from __future__ import annotations

from bisect import insort
from dataclasses import dataclass, field
from datetime import datetime

from xmltv_converter.exceptions import MalformedChannelIdentifier


@dataclass(slots=True)
class Episode:
    """One programme occurrence on one channel."""
    show_title: str
    start_time: datetime
    title: str | None = None
    plot: str | None = None
    episode_number: str | None = None
    preview_url: str | None = None
    thumbnail: bytes | None = None
    slot_index: int | None = None

    @property
    def has_preview(self) -> bool:
        return self.thumbnail is not None or self.slot_index is not None


@dataclass(slots=True)
class Channel:
    """Named channel owning its episodes in ascending start-time order."""
    channel_id: int
    name: str
    _episodes: list[Episode] = field(default_factory=list, repr=False)

    @classmethod
    def from_identifier(cls, identifier: str) -> Channel:
        """
        Build a channel from a display-name token such as '12 News'

        Raises:
            MalformedChannelIdentifier: If the id or the name is missing, or the id is not numeric
        """
        parts = identifier.split(None, 1)
        if len(parts) != 2:
            raise MalformedChannelIdentifier(
                f"Channel identifier must be '<id> <name>', got: '{identifier}'"
            )

        raw_id, name = parts
        try:
            channel_id = int(raw_id)
        except ValueError as e:
            raise MalformedChannelIdentifier(
                f"Channel id must be an integer, got: '{raw_id}'"
            ) from e

        return cls(channel_id=channel_id, name=name.strip())

    @property
    def episodes(self) -> list[Episode]:
        return list(self._episodes)

    def add_episode(self, episode: Episode) -> None:
        # insort places equal keys after existing ones, so ties keep insertion order
        insort(self._episodes, episode, key=lambda item: item.start_time)


__all__ = ["Episode", "Channel"]
