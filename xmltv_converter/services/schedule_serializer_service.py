"""
Schedule Serializer Service

Turns packed channels into the guide JSON structure, referencing thumbnails
by mosaic slot instead of URL.
"""
import logging
from collections.abc import Iterable

from xmltv_converter.models import Channel, Episode
from xmltv_converter.schemas import ChannelSchedule, EpisodeInfo, GuideSchedule, MediaEntry
from xmltv_converter.utils.file_operations import dump_json
from xmltv_converter.utils.timezone import ConversionWindow, format_utc_timestamp

logger = logging.getLogger(__name__)


def build_schedule(channels: Iterable[Channel], window: ConversionWindow) -> list[ChannelSchedule]:
    """
    Build channel schedules in ingestion order

    Each channel stops at its first episode starting at or after the window end.
    """
    schedule = []
    for channel in channels:
        media = []
        for episode in channel.episodes:
            if episode.start_time >= window.end:
                break
            media.append(_build_media_entry(episode))

        schedule.append(ChannelSchedule(name=channel.name, media=media))
        logger.debug(f"Channel {channel.channel_id} '{channel.name}': {len(media)} entries")

    return schedule


def _build_media_entry(episode: Episode) -> MediaEntry:
    image = None
    if episode.preview_url is not None:
        # URL known but no slot (fetch failed or mosaic full) is emitted as 0
        image = episode.slot_index or 0
    elif episode.slot_index is not None:
        image = episode.slot_index

    return MediaEntry(
        name=episode.show_title,
        start_date=format_utc_timestamp(episode.start_time),
        info=EpisodeInfo(episode=episode.title, plot=episode.plot, image=image),
        episode_number=episode.episode_number or "",
    )


def schedule_to_payload(schedule: list[ChannelSchedule]) -> list[dict]:
    """Plain JSON-ready value with absent info fields left out"""
    return GuideSchedule.dump_python(schedule, mode="json", by_alias=True, exclude_none=True)


def render_schedule_json(schedule: list[ChannelSchedule]) -> str:
    return dump_json(schedule_to_payload(schedule))
