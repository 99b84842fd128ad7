"""
XMLTV Ingestion Service

Walks a parsed XMLTV tree and builds channels and episodes inside the conversion window.
"""
from pathlib import Path
from typing import Optional
import logging

import httpx
from lxml import etree # type: ignore

from xmltv_converter.exceptions import MissingRequiredField, UnknownChannelReference
from xmltv_converter.models import Channel, Episode
from xmltv_converter.services.image_resolver_service import ImageResolver
from xmltv_converter.services.replacement_service import ReplacementRegistry
from xmltv_converter.utils.file_operations import download_bytes
from xmltv_converter.utils.logging_helpers import log_ingest_summary
from xmltv_converter.utils.timezone import ConversionWindow, parse_xmltv_time

logger = logging.getLogger(__name__)


def load_xmltv_document(source: str, client: httpx.Client) -> etree._Element:
    """
    Load an XMLTV document from an HTTP/HTTPS URL or a local path

    Raises:
        etree.XMLSyntaxError: If XML is malformed
        httpx.HTTPError: If the download fails
        OSError: If the file can't be read
    """
    logger.debug(f"Loading XMLTV document: {source}")

    try:
        if source.lower().startswith(("http://", "https://")):
            root = etree.fromstring(download_bytes(client, source))
        else:
            root = etree.parse(str(Path(source))).getroot()
    except etree.XMLSyntaxError as e:
        logger.error(f"  XML parsing error: {e}")
        raise

    logger.debug(f"  XML document loaded (root tag: {root.tag})")
    return root


def ingest_guide(
    root: etree._Element,
    window: ConversionWindow,
    registry: ReplacementRegistry,
    resolver: ImageResolver
) -> list[Channel]:
    """
    Build channels with their in-window episodes

    Args:
        root: Parsed XMLTV root element
        window: Conversion time window
        registry: Title replacements
        resolver: Preview image resolver

    Returns:
        Channels in document order

    Raises:
        MalformedChannelIdentifier: If a display-name is not '<id> <name>'
        MissingRequiredField: If a channel or programme lacks a required field
        UnknownChannelReference: If a programme points at an undeclared channel
        DateFormatError: If a start or stop timestamp is malformed
    """
    logger.debug("  Extracting channels...")
    channels = _parse_channels(root)
    channels_by_id: dict[int, Channel] = {}
    for channel in channels:
        channels_by_id.setdefault(channel.channel_id, channel)
    logger.debug(f"    Found {len(channels)} channels")

    logger.debug(f"  Extracting programmes (window: {window.now.isoformat()} to {window.end.isoformat()})...")
    included = 0
    skipped = 0
    for programme in root.iter('programme'):
        episode, channel_id = _parse_single_programme(programme, window, registry, resolver)
        if episode is None:
            skipped += 1
            continue

        channel = channels_by_id.get(channel_id)
        if channel is None:
            raise UnknownChannelReference(
                f"Programme '{episode.show_title}' references unknown channel {channel_id}"
            )
        channel.add_episode(episode)
        included += 1

    log_ingest_summary(logger, len(channels), included, skipped)
    return channels


def _parse_channels(root: etree._Element) -> list[Channel]:
    """Extract channels from XMLTV root element"""
    channels = []

    for channel in root.iter('channel'):
        display_name = _get_text(channel, 'display-name')
        if display_name is None:
            raise MissingRequiredField(
                f"Channel {channel.get('id', '<no id>')} has no display-name"
            )
        channels.append(Channel.from_identifier(display_name))

    return channels


def _parse_single_programme(
    programme: etree._Element,
    window: ConversionWindow,
    registry: ReplacementRegistry,
    resolver: ImageResolver
) -> tuple[Optional[Episode], int]:
    """Parse single programme element, returning no episode when outside the window"""
    # Required fields
    channel_ref = programme.get('channel')
    start_str = programme.get('start')
    stop_str = programme.get('stop')
    title = _get_text(programme, 'title')

    if title is None:
        raise MissingRequiredField(f"Programme at {start_str} has no title")
    for field_name, value in (('channel', channel_ref), ('start', start_str), ('stop', stop_str)):
        if not value:
            raise MissingRequiredField(f"Programme '{title}' has no {field_name} attribute")

    channel_id = _parse_channel_reference(channel_ref, title)
    start_time = parse_xmltv_time(start_str)
    stop_time = parse_xmltv_time(stop_str)

    if not window.includes(start_time, stop_time):
        return None, channel_id

    episode = Episode(show_title=title, start_time=start_time)

    icon_url = None
    icon_elem = programme.find('icon')
    if icon_elem is not None:
        icon_url = icon_elem.get('src')
        if not icon_url:
            logger.debug(f"Ignoring icon without src for '{title}'")
            icon_url = None

    resolver.apply_preview(
        episode,
        registry.lookup(title),
        icon_url,
        _get_text(programme, 'desc'),
    )

    # Optional fields
    episode.title = _get_text(programme, 'sub-title')
    episode.episode_number = _get_text(programme, 'episode-num')

    return episode, channel_id


def _parse_channel_reference(channel_ref: str, title: str) -> int:
    """Numeric prefix of a channel attribute like '12.example.com'"""
    prefix = channel_ref.split('.')[0].strip()
    try:
        return int(prefix)
    except ValueError as e:
        raise UnknownChannelReference(
            f"Programme '{title}' has non-numeric channel reference '{channel_ref}'"
        ) from e


def _get_text(element: etree._Element, tag: str, default: Optional[str] = None) -> Optional[str]:
    """Text of the first matching child, or default when the child is absent"""
    child = element.find(tag)
    if child is None:
        return default
    return "".join(child.itertext())
