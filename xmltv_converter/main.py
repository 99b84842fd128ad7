"""
Guide conversion entry point

Coordinates ingestion, mosaic packing and serialization for one batch run,
then writes guide.json and guide.jpg.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

import httpx
from lxml import etree # type: ignore
from pydantic import ValidationError

from xmltv_converter.config import ConverterSettings, setup_logging
from xmltv_converter.exceptions import ConversionError
from xmltv_converter.schemas import ChannelSchedule
from xmltv_converter.services import (
    HttpImageFetcher,
    ImageFetcher,
    ImageResolver,
    MosaicPacker,
    ReplacementRegistry,
    build_schedule,
    ingest_guide,
    load_replacements,
    load_xmltv_document,
    render_schedule_json,
)
from xmltv_converter.utils.file_operations import PosterCache, write_guide_files
from xmltv_converter.utils.logging_helpers import (
    log_conversion_end,
    log_conversion_start,
    log_section_end,
    log_section_start,
)
from xmltv_converter.utils.timezone import ConversionWindow


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConversionResult:
    schedule: list[ChannelSchedule]
    schedule_json: str
    mosaic_jpeg: bytes
    stats: dict = field(default_factory=dict)


class ConversionPipeline:
    """Runs ingest -> pack -> serialize in memory for a single guide."""

    def __init__(
        self,
        registry: ReplacementRegistry,
        resolver: ImageResolver,
        *,
        hours_to_convert: float = 8.0,
        jpeg_quality: int = 90,
        now: datetime | None = None,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.jpeg_quality = jpeg_quality
        self.window = ConversionWindow.starting_at(now or datetime.now(timezone.utc), hours_to_convert)

    def run(self, root: etree._Element) -> ConversionResult:
        logger.info(
            "Target window: %s -> %s",
            self.window.now.isoformat(),
            self.window.end.isoformat(),
        )

        log_section_start(logger, "ingest")
        channels = ingest_guide(root, self.window, self.registry, self.resolver)
        log_section_end(logger, "ingest")

        log_section_start(logger, "mosaic packing")
        packer = MosaicPacker()
        packer.pack_channels(channels)
        mosaic_jpeg = packer.to_jpeg(self.jpeg_quality)
        log_section_end(logger, "mosaic packing")

        log_section_start(logger, "serialization")
        schedule = build_schedule(channels, self.window)
        schedule_json = render_schedule_json(schedule)
        log_section_end(logger, "serialization")

        stats = {
            "channels": len(schedule),
            "entries": sum(len(channel.media) for channel in schedule),
            "slots_used": packer.used_slots,
            "episodes_without_slot": packer.unplaced,
            "image_fetches": self.resolver.fetches,
            "image_fetch_failures": self.resolver.failures,
            "image_cache_hits": self.resolver.cache_hits,
        }
        logger.info("Conversion stats: %s", stats)

        return ConversionResult(
            schedule=schedule,
            schedule_json=schedule_json,
            mosaic_jpeg=mosaic_jpeg,
            stats=stats,
        )


def convert(
    settings: ConverterSettings,
    *,
    client: httpx.Client | None = None,
    fetcher: ImageFetcher | None = None,
    now: datetime | None = None,
) -> ConversionResult:
    """
    Run a full conversion and write the guide files

    Nothing is written unless the whole run succeeds.

    Raises:
        ConversionError: On any fatal input or configuration error
    """
    if not settings.guide_source:
        raise ConversionError("No XMLTV source configured")

    for directory in (settings.output_path, settings.replacements_poster_path, settings.poster_cache_path):
        Path(directory).mkdir(parents=True, exist_ok=True)

    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=settings.fetch_timeout_sec, follow_redirects=True)

    log_conversion_start(logger)
    try:
        registry = load_replacements(settings.replacements_json_path, settings.replacements_poster_path)
        resolver = ImageResolver(PosterCache(settings.poster_cache_path), fetcher or HttpImageFetcher(client))
        root = load_xmltv_document(settings.guide_source, client)

        pipeline = ConversionPipeline(
            registry,
            resolver,
            hours_to_convert=settings.hours_to_convert,
            jpeg_quality=settings.mosaic_jpeg_quality,
            now=now,
        )
        result = pipeline.run(root)
    finally:
        if own_client:
            client.close()

    write_guide_files(settings.output_path, result.schedule_json, result.mosaic_jpeg)
    log_conversion_end(logger)
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xmltv-converter",
        description="Convert an XMLTV guide into guide.json and a guide.jpg thumbnail mosaic.",
    )
    parser.add_argument("-i", "--input", dest="guide_source",
                        help="URL or path of the XMLTV guide to convert. Defaults to XMLTV_GUIDE_SOURCE.")
    parser.add_argument("-o", "--output", dest="output_path",
                        help="Folder to write guide.json and guide.jpg to. Defaults to ./guide")
    parser.add_argument("-l", "--length", dest="hours_to_convert", type=float,
                        help="Approximate hours of guide data to write per channel. Defaults to 8.")
    parser.add_argument("-r", "--replacements", dest="replacements_json_path",
                        help="Path to the replacements JSON file. Defaults to ./replacements.json")
    parser.add_argument("-p", "--posters", dest="replacements_poster_path",
                        help="Folder with replacement posters. Defaults to ./replacementposters")
    parser.add_argument("-c", "--cache", dest="poster_cache_path",
                        help="Poster cache folder. Defaults to ./cachedposters")
    parser.add_argument("--log-level", dest="log_level",
                        help="Logging level. Defaults to INFO.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}

    try:
        settings = ConverterSettings(**overrides)
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        return 2

    setup_logging(settings.log_level)

    try:
        result = convert(settings)
    except (ConversionError, etree.XMLSyntaxError, httpx.HTTPError, OSError) as e:
        logger.error(f"Guide conversion failed, no output written: {e}", exc_info=True)
        return 1

    logger.info(
        "Guide written: %s channels, %s entries, %s mosaic slots",
        result.stats["channels"],
        result.stats["entries"],
        result.stats["slots_used"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
