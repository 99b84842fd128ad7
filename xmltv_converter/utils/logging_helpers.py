"""
Structured logging helpers for consistent log formatting.
"""
import logging
from datetime import datetime, timezone


def log_section_start(logger: logging.Logger, section_name: str) -> None:
    """
    Log the start of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being started
    """
    logger.info(f"Starting: {section_name}")


def log_section_end(logger: logging.Logger, section_name: str) -> None:
    """
    Log the end of a processing section.

    Args:
        logger: Logger instance
        section_name: Name of the section being ended
    """
    logger.info(f"Completed: {section_name}")


def log_conversion_start(logger: logging.Logger) -> None:
    """Log conversion run start."""
    logger.info(f"Guide conversion started at {datetime.now(timezone.utc).isoformat()}")


def log_conversion_end(logger: logging.Logger) -> None:
    """Log conversion run end."""
    logger.info(f"Guide conversion completed at {datetime.now(timezone.utc).isoformat()}")


def log_ingest_summary(
    logger: logging.Logger,
    channels_count: int,
    episodes_count: int,
    skipped_count: int
) -> None:
    """
    Log ingestion summary.

    Args:
        logger: Logger instance
        channels_count: Number of channels declared in the guide
        episodes_count: Number of programmes inside the time window
        skipped_count: Number of programmes outside the time window
    """
    logger.info(
        f"Ingest summary - Channels: {channels_count}, Episodes: {episodes_count}, "
        f"Skipped (outside window): {skipped_count}"
    )


def log_mosaic_stats(
    logger: logging.Logger,
    used_slots: int,
    capacity: int,
    unplaced: int
) -> None:
    """
    Log mosaic packing statistics.

    Args:
        logger: Logger instance
        used_slots: Slots filled with thumbnails
        capacity: Total slots available
        unplaced: Thumbnail-bearing episodes left without a slot
    """
    logger.info(f"Mosaic: {used_slots}/{capacity} slots used, {unplaced} episodes without slot")
