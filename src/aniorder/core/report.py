"""Release order listing."""

from pathlib import Path
from typing import Iterable

import click
import structlog

from aniorder.models.media import MediaRecord

logger = structlog.get_logger(__name__)

COLUMN_WIDTH = 15
DATE_FORMAT = "%m/%d/%Y"
UNRELEASED_LABEL = "Unreleased"


def format_release_date(record: MediaRecord) -> str:
    """Render a record's release date, or the unreleased label."""
    if record.release_date is None:
        return UNRELEASED_LABEL
    return record.release_date.strftime(DATE_FORMAT)


def format_release_order(records: Iterable[MediaRecord], pad: int = COLUMN_WIDTH) -> str:
    """Render records as a two-column release/title listing.

    Args:
        records: Records in the order they should be listed
        pad: Width of the release column

    Returns:
        Listing text, one line per record after the header
    """
    lines = ["Release:".ljust(pad) + "Anime:"]
    for record in records:
        lines.append(format_release_date(record).ljust(pad) + record.title)
    return "\n".join(lines) + "\n"


def write_report(path: Path, text: str) -> Path:
    """Write a listing to disk, creating parent directories.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote release order", path=str(path))
    return path


def open_report(path: Path) -> None:
    """Open a written listing with the OS default application."""
    logger.debug("Opening release order", path=str(path))
    click.launch(str(path))
