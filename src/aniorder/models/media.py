"""Media data models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union


class MediaType(str, Enum):
    """Media type tags, plus ANY to disable filtering."""

    ANY = "ANY"
    ANIME = "ANIME"
    MANGA = "MANGA"


class RelationType(str, Enum):
    """Relation type tags accepted in the relation allow-list."""

    ADAPTATION = "ADAPTATION"
    PREQUEL = "PREQUEL"
    SEQUEL = "SEQUEL"
    PARENT = "PARENT"
    SIDE_STORY = "SIDE_STORY"
    CHARACTER = "CHARACTER"
    SUMMARY = "SUMMARY"
    ALTERNATIVE = "ALTERNATIVE"
    SPIN_OFF = "SPIN_OFF"
    OTHER = "OTHER"


@dataclass(frozen=True)
class MediaTitles:
    """Title variants of a work."""

    romaji: Optional[str] = None  # Primary display title
    native: Optional[str] = None
    english: Optional[str] = None


@dataclass(frozen=True)
class MediaRecord:
    """A single resolved work.

    A release date of None means the work is unreleased or has no complete
    date; such records sort after every dated record.
    """

    media_id: int
    titles: MediaTitles = field(default_factory=MediaTitles)
    release_date: Optional[date] = None

    @property
    def title(self) -> str:
        """Primary title, falling back to English then native."""
        return self.titles.romaji or self.titles.english or self.titles.native or ""

    @property
    def is_released(self) -> bool:
        return self.release_date is not None

    @property
    def sort_key(self) -> tuple[bool, date]:
        """Key ordering dated records ascending and unreleased ones last."""
        return (self.release_date is None, self.release_date or date.min)

    def __str__(self) -> str:
        """Human-readable representation."""
        released = self.release_date.isoformat() if self.release_date else "unreleased"
        return f"{self.title or 'Unknown'} [{self.media_id}] ({released})"


@dataclass(frozen=True)
class RelationEdge:
    """A typed link from one work to another.

    Tags the catalog returns that are not known here are kept as raw strings
    so they simply never match a filter.
    """

    target_id: int
    relation_type: Union[RelationType, str]
    target_media_type: Union[MediaType, str, None] = None

    def matches(self, relations: set[RelationType], media_type: MediaType) -> bool:
        """Check the edge against a relation allow-list and media type filter."""
        if self.relation_type not in relations:
            return False
        return media_type is MediaType.ANY or self.target_media_type == media_type
