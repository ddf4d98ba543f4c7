"""Domain models for AniOrder."""

from aniorder.models.media import (
    MediaRecord,
    MediaTitles,
    MediaType,
    RelationEdge,
    RelationType,
)

__all__ = ["MediaRecord", "MediaTitles", "MediaType", "RelationEdge", "RelationType"]
