"""Pydantic models for catalog GraphQL responses."""

from datetime import date
from typing import List, Optional

import structlog
from pydantic import BaseModel, PositiveInt, ValidationError

from aniorder.models.media import (
    MediaRecord,
    MediaTitles,
    MediaType,
    RelationEdge,
    RelationType,
)

logger = structlog.get_logger(__name__)


class FuzzyDate(BaseModel):
    """Catalog date where any component may be unknown."""

    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    def to_date(self) -> Optional[date]:
        """Convert to a calendar date, or None if incomplete or invalid."""
        if self.year is None or self.month is None or self.day is None:
            return None
        try:
            return date(self.year, self.month, self.day)
        except ValueError:
            logger.debug(
                "Invalid catalog date",
                year=self.year,
                month=self.month,
                day=self.day,
            )
            return None


class MediaTitle(BaseModel):
    """Catalog title variants."""

    romaji: Optional[str] = None
    english: Optional[str] = None
    native: Optional[str] = None


class RelationNode(BaseModel):
    """Target of a relation edge."""

    id: PositiveInt
    type: Optional[str] = None


class RelationEdgeNode(BaseModel):
    """Relation edge as returned by the catalog."""

    node: RelationNode
    relationType: Optional[str] = None


class MediaRelations(BaseModel):
    """Relation connection."""

    edges: Optional[List[Optional[dict]]] = None


class MediaNode(BaseModel):
    """The data.Media node."""

    id: Optional[int] = None
    title: Optional[MediaTitle] = None
    startDate: Optional[FuzzyDate] = None
    endDate: Optional[FuzzyDate] = None
    relations: Optional[MediaRelations] = None

    @property
    def release_date(self) -> Optional[date]:
        """Start date as a calendar date."""
        return self.startDate.to_date() if self.startDate else None

    @property
    def completion_date(self) -> Optional[date]:
        """End date as a calendar date."""
        return self.endDate.to_date() if self.endDate else None


def _media_node(body: dict) -> Optional[MediaNode]:
    """Extract and validate data.Media, or None if missing or malformed."""
    data = body.get("data") if isinstance(body, dict) else None
    media = data.get("Media") if isinstance(data, dict) else None
    if not isinstance(media, dict):
        return None

    try:
        return MediaNode.model_validate(media)
    except ValidationError as e:
        logger.debug("Malformed media node", error=str(e))
        return None


def parse_media_record(
    body: dict,
    media_id: Optional[int] = None,
    use_end_date: bool = False,
) -> Optional[MediaRecord]:
    """Build a MediaRecord from a catalog response body.

    Args:
        body: Decoded response body
        media_id: Requested identifier, used when the node omits its id
        use_end_date: Use endDate instead of startDate as release date

    Returns:
        MediaRecord, or None if the response carries no media node
    """
    node = _media_node(body)
    if node is None:
        return None

    record_id = node.id if node.id is not None else media_id
    if record_id is None:
        return None

    title = node.title or MediaTitle()
    return MediaRecord(
        media_id=record_id,
        titles=MediaTitles(
            romaji=title.romaji,
            native=title.native,
            english=title.english,
        ),
        release_date=node.completion_date if use_end_date else node.release_date,
    )


def _tag(value: Optional[str], enum_cls):
    """Map a catalog tag onto an enum, keeping unknown tags as strings."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return value


def extract_relation_edges(body: dict) -> list[RelationEdge]:
    """Extract relation edges in the order the catalog returned them.

    Edges without a positive target id are skipped.
    """
    node = _media_node(body)
    if node is None or node.relations is None or not node.relations.edges:
        return []

    edges = []
    for raw_edge in node.relations.edges:
        if not isinstance(raw_edge, dict):
            continue
        try:
            edge = RelationEdgeNode.model_validate(raw_edge)
        except ValidationError:
            logger.debug("Skipping malformed relation edge", edge=raw_edge)
            continue

        edges.append(
            RelationEdge(
                target_id=edge.node.id,
                relation_type=_tag(edge.relationType, RelationType) or "",
                target_media_type=_tag(edge.node.type, MediaType),
            )
        )

    return edges
