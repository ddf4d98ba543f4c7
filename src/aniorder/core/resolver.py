"""Relation resolver that walks the catalog's media relation graph."""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol

import structlog

from aniorder.catalog.schema import extract_relation_edges, parse_media_record
from aniorder.exceptions import CatalogResponseError
from aniorder.models.media import MediaRecord, MediaType, RelationType

logger = structlog.get_logger(__name__)


class MediaFetcher(Protocol):
    """Anything that can fetch one catalog response by identifier."""

    async def fetch(self, media_id: int) -> dict: ...


@dataclass
class _Frame:
    """One entry of the explicit traversal stack.

    `queue` first holds the filtered relation targets; once they are
    exhausted the frame drains the pending retries into it exactly once.
    """

    media_id: int
    queue: deque = field(default_factory=deque)
    draining: bool = False


def order_media(records: Iterable[MediaRecord]) -> list[MediaRecord]:
    """Sort records by release date, unreleased last.

    The sort is stable, so records with equal dates keep their input order.
    """
    return sorted(records, key=lambda record: record.sort_key)


class RelationResolver:
    """Resolves every work reachable from a root through allowed relations.

    Each identifier is fetched at most once per run. Responses without a
    media node are deferred and retried each time a traversal frame
    finishes, so a failure deep in the graph gets one retry per enclosing
    frame. An instance drives one run at a time.
    """

    def __init__(
        self,
        client: MediaFetcher,
        relations: Iterable[RelationType],
        media_type: MediaType = MediaType.ANY,
        use_end_date: bool = False,
        max_requests: Optional[int] = None,
    ):
        """Initialize relation resolver.

        Args:
            client: Catalog client used for every fetch
            relations: Relation types to follow
            media_type: Only follow edges to this media type (ANY = all)
            use_end_date: Order by end date instead of start date
            max_requests: Ceiling on catalog requests per run (None = unbounded)
        """
        if max_requests is not None and max_requests < 1:
            raise ValueError("max_requests must be at least 1")

        self.client = client
        self.relations = set(relations)
        self.media_type = media_type
        self.use_end_date = use_end_date
        self.max_requests = max_requests

        self.visited: dict[int, MediaRecord] = {}
        self.pending: list[int] = []
        self.request_count = 0

    @classmethod
    def from_config(cls, client: MediaFetcher, config) -> "RelationResolver":
        """Create a resolver from a ResolverConfig."""
        return cls(
            client,
            relations=config.relation_types,
            media_type=config.media_type_filter,
            use_end_date=config.use_end_date,
            max_requests=config.max_requests,
        )

    @property
    def unresolved(self) -> list[int]:
        """Identifiers that failed on every attempt of the last run."""
        return [
            media_id
            for media_id in dict.fromkeys(self.pending)
            if media_id not in self.visited
        ]

    async def resolve(self, root_id: int) -> list[MediaRecord]:
        """Traverse the relation graph from root_id.

        Args:
            root_id: Catalog identifier of the starting work

        Returns:
            Every resolved work ordered by release date

        Raises:
            CatalogTransportError: If the catalog cannot be reached
        """
        self.visited = {}
        self.pending = []
        self.request_count = 0

        logger.info(
            "Resolving release order",
            root_id=root_id,
            relations=sorted(relation.value for relation in self.relations),
            media_type=self.media_type.value,
        )

        stack: list[_Frame] = []
        if frame := await self._enter(root_id):
            stack.append(frame)

        while stack:
            frame = stack[-1]

            if frame.queue:
                media_id = frame.queue.popleft()
                if media_id in self.visited:
                    logger.debug("Relation already resolved, skipping", media_id=media_id)
                    continue
                if child := await self._enter(media_id):
                    stack.append(child)
                continue

            if not frame.draining:
                frame.draining = True
                if self.pending:
                    logger.info(
                        "Retrying failed IDs",
                        media_id=frame.media_id,
                        count=len(self.pending),
                    )
                    frame.queue.extend(self.pending)
                    self.pending = []
                continue

            stack.pop()

        if unresolved := self.unresolved:
            logger.warning("Unresolved media after all retries", media_ids=unresolved)

        ordered = order_media(self.visited.values())
        logger.info(
            "Resolved release order",
            root_id=root_id,
            resolved=len(ordered),
            unresolved=len(self.unresolved),
            requests=self.request_count,
        )
        return ordered

    async def _enter(self, media_id: int) -> Optional[_Frame]:
        """Fetch one work and open a frame for its relations.

        Returns None when the work is already known, the request ceiling is
        reached, or the fetch failed and was deferred.
        """
        if media_id in self.visited:
            return None

        if self.max_requests is not None and self.request_count >= self.max_requests:
            logger.warning(
                "Request ceiling reached, skipping",
                media_id=media_id,
                max_requests=self.max_requests,
            )
            return None

        logger.info("Requesting media data", media_id=media_id)
        self.request_count += 1

        try:
            body = await self.client.fetch(media_id)
        except CatalogResponseError as e:
            logger.debug("Deferring media", media_id=media_id, error=str(e))
            self.pending.append(media_id)
            return None

        record = parse_media_record(body, media_id=media_id, use_end_date=self.use_end_date)
        if record is None:
            logger.debug("No media node in response, deferring", media_id=media_id)
            self.pending.append(media_id)
            return None

        self.visited[media_id] = record

        targets = [
            edge.target_id
            for edge in extract_relation_edges(body)
            if edge.matches(self.relations, self.media_type)
        ]
        logger.info(
            "Resolving relations",
            media_id=media_id,
            title=record.title,
            count=len(targets),
        )

        return _Frame(media_id=media_id, queue=deque(targets))
