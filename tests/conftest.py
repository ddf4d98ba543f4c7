"""Shared pytest fixtures for AniOrder tests."""

from typing import Optional

import pytest

from aniorder.config import Config
from aniorder.models.media import RelationType


def build_media_body(
    media_id: int,
    title: Optional[str] = None,
    start: tuple = (None, None, None),
    end: tuple = (None, None, None),
    edges: Optional[list] = None,
) -> dict:
    """Build a catalog response body.

    Edges are (target_id, relation_type, media_type) tuples.
    """
    return {
        "data": {
            "Media": {
                "id": media_id,
                "title": {
                    "romaji": title or f"Media {media_id}",
                    "english": None,
                    "native": None,
                },
                "startDate": dict(zip(("year", "month", "day"), start)),
                "endDate": dict(zip(("year", "month", "day"), end)),
                "relations": {
                    "edges": [
                        {
                            "node": {"id": target, "type": media_type},
                            "relationType": relation,
                        }
                        for target, relation, media_type in (edges or [])
                    ]
                },
            }
        }
    }


NOT_FOUND_BODY = {
    "errors": [{"message": "Not Found.", "status": 404}],
    "data": {"Media": None},
}


class FakeCatalog:
    """In-memory catalog keyed by identifier.

    A value may be a body dict or a list of bodies served in turn (the last
    one repeats). Unknown identifiers answer with a not-found body.
    """

    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[int] = []

    async def fetch(self, media_id: int) -> dict:
        self.calls.append(media_id)
        response = self.responses.get(media_id, NOT_FOUND_BODY)
        if isinstance(response, list):
            attempt = self.calls.count(media_id) - 1
            response = response[min(attempt, len(response) - 1)]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def media_body():
    """Factory for catalog response bodies."""
    return build_media_body


@pytest.fixture
def fake_catalog():
    """Factory for FakeCatalog instances."""
    return FakeCatalog


@pytest.fixture
def all_relations():
    """Every relation type."""
    return set(RelationType)


@pytest.fixture
def default_config():
    """Create a default configuration for testing."""
    return Config(
        resolver={
            "relations": ["PREQUEL", "SEQUEL", "SIDE_STORY"],
            "media_type": "ANIME",
        },
    )

