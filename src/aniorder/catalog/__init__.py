"""Catalog access: GraphQL client and response schema."""

from aniorder.catalog.client import CatalogClient
from aniorder.catalog.schema import extract_relation_edges, parse_media_record

__all__ = ["CatalogClient", "extract_relation_edges", "parse_media_record"]
