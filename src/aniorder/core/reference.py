"""Parsing of user-supplied media references and traversal filters."""

import re
from typing import Iterable, Union

from aniorder.exceptions import (
    InvalidMediaReferenceError,
    InvalidMediaTypeError,
    InvalidRelationTypeError,
)
from aniorder.models.media import MediaType, RelationType

# Id is the first path segment after /anime/ or /manga/
URL_PATTERN = re.compile(r"/(?:anime|manga)/([^/?#]*)")
ID_PATTERN = re.compile(r"[0-9]+")


def parse_media_reference(reference: str) -> int:
    """Extract the catalog identifier from an id or a catalog URL.

    Args:
        reference: Plain identifier ("21") or URL
            ("https://anilist.co/anime/21/One-Piece/")

    Returns:
        Positive integer identifier

    Raises:
        InvalidMediaReferenceError: If no identifier can be extracted
    """
    text = reference.strip()

    if match := URL_PATTERN.search(text):
        segment = match.group(1)
        if ID_PATTERN.fullmatch(segment) and int(segment) > 0:
            return int(segment)
        raise InvalidMediaReferenceError(f"Invalid catalog ID in URL: {reference}")

    if ID_PATTERN.fullmatch(text) and int(text) > 0:
        return int(text)

    raise InvalidMediaReferenceError(f"Invalid catalog URL/ID: {reference}")


def parse_relation_types(value: Union[str, Iterable[str]]) -> set[RelationType]:
    """Parse a relation allow-list.

    Accepts a comma-separated string or an iterable of names. Matching is
    case-insensitive and ignores whitespace.

    Raises:
        InvalidRelationTypeError: On an unknown or empty token, a value that is
            not a string or an iterable of strings, or an empty list
    """
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, Iterable):
        tokens = list(value)
    else:
        raise InvalidRelationTypeError(
            f"Relation types must be a string or a list of names, got {value!r}"
        )

    relations = set()
    for token in tokens:
        if isinstance(token, RelationType):
            token = token.value
        if not isinstance(token, str):
            raise InvalidRelationTypeError(f"Invalid relation type: {token!r}")
        name = "".join(token.split()).upper()
        try:
            relations.add(RelationType(name))
        except ValueError:
            raise InvalidRelationTypeError(f"Invalid relation type: {name}") from None

    if not relations:
        raise InvalidRelationTypeError("At least one relation type is required")

    return relations


def parse_media_type(value: Union[str, MediaType]) -> MediaType:
    """Parse a media type filter (ANY, ANIME or MANGA).

    Raises:
        InvalidMediaTypeError: On an unknown value
    """
    if isinstance(value, MediaType):
        return value

    name = value.strip().upper()
    try:
        return MediaType(name)
    except ValueError:
        raise InvalidMediaTypeError(f"Invalid media type: {name}") from None
