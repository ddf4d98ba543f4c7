"""Unit tests for catalog response parsing."""

from datetime import date

from aniorder.catalog.schema import FuzzyDate, extract_relation_edges, parse_media_record
from aniorder.models.media import MediaTitles, MediaType, RelationEdge, RelationType


class TestFuzzyDate:
    """Test conversion of catalog dates."""

    def test_complete_date(self):
        """(2020, 5, 3) becomes 2020-05-03."""
        assert FuzzyDate(year=2020, month=5, day=3).to_date() == date(2020, 5, 3)

    def test_missing_component_is_unreleased(self):
        """Any missing component yields the unreleased sentinel."""
        assert FuzzyDate(year=2020, month=5).to_date() is None
        assert FuzzyDate(year=2020, day=3).to_date() is None
        assert FuzzyDate(month=5, day=3).to_date() is None
        assert FuzzyDate().to_date() is None

    def test_impossible_date_is_unreleased(self):
        assert FuzzyDate(year=2021, month=2, day=30).to_date() is None


class TestParseMediaRecord:
    """Test MediaRecord construction from response bodies."""

    def test_full_record(self, media_body):
        body = media_body(21, "One Piece", start=(1999, 10, 20))

        record = parse_media_record(body)

        assert record.media_id == 21
        assert record.titles == MediaTitles(romaji="One Piece")
        assert record.release_date == date(1999, 10, 20)
        assert record.title == "One Piece"

    def test_incomplete_start_date(self, media_body):
        record = parse_media_record(media_body(1, start=(2026, None, None)))

        assert record.release_date is None
        assert not record.is_released

    def test_end_date(self, media_body):
        body = media_body(1, start=(2020, 1, 1), end=(2020, 3, 31))

        assert parse_media_record(body, use_end_date=True).release_date == date(2020, 3, 31)

    def test_missing_optional_nodes(self):
        """Title, date and relations nodes are all optional."""
        body = {"data": {"Media": {"id": 3}}}

        record = parse_media_record(body)

        assert record.media_id == 3
        assert record.titles == MediaTitles()
        assert record.title == ""
        assert record.release_date is None

    def test_title_fallback(self):
        body = {"data": {"Media": {"id": 3, "title": {"romaji": None, "english": "Frieren", "native": "葬送のフリーレン"}}}}

        record = parse_media_record(body)

        assert record.title == "Frieren"
        assert record.titles.native == "葬送のフリーレン"

    def test_missing_id_uses_requested_id(self):
        record = parse_media_record({"data": {"Media": {"title": {"romaji": "X"}}}}, media_id=8)

        assert record.media_id == 8

    def test_missing_media_node(self):
        """No data.Media means the response cannot be parsed."""
        assert parse_media_record({"data": {"Media": None}}) is None
        assert parse_media_record({"data": None}) is None
        assert parse_media_record({"errors": [{"message": "Too Many Requests."}]}) is None
        assert parse_media_record({}) is None

    def test_malformed_media_node(self):
        assert parse_media_record({"data": {"Media": {"id": 1, "title": "oops"}}}) is None
        assert parse_media_record({"data": {"Media": []}}) is None


class TestExtractRelationEdges:
    """Test relation edge extraction."""

    def test_edges_in_server_order(self, media_body):
        body = media_body(1, edges=[(5, "SEQUEL", "ANIME"), (2, "ADAPTATION", "MANGA")])

        edges = extract_relation_edges(body)

        assert edges == [
            RelationEdge(5, RelationType.SEQUEL, MediaType.ANIME),
            RelationEdge(2, RelationType.ADAPTATION, MediaType.MANGA),
        ]

    def test_unknown_tags_kept_raw(self, media_body):
        edges = extract_relation_edges(media_body(1, edges=[(5, "COMPILATION", "NOVEL")]))

        assert edges == [RelationEdge(5, "COMPILATION", "NOVEL")]
        assert not edges[0].matches(set(RelationType), MediaType.ANY)

    def test_malformed_edges_skipped(self):
        body = {
            "data": {
                "Media": {
                    "id": 1,
                    "relations": {
                        "edges": [
                            None,
                            {"relationType": "SEQUEL"},
                            {"node": {"type": "ANIME"}, "relationType": "SEQUEL"},
                            {"node": {"id": 9, "type": "ANIME"}, "relationType": "PREQUEL"},
                        ]
                    },
                }
            }
        }

        assert extract_relation_edges(body) == [
            RelationEdge(9, RelationType.PREQUEL, MediaType.ANIME)
        ]

    def test_non_positive_target_ids_skipped(self, media_body):
        body = media_body(
            1, edges=[(0, "SEQUEL", "ANIME"), (-3, "PREQUEL", "ANIME"), (2, "SEQUEL", "ANIME")]
        )

        assert extract_relation_edges(body) == [
            RelationEdge(2, RelationType.SEQUEL, MediaType.ANIME)
        ]

    def test_no_relations(self):
        assert extract_relation_edges({"data": {"Media": {"id": 1}}}) == []
        assert extract_relation_edges({"data": {"Media": {"id": 1, "relations": None}}}) == []
        assert extract_relation_edges({"data": {"Media": None}}) == []


class TestRelationEdgeMatches:
    """Test relation and media type filtering."""

    def test_relation_filter(self):
        edge = RelationEdge(1, RelationType.SEQUEL, MediaType.ANIME)

        assert edge.matches({RelationType.SEQUEL}, MediaType.ANY)
        assert not edge.matches({RelationType.PREQUEL}, MediaType.ANY)

    def test_media_type_filter(self):
        edge = RelationEdge(1, RelationType.ADAPTATION, MediaType.MANGA)

        assert edge.matches({RelationType.ADAPTATION}, MediaType.MANGA)
        assert not edge.matches({RelationType.ADAPTATION}, MediaType.ANIME)
        assert edge.matches({RelationType.ADAPTATION}, MediaType.ANY)
