"""Tests for the typed [[lng, lat], ...] coordinate parser."""

from __future__ import annotations

import pytest

from parcelmap.core.errors import MalformedCoordinateInput
from parcelmap.geo.models import GeoPoint, Polygon
from parcelmap.geo.parser import CoordinateInputParser


@pytest.fixture
def parser() -> CoordinateInputParser:
    return CoordinateInputParser()


class TestParse:
    def test_lng_comes_first(self, parser):
        polygon = parser.parse("[[32.8597,39.9334],[32.8598,39.9335],[32.8599,39.9334]]")
        assert polygon.vertices[0] == GeoPoint(lat=39.9334, lng=32.8597)
        assert len(polygon) == 3

    def test_bounding_box_of_typed_ring(self, parser):
        polygon = parser.parse("[[32.8597,39.9334],[32.8598,39.9335],[32.8599,39.9334]]")
        bbox = polygon.bounding_box()
        assert bbox.min_lat == 39.9334
        assert bbox.max_lat == 39.9335
        assert bbox.min_lng == 32.8597
        assert bbox.max_lng == 32.8599

    def test_closed_ring_is_stored_open(self, parser):
        polygon = parser.parse("[[0,0],[0,1],[1,1],[0,0]]")
        assert len(polygon) == 3
        assert polygon.vertices[0] != polygon.vertices[-1]

    def test_integers_and_whitespace_accepted(self, parser):
        polygon = parser.parse(" [ [1, 2], [3, 4],\n[5, 6] ] ")
        assert polygon.to_lnglat_pairs() == [[1, 2], [3, 4], [5, 6]]

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "",
            '{"type": "Polygon"}',
            "[[1,2],[3,4]]",
            "[[1,2],[3,4],[5]]",
            "[[1,2],[3,4],[5,6,7]]",
            '[[1,2],[3,4],["5",6]]',
            "[[1,2],[3,4],[true,6]]",
            "[[1,2],[3,4],[200,6]]",
            "[[1,2],[1,2],[1,2],[3,4]]",
            "[]",
            "[" * 100_000 + "]" * 100_000,
            "[[" + "1" * 5000 + ",1],[0,0],[0,1]]",
            "[[1e999,0],[0,0],[0,1]]",
        ],
        ids=lambda text: text[:40],
    )
    def test_malformed_input_raises(self, parser, text):
        with pytest.raises(MalformedCoordinateInput):
            parser.parse(text)

    def test_malformed_is_a_value_error(self, parser):
        with pytest.raises(ValueError):
            parser.parse("[[1,2]]")

    def test_custom_minimum(self):
        parser = CoordinateInputParser(min_vertices=4)
        with pytest.raises(MalformedCoordinateInput, match="at least 4"):
            parser.parse("[[0,0],[0,1],[1,1]]")


class TestSerialize:
    def test_parse_of_serialized_polygon_is_identity(self, parser):
        polygon = Polygon(
            vertices=(
                GeoPoint(lat=39.9334, lng=32.8597),
                GeoPoint(lat=39.9335, lng=32.8598),
                GeoPoint(lat=39.9334, lng=32.8599),
            )
        )
        assert parser.parse(parser.serialize(polygon)) == polygon
        assert parser.parse(parser.serialize(polygon, closed=True)) == polygon

    def test_serialize_format(self, parser):
        polygon = parser.parse("[[1.5,2],[3,4],[5,6]]")
        assert parser.serialize(polygon) == "[[1.5,2.0],[3.0,4.0],[5.0,6.0]]"
