"""Tests for in-progress polygon construction."""

from __future__ import annotations

import pytest

from parcelmap.geo.models import GeoPoint
from parcelmap.map.builder import PolygonBuilder


def _pt(lat: float, lng: float) -> GeoPoint:
    return GeoPoint(lat=lat, lng=lng)


class TestPolygonBuilder:
    def test_add_vertex_returns_count(self):
        builder = PolygonBuilder()
        assert builder.is_empty
        assert builder.add_vertex(_pt(0, 0)) == 1
        assert builder.add_vertex(_pt(0, 1)) == 2
        assert builder.vertices == (_pt(0, 0), _pt(0, 1))

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_fewer_than_three_vertices_never_promoted(self, count):
        builder = PolygonBuilder()
        for i in range(count):
            builder.add_vertex(_pt(i, i))
        assert builder.complete() is None
        assert len(builder.vertices) == count

    def test_duplicate_clicks_do_not_count(self):
        builder = PolygonBuilder()
        for _ in range(3):
            builder.add_vertex(_pt(1, 1))
        builder.add_vertex(_pt(1, 2))
        assert builder.complete() is None
        assert len(builder.vertices) == 4

    def test_complete_promotes_and_resets(self):
        builder = PolygonBuilder()
        for p in [_pt(0, 0), _pt(0, 2), _pt(2, 2), _pt(2, 0)]:
            builder.add_vertex(p)
        completed = builder.complete()
        assert completed is not None
        assert len(completed.polygon) == 4
        assert completed.centroid.lat == pytest.approx(1.0)
        assert completed.centroid.lng == pytest.approx(1.0)
        assert builder.is_empty

    def test_ring_closed_on_first_vertex_is_stored_open(self):
        builder = PolygonBuilder()
        for p in [_pt(0, 0), _pt(0, 3), _pt(3, 0), _pt(0, 0)]:
            builder.add_vertex(p)
        completed = builder.complete()
        assert len(completed.polygon) == 3
        assert completed.centroid.lat == pytest.approx(1.0)
        assert completed.centroid.lng == pytest.approx(1.0)

    def test_no_upper_bound(self):
        builder = PolygonBuilder()
        for i in range(200):
            builder.add_vertex(_pt(i * 0.1, (i % 7) * 0.1))
        completed = builder.complete()
        assert completed is not None
        assert len(completed.polygon) == 200

    def test_cancel_reports_dropped(self):
        builder = PolygonBuilder()
        builder.add_vertex(_pt(0, 0))
        builder.add_vertex(_pt(0, 1))
        assert builder.cancel() == 2
        assert builder.is_empty
        assert builder.cancel() == 0

    def test_custom_minimum(self):
        builder = PolygonBuilder(min_vertices=4)
        for p in [_pt(0, 0), _pt(0, 1), _pt(1, 1)]:
            builder.add_vertex(p)
        assert builder.complete() is None
        builder.add_vertex(_pt(1, 0))
        assert builder.complete() is not None
