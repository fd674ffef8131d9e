"""Command-line check for typed coordinate input.

Reads a ``[[lng, lat], ...]`` list from the argument (or stdin when the
argument is ``-``) and prints the closed GeoJSON ring, centroid and
bounding box that the map would draw.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from parcelmap.core.config import Settings
from parcelmap.core.errors import MalformedCoordinateInput
from parcelmap.geo.parser import CoordinateInputParser

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="parcelmap-coords",
        description="Validate a typed coordinate list and show the resulting polygon.",
    )
    parser.add_argument(
        "text",
        help='Coordinate list such as "[[32.85,39.92],[32.86,39.92],[32.86,39.93]]", or - for stdin.',
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of the output.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Settings()
    logging.basicConfig(level=settings.log_level)

    text = sys.stdin.read() if args.text == "-" else args.text
    parser = CoordinateInputParser(min_vertices=settings.map.min_polygon_vertices)
    try:
        polygon = parser.parse(text)
    except MalformedCoordinateInput as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    centroid = polygon.centroid()
    bbox = polygon.bounding_box()
    result = {
        "geometry": polygon.to_geojson().model_dump(),
        "centroid": {"lat": centroid.lat, "lng": centroid.lng},
        "bbox": bbox.model_dump(),
        "vertices": len(polygon),
    }
    print(json.dumps(result, indent=args.indent))
    logger.debug("Parsed polygon with %d vertices", len(polygon))
    return 0


if __name__ == "__main__":
    sys.exit(main())
