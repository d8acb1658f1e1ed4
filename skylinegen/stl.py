"""Build a skyline mesh from contributions and write it as binary STL."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .model import Contribution

Vector = tuple[float, float, float]

BASE_WIDTH = 142.5
BASE_DEPTH = 27.5
MAX_HEIGHT = 25.0
CELL_WIDTH = 2.5
CELL_DEPTH = 2.5
PLATE_THICKNESS = 0.1
TRAPEZOID_HEIGHT = 10.0
TRAPEZOID_OVERHANG = 2.5

_HEADER = bytes(80)
_TRIANGLE = struct.Struct("<12fH")

# Side faces shared by every box-like solid: (normal, vertex indices).
_SIDE_FACES: tuple[tuple[Vector, tuple[int, int, int]], ...] = (
    ((0.0, 1.0, 0.0), (3, 2, 6)),
    ((0.0, 1.0, 0.0), (3, 6, 7)),
    ((0.0, -1.0, 0.0), (0, 1, 5)),
    ((0.0, -1.0, 0.0), (0, 5, 4)),
    ((-1.0, 0.0, 0.0), (0, 3, 7)),
    ((-1.0, 0.0, 0.0), (0, 7, 4)),
    ((1.0, 0.0, 0.0), (1, 2, 6)),
    ((1.0, 0.0, 0.0), (1, 6, 5)),
)


@dataclass(frozen=True)
class Triangle:
    """A facet with its normal and three vertices."""

    normal: Vector
    vertices: tuple[Vector, Vector, Vector]


def _solid(corners: Sequence[Vector], first_ring_is_top: bool) -> list[Triangle]:
    """Triangulate an eight-cornered solid whose corners come as two rings of four."""
    first_z, second_z = (1.0, -1.0) if first_ring_is_top else (-1.0, 1.0)
    faces = [
        ((0.0, 0.0, first_z), (0, 1, 2)),
        ((0.0, 0.0, first_z), (0, 2, 3)),
        ((0.0, 0.0, second_z), (4, 5, 6)),
        ((0.0, 0.0, second_z), (4, 6, 7)),
        *_SIDE_FACES,
    ]
    return [
        Triangle(normal, (corners[a], corners[b], corners[c]))
        for normal, (a, b, c) in faces
    ]


def _column(contribution: Contribution, max_count: float) -> list[Triangle]:
    day = contribution.day - 1.0
    height = contribution.count / max_count if max_count else math.nan
    height *= MAX_HEIGHT
    x = 5.0 + contribution.week * CELL_WIDTH
    y = 2.5 + (6.0 - day) * CELL_DEPTH
    ring = [
        (x, y),
        (x + CELL_WIDTH, y),
        (x + CELL_WIDTH, y + CELL_DEPTH),
        (x, y + CELL_DEPTH),
    ]
    corners = [(px, py, 0.0) for px, py in ring] + [(px, py, height) for px, py in ring]
    return _solid(corners, first_ring_is_top=False)


def _rectangle(x0: float, y0: float, x1: float, y1: float, z: float) -> list[Vector]:
    return [(x0, y0, z), (x1, y0, z), (x1, y1, z), (x0, y1, z)]


def build_triangles(contributions: Iterable[Contribution]) -> list[Triangle]:
    """Return the columns, base plate and pedestal of the skyline, in that order."""
    contributions = list(contributions)
    max_count = float(max((c.count for c in contributions), default=1))

    triangles: list[Triangle] = []
    for contribution in contributions:
        triangles.extend(_column(contribution, max_count))

    plate = _rectangle(0.0, 0.0, BASE_WIDTH, BASE_DEPTH, 0.0) + _rectangle(
        0.0, 0.0, BASE_WIDTH, BASE_DEPTH, -PLATE_THICKNESS
    )
    triangles.extend(_solid(plate, first_ring_is_top=True))

    d = TRAPEZOID_OVERHANG
    pedestal = _rectangle(0.0, 0.0, BASE_WIDTH, BASE_DEPTH, -PLATE_THICKNESS) + _rectangle(
        -d, -d, BASE_WIDTH + d, BASE_DEPTH + d, -(PLATE_THICKNESS + TRAPEZOID_HEIGHT)
    )
    triangles.extend(_solid(pedestal, first_ring_is_top=True))
    return triangles


def write_stl(stream: BinaryIO, triangles: Iterable[Triangle]) -> None:
    """Write triangles to a binary stream in binary STL format."""
    triangles = list(triangles)
    stream.write(_HEADER)
    stream.write(struct.pack("<I", len(triangles)))
    for triangle in triangles:
        coords = [*triangle.normal]
        for vertex in triangle.vertices:
            coords.extend(vertex)
        stream.write(_TRIANGLE.pack(*coords, 0))


def create_3d_model(user: str, year: int, contributions: Iterable[Contribution]) -> Path:
    """Write the skyline to ``<user>_<year>.stl`` in the working directory."""
    path = Path(f"{user}_{year}.stl")
    triangles = build_triangles(contributions)
    with path.open("wb") as stream:
        write_stl(stream, triangles)
    return path