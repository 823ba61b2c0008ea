## immutable line-set and face-set records produced by the factories

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Plain geometry records returned by conic, point-range and tube factories.

Vertices are homogeneous 4-tuples ``(x, y, z, w)``.  An edge of an
:class:`IndexedLineSet` is a polyline given as a tuple of vertex indices;
a face of an :class:`IndexedFaceSet` is a polygon given the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

Vec4 = Tuple[float, float, float, float]
Index = Tuple[int, ...]


def to_vec4(point_like: Sequence[float]) -> Vec4:
    """Return a point as a homogeneous 4-tuple; 3D points get ``w = 1``."""

    if len(point_like) == 3:
        return float(point_like[0]), float(point_like[1]), float(point_like[2]), 1.0
    if len(point_like) == 4:
        return tuple(float(x) for x in point_like)
    raise ValueError("point must have three or four components")


@dataclass(frozen=True)
class IndexedLineSet:
    """Vertices and polyline edges."""

    vertices: Tuple[Vec4, ...]
    edges: Tuple[Index, ...]

    def num_points(self) -> int:
        return len(self.vertices)

    def num_edges(self) -> int:
        return len(self.edges)

    def polylines(self):
        """Yield each edge as a list of its vertices."""
        for edge in self.edges:
            yield [self.vertices[i] for i in edge]


@dataclass(frozen=True)
class IndexedFaceSet:
    """Vertices, polygonal faces and optional per-vertex attributes."""

    vertices: Tuple[Vec4, ...]
    faces: Tuple[Index, ...]
    vertex_normals: Optional[Tuple[Vec4, ...]] = None
    texture_coordinates: Optional[Tuple[Tuple[float, float], ...]] = None

    def num_points(self) -> int:
        return len(self.vertices)

    def num_faces(self) -> int:
        return len(self.faces)


def line_set_from_polylines(polylines: Iterable[Sequence[Sequence[float]]]) -> IndexedLineSet:
    """Collect polylines into one line set; polylines with fewer than two
    points are dropped."""

    vertices = []
    edges = []
    for polyline in polylines:
        if len(polyline) < 2:
            continue
        start = len(vertices)
        vertices.extend(to_vec4(p) for p in polyline)
        edges.append(tuple(range(start, len(vertices))))
    return IndexedLineSet(tuple(vertices), tuple(edges))


def merge_line_sets(*line_sets: IndexedLineSet) -> IndexedLineSet:
    vertices = []
    edges = []
    for ils in line_sets:
        if ils is None:
            continue
        offset = len(vertices)
        vertices.extend(ils.vertices)
        edges.extend(tuple(i + offset for i in edge) for edge in ils.edges)
    return IndexedLineSet(tuple(vertices), tuple(edges))


def split_at_infinity(points: Sequence[Optional[Sequence[float]]], tol: float = 1e-12):
    """Break a sequence of points into runs of finite points.

    Missing points (None) and points whose last coordinate is within
    ``tol`` of zero end the current run.
    """
    runs = []
    current = []
    for p in points:
        if p is None or abs(p[-1]) <= tol:
            if len(current) > 1:
                runs.append(current)
            current = []
            continue
        current.append(p)
    if len(current) > 1:
        runs.append(current)
    return runs


def quad_mesh_faces(rows: int, cols: int) -> Tuple[Index, ...]:
    """Quads of a ``rows`` x ``cols`` grid stored row by row."""

    faces = []
    for i in range(rows - 1):
        for j in range(cols - 1):
            a = i * cols + j
            faces.append((a, a + cols, a + cols + 1, a + 1))
    return tuple(faces)
