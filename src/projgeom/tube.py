## frame fields along polygonal curves and the tubes swept along them

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

"""Frame fields and tubes in Euclidean, elliptic and hyperbolic space.

A frame field assigns to every interior joint of a polygon an orthonormal
frame ``(N, B, T, p)``: normal, binormal, tangent and the joint itself.
The polygon must be given in homogeneous 4D coordinates and padded with
one extra point at each end, so that each frame sees both neighbours.

The Frenet frame follows the osculating plane of each joint and twists
with the torsion of the curve.  The parallel frame transports the normal
from joint to joint without rotation about the tangent; it is stored as
the Frenet frame plus the angle ``phi`` that rotates the Frenet normal
into the parallel normal.

:class:`PolygonalTubeFactory` sweeps a planar cross section along such a
frame field and returns the tube as an indexed face set of quads.
"""

import math
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from projgeom import meshdata
from projgeom import p3
from projgeom import pn
from projgeom import rn
from projgeom.config import get_setting
from projgeom.log import get_logger

logger = get_logger(__name__)


class FrameFieldType(Enum):
    PARALLEL = 1
    FRENET = 2


@dataclass
class FrameInfo:
    """Frame at one joint of a curve.

    ``frame`` is a flat 4x4 matrix whose columns are the normal, binormal,
    tangent and position; ``length`` is the arc length up to the joint as
    a fraction of the whole; ``theta`` is the angle between the two
    segments meeting at the joint (pi for a straight joint); ``phi`` is the
    rotation taking the Frenet normal to the parallel normal.
    """

    frame: list
    length: float
    theta: float
    phi: float

    def __str__(self):
        return "Frame is\n{}\nLength is: {}\nTheta is: {}\nPhi is: {}".format(
            rn.matrix_to_string(self.frame), self.length, self.theta, self.phi)


DIAMOND_CROSS_SECTION = (
    (1.0, 0.0, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0),
    (-1.0, 0.0, 0.0, 1.0),
    (0.0, -1.0, 0.0, 1.0),
    (1.0, 0.0, 0.0, 1.0),
)

OCTAGONAL_CROSS_SECTION = (
    (1.0, 0.0, 0.0, 1.0),
    (0.707, 0.707, 0.0, 1.0),
    (0.0, 1.0, 0.0, 1.0),
    (-0.707, 0.707, 0.0, 1.0),
    (-1.0, 0.0, 0.0, 1.0),
    (-0.707, -0.707, 0.0, 1.0),
    (0.0, -1.0, 0.0, 1.0),
    (0.707, -0.707, 0.0, 1.0),
    (1.0, 0.0, 0.0, 1.0),
)

## fixed points in general position, used where a third point is needed
## to span a plane with a line
_GENERIC_POINTS = (
    (0.3141, 0.2718, 0.5772, 1.0),
    (-0.6931, 0.4142, 0.1732, 1.0),
)


def get_ngon(n):
    """Closed regular n-gon in the xy-plane; the first point is repeated."""
    if n < 3:
        raise ValueError('bad n-gon, need at least 3 sides: {}'.format(n))
    pts = [(math.cos(2 * math.pi * i / n), math.sin(2 * math.pi * i / n), 0.0, 1.0)
           for i in range(n)]
    return tuple(pts + [pts[0]])


def _check_4d(points, name):
    if not points:
        raise ValueError('bad {}, no points'.format(name))
    for p in points:
        if len(p) != 4:
            raise ValueError('bad {}, points must have dimension 4: {}'.format(name, p))


def get_initial_binormal(polygon, metric, tol=1e-15):
    """Polar of the first non-degenerate osculating plane of the polygon.

    For a polygon lying on a line, a plane through the line and a fixed
    point off it is used instead.
    """
    for i in range(1, len(polygon) - 1):
        b = pn.polarize(p3.plane_from_points(polygon[i - 1], polygon[i], polygon[i + 1]), metric)
        if rn.euclidean_norm_squared(b) > tol:
            return b
    for g in _GENERIC_POINTS:
        plane = p3.plane_from_points(g, polygon[1], polygon[2])
        if rn.euclidean_norm_squared(plane) > tol:
            return pn.polarize_plane(plane, metric)
    raise ValueError('bad polygon, cannot find a binormal')


def remove_duplicates(curve, tol=1e-15):
    """Drop points closer than ``tol`` to the previously kept point."""
    if not curve:
        return []
    out = [curve[0]]
    for p in curve[1:]:
        if rn.euclidean_distance(out[-1], p) >= tol:
            out.append(p)
    return out


def _pad_open(curve):
    n = len(curve)
    first = rn.add(curve[0], rn.subtract(curve[0], curve[1]))
    last = rn.add(curve[n - 1], rn.subtract(curve[n - 1], curve[n - 2]))
    return [first] + [list(p) for p in curve] + [last]


class TubeFactory:
    """Frame fields along a polygonal curve.

    The settings mirror those of a tube: radius (or per-vertex radii),
    cross section, frame field type, metric, number of extra twists,
    closure of the curve and user-supplied tangents, binormals or frames.
    """

    def __init__(self, curve=None):
        self.curve = None if curve is None else [list(p) for p in curve]
        self.user_tangents = None
        self.user_binormals = None
        self.user_frames = None
        self.cross_section = OCTAGONAL_CROSS_SECTION
        self.radii = None
        self.radius = get_setting("tube_radius")
        self.frame_field_type = FrameFieldType.PARALLEL
        self.metric = pn.EUCLIDEAN
        self.twists = 0
        self.generate_texture_coordinates = False
        self.arc_length_texture_coordinates = False
        self.match_closed_twist = False
        self.remove_duplicate_points = False
        self.closed = False
        self.is_line = False
        self.frames = None
        self.tolerance = get_setting("frame_tolerance")

    def get_frame_field(self):
        return self.frames

    def set_frame_field(self, frames):
        self.user_frames = frames

    def set_closed(self, closed):
        self.closed = bool(closed)

    def set_cross_section(self, xsec):
        _check_4d(xsec, 'cross section')
        self.cross_section = tuple(tuple(p) for p in xsec)

    def set_tangents(self, tangents):
        self.user_tangents = tangents

    def set_user_binormals(self, binormals):
        self.user_binormals = binormals

    def set_frame_field_type(self, frame_field_type):
        self.frame_field_type = FrameFieldType(frame_field_type)

    def set_radius(self, radius):
        self.radius = radius

    def set_radii(self, radii):
        self.radii = None if radii is None else list(radii)

    def set_metric(self, metric):
        self.metric = pn.check_metric(metric)

    def set_twists(self, twists):
        self.twists = twists

    def set_match_closed_twist(self, value):
        self.match_closed_twist = bool(value)

    def set_remove_duplicates(self, value):
        self.remove_duplicate_points = bool(value)

    def set_generate_texture_coordinates(self, value):
        self.generate_texture_coordinates = bool(value)

    def set_arc_length_texture_coordinates(self, value):
        self.arc_length_texture_coordinates = bool(value)

    def update(self):
        if self.remove_duplicate_points and self.curve:
            self.curve = remove_duplicates(self.curve, self.tolerance)

    def _calculate_is_line(self, polygon):
        for i in range(1, len(polygon) - 1):
            plane = p3.plane_from_points(polygon[i - 1], polygon[i], polygon[i + 1])
            if rn.euclidean_norm_squared(plane) > self.tolerance:
                return False
        return True

    def make_frame_field(self, polygon, frame_type, metric):
        """Frames at the interior joints of a padded 4D polygon.

        Returns one :class:`FrameInfo` per point of ``polygon[1:-1]``.
        Raises ValueError for fewer than three points or points that are
        not 4D.
        """
        frame_type = FrameFieldType(frame_type)
        _check_4d(polygon, 'polygon')
        if len(polygon) < 3:
            raise ValueError('bad polygon, need at least 3 points: {}'.format(len(polygon)))
        self.metric = metric
        tol = self.tolerance

        polygonh = []
        for p in pn.normalize([list(p) for p in polygon], metric):
            polygonh.append(rn.negate(p) if p[3] < 0 else p)
        self.is_line = self._calculate_is_line(polygonh)
        logger.debug('frame field: %d joints, metric %d, line %s',
                     len(polygonh) - 2, metric, self.is_line)

        n = len(polygonh)
        lengths = []
        total = 0.0
        for i in range(1, n - 1):
            total += pn.distance_between(polygonh[i - 1], polygonh[i], metric)
            lengths.append(total)
        if total == 0.0:
            raise ValueError('bad polygon, all points coincide')
        lengths = [x / total for x in lengths]

        tangents = []
        binormals = []
        frenet_normals = []
        parallel_normals = []
        frames = []
        for i in range(1, n - 1):
            k = i - 1
            theta = 0.0
            phi = 0.0
            point = polygonh[i]
            polar_plane = pn.polarize_point(point, metric)

            ## binormal: polar of the osculating plane
            osculating = p3.plane_from_points(polygonh[i - 1], point, polygonh[i + 1])
            collinear = rn.euclidean_norm_squared(osculating) < tol
            if not collinear:
                binormal = pn.polarize(osculating, metric)
            elif i == 1:
                binormal = get_initial_binormal(polygonh, metric, tol)
            elif metric == pn.EUCLIDEAN:
                binormal = list(binormals[k - 1])
            else:
                binormal = pn.project_to_tangent_space(point, binormals[k - 1], metric)
                if binormal is None:
                    binormal = list(binormals[k - 1])
            if self.user_binormals is not None:
                binormal = list(self.user_binormals[k])
            binormal = pn.set_to_length(binormal, 1.0, metric)
            if i > 1 and metric == pn.ELLIPTIC:
                if abs(pn.angle_between(binormals[k - 1], binormal, metric)) > math.pi / 2:
                    binormal = rn.negate(binormal)
            binormals.append(binormal)

            ## tangent: polar of the plane bisecting the two segments
            if self.user_tangents is not None:
                tangent = list(self.user_tangents[k])
                mid_plane = rn.plane_parallel_to_passing_through(tangent, point)
                if k > 0:
                    theta = pn.angle_between(self.user_tangents[k - 1], tangent, metric)
            else:
                size = 0.0
                mid_plane = None
                if not collinear:
                    plane1 = p3.plane_from_points(binormal, point, polygonh[i - 1])
                    plane2 = p3.plane_from_points(binormal, point, polygonh[i + 1])
                    mid_plane = pn.mid_plane(plane1, plane2, metric)
                    size = rn.euclidean_norm_squared(mid_plane)
                    theta = pn.angle_between(plane1, plane2, metric)
                if collinear or size < tol:
                    logger.debug('frame field: degenerate tangent at joint %d', k)
                    pseudo = p3.line_intersect_plane(polygonh[i - 1], polygonh[i + 1], polar_plane)
                    if metric == pn.EUCLIDEAN:
                        mid_plane = pseudo
                    else:
                        mid_plane = pn.polarize_point(pseudo, metric)
                    theta = math.pi
                tangent = pn.polarize_plane(mid_plane, metric)

            ## point the tangent along the direction of travel
            if rn.inner_product(rn.subtract(point, polygonh[i - 1]), tangent) < 0.0:
                tangent = rn.negate(tangent)
            tangent = pn.set_to_length(tangent, 1.0, metric)
            tangents.append(tangent)

            frenet = pn.polarize_plane(p3.plane_from_points(binormal, tangent, point), metric)
            frenet = pn.set_to_length(frenet, 1.0, metric)
            frenet_normals.append(frenet)

            if frame_type == FrameFieldType.PARALLEL:
                if i == 1:
                    parallel = list(frenet)
                else:
                    prev = parallel_normals[k - 1]
                    n_plane = p3.plane_from_points(point, polygonh[i - 1], prev)
                    projected = p3.point_from_planes(n_plane, mid_plane, polar_plane)
                    if rn.euclidean_norm_squared(projected) < tol:
                        logger.debug('frame field: degenerate normal at joint %d', k)
                        projected = prev
                    elif pn.inner_product(projected, prev, metric) < 0.0:
                        projected = rn.negate(projected)
                    parallel = pn.normalize_plane(projected, metric)
                parallel = pn.set_to_length(parallel, 1.0, metric)
                parallel_normals.append(parallel)

                phi = pn.angle_between(frenet, parallel, metric)
                if metric == pn.ELLIPTIC:
                    if phi > math.pi / 2:
                        phi -= math.pi
                    elif phi < -math.pi / 2:
                        phi += math.pi
                if pn.angle_between(parallel, binormal, metric) > math.pi / 2:
                    phi = -phi
                if self.is_line:
                    phi = 0.0

            idx = 0 if self.is_line else k
            rows = [frenet_normals[idx], binormals[idx], tangents[idx], point]
            frame = [float(x) for row in rows for x in row]
            frames.append(FrameInfo(rn.transpose(frame), lengths[k], theta, phi))

        self.frames = frames
        return frames


def tube_one_edge(p1, p2, radius, metric):
    """Transform carrying the canonical tube segment onto the segment p1 p2.

    The canonical segment (see :func:`canonical_tube`) is a unit-radius
    octagonal cylinder along z from -0.5 to 0.5.  Returns a flat 4x4 matrix,
    or None when neither endpoint is a proper point of the metric.
    """
    _check_4d([p1, p2], 'tube segment')
    valid1 = pn.is_valid_coordinate(p1, metric)
    valid2 = pn.is_valid_coordinate(p2, metric)
    if not (valid1 or valid2):
        return None
    if not valid1:
        p1 = rn.linear_combination(0.99, p1, 0.01, p2)
    elif not valid2:
        p2 = rn.linear_combination(0.99, p2, 0.01, p1)
    p1 = pn.normalize(p1, metric)
    p2 = pn.normalize(p2, metric)

    polar_plane = pn.polarize_point(p1, metric)
    tangent = p3.line_intersect_plane(p1, p2, polar_plane)
    if rn.inner_product(rn.subtract(p2, p1), tangent) < 0.0:
        tangent = rn.negate(tangent)
    tangent = pn.set_to_length(tangent, 1.0, metric)

    for g in _GENERIC_POINTS:
        plane = p3.plane_from_points(p1, tangent, g)
        if rn.euclidean_norm_squared(plane) > 1e-12:
            break
    normal = pn.polarize_plane(plane, metric)
    binormal = pn.polarize_plane(p3.plane_from_points(p1, tangent, normal), metric)
    normal = pn.set_to_length(normal, 1.0, metric)
    binormal = pn.set_to_length(binormal, 1.0, metric)

    frame = binormal + normal + tangent + list(p1)
    if rn.determinant(frame) < 0:
        frame = normal + binormal + tangent + list(p1)
        logger.debug('tube_one_edge: flipping orientation')
    frame = rn.transpose(frame)

    dist = pn.distance_between(p1, p2, metric)
    if math.isnan(dist):
        logger.warning('tube_one_edge: bad distance between %s and %s',
                       rn.to_string(p1), rn.to_string(p2))
        return None
    coord = dist / 2
    radcoord = radius
    if metric == pn.HYPERBOLIC:
        coord = pn.tanh(dist / 2)
        radcoord = math.sqrt(1 - coord * coord) * pn.tanh(radius)
    elif metric == pn.ELLIPTIC:
        coord = math.tan(dist / 2)
        radcoord = math.sqrt(1 + coord * coord) * math.tan(radius)
    scaler = rn.identity_matrix(4)
    scaler[10] = 2 * coord
    scaler[0] = scaler[5] = radcoord

    translate = p3.make_translation_matrix([0.0, 0.0, coord, 1.0], metric)
    return rn.times_matrix(frame, rn.times_matrix(translate, scaler))


@lru_cache(maxsize=1)
def canonical_tube():
    """The octagonal unit-radius cylinder from z = -0.5 to z = 0.5."""
    m = len(OCTAGONAL_CROSS_SECTION)
    verts = []
    for z in (-0.5, 0.5):
        for x, y, _, _ in reversed(OCTAGONAL_CROSS_SECTION):
            verts.append((x, y, z, 1.0))
    normals = tuple((v[0], v[1], 0.0, 0.0) for v in verts)
    return meshdata.IndexedFaceSet(tuple(verts), meshdata.quad_mesh_faces(2, m), normals)


def calculate_normals_for_curve(points):
    """Euclidean Frenet normals at the vertices of a 4D polyline."""
    _check_4d(points, 'curve')
    if len(points) < 2:
        raise ValueError("bad curve, can't tube fewer than 2 vertices")
    frames = TubeFactory().make_frame_field(_pad_open(points), FrameFieldType.FRENET,
                                            pn.EUCLIDEAN)
    normals = []
    for info in frames:
        nv = [info.frame[4 * j] for j in range(4)]
        nv[3] *= -1
        normals.append(pn.normalize(nv, pn.EUCLIDEAN))
    return normals


class PolygonalTubeFactory(TubeFactory):
    """Sweep a cross section along a polygonal curve.

    A curve whose first and last points coincide is closed automatically.
    Call :meth:`update` and then :meth:`get_tube`.
    """

    def __init__(self, curve=None):
        super().__init__(curve)
        self.tube = None
        self.tube_vertices = None
        self._polygon = None

    def make_tube(self, curve, radii, xsec, frame_type, closed, metric, twists):
        """Vertices of the swept tube, one cross section per frame.

        Returns None for a curve with fewer than two distinct points.
        """
        if not curve:
            return None
        _check_4d(curve, 'curve')
        _check_4d(xsec, 'cross section')

        n = len(curve)
        if n > 1 and rn.euclidean_distance(curve[0], curve[n - 1]) < 1e-8:
            closed = True
            n -= 1
        if n <= 1:
            return None
        self.closed = closed

        has_radii = len(radii) > 1
        if closed:
            polygon = [curve[n - 1]] + [list(p) for p in curve[:n]] + [curve[0], curve[1]]
            padded_radii = ([radii[n - 1]] + list(radii[:n]) + [radii[0], radii[1]]
                            if has_radii else None)
        else:
            polygon = _pad_open(curve[:n])
            padded_radii = ([radii[0]] + list(radii[:n]) + [radii[n - 1]]
                            if has_radii else None)
        self._polygon = polygon

        if self.user_frames is None:
            self.frames = self.make_frame_field(polygon, frame_type, metric)
        else:
            self.frames = self.user_frames
        if not self.frames:
            raise ValueError('bad tube, no frames')

        nn = len(self.frames)
        last_phi = self.frames[nn - 1].phi
        correction = 0.0
        if closed and self.match_closed_twist:
            correction = (2 * math.pi - last_phi if last_phi > math.pi else -last_phi) / nn

        vals = []
        normals = []
        for i, info in enumerate(self.frames):
            sangle = math.sin(info.theta / 2.0)
            factor = 1.0 / sangle if sangle != 0 else 1.0
            r = padded_radii[i + 1] if has_radii else radii[0]
            rad = rn.identity_matrix(4)
            rad[0] = r * factor
            rad[5] = r
            phi = info.phi + i * correction + twists * 2 * math.pi * info.length
            zrot = p3.make_rotation_matrix_z(phi)
            scaled = rn.times_matrix(info.frame, rn.times_matrix(rad, zrot))
            rotated = rn.times_matrix(info.frame, zrot)
            for x in xsec:
                vals.append(rn.matrix_times_vector(scaled, x))
                nv = rn.matrix_times_vector(rotated, [x[0], x[1], 0.0, 0.0])
                normals.append(pn.set_to_length(nv, 1.0, metric)
                               if pn.norm_squared(nv, metric) > 0 else nv)

        if closed and self.match_closed_twist:
            m = len(xsec)
            vals[(nn - 1) * m:nn * m] = [list(v) for v in vals[:m]]
            normals[(nn - 1) * m:nn * m] = [list(v) for v in normals[:m]]
        self._normals = normals
        return vals

    def update(self):
        super().update()
        radii = self.radii if self.radii and len(self.radii) > 1 else [self.radius]
        verts = self.make_tube(self.curve, radii, self.cross_section, self.frame_field_type,
                               self.closed, self.metric, self.twists)
        self.tube_vertices = verts
        if verts is None:
            logger.info('tube: curve has fewer than two points')
            self.tube = None
            return
        m = len(self.cross_section)
        rows = len(verts) // m
        tex = None
        if self.generate_texture_coordinates:
            if self.arc_length_texture_coordinates:
                tex = self._arc_length_texture_coordinates(rows, m)
            else:
                tex = tuple((j / (m - 1.0), i / (rows - 1.0))
                            for i in range(rows) for j in range(m))
        self.tube = meshdata.IndexedFaceSet(
            tuple(meshdata.to_vec4(v) for v in verts),
            meshdata.quad_mesh_faces(rows, m),
            tuple(meshdata.to_vec4(v) for v in self._normals),
            tex)

    def _arc_length_texture_coordinates(self, rows, m):
        pts = self._polygon[1:1 + rows]
        lengths = [0.0]
        for a, b in zip(pts, pts[1:]):
            lengths.append(lengths[-1] + pn.distance_between(b, a, self.metric))
        total = lengths[-1] if lengths[-1] > 0 else 1.0
        return tuple((j / (m - 1.0), lengths[i] / total) for i in range(rows) for j in range(m))

    def get_tube(self):
        return self.tube
