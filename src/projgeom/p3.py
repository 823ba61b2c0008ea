## isometries, incidences and matrix factoring in real projective 3-space

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

import math

from projgeom import pn
from projgeom import rn
from projgeom.log import get_logger
from projgeom.quaternion import (Quaternion, quaternion_to_rotation_matrix,
                                 rotation_matrix_to_quaternion)

logger = get_logger(__name__)

_out = rn._out

## points and planes of P3 are homogeneous 4-vectors; matrices are flat
## row-major 4x4 lists acting on column vectors

Q_HYPERBOLIC = (1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, -1)
Q_EUCLIDEAN = (1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0)
Q_ELLIPTIC = (1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1)
## indexed by metric + 1
Q_LIST = (Q_HYPERBOLIC, Q_EUCLIDEAN, Q_ELLIPTIC)

ORIGIN = (0.0, 0.0, 0.0, 1.0)
ZERO_VECTOR = (0.0, 0.0, 0.0, 0.0)
X_AXIS = (1.0, 0.0, 0.0)
Y_AXIS = (0.0, 1.0, 0.0)
Z_AXIS = (0.0, 0.0, -1.0)
HZ_AXIS = (0.0, 0.0, 1.0, 1.0)


def _point4(p):
    if len(p) == 3:
        return [p[0], p[1], p[2], 1.0]
    if len(p) == 4:
        return list(p)
    raise ValueError('bad point, expected 3 or 4 coordinates: {}'.format(p))


## rotations


## counterclockwise rotation by angle (radians) about axis through the
## origin
def make_rotation_matrix(axis, angle, dst=None):
    if len(axis) < 3:
        raise ValueError('bad rotation axis: {}'.format(axis))
    u = rn.normalize(list(axis[:3]))
    c = math.cos(angle)
    s = math.sin(angle)
    v = 1.0 - c
    m = rn.identity_matrix(4)
    m[0] = u[0] * u[0] * v + c
    m[4] = u[0] * u[1] * v + u[2] * s
    m[8] = u[0] * u[2] * v - u[1] * s

    m[1] = u[1] * u[0] * v - u[2] * s
    m[5] = u[1] * u[1] * v + c
    m[9] = u[1] * u[2] * v + u[0] * s

    m[2] = u[2] * u[0] * v + u[1] * s
    m[6] = u[2] * u[1] * v - u[0] * s
    m[10] = u[2] * u[2] * v + c
    return _out(m, dst)


def make_rotation_matrix_x(angle, dst=None):
    return make_rotation_matrix((1.0, 0.0, 0.0), angle, dst)


def make_rotation_matrix_y(angle, dst=None):
    return make_rotation_matrix((0.0, 1.0, 0.0), angle, dst)


def make_rotation_matrix_z(angle, dst=None):
    return make_rotation_matrix((0.0, 0.0, 1.0), angle, dst)


## a unit vector perpendicular to v
def _perpendicular(v):
    i = min(range(3), key=lambda k: abs(v[k]))
    e = [0.0, 0.0, 0.0]
    e[i] = 1.0
    return rn.normalize(rn.cross_product(v, e))


## rotation taking the direction of frm to the direction of to
def make_rotation_axis_matrix(frm, to, dst=None):
    if len(frm) < 3 or len(to) < 3:
        raise ValueError('input vectors too short')
    v1 = list(frm[:3])
    v2 = list(to[:3])
    if rn.euclidean_norm_squared(v1) == 0.0 or rn.euclidean_norm_squared(v2) == 0.0:
        return _out(rn.identity_matrix(4), dst)
    v1 = rn.normalize(v1)
    v2 = rn.normalize(v2)
    cos_angle = max(-1.0, min(1.0, rn.inner_product(v1, v2)))
    angle = math.acos(cos_angle)
    axis = rn.cross_product(v1, v2)
    if rn.euclidean_norm(axis) < 1e-12:
        if cos_angle > 0:
            return _out(rn.identity_matrix(4), dst)
        return make_rotation_matrix(_perpendicular(v1), math.pi, dst)
    return make_rotation_matrix(axis, angle, dst)


## translations


def make_translation_matrix(to, metric, dst=None):
    """Isometry of the given metric taking the origin to ``to``.

    Euclidean translations are affine.  Elliptic and hyperbolic
    translations are built as the canonical translation along the z-axis
    conjugated by the rotation aligning the z-axis with the target.
    Hyperbolic targets outside the absolute are first pulled just inside it.
    """
    point = _point4(to)

    if metric == pn.EUCLIDEAN:
        m = rn.identity_matrix(4)
        point = pn.dehomogenize(point)
        for i in range(3):
            m[i * 4 + 3] = point[i]
        return _out(m, dst)

    if metric not in (pn.HYPERBOLIC, pn.ELLIPTIC):
        return _out(rn.identity_matrix(4), dst)

    if metric == pn.HYPERBOLIC and pn.inner_product(point, point, pn.HYPERBOLIC) > 0.0:
        k = max(0.0, point[3] * point[3] - 0.0001) / rn.inner_product_n(point, point, 3)
        k = math.sqrt(k)
        for i in range(3):
            point[i] *= k

    tmp = pn.normalize(point, metric)
    d = rn.inner_product_n(tmp, tmp, 3)
    mtmp = rn.identity_matrix(4)
    mtmp[11] = math.sqrt(d)
    if metric == pn.ELLIPTIC:
        mtmp[14] = -mtmp[11]
    else:
        mtmp[14] = mtmp[11]
    mtmp[10] = mtmp[15] = tmp[3]
    if d < 1e-24:
        return _out(mtmp, dst)
    rot = make_rotation_axis_matrix(HZ_AXIS, tmp)
    return rn.conjugate_by_matrix(mtmp, rot, dst)


## translation along the line through frm and to, taking frm to to
def make_translation_matrix2(frm, to, metric, dst=None):
    tp = make_translation_matrix(frm, metric)
    to_prime = rn.matrix_times_vector(rn.inverse(tp), _point4(to))
    m = make_translation_matrix(to_prime, metric)
    return rn.conjugate_by_matrix(m, tp, dst)


## rotation by angle about the line through p1 and p2
def make_rotation_matrix_axis(p1, p2, angle, metric, dst=None):
    if len(p1) < 3 or len(p2) < 3:
        raise ValueError('points too short')
    tmat = make_translation_matrix(p1, metric)
    ip2 = rn.matrix_times_vector(rn.inverse(tmat), _point4(p2))
    rot = make_rotation_matrix(ip2, angle)
    return rn.conjugate_by_matrix(rot, tmat, dst)


def make_screw_motion_matrix(p1, p2, angle, metric, dst=None):
    tlate = make_translation_matrix2(p1, p2, metric)
    rot = make_rotation_matrix_axis(p1, p2, angle, metric)
    return rn.times_matrix(tlate, rot, dst)


## isometry taking frm to the origin and the direction towards to onto
## the negative z-axis, followed by a roll about that axis
def make_lookat_matrix(frm, to, roll, metric, dst=None):
    tm1 = rn.inverse(make_translation_matrix(frm, metric))
    newto = rn.matrix_times_vector(tm1, _point4(to))
    tm2 = make_rotation_axis_matrix(newto, Z_AXIS)
    m = rn.times_matrix(tm2, tm1)
    if roll != 0:
        m = rn.times_matrix(m, make_rotation_matrix(Z_AXIS, roll))
    return _out(m, dst)


## scaling and projection


def make_stretch_matrix(stretch, dst=None):
    m = rn.identity_matrix(4)
    m[0] = m[5] = m[10] = stretch
    return _out(m, dst)


def make_stretch_matrix_xyz(sx, sy, sz, dst=None):
    m = rn.identity_matrix(4)
    m[0] = sx
    m[5] = sy
    m[10] = sz
    return _out(m, dst)


def make_stretch_matrix_vector(scales, dst=None):
    m = rn.identity_matrix(4)
    for i in range(min(4, len(scales))):
        m[i * 4 + i] = scales[i]
    return _out(m, dst)


def make_skew_matrix(i, j, val, dst=None):
    m = rn.identity_matrix(4)
    m[4 * i + j] = val
    return _out(m, dst)


## viewports are (xmin, xmax, ymin, ymax)
def make_orthographic_projection_matrix(viewport, near, far, dst=None):
    l, r, b, t = viewport
    m = rn.identity_matrix(4)
    m[0] = 2 / (r - l)
    m[5] = 2 / (t - b)
    m[10] = -2 / (far - near)
    m[3] = -(r + l) / (r - l)
    m[7] = -(t + b) / (t - b)
    m[11] = -(far + near) / (far - near)
    return _out(m, dst)


def make_perspective_projection_matrix(viewport, near, far, dst=None):
    an = abs(near)
    l, r, b, t = (x * an for x in viewport)
    m = rn.identity_matrix(4)
    m[0] = 2 * near / (r - l)
    m[5] = 2 * near / (t - b)
    m[10] = (far + near) / (near - far)
    m[15] = 0.0
    m[2] = (r + l) / (r - l)
    m[6] = (t + b) / (t - b)
    m[11] = 2 * near * far / (near - far)
    m[14] = -1.0
    return _out(m, dst)


def make_reflection_matrix(plane, metric, dst=None):
    """Reflection in a plane, for the given metric."""
    if len(plane) != 4:
        raise ValueError('bad plane passed to make_reflection_matrix: {}'.format(plane))
    polar = pn.set_to_length(pn.polarize_plane(plane, metric), 1.0, metric)
    if metric == pn.EUCLIDEAN:
        fixed = pn.normalize_plane(plane, metric)
    else:
        fixed = pn.normalize(plane, metric)
    m = rn.identity_matrix(4)
    for i in range(4):
        for j in range(4):
            m[i * 4 + j] -= 2 * fixed[j] * polar[i]
    return _out(m, dst)


## incidence


def plane_from_points(p1, p2, p3, dst=None):
    """Plane through three points; 3D points are taken with weight 1.

    Collinear points give the zero vector.
    """
    if len(p1) < 3 or len(p2) < 3 or len(p3) < 3:
        raise ValueError('input points must be homogeneous vectors')
    p1 = _point4(p1)
    p2 = _point4(p2)
    p3 = _point4(p3)
    plane = [
        p1[1] * (p2[2] * p3[3] - p2[3] * p3[2]) - p1[2] * (p2[1] * p3[3] - p2[3] * p3[1])
        + p1[3] * (p2[1] * p3[2] - p2[2] * p3[1]),
        p1[0] * (p2[2] * p3[3] - p2[3] * p3[2]) - p1[2] * (p2[0] * p3[3] - p2[3] * p3[0])
        + p1[3] * (p2[0] * p3[2] - p2[2] * p3[0]),
        p1[0] * (p2[1] * p3[3] - p2[3] * p3[1]) - p1[1] * (p2[0] * p3[3] - p2[3] * p3[0])
        + p1[3] * (p2[0] * p3[1] - p2[1] * p3[0]),
        p1[0] * (p2[1] * p3[2] - p2[2] * p3[1]) - p1[1] * (p2[0] * p3[2] - p2[2] * p3[0])
        + p1[2] * (p2[0] * p3[1] - p2[1] * p3[0]),
    ]
    plane[0] *= -1
    plane[2] *= -1
    return _out(plane, dst)


## by duality the same formula gives the point common to three planes
def point_from_planes(pl1, pl2, pl3, dst=None):
    return plane_from_points(pl1, pl2, pl3, dst)


def line_intersect_plane(p1, p2, plane, dst=None):
    """Point where the line through ``p1`` and ``p2`` meets ``plane``.

    A line lying in the plane has no unique intersection; ``p1`` is
    returned and a warning logged.
    """
    if len(plane) != 4:
        raise ValueError('bad plane passed to line_intersect_plane: {}'.format(plane))
    point1 = _point4(p1)
    point2 = _point4(p2)
    k1 = rn.inner_product(point1, plane)
    k2 = rn.inner_product(point2, plane)
    if k1 == 0.0 and k2 == 0.0:
        logger.warning('line_intersect_plane: line lies in plane')
        return _out(point1, dst)
    tmp = rn.linear_combination(k2, point1, -k1, point2)
    return pn.dehomogenize(tmp, dst)


## dual of line_intersect_plane: the plane through a point and a line
## given as the intersection of two planes
def line_join_point(pl1, pl2, point, dst=None):
    return line_intersect_plane(pl1, pl2, point, dst)


def are_collinear(p0, p1, p2, tol):
    return rn.equals(plane_from_points(p0, p1, p2), ZERO_VECTOR, tol)


## weights [a, b] with p = a*p0 + b*p1, after projecting p onto the
## line through p0 and p1 when it does not lie on it
def barycentric_coordinates(p0, p1, p):
    plane = plane_from_points(p0, p1, p)
    projected = list(p)
    if not rn.equals(ZERO_VECTOR, plane, 1e-8):
        plane = rn.subtract(p0, p1)
        plane[3] = -rn.inner_product_n(plane, p, 3)
        projected = line_intersect_plane(p0, p1, plane)

    weights = [0.0, 0.0]
    n = min(len(p0), len(p1))
    for index0 in range(n - 1):
        for index1 in range(index0 + 1, n):
            det = p0[index0] * p1[index1] - p0[index1] * p1[index0]
            if abs(det) > 1e-8:
                a, b = p0[index0], p1[index0]
                c, d = p0[index1], p1[index1]
                weights[0] = (d * projected[index0] - b * projected[index1]) / det
                weights[1] = (-c * projected[index0] + a * projected[index1]) / det
                return weights
    return weights


def affine_coordinate(p1, p2, pw):
    weights = barycentric_coordinates(p1, p2, pw)
    if weights[1] == 0:
        return 0.0
    if weights[0] != 0.0:
        return weights[1] / weights[0]
    if weights[1] < 0:
        return -rn.MAX
    return rn.MAX


## metric frames


## Q - m^T Q m, which vanishes for isometries of the metric
def get_transformed_absolute(m, metric):
    q = list(Q_LIST[metric + 1])
    mtqm = rn.times_matrix(rn.transpose(m), rn.times_matrix(q, m))
    return rn.subtract(q, mtqm)


def orthonormalize_matrix(m, tolerance, metric, dst=None):
    """Gram-Schmidt the columns of ``m`` with respect to the metric."""
    m = list(m)
    if metric == pn.EUCLIDEAN:
        for i in range(3):
            v = rn.normalize([m[i], m[i + 4], m[i + 8]])
            m[i], m[i + 4], m[i + 8] = v
            m[i + 12] = 0.0
        return _out(m, dst)

    lastentry = m[15]
    diagnosis = get_transformed_absolute(m, metric)
    q = Q_LIST[metric + 1]
    basis = [[m[j * 4 + i] for j in range(4)] for i in range(4)]
    for i in range(3):
        for j in range(i + 1, 4):
            if q[5 * j] == 0.0:
                continue
            if abs(diagnosis[4 * i + j]) > tolerance:
                projected = pn.project_onto_complement(basis[i], basis[j], metric)
                if projected is not None:
                    basis[j] = projected
    out = [0.0] * 16
    for i in range(4):
        if q[5 * i] != 0.0:
            basis[i] = pn.normalize_plane(basis[i], metric)
        for j in range(4):
            out[j * 4 + i] = basis[i][j]
    if out[15] * lastentry < 0:
        out = rn.times(-1, out)
    return _out(out, dst)


## the part of m left after removing the translation that takes the
## origin to the image of point
def extract_orientation_matrix(m, point, metric, dst=None):
    image = rn.matrix_times_vector(m, _point4(point))
    translate = make_translation_matrix(image, metric)
    return rn.times_matrix(rn.inverse(translate), m, dst)


## factoring


def factor_matrix(m, metric):
    """Factor a 4x4 isometry-with-stretch into its components.

    Returns ``(translation, rotation_q, stretch_rotation_q, stretch,
    is_flipped)`` with ``m = T * R * S`` (S negated when flipped).
    """
    is_flipped = rn.determinant(m) < 0
    trans = rn.matrix_times_vector(m, ORIGIN)
    if metric == pn.EUCLIDEAN and trans[3] == 0.0:
        raise ValueError('bad translation vector: {}'.format(trans))

    trans_t = make_translation_matrix(trans, metric)
    tmp = rn.times_matrix(rn.inverse(trans_t), m)
    m3 = rn.extract_submatrix(tmp, 0, 2, 0, 2)
    if is_flipped:
        m3 = rn.times(-1.0, m3)
    q3, s3 = rn.polar_decompose(m3)
    stretch = [s3[0], s3[4], s3[8], 1.0]
    rot_q = rotation_matrix_to_quaternion(q3)
    stretch_rot_q = Quaternion(1.0, 0.0, 0.0, 0.0)
    return trans, rot_q, stretch_rot_q, stretch, is_flipped


def compose_matrix_from_factors(trans, rot_q, stretch_rot_q, stretch, is_flipped,
                                metric, dst=None):
    """Inverse of :func:`factor_matrix`: ``T * R * SR * S * SR^-1``."""
    if trans is None or rot_q is None or stretch is None:
        raise ValueError('missing factor passed to compose_matrix_from_factors')
    trans_t = make_translation_matrix(trans, metric)
    rot_t = quaternion_to_rotation_matrix(rot_q)
    s = [-x for x in stretch[:3]] if is_flipped else list(stretch[:3])
    stretch_t = rn.set_diagonal_matrix([0.0] * 16, s)
    if stretch_rot_q is not None:
        srot = quaternion_to_rotation_matrix(stretch_rot_q)
        stretch_t = rn.times_matrix(srot, rn.times_matrix(stretch_t, rn.transpose(srot)))
    m = rn.times_matrix(rot_t, stretch_t)
    return rn.times_matrix(trans_t, m, dst)
