## Pluecker coordinates for lines of real projective 3-space

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

"""Line geometry in Pluecker coordinates.

A line is a 6-vector ``[p01, p02, p03, p12, p31, p23]`` built from two
points (or, dually, from two planes).  The skew-symmetric 4x4 matrix of a
line turns incidence questions into a single matrix-vector product: the
skew matrix of a line joins it with a point; the skew matrix of the dual
line cuts it with a plane.  Dualizing reverses the coordinate order.

The Pluecker inner product of two lines vanishes exactly when they meet;
a 6-vector represents a line exactly when its inner product with itself
vanishes.
"""

import math

from projgeom import p3
from projgeom import pn
from projgeom import rn
from projgeom.log import get_logger

logger = get_logger(__name__)

_out = rn._out

TOLERANCE = 10e-8

## index pairs of the six coordinates
PLUECKER_INDICES = ((0, 1), (0, 2), (0, 3), (1, 2), (3, 1), (2, 3))


def line_from_points(p0, p1, dst=None):
    if len(p0) != 4 or len(p1) != 4:
        raise ValueError('input points must be homogeneous vectors')
    line = [p0[0] * p1[1] - p0[1] * p1[0],
            p0[0] * p1[2] - p0[2] * p1[0],
            p0[0] * p1[3] - p0[3] * p1[0],
            p0[1] * p1[2] - p0[2] * p1[1],
            p0[3] * p1[1] - p0[1] * p1[3],
            p0[2] * p1[3] - p0[3] * p1[2]]
    return _out(line, dst)


def line_from_planes(plane0, plane1, dst=None):
    return dualize_line(line_from_points(plane0, plane1), dst)


def plane_from_points(p0, p1, p2, dst=None):
    return line_join_point(line_from_points(p0, p1), p2, dst)


def line_to_skew_matrix(pl, dst=None):
    m = [0.0] * 16
    m[1] = pl[5]
    m[4] = -pl[5]
    m[2] = pl[4]
    m[8] = -pl[4]
    m[3] = pl[3]
    m[12] = -pl[3]
    m[6] = pl[2]
    m[9] = -pl[2]
    ## p42 rather than p24
    m[7] = -pl[1]
    m[13] = pl[1]
    m[11] = pl[0]
    m[14] = -pl[0]
    return _out(m, dst)


def dualize_line(src, dst=None):
    return _out(list(reversed(src[:6])), dst)


def inner_product(l0, l1):
    return sum(l0[i] * l1[5 - i] for i in range(6))


## relabel the coordinate axes of P3 by perm and return the line in the
## new coordinates
def permute_coordinates(src, perm, dst=None):
    pm = rn.permutation_matrix(perm)
    mm = rn.conjugate_by_matrix(line_to_skew_matrix(src), pm)
    return _out([mm[11], -mm[7], mm[6], mm[3], mm[2], mm[1]], dst)


def line_intersect_plane(line, plane, dst=None):
    return rn.matrix_times_vector(line_to_skew_matrix(dualize_line(line)), plane, dst)


def line_join_point(line, point, dst=None):
    return rn.matrix_times_vector(line_to_skew_matrix(line), point, dst)


def intersection_point(l0, l1, dst=None):
    """Common point of two coplanar lines.

    Raises ValueError when the lines are skew or coincide.
    """
    norm = abs(inner_product(l0, l1))
    if norm > TOLERANCE:
        logger.warning('intersection_point: lines are skew, inner product %g', norm)
        raise ValueError('bad lines, they do not intersect: {} {}'.format(l0, l1))
    return intersection_point_unchecked(l0, l1, dst)


def intersection_plane(l0, l1, dst=None):
    return intersection_point(dualize_line(l0), dualize_line(l1), dst)


def intersection_point_unchecked(l0, l1, dst=None):
    """Read the common point off a column of the product of skew matrices.

    Every nonzero column of the product represents the point; the column
    with the biggest entry is used.
    """
    mm = rn.times_matrix(line_to_skew_matrix(dualize_line(l0)), line_to_skew_matrix(l1))
    norm = max(rn.max_norm(l0), rn.max_norm(l1))
    maxval = TOLERANCE * norm
    best_column = -1
    biggest_entry = -1
    for i in range(4):
        for j in range(4):
            v = abs(mm[i + 4 * j])
            if v > maxval:
                maxval = v
                best_column = i
                biggest_entry = j
        if best_column != -1:
            break
    if best_column == -1:
        raise ValueError('bad lines, they coincide: {} {}'.format(l0, l1))
    for i in range(best_column + 1, 4):
        v = abs(mm[i + 4 * biggest_entry])
        if v > maxval:
            maxval = v
            best_column = i
    return _out([mm[best_column + 4 * k] for k in range(4)], dst)


def project_point_onto_line(p, v0, v1, metric, dst=None):
    """Foot of the metric perpendicular from ``p`` to the line ``v0 v1``."""
    if metric == pn.EUCLIDEAN:
        dp = rn.subtract(pn.dehomogenize(p), pn.dehomogenize(v0))
        dv = rn.subtract(pn.dehomogenize(v1), pn.dehomogenize(v0))
        dp[3] = dv[3] = 0.0
        return rn.add(pn.dehomogenize(v0), rn.project_onto(dp, dv), dst)
    polar0 = pn.polarize_point(v0, metric)
    polar1 = pn.polarize_point(v1, metric)
    line = line_from_planes(polar0, polar1)
    plane = line_join_point(line, p)
    return p3.line_intersect_plane(v0, v1, plane, dst)


def project_point_onto_pluecker_line(p, line, metric, dst=None):
    plane = line_join_point(polarize(line, metric), p)
    return line_intersect_plane(line, plane, dst)


## scale so that the direction vector [l2, -l4, l5] has unit length
def normalize(src, dst=None):
    x = src[2] * src[2] + src[4] * src[4] + src[5] * src[5]
    if x == 0.0:
        return _out(list(src), dst)
    return rn.times(1.0 / math.sqrt(x), src, dst)


def direction_vector(line):
    return [line[2], -line[4], line[5]]


def cosine_between_lines(l1, l2):
    dv1 = direction_vector(l1)
    dv2 = direction_vector(l2)
    return rn.inner_product(dv1, dv2) / math.sqrt(
        rn.inner_product(dv1, dv1) * rn.inner_product(dv2, dv2))


## lines in the plane at infinity have no direction
def is_infinite(line):
    return rn.euclidean_norm_squared(direction_vector(line)) == 0.0


def induced_p5_proj_from_p3_proj(m, dst=None):
    """6x6 action on Pluecker coordinates of a 4x4 projectivity."""
    out = [0.0] * 36
    for i in range(6):
        ii, jj = PLUECKER_INDICES[i]
        for j in range(6):
            kk, mm = PLUECKER_INDICES[j]
            out[i * 6 + j] = m[ii * 4 + kk] * m[jj * 4 + mm] - m[ii * 4 + mm] * m[jj * 4 + kk]
    return _out(out, dst)


## image of a line under the null correlation of a linear complex
def conjugate_with_respect_to_complex(complex_, line, dst=None):
    p5m = induced_p5_proj_from_p3_proj(line_to_skew_matrix(complex_))
    return dualize_line(rn.matrix_times_vector(p5m, line), dst)


def null_plane(complex_, point, dst=None):
    return rn.matrix_times_vector(line_to_skew_matrix(complex_), point, dst)


def null_point(complex_, plane, dst=None):
    return rn.matrix_times_vector(line_to_skew_matrix(dualize_line(complex_)), plane, dst)


def is_valid_line(line):
    if rn.euclidean_norm_squared(line) < 10e-16:
        return False
    return not inner_product(line, line) > TOLERANCE


def polarize(src, metric, dst=None):
    out = dualize_line(src)
    out[2] *= metric
    out[4] *= metric
    out[5] *= metric
    return _out(out, dst)
