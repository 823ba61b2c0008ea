## points, lines and conic helpers in the real projective plane

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

logger = get_logger(__name__)

_out = rn._out

## points and lines of the plane are homogeneous 3-vectors [x, y, w]
## and [a, b, c] (for a*x + b*y + c*w = 0)


def outer_product(p1, p2, dst=None):
    x1, y1, w1 = p1[:3]
    x2, y2, w2 = p2[:3]
    return _out([y1 * w2 - y2 * w1, x2 * w1 - x1 * w2, x1 * y2 - x2 * y1], dst)


## scale a line so that its normal (a, b) has unit length
def normalize_line(line, dst=None):
    a, b, c = line[:3]
    d = a * a + b * b
    d = 1.0 / math.sqrt(d) if d != 0 else 1.0
    return _out([d * a, d * b, d * c], dst)


def line_from_points(p1, p2, dst=None):
    return normalize_line(outer_product(pn.dehomogenize(p1), pn.dehomogenize(p2)), dst)


def point_from_lines(l1, l2, dst=None):
    return pn.dehomogenize(outer_product(l1, l2), dst)


def inner_product(line, point):
    return rn.inner_product_n(line, point, 3)


## adjugate of a 3x3 matrix, divided by the cube root of |det| so that
## the dual of a normalized conic is normalized too
def cofactor(m, dst=None):
    if m is None or len(m) != 9:
        raise ValueError('bad 3x3 matrix passed to cofactor: {}'.format(m))
    det = rn.determinant(m)
    if abs(det) < rn.TOLERANCE:
        det = 1.0
    else:
        det = abs(det) ** (1.0 / 3.0)
    result = [
        (m[4] * m[8] - m[5] * m[7]) / det,
        (m[2] * m[7] - m[1] * m[8]) / det,
        (m[1] * m[5] - m[2] * m[4]) / det,
        (m[5] * m[6] - m[3] * m[8]) / det,
        (m[0] * m[8] - m[2] * m[6]) / det,
        (m[2] * m[3] - m[0] * m[5]) / det,
        (m[3] * m[7] - m[4] * m[6]) / det,
        (m[1] * m[6] - m[0] * m[7]) / det,
        (m[0] * m[4] - m[1] * m[3]) / det,
    ]
    return _out(result, dst)


def multiply_matrix_vector(m, v, dst=None):
    out = [0.0, 0.0, 0.0]
    for i in range(3):
        for j in range(3):
            out[i] += m[3 * i + j] * v[j]
    return _out(out, dst)


## the two points where a line cuts a circle, or [] if it misses
def clip_line_to_circle(line, center, radius):
    nline = normalize_line(line)
    if nline[0] != 0:
        p = [-nline[2] / nline[0], 0.0]
    else:
        p = [0.0, -nline[2] / nline[1]]
    v = [nline[1], -nline[0]]
    p = [p[0] - center[0], p[1] - center[1]]
    a = v[0] * v[0] + v[1] * v[1]
    b = 2 * (p[0] * v[0] + p[1] * v[1])
    c = p[0] * p[0] + p[1] * p[1] - radius * radius
    d = b * b - 4 * a * c
    if d < 0:
        return []
    s = math.sqrt(d)
    result = []
    for t in ((-b + s) / (2 * a), (-b - s) / (2 * a)):
        result.append([p[0] + t * v[0] + center[0], p[1] + t * v[1] + center[1], 1.0])
    return result


## the segment of a line inside an axis-aligned box, as a list of
## dehomogenized points (empty if the line misses the box)
def clip_line_to_box(line, xmin, xmax, ymin, ymax):
    nline = normalize_line(line)
    box = [[xmin, ymin, 1.0], [xmax, ymin, 1.0], [xmax, ymax, 1.0], [xmin, ymax, 1.0]]
    dis = [inner_product(nline, p) for p in box]
    signs = []
    for i in range(4):
        j = (i + 1) % 4
        signs.append(math.copysign(1.0, dis[i]) * math.copysign(1.0, dis[j])
                     if dis[i] != 0 and dis[j] != 0 else 0.0)
    if all(s == signs[0] for s in signs) and signs[0] > 0:
        return []
    seg = []
    for i in range(4):
        j = (i + 1) % 4
        if dis[i] == 0.0:
            seg.append(list(box[i]))
        elif signs[i] < 0:
            p = rn.linear_combination(dis[i], box[j], -dis[j], box[i])
            seg.append(pn.dehomogenize(p))
    return seg


def perpendicular_bisector(p1, p2, metric=pn.EUCLIDEAN, dst=None):
    if len(p1) != 3 or len(p2) != 3:
        raise ValueError('input points must be homogeneous vectors')
    if metric == pn.EUCLIDEAN:
        avg = rn.times(0.5, rn.add(pn.dehomogenize(p1), pn.dehomogenize(p2)))
        line = line_from_points(p1, p2)
        out = [-line[1], line[0], 0.0]
        out[2] = -(out[0] * avg[0] + out[1] * avg[1])
        return _out(out, dst)
    midpoint = pn.linear_interpolation(p1, p2, 0.5, metric)
    line = line_from_points(p1, p2)
    polar_m = pn.polarize(midpoint, metric)
    pb = point_from_lines(polar_m, line)
    out = pn.polarize(pb, metric)
    if rn.inner_product(out, p1) < 0:
        out = rn.times(-1.0, out)
    return _out(out, dst)


## index of the first edge of a convex polygon that has point on its
## outside, or -1 if the point is inside
def get_first_outside_edge(polygon, point, open_edges=None):
    if len(point) != 3:
        raise ValueError('input point must be homogeneous vector')
    n = len(polygon)
    minimum = 1.0e11
    which = -1
    for i in range(n):
        j = (i + 1) % n
        p1 = [polygon[i][0], polygon[i][1], 1.0]
        p2 = [polygon[j][0], polygon[j][1], 1.0]
        ip = rn.inner_product(line_from_points(p1, p2), point)
        if ip < minimum:
            which = i
            minimum = ip
    if open_edges is not None and open_edges[which]:
        if minimum <= 0.0:
            return which
    elif minimum < 0.0:
        return which
    return -1


def polygon_contains_point(polygon, point, open_edges=None):
    return get_first_outside_edge(polygon, point, open_edges) == -1


def is_convex(polygon):
    n = len(polygon)
    diffs = []
    for i in range(n):
        j = (i + 1) % n
        diffs.append(rn.normalize(rn.subtract(polygon[j][:3], polygon[i][:3])))
    sign = 0.0
    for i in range(n):
        j = (i + 1) % n
        z = rn.cross_product(diffs[i], diffs[j])[2]
        if sign == 0.0:
            sign = z
        elif sign * z < 0.0:
            return False
    return True


## the part of a convex polygon on the non-negative side of a line;
## None if nothing is left
def chop_convex_polygon_with_line(polygon, line):
    if len(line) != 3:
        raise ValueError('input line must be homogeneous vector')
    if polygon is None:
        return None
    n = len(polygon)
    vals = [rn.inner_product(line, p) for p in polygon]
    count = sum(1 for v in vals if v >= 0)
    if count == 0:
        return None
    if count == n:
        return polygon
    result = []
    for i in range(n):
        j = (i + 1) % n
        if vals[i] >= 0:
            result.append(list(polygon[i]))
        if vals[i] * vals[j] < 0:
            edge = line_from_points(polygon[i], polygon[j])
            result.append(point_from_lines(edge, line))
    return result


def _matrix_from_columns(c0, c1, c2):
    cols = (c0, c1, c2)
    return [cols[j][i] for i in range(3) for j in range(3)]


## direct isometry taking the origin to point and the x-axis to the
## direction of xdir
def make_direct_isometry_from_frame(point, xdir, metric):
    point = pn.normalize(point, metric)
    if metric == pn.EUCLIDEAN:
        p1n = list(xdir)
        if p1n[2] != 0:
            p1n = rn.subtract(pn.dehomogenize(p1n), point)
        p1n = rn.normalize(p1n)
        p2 = [-p1n[1], p1n[0], 0.0]
    else:
        polar_p = pn.polarize(point, metric)
        line_p = line_from_points(point, xdir)
        p1n = pn.normalize(point_from_lines(polar_p, line_p), metric)
        p2 = pn.normalize(pn.polarize(line_p, metric), metric)
    return _matrix_from_columns(p1n, p2, point)


def make_direct_isometry_from_frames(p0, p1, q0, q1, metric):
    to_p = make_direct_isometry_from_frame(p0, p1, metric)
    to_q = make_direct_isometry_from_frame(q0, q1, metric)
    return rn.times_matrix(to_q, rn.inverse(to_p))


def project_p3_to_p2(v4, dst=None):
    return _out([v4[0], v4[1], v4[3]], dst)


## lift plane points [x, y, w] (or a list of them) to [x, y, 0, w]
def imbed_p2_in_p3(v3):
    if len(v3) > 0 and isinstance(v3[0], (list, tuple)):
        return [imbed_p2_in_p3(v) for v in v3]
    return [v3[0], v3[1], 0.0, v3[2]]


_WHICH = (0, 1, 3)


def imbed_matrix_p2_in_p3(m3, dst=None):
    out = rn.identity_matrix(4)
    for i in range(3):
        for j in range(3):
            out[4 * _WHICH[i] + _WHICH[j]] = m3[3 * i + j]
    out[2] = out[6] = out[8] = out[9] = out[11] = out[14] = 0.0
    out[10] = 1.0
    return _out(out, dst)
