## sampling and cutting of lines given in Pluecker coordinates

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

from projgeom import pluecker
from projgeom import pn
from projgeom import rn
from projgeom.log import get_logger
from projgeom.quadratic import solve_quadratic

logger = get_logger(__name__)

## shift of the first sample along a line, so that no sample lands
## exactly on the point at infinity
LINE_COORD_OFFSET = 0.000001


def two_planes_on_line(line):
    """Two independent planes containing a Pluecker line.

    They are columns of the line's skew matrix.  Raises ValueError if no
    two usable columns exist.
    """
    m = pluecker.line_to_skew_matrix(line)
    cols = [[m[i], m[4 + i], m[8 + i], m[12 + i]] for i in range(4)]
    size = rn.euclidean_norm_squared(line)
    i = 0
    while i < 4 and not rn.euclidean_norm_squared(cols[i]) > size * 10e-4:
        i += 1
    if i == 4:
        raise ValueError('Degenerate plucker line {}'.format(rn.to_string(line)))
    first = cols[i]
    for j in range(i + 1, 4):
        pl = pluecker.line_from_points(cols[j], first)
        if rn.inner_product(pl, pl) > size * 10e-16 and \
                rn.euclidean_norm_squared(cols[j]) > size * 10e-4:
            return [first, cols[j]]
    raise ValueError('Degenerate plucker line {}'.format(rn.to_string(line)))


def two_points_on_line(line):
    return two_planes_on_line(pluecker.dualize_line(line))


## num points evenly spaced along the elliptic segment from pt0 to pt1
def elliptic_segment(pt0, pt1, num):
    return [pn.linear_interpolation(pt0, pt1, i / (num - 1.0), pn.ELLIPTIC) for i in range(num)]


def samples_on_1d_extent(offset, num_segs, pt0, pt1, doubled, verts=None):
    """Evenly spaced elliptic samples along the projective line ``pt0 pt1``.

    Without ``doubled`` the ``num_segs`` samples cover the line once.  With
    ``doubled`` (``num_segs`` must then be even) the second half of the
    samples repeats the first with negated coordinates, so that the samples
    run once around the double cover of the line.  Samples are written
    from index ``offset`` of ``verts`` when given.
    """
    if len(pt0) == 3:
        pt0 = pn.homogenize(pt0)
        pt1 = pn.homogenize(pt1)
    if doubled and num_segs % 2 != 0:
        raise ValueError('bad number of segments, must be even: {}'.format(num_segs))
    if verts is None:
        verts = [[0.0] * 4 for _ in range(offset + num_segs)]
    lim = num_segs // 2 if doubled else num_segs
    angle = (2 if doubled else 1) * math.pi / num_segs
    begin = -angle * (lim / 2 + LINE_COORD_OFFSET)
    p0 = pn.normalize(pt0, pn.ELLIPTIC)
    p1 = pn.normalize(pt1, pn.ELLIPTIC)
    for i in range(lim):
        sample = pn.drag_towards(p0, p1, begin + i * angle, pn.ELLIPTIC)
        if sample is None:
            raise ValueError('bad line, the two points coincide: {} {}'.format(pt0, pt1))
        verts[offset + i] = sample
        if doubled:
            verts[offset + lim + i] = rn.times(-1.0, sample)
    return verts


def samples_on_line(num_segs, line, doubled):
    p0, p1 = two_points_on_line(line)
    return samples_on_1d_extent(0, num_segs, p0, p1, doubled)


def coordinates_for_1d_extent(offset, num_segs, pt0, pt1, verts=None):
    return samples_on_1d_extent(offset, num_segs, pt0, pt1, True, verts)


## t in [0, 1] runs once around the elliptic line
def value_at_time(t, p0, p1):
    return pn.drag_towards(p0, p1, t * math.pi, pn.ELLIPTIC)


def line_intersect_sphere(line, center, radius):
    """The two points where a line cuts a Euclidean sphere.

    If the line misses the sphere, the point of the sphere closest to the
    line is returned twice.
    """
    if len(center) == 3:
        center = pn.homogenize(center)
    ct = pn.dehomogenize(center)[:3]
    direction = pluecker.direction_vector(line)
    plane = [direction[0], direction[1], direction[2], 0.0]
    q0 = pn.dehomogenize(pluecker.line_intersect_plane(line, plane))
    plane[3] = 1.0
    q1 = pn.dehomogenize(pluecker.line_intersect_plane(line, plane))
    if q0[3] == 0.0:
        v0, v = q1[:3], q0[:3]
    elif q1[3] == 0.0:
        v0, v = q0[:3], q1[:3]
    else:
        v0, v = q0[:3], rn.subtract(q1[:3], q0[:3])
    v0 = rn.subtract(v0, ct)
    a = rn.inner_product(v, v)
    b = 2 * rn.inner_product(v0, v)
    c = rn.inner_product(v0, v0) - radius * radius
    roots = solve_quadratic(a, b, c)
    if roots is None:
        ## foot of the perpendicular from the center, pushed out to the sphere
        foot = rn.linear_combination(1.0, v0, -b / (2 * a), v)
        p = rn.add(rn.set_euclidean_norm(foot, radius), ct) + [1.0]
        return [p, list(p)]
    return [rn.add(rn.linear_combination(1.0, v0, t, v), ct) + [1.0] for t in roots]


def convert_2d_line_to_pluecker_line(abc):
    """Pluecker coordinates of the line ``a*x + b*y + c*w = 0`` in the plane z = 0."""
    return [abc[2], 0.0, -abc[1], 0.0, -abc[0], 0.0]
