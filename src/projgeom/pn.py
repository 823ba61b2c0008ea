## metric-parametrized projective geometry in arbitrary dimension

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

"""Projective geometry of points and hyperplanes in homogeneous coordinates.

Every distance, angle and normalization takes a ``metric`` argument that
selects the inner product used:

* ``EUCLIDEAN`` (0): the last coordinate is dropped
* ``ELLIPTIC`` (1): the last coordinate's product is added
* ``HYPERBOLIC`` (-1): the last coordinate's product is subtracted

``PROJECTIVE`` (2) marks metric-agnostic operations.  Functions producing
arrays follow the ``dst=None`` convention of :mod:`projgeom.rn`.
"""

import math

from projgeom import rn
from projgeom.log import get_logger

logger = get_logger(__name__)

ELLIPTIC = 1
EUCLIDEAN = 0
HYPERBOLIC = -1
PROJECTIVE = 2

METRICS = (HYPERBOLIC, EUCLIDEAN, ELLIPTIC)

Z_DIRECTION_P3 = (0.0, 0.0, 1.0, 0.0)

_out = rn._out


def check_metric(metric):
    if metric not in (HYPERBOLIC, EUCLIDEAN, ELLIPTIC, PROJECTIVE):
        raise ValueError('bad metric: {}'.format(metric))
    return metric


## hyperbolic functions, written out so that acosh accepts |x| >= 1
## of either sign


def cosh(x):
    return 0.5 * (math.exp(x) + math.exp(-x))


def sinh(x):
    return 0.5 * (math.exp(x) - math.exp(-x))


def tanh(x):
    return sinh(x) / cosh(x)


def acosh(x):
    return math.log(abs(x) + math.sqrt(x * x - 1))


def asinh(x):
    return math.log(x + math.sqrt(x * x + 1))


def atanh(x):
    return 0.5 * math.log((1 + x) / (1 - x))


def inner_product(u, v, metric):
    """Metric inner product of two homogeneous vectors.

    The sum runs over all but the last shared coordinate; the last one is
    added for the elliptic metric and subtracted for the hyperbolic one.
    Euclidean and projective forms ignore it.
    """
    n = min(len(u), len(v)) - 1
    s = rn.inner_product_n(u, v, n)
    if metric == HYPERBOLIC:
        return s - u[n] * v[n]
    if metric == ELLIPTIC:
        return s + u[n] * v[n]
    return s


def inner_product_planes(u, v, metric):
    return inner_product(u, v, metric)


def norm_squared(v, metric):
    return inner_product(v, v, metric)


def angle_between(u, v, metric):
    """Angle between two hyperplanes (or points) in the given metric.

    Returns ``rn.MAX`` when either argument is null (an ideal plane).
    """
    uu = inner_product_planes(u, u, metric)
    vv = inner_product_planes(v, v, metric)
    uv = inner_product_planes(u, v, metric)
    if uu == 0 or vv == 0:
        return rn.MAX
    f = uv / math.sqrt(abs(uu * vv))
    f = max(-1.0, min(1.0, f))
    return math.acos(f)


def dehomogenize(src, dst=None):
    """Divide by the last coordinate.

    ``dst`` may have the same length as ``src`` (the last entry becomes 1)
    or be one shorter (the weight is dropped).  Points at infinity and
    points with weight 1 are copied unchanged.
    """
    sl = len(src)
    dl = sl if dst is None else len(dst)
    if not (dl == sl or dl + 1 == sl):
        raise ValueError('bad dimensions passed to dehomogenize: {} and {}'.format(sl, dl))
    last = src[sl - 1]
    if last == 1.0 or last == 0.0:
        return _out(list(src[:dl]), dst)
    f = 1.0 / last
    out = [f * x for x in src[:dl]]
    if dl == sl:
        out[dl - 1] = 1.0
    return _out(out, dst)


def homogenize(src, dst=None):
    return _out(list(src) + [1.0], dst)


def distance_between(p1, p2, metric):
    """Distance between two points.

    Euclidean distance is measured between the dehomogenized points and is
    ``rn.MAX`` if either point lies at infinity.  Hyperbolic and elliptic
    distances are inverse (hyperbolic) cosines of the normalized inner
    product, clamped to the valid domain.
    """
    if metric == HYPERBOLIC:
        uu = inner_product(p1, p1, metric)
        vv = inner_product(p2, p2, metric)
        uv = inner_product(p1, p2, metric)
        k = -uv / math.sqrt(abs(uu * vv))
        if k < 1.0:
            k = 1.0
        return abs(acosh(k))
    if metric == ELLIPTIC:
        uu = inner_product(p1, p1, metric)
        vv = inner_product(p2, p2, metric)
        uv = inner_product(p1, p2, metric)
        ip = uv / math.sqrt(abs(uu * vv))
        ip = max(-1.0, min(1.0, ip))
        return math.acos(ip)

    n = len(p1)
    ul = p1[n - 1]
    vl = p2[n - 1]
    if ul == 0 or vl == 0:
        return rn.MAX
    d = 0.0
    for i in range(n - 1):
        tmp = ul * p2[i] - vl * p1[i]
        d += tmp * tmp
    return math.sqrt(d) / abs(ul * vl)


def set_to_length(src, length, metric, dst=None):
    """Scale ``src`` to the given metric length.

    A null vector cannot be scaled; it is returned unscaled with a warning.
    """
    norm = math.sqrt(abs(norm_squared(src, metric)))
    if norm == 0:
        logger.warning('set_to_length: null vector %s left unscaled', rn.to_string(src))
        return _out(list(src), dst)
    return rn.times(length / norm, src, dst)


def normalize(src, metric, dst=None):
    """Normalize a point (or a list of points).

    Euclidean points are dehomogenized; otherwise the point is scaled to
    unit metric length.
    """
    if len(src) > 0 and isinstance(src[0], (list, tuple)):
        out = [normalize(p, metric) for p in src]
        return _out(out, dst)
    if metric == EUCLIDEAN:
        return dehomogenize(src, dst)
    return set_to_length(src, 1.0, metric, dst)


def normalize_point_vector(point, vector, metric):
    """Normalize ``point`` and a tangent ``vector`` attached to it.

    Returns ``(point, vector)``; the vector is projected into the tangent
    space of the normalized point.
    """
    if metric == EUCLIDEAN:
        p = dehomogenize(point)
        v = dehomogenize(vector)
        v[-1] = 0.0
        return p, v
    p = normalize(point, metric)
    v = project_to_tangent_space(p, vector, metric)
    if v is None:
        return p, list(vector)
    return p, normalize(v, metric)


def normalize_plane(src, metric, dst=None):
    """Normalize a hyperplane; Euclidean planes get a unit normal."""
    if metric != EUCLIDEAN:
        return normalize(src, metric, dst)
    norm = rn.inner_product_n(src, src, len(src) - 1)
    if norm == 0:
        return _out(list(src), dst)
    return rn.times(1.0 / math.sqrt(norm), src, dst)


def is_valid_coordinate(v, metric, dim=None):
    """True if ``v`` represents a proper point of the metric's space."""
    if dim is None:
        dim = len(v) - 1
    if len(v) < dim:
        return False
    if metric == EUCLIDEAN and len(v) == dim + 1 and v[dim] == 0.0:
        return False
    if metric == HYPERBOLIC:
        if len(v) == dim + 1:
            if not inner_product(v, v, metric) < 0:
                return False
        elif len(v) == dim:
            if not rn.inner_product(v, v) < 1:
                return False
    return True


def calculate_bounds(points):
    """Bounding box ``[mins, maxs]`` of the finite points in the list."""
    n = len(points[0]) - 1
    lo = [rn.MAX] * n
    hi = [-rn.MAX] * n
    for p in points:
        if p[n] == 0.0:
            continue
        tmp = dehomogenize(p)
        for i in range(n):
            lo[i] = min(lo[i], tmp[i])
            hi[i] = max(hi[i], tmp[i])
    return [lo, hi]


def centroid(points, metric, dst=None):
    acc = [0.0] * len(points[0])
    for p in points:
        tmp = normalize(p, metric)
        for j in range(len(acc)):
            acc[j] += tmp[j]
    acc = rn.times(1.0 / len(points), acc)
    return normalize(acc, metric, dst)


def linear_interpolation(u, v, t, metric, dst=None):
    """Interpolate between ``u`` (t=0) and ``v`` (t=1).

    Euclidean and projective interpolation is linear in coordinates.
    Elliptic interpolation is spherical; hyperbolic interpolation uses
    sinh weights, falling back to the spherical formula when the normalized
    inner product lies in [-1, 1].
    """
    s0 = s1 = 0.0
    dot = 0.0
    real_metric = metric
    uu = u
    vv = v
    if metric not in (EUCLIDEAN, PROJECTIVE):
        uu = normalize(u, metric)
        vv = normalize(v, metric)

    if metric in (EUCLIDEAN, PROJECTIVE):
        s0 = 1 - t
        s1 = t
    elif metric == HYPERBOLIC:
        dot = inner_product(uu, vv, metric)
        if abs(dot) <= 1.0:
            real_metric = ELLIPTIC
    elif metric == ELLIPTIC:
        dot = inner_product(uu, vv, metric)
        dot = max(-1.0, min(1.0, dot))

    if real_metric == ELLIPTIC:
        angle = math.acos(dot)
        s2 = math.sin(angle)
        if s2 != 0.0:
            s0 = math.sin((1 - t) * angle) / s2
            s1 = math.sin(t * angle) / s2
        else:
            s0 = 1.0
            s1 = 0.0
    elif real_metric == HYPERBOLIC:
        angle = acosh(dot)
        s2 = sinh(angle)
        if s2 != 0.0:
            s0 = sinh((1 - t) * angle) / s2
            s1 = sinh(t * angle) / s2
        else:
            s0 = 1.0
            s1 = 0.0

    return rn.linear_combination(s0, uu, s1, vv, dst)


def mid_plane(pl1, pl2, metric, dst=None):
    """Bisecting plane of two planes."""
    pt1 = normalize_plane(pl1, metric)
    pt2 = normalize_plane(pl2, metric)
    return linear_interpolation(pt1, pt2, 0.5, metric, dst)


def project_onto(master, victim, metric, dst=None):
    """Metric projection of ``victim`` onto ``master``; None if master is null."""
    mm = inner_product(master, master, metric)
    if mm == 0:
        return None
    scale = inner_product(master, victim, metric) / mm
    return rn.times(scale, master, dst)


def project_onto_complement(master, victim, metric, dst=None):
    proj = project_onto(master, victim, metric)
    if proj is None:
        return None
    return rn.subtract(victim, proj, dst)


def project_to_tangent_space(point, vector, metric, dst=None):
    return project_onto_complement(point, vector, metric, dst)


def drag_towards(p0, p1, length, metric, dst=None):
    """Point at metric distance ``length`` from ``p0`` towards ``p1``.

    Returns None when the two points coincide.
    """
    np0 = normalize(p0, metric)
    np1 = normalize(p1, metric)
    if metric == EUCLIDEAN:
        dp0 = dehomogenize(np0)
        dp1 = dehomogenize(np1)
        direction = rn.subtract(dp1, dp0)
        norm = rn.euclidean_norm(direction)
        if norm == 0:
            return None
        out = rn.linear_combination(1.0, dp0, length / norm, direction)
        out[-1] = 1.0
        return _out(out, dst)

    angle = angle_between(np0, np1, metric)
    if angle == 0:
        return None
    return linear_interpolation(np0, np1, length / angle, metric, dst)


def polarize(v, metric, dst=None):
    """Polar of a point or plane with respect to the metric's absolute."""
    out = list(v)
    if metric == EUCLIDEAN:
        out[-1] = 0.0
    elif metric == HYPERBOLIC:
        out[-1] *= -1
    return _out(out, dst)


def polarize_plane(plane, metric, dst=None):
    return polarize(plane, metric, dst)


def polarize_point(point, metric, dst=None):
    """Polar hyperplane of a point; every Euclidean point maps to the
    plane at infinity."""
    if metric == EUCLIDEAN:
        out = [0.0] * len(point)
        out[-1] = -1.0
        return _out(out, dst)
    return polarize(point, metric, dst)
