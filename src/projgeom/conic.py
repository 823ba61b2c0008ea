## fitting, classifying and factoring conics of the projective plane

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

"""Conic utilities.

A conic ``a x^2 + h xy + b y^2 + g xw + f yw + c w^2 = 0`` is kept both as
its coefficient 6-vector ``[a, h, b, g, f, c]`` and as the symmetric 3x3
matrix ``Q`` (flat, row-major) with ``p^T Q p = 0`` for its points.

Fitting a conic through five points is a null-space problem: every point
contributes its Veronese embedding as one row of a 5x6 matrix, and the
coefficients span the right null space.  The null-space dimension and
the rank of ``Q`` together classify the conic:

========  ==========  ==========================================
nullity   rank of Q   conic
========  ==========  ==========================================
1         3           regular conic
1         2           line pair
2         (2)         four collinear points, forced line pair
3         (1)         five collinear points, forced double line
========  ==========  ==========================================

Singular values up to ``degen_conic_tolerance`` (1e-4 by default) count
as zero, both for the point matrix and for ``Q``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from projgeom import p2
from projgeom import p3
from projgeom import pn
from projgeom import rn
from projgeom.config import get_setting
from projgeom.log import get_logger
from projgeom.quadratic import solve_quadratic

logger = get_logger(__name__)

CONIC_TYPES = ("zero", "double line", "line pair", "regular")

## entries of a 4x4 matrix acting on [x, y, 0, w] that form the 3x3
## matrix acting on [x, y, w]
_REDUCE_44_TO_33 = (0, 1, 3, 4, 5, 7, 12, 13, 15)


def _tolerance(tol):
    return get_setting("degen_conic_tolerance") if tol is None else tol


def _point3(p) -> List[float]:
    if len(p) == 2:
        return [float(p[0]), float(p[1]), 1.0]
    if len(p) == 3:
        return [float(x) for x in p]
    raise ValueError('bad plane point, expected 2 or 3 coordinates: {}'.format(p))


def veronese(point) -> List[float]:
    x, y, z = _point3(point)
    return [x * x, x * y, y * y, x * z, y * z, z * z]


def normalize_coefficients(coefficients) -> List[float]:
    mx = rn.max_norm(coefficients)
    if mx == 0.0:
        raise ValueError('bad conic coefficients, all zero: {}'.format(coefficients))
    return rn.times(1.0 / mx, coefficients)


def normalize_q(q) -> List[float]:
    """Scale a regular ``Q`` to determinant +-1; degenerate ``Q`` is returned unscaled."""
    det = rn.determinant(q)
    if abs(det) > rn.TOLERANCE:
        return rn.times(1.0 / abs(det) ** (1.0 / 3.0), q)
    return list(q)


def _array_to_q(a, h, b, g, f, c):
    return [a, h / 2, g / 2, h / 2, b, f / 2, g / 2, f / 2, c]


def convert_array_to_q(coefficients) -> List[float]:
    if len(coefficients) != 6:
        raise ValueError('bad conic coefficients, expected 6: {}'.format(coefficients))
    return normalize_q(_array_to_q(*coefficients))


def convert_q_to_array(q) -> List[float]:
    return normalize_coefficients([q[0], 2 * q[1], q[4], 2 * q[2], 2 * q[5], q[8]])


def evaluate(q, point) -> float:
    p = _point3(point)
    return rn.bilinear_form(q, p, p)


## polar line of a point
def polarize(q, point) -> List[float]:
    return rn.matrix_times_vector(q, _point3(point))


## symmetric product of two lines: the line pair, or the double line
## when l1 == l2
def get_q_from_factors(l1, l2) -> List[float]:
    return [0.5 * (l1[i] * l2[j] + l2[i] * l1[j]) for i in range(3) for j in range(3)]


def singular_values(q) -> List[float]:
    return [float(s) for s in np.linalg.svd(np.array(q, dtype=float).reshape(3, 3),
                                            compute_uv=False)]


def rank_of_q(q, tol=None) -> int:
    """Number of singular values of ``Q`` above ``tol``, after scaling
    ``Q`` to unit max norm."""
    tol = _tolerance(tol)
    mx = rn.max_norm(q)
    if mx == 0.0:
        return 0
    return sum(1 for s in singular_values(rn.times(1.0 / mx, q)) if s > tol)


def _null_vector(rows) -> Tuple[List[float], List[float]]:
    """Unit right null vector of a matrix and its singular values."""
    _, s, vt = np.linalg.svd(np.array(rows, dtype=float), full_matrices=True)
    return [float(x) for x in vt[-1]], [float(x) for x in s]


@dataclass(frozen=True)
class ConicFit:
    """Result of fitting a conic to five points."""

    coefficients: Tuple[float, ...]
    nullity: int
    singular_values: Tuple[float, ...]
    rank: int
    double_line: Optional[Tuple[float, ...]] = None

    @property
    def conic_type(self) -> str:
        return CONIC_TYPES[self.rank]


def solve_conic_from_points_svd(points: Sequence[Sequence[float]], tol=None) -> ConicFit:
    """Fit a conic through exactly five plane points.

    Raises ValueError for the wrong number of points, for a null space of
    dimension one whose ``Q`` has rank below two, and for points too
    degenerate to determine any conic.
    """
    if points is None or len(points) != 5:
        raise ValueError('bad point list, exactly 5 points required: {}'.format(points))
    tol = _tolerance(tol)
    pts = [rn.normalize(_point3(p)) for p in points]
    rows = [rn.normalize(veronese(p)) for p in pts]
    null, svals = _null_vector(rows)
    nullity = 6 - sum(1 for s in svals if s > tol)
    logger.debug('conic fit: singular values %s, nullity %d', svals, nullity)

    double_line = None
    coefficients = rn.normalize(null)
    if nullity == 1:
        rank = rank_of_q(_array_to_q(*coefficients), tol)
        if rank not in (2, 3):
            raise ValueError('Invalid rank for conic with one null space vector: {}'.format(rank))
    elif nullity == 2:
        rank = 2
    elif nullity == 3:
        rank = 1
        line, _ = _null_vector(pts)
        double_line = tuple(line)
        coefficients = convert_q_to_array(get_q_from_factors(line, line))
    else:
        raise ValueError('bad point list, null space of dimension {} does not determine a conic'
                         .format(nullity))
    return ConicFit(tuple(coefficients), nullity, tuple(svals), rank, double_line)


def _translation_to(point) -> List[float]:
    """3x3 elliptic isometry taking [0, 0, 1] to ``point``."""
    target = pn.normalize([point[0], point[1], 0.0, point[2]], pn.ELLIPTIC)
    m = p3.make_translation_matrix(target, pn.ELLIPTIC)
    return [m[i] for i in _REDUCE_44_TO_33]


def factor_pair(q) -> Optional[List[List[float]]]:
    """Factor a degenerate ``Q`` into two lines.

    The double point of the pair (the null vector of ``Q``) is moved to
    [0, 0, 1]; there the conic is a binary quadratic form
    ``q0 x^2 + 2 q1 xy + q4 y^2`` whose roots give the two lines through
    the origin, which are carried back.  Returns None when the lines are
    complex conjugates.
    """
    dcp, _ = _null_vector([q[0:3], q[3:6], q[6:9]])
    t = _translation_to(dcp)
    qt = rn.times_matrix(rn.transpose(t), rn.times_matrix(q, t))
    q0, q1, q4 = qt[0], qt[1], qt[4]
    scale = max(abs(q0), abs(q1), abs(q4))
    if scale == 0.0:
        logger.warning('factor_pair: conic vanishes identically')
        return None
    q0, q1, q4 = q0 / scale, q1 / scale, q4 / scale

    if abs(q0) < rn.TOLERANCE:
        lines = [[0.0, 1.0, 0.0], [2 * q1, q4, 0.0]]
    else:
        ## the line [1, r, 0] is a factor when q0 r^2 - 2 q1 r + q4 = 0
        roots = solve_quadratic(q0, -2 * q1, q4, tol=rn.TOLERANCE)
        if roots is None:
            return None
        lines = [[1.0, r, 0.0] for r in roots]

    back = rn.transpose(rn.inverse(t))
    return [p2.normalize_line(rn.matrix_times_vector(back, line)) for line in lines]


def factor_double_line(q, points=None) -> Optional[List[float]]:
    """The line of a rank one ``Q``.

    Of the two (nearly equal) factors the one closest to passing through
    ``points`` is chosen when points are given.
    """
    lines = factor_pair(q)
    if lines is None:
        return None
    if not points:
        return lines[0]
    sums = [sum(abs(rn.inner_product(_point3(pt), line)) for pt in points) for line in lines]
    return lines[0] if sums[0] < sums[1] else lines[1]
