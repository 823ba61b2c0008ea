## Sylvester normal form of a real symmetric 3x3 quadratic form

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

"""Sylvester decomposition of conic matrices.

For a real symmetric ``Q`` this module finds ``P`` and a diagonal ``D``
with entries in {+1, -1, 0} such that ``P^T Q P = D``.  The columns of
``P`` are eigenvectors of ``Q`` scaled by ``1/sqrt(|lambda|)`` and
permuted into a canonical order, so that the signature alone tells a real
oval from an imaginary conic, a real line pair from a complex conjugate
one, and a double line from the zero conic.

The eigenvectors come from a cyclic Jacobi iteration, which is exact
enough for the small, well-scaled matrices produced by
:mod:`projgeom.conic`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from projgeom.config import get_setting
from projgeom.log import get_logger

logger = get_logger(__name__)

__all__ = [
    "SylvesterDecomposition",
    "factor_real_rank2_line_pair",
    "imaginary_rank2_intersection_point",
    "factor_rank1_double_line",
]

_MAX_JACOBI_ITERATIONS = 50
_SINGULAR = 1e-14


def _to_flat_3x3(q) -> List[float]:
    if isinstance(q, (list, tuple)) and len(q) == 9 and not isinstance(q[0], (list, tuple)):
        return [float(x) for x in q]
    if (isinstance(q, (list, tuple)) and len(q) == 3
            and all(isinstance(r, (list, tuple)) and len(r) == 3 for r in q)):
        return [float(x) for row in q for x in row]
    raise ValueError('bad quadratic form, expected 3x3 matrix: {}'.format(q))


def _symmetrize(q: List[float]) -> List[float]:
    return [q[0], 0.5 * (q[1] + q[3]), 0.5 * (q[2] + q[6]),
            0.5 * (q[3] + q[1]), q[4], 0.5 * (q[5] + q[7]),
            0.5 * (q[6] + q[2]), 0.5 * (q[7] + q[5]), q[8]]


def _jacobi_eigen(a: List[float], eps: float) -> Tuple[List[float], List[float]]:
    """Eigenvalues and column eigenvectors of a symmetric 3x3 matrix."""
    a = list(a)
    v = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0]
    pairs = ((1, 2), (0, 2), (0, 1))
    for _ in range(_MAX_JACOBI_ITERATIONS):
        ## largest off-diagonal entry, indexed by the missing row
        off = (abs(a[5]), abs(a[2]), abs(a[1]))
        k = 0
        if off[1] > off[k]:
            k = 1
        if off[2] > off[k]:
            k = 2
        if off[k] <= eps:
            break
        p, q = pairs[k]
        app = a[3 * p + p]
        aqq = a[3 * q + q]
        apq = a[3 * p + q]

        tau = (aqq - app) / (2 * apq)
        if tau >= 0:
            t = 1 / (tau + math.sqrt(1 + tau * tau))
        else:
            t = -1 / (-tau + math.sqrt(1 + tau * tau))
        c = 1 / math.sqrt(1 + t * t)
        s = t * c

        for r in range(3):
            arp = a[3 * r + p]
            arq = a[3 * r + q]
            a[3 * r + p] = c * arp - s * arq
            a[3 * r + q] = s * arp + c * arq
        for r in range(3):
            apr = a[3 * p + r]
            aqr = a[3 * q + r]
            a[3 * p + r] = c * apr - s * aqr
            a[3 * q + r] = s * apr + c * aqr
        a[3 * p + q] = 0.0
        a[3 * q + p] = 0.0

        for r in range(3):
            vrp = v[3 * r + p]
            vrq = v[3 * r + q]
            v[3 * r + p] = c * vrp - s * vrq
            v[3 * r + q] = s * vrp + c * vrq
    else:
        logger.debug('jacobi iteration stopped after %d sweeps', _MAX_JACOBI_ITERATIONS)
    return [a[0], a[4], a[8]], v


def _canonical_permutation(signs: Sequence[int]) -> List[int]:
    pos = [i for i, s in enumerate(signs) if s > 0]
    neg = [i for i, s in enumerate(signs) if s < 0]
    zero = [i for i, s in enumerate(signs) if s == 0]
    if len(pos) == 2 and len(neg) == 1:
        return [pos[0], pos[1], neg[0]]
    if len(neg) == 2 and len(pos) == 1:
        return [neg[0], neg[1], pos[0]]
    if len(pos) == 2 and len(zero) == 1:
        return [pos[0], pos[1], zero[0]]
    if len(neg) == 2 and len(zero) == 1:
        return [neg[0], neg[1], zero[0]]
    if len(pos) == 1 and len(neg) == 1 and len(zero) == 1:
        return [pos[0], neg[0], zero[0]]
    if len(pos) == 1 and len(zero) == 2:
        return [zero[0], zero[1], pos[0]]
    if len(neg) == 1 and len(zero) == 2:
        return [zero[0], zero[1], neg[0]]
    return [0, 1, 2]


def _mat_vec(m, v):
    return [m[0] * v[0] + m[1] * v[1] + m[2] * v[2],
            m[3] * v[0] + m[4] * v[1] + m[5] * v[2],
            m[6] * v[0] + m[7] * v[1] + m[8] * v[2]]


def _transpose(m):
    return [m[0], m[3], m[6], m[1], m[4], m[7], m[2], m[5], m[8]]


def _inverse_3x3(m):
    a, b, c, d, e, f, g, h, i = m
    A = e * i - f * h
    B = -(d * i - f * g)
    C = d * h - e * g
    D = -(b * i - c * h)
    E = a * i - c * g
    F = -(a * h - b * g)
    G = b * f - c * e
    H = -(a * f - c * d)
    I = a * e - b * d
    det = a * A + b * B + c * C
    if abs(det) < _SINGULAR:
        raise ValueError('bad sylvester decomposition, P is singular: det = {}'.format(det))
    return [x / det for x in (A, D, G, B, E, H, C, F, I)]


## scale a line so its (a, b) part has unit length; lines with no finite
## direction are scaled to unit length overall
def _normalize_line(line):
    nxy = math.hypot(line[0], line[1])
    if nxy > _SINGULAR:
        return [x / nxy for x in line]
    n = math.hypot(line[0], line[1], line[2])
    if n > _SINGULAR:
        return [x / n for x in line]
    return list(line)


def _normalize_point(point):
    z = point[2]
    if abs(z) > _SINGULAR:
        return [point[0] / z, point[1] / z, 1.0]
    n = math.hypot(*point)
    if n > _SINGULAR:
        return [x / n for x in point]
    return list(point)


@dataclass(frozen=True)
class SylvesterDecomposition:
    """``P^T Q P = D`` for a symmetric 3x3 ``Q``; all matrices flat row-major."""

    p: Tuple[float, ...]
    d: Tuple[float, ...]
    eigenvalues: Tuple[float, ...]
    signs: Tuple[int, ...]
    inertia: Tuple[int, int, int]
    permutation: Tuple[int, ...]

    @classmethod
    def from_quadratic_form_3x3(cls, q, eps: Optional[float] = None) -> "SylvesterDecomposition":
        """Decompose ``q``, given flat (9 entries) or as 3 rows of 3.

        Eigenvalues with ``|lambda| <= eps`` count as zero.
        """
        if eps is None:
            eps = get_setting("sylvester_eps")
        sym = _symmetrize(_to_flat_3x3(q))
        values, vectors = _jacobi_eigen(sym, eps)

        signs = []
        cols = []
        for i in range(3):
            val = values[i]
            sign = 0
            if abs(val) > eps:
                sign = 1 if val > 0 else -1
            signs.append(sign)
            scale = 1.0 / math.sqrt(abs(val)) if abs(val) > eps else 1.0
            cols.append([scale * vectors[i], scale * vectors[3 + i], scale * vectors[6 + i]])

        perm = _canonical_permutation(signs)
        c0, c1, c2 = (cols[i] for i in perm)
        p = (c0[0], c1[0], c2[0],
             c0[1], c1[1], c2[1],
             c0[2], c1[2], c2[2])
        ordered = tuple(signs[i] for i in perm)
        d = (float(ordered[0]), 0.0, 0.0,
             0.0, float(ordered[1]), 0.0,
             0.0, 0.0, float(ordered[2]))
        inertia = (signs.count(1), signs.count(-1), signs.count(0))
        return cls(p, d, tuple(values[i] for i in perm), ordered, inertia, tuple(perm))

    def get_p(self) -> List[float]:
        return list(self.p)

    def get_d(self) -> List[float]:
        return list(self.d)

    def get_eigenvalues(self) -> List[float]:
        return list(self.eigenvalues)

    def get_signs(self) -> List[int]:
        return list(self.signs)

    ## (positive, negative, zero) counts
    def get_inertia(self) -> Tuple[int, int, int]:
        return self.inertia

    def get_permutation(self) -> List[int]:
        return list(self.permutation)

    def rank(self) -> int:
        return self.inertia[0] + self.inertia[1]

    def is_degenerate(self) -> bool:
        return self.rank() < 3

    def is_rank3(self) -> bool:
        return self.rank() == 3

    def is_rank2(self) -> bool:
        return self.rank() == 2

    def is_rank1(self) -> bool:
        return self.rank() == 1

    def is_real_oval(self) -> bool:
        pos, neg, _ = self.inertia
        return self.is_rank3() and (pos == 1 or neg == 1)

    def is_imaginary(self) -> bool:
        pos, neg, _ = self.inertia
        return self.is_rank3() and (pos == 3 or neg == 3)

    def is_rank2_imaginary(self) -> bool:
        pos, neg, _ = self.inertia
        return self.is_rank2() and (pos == 2 or neg == 2)

    def is_rank2_real(self) -> bool:
        pos, neg, _ = self.inertia
        return self.is_rank2() and pos == 1 and neg == 1

    def signature_string(self) -> str:
        return ''.join('+' if s > 0 else ('-' if s < 0 else '0') for s in self.signs)

    def to_dict(self) -> Dict[str, object]:
        pos, neg, zero = self.inertia
        return {
            "P": self.get_p(),
            "D": self.get_d(),
            "eigenvalues": self.get_eigenvalues(),
            "signs": self.get_signs(),
            "inertia": {"pos": pos, "neg": neg, "zero": zero},
            "permutation": self.get_permutation(),
        }

    def factor_real_rank2_line_pair(self) -> Optional[List[List[float]]]:
        """The two real lines of a ``+-0`` conic, or None for any other signature.

        In the canonical frame the lines are ``x = y`` and ``x = -y``; they
        are carried back with ``P^-T``.
        """
        if not self.is_rank2_real():
            return None
        pinv_t = _transpose(_inverse_3x3(self.p))
        return [_normalize_line(_mat_vec(pinv_t, [1.0, -1.0, 0.0])),
                _normalize_line(_mat_vec(pinv_t, [1.0, 1.0, 0.0]))]

    def imaginary_rank2_intersection_point(self) -> Optional[List[float]]:
        """The real point where two complex conjugate lines meet."""
        if not self.is_rank2_imaginary():
            return None
        return _normalize_point([self.p[2], self.p[5], self.p[8]])

    def factor_rank1_double_line(self) -> Optional[List[float]]:
        if not self.is_rank1():
            return None
        pinv_t = _transpose(_inverse_3x3(self.p))
        return _normalize_line(_mat_vec(pinv_t, [0.0, 0.0, 1.0]))


def factor_real_rank2_line_pair(q, eps=None):
    return SylvesterDecomposition.from_quadratic_form_3x3(q, eps).factor_real_rank2_line_pair()


def imaginary_rank2_intersection_point(q, eps=None):
    return SylvesterDecomposition.from_quadratic_form_3x3(q, eps).imaginary_rank2_intersection_point()


def factor_rank1_double_line(q, eps=None):
    return SylvesterDecomposition.from_quadratic_form_3x3(q, eps).factor_rank1_double_line()
