## a conic of the projective plane with a polyline rendering

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

"""Conic sections and their polyline approximations.

A :class:`ConicSection` is built from exactly one of five points, six
coefficients or a 3x3 matrix (the unit circle when none is given).  Every
change recomputes ``Q``, its normalized adjugate ``dQ``, the rank and, for
degenerate conics, the factor lines, and then rebuilds the curve.

Regular conics are drawn by rotating a line about a point ``P`` of the
conic: the second intersection of the line in direction ``V`` with the
conic is, in homogeneous coordinates, ``Q(V,V) P - 2 Q(V,P) V``.  This
traces the whole conic as the angle runs over ``[0, pi]``, and passes
through infinity exactly where ``V`` is an asymptotic direction.  The
angular samples are refined by midpoint subdivision until the curve
deviates from its chords by less than ``max_pixel_error``.
"""

import math

from projgeom import conic
from projgeom import meshdata
from projgeom import p2
from projgeom import pn
from projgeom import rn
from projgeom.config import get_setting
from projgeom.log import get_logger
from projgeom.point_range import PointRangeFactory
from projgeom.quadratic import solve_quadratic
from projgeom.sylvester import SylvesterDecomposition

logger = get_logger(__name__)

DEFAULT_COEFFICIENTS = (1.0, 0.0, 1.0, 0.0, 0.0, -1.0)

## rays cast from the viewport center when looking for a point on the conic
_NUM_RAYS = 16
## deepest midpoint subdivision of one angular sample interval
_MAX_DEPTH = 16


def choose_continuity(new, old):
    """Return ``new`` or ``-new``, whichever is closer to ``old``."""
    if old is None or len(old) != len(new):
        return list(new)
    if rn.euclidean_norm(rn.subtract(new, old)) > rn.euclidean_norm(rn.add(new, old)):
        return rn.negate(new)
    return list(new)


class ConicSection:
    """Conic from five points, six coefficients or a quadratic form."""

    def __init__(self, points=None, coefficients=None, q=None):
        given = [x is not None for x in (points, coefficients, q)]
        if sum(given) > 1:
            raise ValueError('bad conic input, give only one of points, coefficients or Q')
        self.num_points = get_setting("num_points")
        self.degen_conic_tolerance = get_setting("degen_conic_tolerance")
        self.max_pixel_error = get_setting("max_pixel_error")
        self.max_curve_points = get_setting("max_curve_points")
        self.viewport_expansion = get_setting("viewport_expansion")
        self.viewport = None

        self.coefficients = None
        self.dcoefficients = None
        self.q = None
        self.dq = None
        self.rank = 0
        self.fit = None
        self.five_points = None
        self.lines = None
        self.double_line = None
        self.curve = None
        self._sylvester = None

        if points is not None:
            self.set_from_five_points(points)
        elif q is not None:
            self.set_from_q(q)
        else:
            self.set_from_coefficients(DEFAULT_COEFFICIENTS if coefficients is None
                                       else coefficients)

    def __repr__(self):
        return "ConicSection(coefficients={}, rank={})".format(self.coefficients, self.rank)

    ## construction

    def set_from_five_points(self, points):
        self.fit = conic.solve_conic_from_points_svd(points, self.degen_conic_tolerance)
        self.five_points = [list(p) for p in points]
        self.rank = self.fit.rank
        self.set_coefficients(self.fit.coefficients)
        self.update_geom_repn()

    def set_from_coefficients(self, coefficients):
        if len(coefficients) != 6:
            raise ValueError('bad conic coefficients, expected 6: {}'.format(coefficients))
        self.fit = None
        self.five_points = None
        self.rank = conic.rank_of_q(conic._array_to_q(*coefficients), self.degen_conic_tolerance)
        if self.rank == 0:
            raise ValueError('bad conic coefficients, all zero: {}'.format(coefficients))
        self.set_coefficients(coefficients)
        self.update_geom_repn()

    def set_from_q(self, q):
        if len(q) != 9:
            raise ValueError('bad conic matrix, expected 9 entries: {}'.format(q))
        sym = [0.5 * (q[3 * i + j] + q[3 * j + i]) for i in range(3) for j in range(3)]
        self.set_from_coefficients(conic.convert_q_to_array(sym))

    def set_coefficients(self, coefficients):
        coeffs = conic.normalize_coefficients(list(coefficients))
        self.coefficients = choose_continuity(coeffs, self.coefficients)
        self.q = conic.convert_array_to_q(self.coefficients)
        self._set_dual(conic.normalize_q(p2.cofactor(self.q)))
        self._sylvester = None
        logger.debug('conic Q %s, dQ %s', self.q, self.dq)

    def update_q(self, new_q):
        self.q = list(new_q)
        self.coefficients = conic.convert_q_to_array(self.q)
        self._set_dual(p2.cofactor(self.q))
        self._sylvester = None

    ## the adjugate of a double line vanishes, so it has no dual coefficients
    def _set_dual(self, dq):
        self.dq = dq
        if self.rank <= 1 or rn.max_norm(dq) < rn.TOLERANCE:
            self.dcoefficients = None
        else:
            self.dcoefficients = conic.convert_q_to_array(dq)

    ## accessors

    def get_q(self):
        return list(self.q)

    def get_dq(self):
        return list(self.dq)

    def get_dual_coefficients(self):
        """Coefficients of the dual conic; None for a double line."""
        return None if self.dcoefficients is None else list(self.dcoefficients)

    def get_coefficients(self):
        return list(self.coefficients)

    def get_rank(self):
        return self.rank

    def get_type(self):
        return conic.CONIC_TYPES[self.rank]

    def get_lines(self):
        """Factor lines: two for a line pair, one for a double line."""
        if self.rank == 2:
            return None if self.lines is None else [list(l) for l in self.lines]
        if self.rank == 1:
            return [list(self.double_line)]
        return None

    def get_sylvester(self):
        if self._sylvester is None:
            self._sylvester = SylvesterDecomposition.from_quadratic_form_3x3(self.q)
        return self._sylvester

    def get_viewport(self):
        return self.viewport

    def set_viewport(self, viewport):
        """Set the drawing window ``(xmin, xmax, ymin, ymax)``, or None."""
        if viewport is not None:
            xmin, xmax, ymin, ymax = viewport
            if xmax <= xmin or ymax <= ymin:
                raise ValueError('bad viewport: {}'.format(viewport))
            viewport = (float(xmin), float(xmax), float(ymin), float(ymax))
        self.viewport = viewport
        self.update_geom_repn()

    def set_num_points(self, n):
        if n < 2:
            raise ValueError('bad number of points: {}'.format(n))
        self.num_points = n
        self.update_geom_repn()

    def set_max_pixel_error(self, err):
        self.max_pixel_error = err
        self.update_geom_repn()

    def get_indexed_line_set(self):
        return self.curve

    ## rendering

    def update_geom_repn(self):
        if self.rank == 1:
            dl = conic.factor_double_line(self.q, self.five_points)
            if dl is None:
                dl = self.get_sylvester().factor_rank1_double_line()
            self.double_line = dl
            self.update_q(conic.get_q_from_factors(dl, dl))
            self.curve = self._line_set(dl)
        elif self.rank == 2:
            self.lines = conic.factor_pair(self.q)
            if self.lines is None:
                logger.info('conic is a pair of complex lines meeting in %s',
                            self.get_sylvester().imaginary_rank2_intersection_point())
                self.curve = meshdata.IndexedLineSet((), ())
                return
            self.update_q(conic.get_q_from_factors(self.lines[0], self.lines[1]))
            self.curve = meshdata.merge_line_sets(self._line_set(self.lines[0]),
                                                  self._line_set(self.lines[1]))
        else:
            self.curve = self._draw_regular_conic()

    def _line_set(self, line):
        prf = PointRangeFactory()
        if self.viewport is not None:
            xmin, xmax, ymin, ymax = self.viewport
            prf.set_center([(xmin + xmax) / 2, (ymin + ymax) / 2, 0.0, 1.0])
            prf.set_sphere_radius(math.hypot(xmax - xmin, ymax - ymin))
        prf.set_2d_line(line)
        prf.update()
        ils = prf.get_indexed_line_set()
        return ils if ils is not None else meshdata.IndexedLineSet((), ())

    def _center(self):
        if self.viewport is None:
            return [0.0, 0.0, 1.0]
        xmin, xmax, ymin, ymax = self.viewport
        return [(xmin + xmax) / 2, (ymin + ymax) / 2, 1.0]

    def find_point_on_conic(self):
        """A real point of the conic near the viewport center, or None."""
        c = self._center()
        qcc = rn.bilinear_form(self.q, c, c)
        best = None
        best_dist = rn.MAX
        for k in range(_NUM_RAYS):
            theta = math.pi * k / _NUM_RAYS
            d = [math.cos(theta), math.sin(theta), 0.0]
            qcd = rn.bilinear_form(self.q, c, d)
            qdd = rn.bilinear_form(self.q, d, d)
            if abs(qdd) < rn.TOLERANCE:
                if abs(qcd) < rn.TOLERANCE:
                    continue
                roots = (-qcc / (2 * qcd),)
            else:
                roots = solve_quadratic(qdd, 2 * qcd, qcc)
                if roots is None:
                    continue
            for t in roots:
                p = rn.linear_combination(1.0, c, t, d)
                dist = pn.distance_between(c, p, pn.EUCLIDEAN)
                if dist < best_dist:
                    best_dist = dist
                    best = p
        if best is not None:
            return best
        syl = self.get_sylvester()
        if not syl.is_real_oval():
            logger.info('conic has no real points')
            return None
        return rn.matrix_times_vector(syl.get_p(), [1.0, 0.0, 1.0])

    def _point_for_angle(self, angle, point):
        v = [math.cos(angle), math.sin(angle), 0.0]
        a = rn.bilinear_form(self.q, v, v)
        b = 2 * rn.bilinear_form(self.q, v, point)
        if a == 0.0 and b == 0.0:
            return list(point)
        return rn.linear_combination(a, point, -b, v)

    def _expanded_viewport(self):
        if self.viewport is None:
            return None
        xmin, xmax, ymin, ymax = self.viewport
        dx = (xmax - xmin) * self.viewport_expansion
        dy = (ymax - ymin) * self.viewport_expansion
        return xmin - dx, xmax + dx, ymin - dy, ymax + dy

    def _draw_regular_conic(self):
        point = self.find_point_on_conic()
        if point is None:
            return meshdata.IndexedLineSet((), ())
        if self.viewport is None:
            tol = self.max_pixel_error
        else:
            xmin, xmax, ymin, ymax = self.viewport
            tol = self.max_pixel_error * max(xmax - xmin, ymax - ymin)
        box = self._expanded_viewport()

        ## homogeneous samples (angle, point); w is normalized to be >= 0
        ## only when breaking the curve, so sign changes mark infinity
        samples = []
        for i in range(self.num_points + 1):
            angle = math.pi * i / self.num_points
            samples.append((angle, self._point_for_angle(angle, point)))

        refined = [samples[0]]
        remaining = [self.max_curve_points - len(samples)]
        for (a0, x0), (a1, x1) in zip(samples, samples[1:]):
            self._subdivide(a0, x0, a1, x1, point, tol, box, 0, refined, remaining)
            refined.append((a1, x1))

        polylines = []
        current = []
        last_w = None
        for _, x in refined:
            w = x[2]
            if abs(w) < rn.TOLERANCE or (last_w is not None and w * last_w < 0):
                if len(current) > 1:
                    polylines.append(current)
                current = []
            if abs(w) >= rn.TOLERANCE:
                current.append([x[0] / w, x[1] / w, 0.0, 1.0])
            last_w = w
        if len(current) > 1:
            polylines.append(current)
        return meshdata.line_set_from_polylines(polylines)

    def _finite(self, x):
        return abs(x[2]) >= rn.TOLERANCE

    def _outside(self, p0, p1, box):
        if box is None:
            return False
        xmin, xmax, ymin, ymax = box
        return (max(p0[0], p1[0]) < xmin or min(p0[0], p1[0]) > xmax
                or max(p0[1], p1[1]) < ymin or min(p0[1], p1[1]) > ymax)

    def _subdivide(self, a0, x0, a1, x1, point, tol, box, depth, out, remaining):
        """Append the refinement points strictly between two samples to out.

        Each interval is halved at most _MAX_DEPTH times, and the whole
        curve stops refining once max_curve_points points are used up.
        """
        if depth >= _MAX_DEPTH or remaining[0] <= 0:
            return
        if not (self._finite(x0) and self._finite(x1)) or x0[2] * x1[2] < 0:
            return
        p0 = pn.dehomogenize(x0)
        p1 = pn.dehomogenize(x1)
        if self._outside(p0, p1, box):
            return
        am = 0.5 * (a0 + a1)
        xm = self._point_for_angle(am, point)
        if not self._finite(xm):
            return
        pm = pn.dehomogenize(xm)
        chord_mid = rn.times(0.5, rn.add(p0, p1))
        if rn.euclidean_distance(pm[:2], chord_mid[:2]) <= tol:
            return
        remaining[0] -= 1
        self._subdivide(a0, x0, am, xm, point, tol, box, depth + 1, out, remaining)
        out.append((am, xm))
        self._subdivide(am, xm, a1, x1, point, tol, box, depth + 1, out, remaining)

    def get_dual_curve(self):
        """Polar lines of the curve's vertices, as points [a, b, 0, c] of
        the dual plane joined like the curve."""
        if self.curve is None:
            return None
        verts = []
        for v in self.curve.vertices:
            line = p2.normalize_line(conic.polarize(self.q, [v[0], v[1], v[3]]))
            verts.append((line[0], line[1], 0.0, line[2]))
        return meshdata.IndexedLineSet(tuple(verts), self.curve.edges)
