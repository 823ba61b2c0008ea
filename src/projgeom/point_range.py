## sampled point ranges along projective lines

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

"""Point ranges: the points of a projective line, sampled for drawing.

A :class:`PointRangeFactory` is given a line (two points on it, a Pluecker
line, or a line of the plane z = 0) and produces sample points along it.
In finite-sphere mode the line is cut with a Euclidean sphere and the
segment inside is sampled linearly; otherwise the whole projective line is
sampled with elliptic spacing, passing through its point at infinity.
"""

from projgeom import animation
from projgeom import line_utility
from projgeom import meshdata
from projgeom import pluecker
from projgeom import pn
from projgeom import rn
from projgeom.config import get_setting
from projgeom.log import get_logger
from projgeom.quadratic import solve_quadratic

logger = get_logger(__name__)


class Abstract1DExtentFactory:
    """Common state of factories that sample a one-dimensional extent."""

    dimension = 4

    def __init__(self):
        self.offset = 0
        self.num_segs = get_setting("num_segments")
        self.samples = None
        self.element0 = [0.0, 0.0, 0.0, 1.0]
        self.element1 = [1.0, 0.0, 0.0, 1.0]
        self.times = None

    def update(self):
        raise NotImplementedError

    def get_number_of_samples(self):
        return self.num_segs

    def set_number_of_samples(self, num_segs):
        self.num_segs = num_segs

    def get_offset(self):
        return self.offset

    def set_offset(self, offset):
        self.offset = offset

    def get_element0(self):
        return self.element0

    def set_element0(self, point):
        self.element0 = pn.homogenize(point) if len(point) == 3 else list(point)

    def get_element1(self):
        return self.element1

    def set_element1(self, point):
        self.element1 = pn.homogenize(point) if len(point) == 3 else list(point)

    def get_samples(self):
        return self.samples

    def set_times(self, times):
        self.times = times

    def get_value_at_time(self, t):
        return line_utility.value_at_time(t, self.element0, self.element1)


class PointRangeFactory(Abstract1DExtentFactory):

    def __init__(self):
        super().__init__()
        self.finite_sphere = True
        self.sphere_radius = get_setting("sphere_radius")
        self.doubled = True
        self.center = [0.0, 0.0, 0.0, 1.0]
        self.old_point = None
        self.pluecker_line = None
        self.cutpoints = None
        self.line = None

    def is_finite_sphere(self):
        return self.finite_sphere

    def set_finite_sphere(self, value):
        self.finite_sphere = bool(value)

    def get_sphere_radius(self):
        return self.sphere_radius

    def set_sphere_radius(self, radius):
        self.sphere_radius = radius

    def is_doubled(self):
        return self.doubled

    def set_doubled(self, value):
        self.doubled = bool(value)

    def get_center(self):
        return self.center

    def set_center(self, center):
        self.center = list(center)

    def get_old_point(self):
        return self.old_point

    def set_old_point(self, point):
        self.old_point = point

    def set_plucker_line(self, line):
        self.pluecker_line = list(line)
        p0, p1 = line_utility.two_points_on_line(line)
        self.set_element0(p0)
        self.set_element1(p1)

    ## the line a*x + b*y + c*w = 0 of the plane z = 0
    def set_2d_line(self, abc):
        self.set_plucker_line(line_utility.convert_2d_line_to_pluecker_line(abc))

    def get_plucker_line(self):
        if self.pluecker_line is not None:
            return list(self.pluecker_line)
        if self.element0 is None or self.element1 is None:
            return None
        return pluecker.line_from_points(self.element0, self.element1)

    def update(self):
        """Recompute the samples and the line set.

        A line that misses the sphere in finite mode leaves the previous
        samples in place and logs at info level.
        """
        if self.finite_sphere:
            cut = self.intersect_line_with_sphere(self.element0, self.element1,
                                                  self.old_point, self.sphere_radius)
            if cut is None:
                logger.info('point range: line lies outside sphere of radius %g',
                            self.sphere_radius)
                return
            self.cutpoints = cut
            if self.num_segs >= 2:
                samples = [None] * (self.offset + self.num_segs)
                for i in range(self.num_segs):
                    t = i / (self.num_segs - 1.0)
                    samples[self.offset + i] = animation.linear_interpolation(
                        None, t, 0.0, 1.0, cut[0], cut[1])
                self.samples = samples
        else:
            verts = line_utility.samples_on_1d_extent(self.offset, self.num_segs,
                                                      self.element0, self.element1, self.doubled)
            self.samples = [pn.dehomogenize(s) for s in verts]

        if self.samples and self.num_segs > 0:
            pts = [s for s in self.samples if s is not None]
            edge = tuple(range(len(pts)))
            if not self.finite_sphere:
                edge = edge + (0,)
            self.line = meshdata.IndexedLineSet(tuple(meshdata.to_vec4(p) for p in pts), (edge,))

    def get_indexed_line_set(self):
        return self.line

    def intersect_line_with_sphere(self, p0, p1, old_point=None, radius=None, center=None):
        """Cut the line through ``p0`` and ``p1`` with a sphere.

        Returns the two dehomogenized cut points, the one nearer to
        ``old_point`` first when it is given, or None when the line misses
        the sphere.
        """
        if radius is None:
            radius = self.sphere_radius
        if center is None:
            center = self.center
        ct = pn.dehomogenize(pn.homogenize(center) if len(center) == 3 else center)
        ct = ct[:3] + [0.0]

        p0 = pn.homogenize(p0) if len(p0) == 3 else list(p0)
        p1 = pn.homogenize(p1) if len(p1) == 3 else list(p1)
        if abs(p0[3]) < abs(p1[3]):
            p0, p1 = p1, p0
        p0 = pn.dehomogenize(p0)
        p1 = pn.dehomogenize(p1)
        v0 = p0
        if p0[3] == 0.0:
            v0, v = p1, p0
        elif p1[3] == 0.0:
            v = p1
        else:
            v = rn.subtract(p1, p0)
        v0 = rn.subtract(v0, ct)
        a = rn.inner_product_n(v, v, 3)
        if a == 0.0:
            return None
        b = 2 * rn.inner_product_n(v0, v, 3)
        c = rn.inner_product_n(v0, v0, 3) - radius * radius
        roots = solve_quadratic(a, b, c)
        if roots is None:
            return None
        result = [pn.dehomogenize(rn.add(rn.linear_combination(1.0, v0, r, v), ct))
                  for r in roots]
        if old_point is not None:
            d0 = pn.distance_between(result[0], old_point, pn.EUCLIDEAN)
            d1 = pn.distance_between(result[1], old_point, pn.EUCLIDEAN)
            if d0 > d1:
                result.reverse()
        return result


def line(pt0, pt1, num_segs=12):
    """Closed doubled sampling of the projective line through two points;
    plane points [x, y, w] are lifted to z = 0."""
    if len(pt0) == 3 or len(pt1) == 3:
        pt0 = [pt0[0], pt0[1], 0.0, pt0[2]]
        pt1 = [pt1[0], pt1[1], 0.0, pt1[2]]
    verts = line_utility.coordinates_for_1d_extent(0, num_segs, pt0, pt1)
    edge = tuple(range(len(verts))) + (0,)
    return meshdata.IndexedLineSet(tuple(meshdata.to_vec4(p) for p in verts), (edge,))
