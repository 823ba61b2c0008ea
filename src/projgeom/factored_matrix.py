## a 4x4 transformation kept together with its geometric factors

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

"""Factored 4x4 transformations.

A :class:`FactoredMatrix` keeps a matrix ``M`` and its factors in sync::

    M = C * T * R * S * C^-1

where ``T`` is a translation, ``R`` a rotation (stored as a quaternion),
``S`` a diagonal stretch (negated when the matrix is a reflection) and
``C`` the translation to an optional center of rotation and scaling.
All factors are interpreted in the matrix's metric.

Setting a factor recomposes the matrix; setting the matrix decomposes it
into factors.  Two dirty flags select the direction of :meth:`update`.
"""

import math

from projgeom import p3
from projgeom import pn
from projgeom import rn
from projgeom.config import get_setting
from projgeom.matrix import Matrix
from projgeom.quaternion import (Quaternion, make_rotation_quaternion_angle,
                                 quaternion_to_rotation_matrix)


class FactoredMatrix(Matrix):
    """4x4 matrix with cached translation, rotation, stretch and center."""

    def __init__(self, metric=pn.EUCLIDEAN, matrix=None):
        self._metric = pn.check_metric(metric)
        self._translation = [0.0, 0.0, 0.0, 1.0]
        self._stretch = [1.0, 1.0, 1.0, 1.0]
        self._rotation_q = Quaternion(1.0, 0.0, 0.0, 0.0)
        self._stretch_rotation_q = Quaternion(1.0, 0.0, 0.0, 0.0)
        self._is_reflection = False
        self._is_special = True
        self._center = None
        self._center_matrix = None
        self._inv_center_matrix = None
        self.factor_has_changed = False
        self.matrix_has_changed = False
        super().__init__(matrix)
        self.matrix_has_changed = True
        self.update()

    @classmethod
    def from_matrix(cls, m, metric=pn.EUCLIDEAN):
        return cls(metric, m.get_array() if isinstance(m, Matrix) else list(m))

    def copy(self):
        fm = FactoredMatrix(self._metric, self.get_array())
        if self._center is not None:
            fm.set_center(self._center, keep_matrix=True)
        return fm

    ## matrix side

    def _matrix_changed(self):
        self.matrix_has_changed = True
        self.update()

    def get_array(self):
        if self.factor_has_changed:
            self.update()
        return list(self.m)

    def get_metric(self):
        return self._metric

    def set_metric(self, metric):
        self._metric = pn.check_metric(metric)
        self.factor_has_changed = True
        self.update()

    def assign_from(self, a):
        if isinstance(a, FactoredMatrix):
            self._metric = a.get_metric()
        super().assign_from(a)

    def update(self):
        """Bring matrix and factors back in sync.

        Changed factors win over a changed matrix.  Both dirty flags are
        clear afterwards.
        """
        if self.factor_has_changed:
            m = p3.compose_matrix_from_factors(
                self._translation, self._rotation_q, self._stretch_rotation_q,
                self._stretch, self._is_reflection, self._metric)
            if self._center is not None:
                m = rn.times_matrix(self._center_matrix,
                                    rn.times_matrix(m, self._inv_center_matrix))
            self.m = m
        elif self.matrix_has_changed or self.matrix_changed:
            m = self.m
            if self._center is not None:
                m = rn.times_matrix(self._inv_center_matrix,
                                    rn.times_matrix(m, self._center_matrix))
            (self._translation, self._rotation_q, self._stretch_rotation_q,
             self._stretch, self._is_reflection) = p3.factor_matrix(m, self._metric)
        self._is_special = rn.is_special_matrix(self.m, get_setting("is_special_tolerance"))
        self.factor_has_changed = False
        self.matrix_has_changed = self.reset_matrix_changed()

    def get_inverse_factored(self):
        return FactoredMatrix(self._metric, rn.inverse(self.get_array()))

    def is_special(self, tol=None):
        if tol is not None:
            return super().is_special(tol)
        return self._is_special

    ## reflection and center

    def is_reflection(self):
        return self._is_reflection

    def set_is_reflection(self, value):
        if value == self._is_reflection:
            return
        self._is_reflection = bool(value)
        self.factor_has_changed = True
        self.update()

    def use_center(self):
        return self._center is not None

    def get_center(self):
        return None if self._center is None else list(self._center)

    def set_center(self, point, keep_matrix=False):
        """Set the center of rotation and stretch, or clear it with None.

        With ``keep_matrix`` the matrix is kept and the factors are
        recomputed relative to the new center; otherwise the factors are
        kept and the matrix is recomposed.
        """
        if point is None:
            self._center = None
            self._center_matrix = None
            self._inv_center_matrix = None
            return
        center = [0.0, 0.0, 0.0, 1.0]
        n = min(len(point), 3)
        center[:n] = [float(x) for x in point[:n]]
        self._center = center
        self._center_matrix = p3.make_translation_matrix(center, self._metric)
        self._inv_center_matrix = rn.inverse(self._center_matrix)
        if keep_matrix:
            self.matrix_has_changed = True
            self.factor_has_changed = False
        else:
            self.matrix_has_changed = False
            self.factor_has_changed = True
        self.update()

    ## translation

    def set_translation(self, tx, ty, tz):
        self._translation = [float(tx), float(ty), float(tz), 1.0]
        self.factor_has_changed = True
        self.update()

    def set_translation_vector(self, v):
        if len(v) == 4 and self._metric == pn.EUCLIDEAN and v[3] == 0.0:
            raise ValueError('bad euclidean translation: {}'.format(v))
        n = min(len(v), 4)
        trans = list(p3.ORIGIN)
        trans[:n] = [float(x) for x in v[:n]]
        self._translation = trans
        self.factor_has_changed = True
        self.update()

    def get_translation(self):
        if self.matrix_has_changed or self.matrix_changed:
            self.update()
        return list(self._translation)

    ## rotation

    def set_rotation(self, angle, axis=None):
        if axis is None:
            axis = self.get_rotation_axis()
        self._rotation_q = make_rotation_quaternion_angle(angle, axis)
        self.factor_has_changed = True
        self.update()

    def set_rotation_angle(self, angle):
        self.set_rotation(angle, self.get_rotation_axis())

    def set_rotation_axis(self, axis):
        self.set_rotation(self.get_rotation_angle(), axis)

    def set_rotation_quaternion(self, q):
        self._rotation_q = q.normalize()
        self.factor_has_changed = True
        self.update()

    def get_rotation_quaternion(self):
        if self.matrix_has_changed or self.matrix_changed:
            self.update()
        return self._rotation_q.copy()

    def get_stretch_rotation_quaternion(self):
        return self._stretch_rotation_q.copy()

    def get_rotation_angle(self):
        return 2.0 * math.acos(min(1.0, abs(self._rotation_q.re)))

    def get_rotation_axis(self):
        return self._rotation_q.rotation_axis()

    def get_rotation(self):
        return Matrix(quaternion_to_rotation_matrix(self.get_rotation_quaternion()))

    ## stretch

    def set_stretch(self, stretch):
        self._stretch = [float(stretch)] * 3 + [1.0]
        self.factor_has_changed = True
        self.update()

    def set_stretch_components(self, sx, sy, sz):
        self._stretch = [float(sx), float(sy), float(sz), 1.0]
        self.factor_has_changed = True
        self.update()

    def set_stretch_vector(self, v):
        n = min(len(v), 3)
        self._stretch[:n] = [float(x) for x in v[:n]]
        if len(v) == 3:
            self._stretch[3] = 1.0
        self.factor_has_changed = True
        self.update()

    def get_stretch(self):
        if self.matrix_has_changed or self.matrix_changed:
            self.update()
        return list(self._stretch)

    def __str__(self):
        return 'metric={}\nrotation {} {}\ntranslation {}\nscale {}\n'.format(
            self._metric,
            rn.to_string(self.get_rotation_axis()),
            self.get_rotation_angle() / math.pi,
            rn.to_string(self.get_translation()),
            rn.to_string(self.get_stretch()))
