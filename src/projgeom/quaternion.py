## quaternions for representing rotations of euclidean 3-space

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


class Quaternion:
    """quaternion re + x*i + y*j + z*k"""

    def __init__(self, re=1.0, x=0.0, y=0.0, z=0.0):
        self.re = float(re)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def __repr__(self):
        return "Quaternion({},{},{},{})".format(self.re, self.x, self.y, self.z)

    def set_value(self, re, x, y, z):
        self.re = float(re)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        return self

    def assign_from(self, q):
        return self.set_value(q.re, q.x, q.y, q.z)

    def copy(self):
        return Quaternion(self.re, self.x, self.y, self.z)

    ## [re, x, y, z]
    def as_list(self):
        return [self.re, self.x, self.y, self.z]

    def ijk(self):
        return [self.x, self.y, self.z]

    def add(self, q):
        return Quaternion(self.re + q.re, self.x + q.x, self.y + q.y, self.z + q.z)

    def subtract(self, q):
        return Quaternion(self.re - q.re, self.x - q.x, self.y - q.y, self.z - q.z)

    def negate(self):
        return Quaternion(-self.re, -self.x, -self.y, -self.z)

    def times_scalar(self, s):
        return Quaternion(s * self.re, s * self.x, s * self.y, s * self.z)

    # Hamilton product self*q
    def times(self, q):
        a = self
        b = q
        return Quaternion(
            a.re * b.re - a.x * b.x - a.y * b.y - a.z * b.z,
            a.re * b.x + b.re * a.x + a.y * b.z - a.z * b.y,
            a.re * b.y - a.x * b.z + b.re * a.y + a.z * b.x,
            a.re * b.z + a.x * b.y - a.y * b.x + b.re * a.z)

    def conjugate(self):
        return Quaternion(self.re, -self.x, -self.y, -self.z)

    def inner_product(self, q):
        return self.re * q.re + self.x * q.x + self.y * q.y + self.z * q.z

    def length_squared(self):
        return self.inner_product(self)

    def length(self):
        return math.sqrt(self.length_squared())

    def invert(self):
        ll = self.length_squared()
        if ll == 0.0:
            raise ValueError('cannot invert the zero quaternion')
        return self.conjugate().times_scalar(1.0 / ll)

    # self * q^-1
    def divide(self, q):
        return self.times(q.invert())

    def normalize(self):
        ll = self.length()
        if ll == 0.0:
            return self.copy()
        return self.times_scalar(1.0 / ll)

    def exp(self):
        v = math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)
        er = math.exp(self.re)
        if v == 0.0:
            return Quaternion(er, 0, 0, 0)
        f = er * math.sin(v) / v
        return Quaternion(er * math.cos(v), f * self.x, f * self.y, f * self.z)

    def equals(self, q, tol=1e-10):
        return rn.equals(self.as_list(), q.as_list(), tol)

    ## q and -q describe the same rotation
    def equals_rotation(self, q, tol=1e-10):
        return self.equals(q, tol) or self.equals(q.negate(), tol)

    ## angle of the rotation described by a unit quaternion
    def rotation_angle(self):
        return 2.0 * math.acos(max(-1.0, min(1.0, abs(self.re))))

    def rotation_axis(self):
        axis = self.ijk()
        if rn.euclidean_norm_squared(axis) == 0.0:
            return [1.0, 0.0, 0.0]
        if self.re < 0:
            axis = rn.negate(axis)
        return rn.normalize(axis)


## unit quaternion rotating by angle about axis
def make_rotation_quaternion_angle(angle, axis):
    if len(axis) < 3:
        raise ValueError('bad rotation axis: {}'.format(axis))
    n = rn.normalize(list(axis[:3]))
    c = math.cos(angle / 2.0)
    s = math.sin(angle / 2.0)
    return Quaternion(c, s * n[0], s * n[1], s * n[2]).normalize()


## shortest-arc spherical interpolation between two unit quaternions
def linear_interpolation(q1, q2, t):
    b = q2
    if q1.inner_product(q2) < 0:
        b = q2.negate()
    v = pn.linear_interpolation(q1.as_list(), b.as_list(), t, pn.ELLIPTIC)
    return Quaternion(*v).normalize()


def rotation_matrix_to_quaternion(m):
    """Unit quaternion of a 3x3 or 4x4 rotation matrix.

    Uses the trace when it is positive and otherwise the largest diagonal
    entry, so that small rotations keep full precision.
    """
    if len(m) == 16:
        m = rn.extract_submatrix(m, 0, 2, 0, 2)
    if len(m) != 9:
        raise ValueError('bad rotation matrix: {}'.format(m))
    tr = m[0] + m[4] + m[8]
    if tr > 0:
        s = math.sqrt(tr + 1.0) * 2
        q = Quaternion(0.25 * s, (m[7] - m[5]) / s, (m[2] - m[6]) / s, (m[3] - m[1]) / s)
    elif m[0] > m[4] and m[0] > m[8]:
        s = math.sqrt(1.0 + m[0] - m[4] - m[8]) * 2
        q = Quaternion((m[7] - m[5]) / s, 0.25 * s, (m[1] + m[3]) / s, (m[2] + m[6]) / s)
    elif m[4] > m[8]:
        s = math.sqrt(1.0 + m[4] - m[0] - m[8]) * 2
        q = Quaternion((m[2] - m[6]) / s, (m[1] + m[3]) / s, 0.25 * s, (m[5] + m[7]) / s)
    else:
        s = math.sqrt(1.0 + m[8] - m[0] - m[4]) * 2
        q = Quaternion((m[3] - m[1]) / s, (m[2] + m[6]) / s, (m[5] + m[7]) / s, 0.25 * s)
    return q.normalize()


## 4x4 rotation matrix of a unit quaternion
def quaternion_to_rotation_matrix(q, dst=None):
    w, x, y, z = q.re, q.x, q.y, q.z
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    m = [1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy), 0.0,
         2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx), 0.0,
         2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy), 0.0,
         0.0, 0.0, 0.0, 1.0]
    return rn._out(m, dst)


## extract the upper-left 3x3 block of a 4x4 matrix
def convert_44_to_33(m, dst=None):
    return rn._out([m[i] for i in (0, 1, 2, 4, 5, 6, 8, 9, 10)], dst)
