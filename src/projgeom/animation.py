## interpolation helpers for animating vectors and factored matrices

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

from projgeom import pn
from projgeom.factored_matrix import FactoredMatrix
from projgeom.quaternion import linear_interpolation as slerp

## Times outside [t0, t1] are clamped to the nearer end.


def get_standard_time(t, t0, t1):
    if t <= t0:
        return 0.0
    if t >= t1:
        return 1.0
    return (t - t0) / (t1 - t0)


def linear_interpolation_direct(v1, v2, t):
    return v1 + t * (v2 - v1)


## smoothstep weight, zero slope at both ends
def hermite_interpolation_direct(v1, v2, t):
    s = -2 * t * t * t + 3 * t * t
    return v1 + s * (v2 - v1)


def linear_interpolation_scalar(t, t0, t1, v0, v1):
    if t <= t0:
        return v0
    if t >= t1:
        return v1
    return linear_interpolation_direct(v0, v1, (t - t0) / (t1 - t0))


def hermite_interpolation_scalar(t, t0, t1, v0, v1):
    return hermite_interpolation_direct(v0, v1, get_standard_time(t, t0, t1))


def linear_interpolation(dst, t, t0, t1, v0, v1):
    """Componentwise interpolation of two vectors at time ``t``.

    Writes into ``dst`` when it is given and returns the result.
    """
    if len(v0) != len(v1):
        raise ValueError('bad vectors, lengths differ: {} and {}'.format(len(v0), len(v1)))
    alpha = get_standard_time(t, t0, t1)
    result = [linear_interpolation_direct(a, b, alpha) for a, b in zip(v0, v1)]
    if dst is None:
        return result
    dst[:] = result
    return dst


def linear_interpolation_factored_matrix(dst, t, t0, t1, m1, m2):
    """Interpolate two :class:`FactoredMatrix` objects factor by factor.

    Translation and stretch are interpolated linearly, rotation along the
    shortest great arc of unit quaternions.  Outside the open interval
    ``(t0, t1)`` the nearer endpoint matrix itself is returned; otherwise
    the result is written into ``dst``, created with ``m1``'s metric when
    None.
    """
    if t <= t0:
        return m1
    if t >= t1:
        return m2
    s = get_standard_time(t, t0, t1)
    if dst is None:
        dst = FactoredMatrix(m1.get_metric())

    tr1 = pn.dehomogenize(m1.get_translation())
    tr2 = pn.dehomogenize(m2.get_translation())
    dst.set_translation(*[linear_interpolation_direct(tr1[i], tr2[i], s) for i in range(3)])

    dst.set_rotation_quaternion(slerp(m1.get_rotation_quaternion(),
                                      m2.get_rotation_quaternion(), s))

    st1 = m1.get_stretch()
    st2 = m2.get_stretch()
    dst.set_stretch_components(*[linear_interpolation_direct(st1[i], st2[i], s) for i in range(3)])
    return dst
