## extended-precision real roots of quadratics

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

import mpmath as mpm

## Line/sphere cuts and line-pair factoring lose digits when the
## discriminant nearly cancels, so the roots are computed with mpmath
## at WORKING_DPS decimal digits and only converted back to floats at
## the end.
WORKING_DPS = 50


def discriminant(a, b, c):
    with mpm.workdps(WORKING_DPS):
        mpa = mpm.mpf(a)
        mpb = mpm.mpf(b)
        mpc = mpm.mpf(c)
        return mpb * mpb - 4 * mpa * mpc


def solve_quadratic(a, b, c, tol=0.0):
    """Real roots of ``a*t^2 + b*t + c = 0``.

    Returns ``(t0, t1)`` with ``t0 = (-b + sqrt(d)) / 2a`` and
    ``t1 = (-b - sqrt(d)) / 2a``, or None for complex roots.  A negative
    discriminant no smaller than ``-tol`` is treated as zero.  A vanishing
    leading coefficient raises ValueError.
    """
    with mpm.workdps(WORKING_DPS):
        mpa = mpm.mpf(a)
        if mpa == 0:
            raise ValueError('bad quadratic, leading coefficient is zero')
        mpb = mpm.mpf(b)
        d = discriminant(a, b, c)
        if d < 0:
            if -d > tol:
                return None
            d = mpm.mpf(0)
        s = mpm.sqrt(d)
        return float((-mpb + s) / (2 * mpa)), float((-mpb - s) / (2 * mpa))
