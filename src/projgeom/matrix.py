## 4x4 matrix object for homogeneous transformations of P3

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

from projgeom import rn

## A Matrix wraps a flat, row-major list of 16 numbers and acts on
## homogeneous column vectors.  The raw list is available through
## get_array(); all modifications go through the methods below so
## that subclasses can track when the matrix has been changed.

TOLERANCE = 1e-8


def _isgoodnum(x):
    return (not isinstance(x, bool)) and isinstance(x, (int, float))


class Matrix:
    """4x4 transformation matrix for homogeneous 3D coordinates"""

    def __init__(self, a=None):
        self.m = rn.identity_matrix(4)
        self.matrix_changed = False
        if a is not None:
            self.m = self._coerce(a)

    @staticmethod
    def _coerce(a):
        if isinstance(a, Matrix):
            return list(a.m)
        if isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
                vals = [x for row in a for x in row]
            elif len(a) == 16:
                vals = list(a)
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
            for x in vals:
                if not _isgoodnum(x):
                    raise ValueError('bad element in matrix initialization: {}'.format(x))
            return [float(x) for x in vals]
        raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({})".format(self.m)

    ## store new entries and record the change
    def _set_matrix(self, vals):
        self.m = vals
        self.matrix_changed = True
        self._matrix_changed()

    ## hook run after every modification through the matrix API
    def _matrix_changed(self):
        pass

    def reset_matrix_changed(self):
        self.matrix_changed = False
        return False

    def get_array(self):
        return list(self.m)

    def set_array(self, a):
        self._set_matrix(self._coerce(a))

    def assign_from(self, a):
        self._set_matrix(self._coerce(a))

    def assign_identity(self):
        self._set_matrix(rn.identity_matrix(4))

    #return value indexed by i,j
    def get_entry(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get_entry: {},{}'.format(i, j))
        return self.m[i * 4 + j]

    #set value indexed by i,j
    def set_entry(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set_entry: {},{}'.format(i, j))
        if not _isgoodnum(x):
            raise ValueError('bad value passed to set_entry: {}'.format(x))
        vals = list(self.m)
        vals[i * 4 + j] = float(x)
        self._set_matrix(vals)

    def get_row(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to get_row: {}'.format(i))
        return self.m[i * 4:i * 4 + 4]

    def get_column(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to get_column: {}'.format(j))
        return [self.m[j], self.m[4 + j], self.m[8 + j], self.m[12 + j]]

    def set_row(self, i, x):
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to set_row: {}'.format(i))
        if len(x) != 4:
            raise ValueError('bad non-vector passed to set_row: {}'.format(x))
        vals = list(self.m)
        vals[i * 4:i * 4 + 4] = [float(v) for v in x]
        self._set_matrix(vals)

    def set_column(self, j, x):
        if j < 0 or j > 3:
            raise ValueError('bad column index passed to set_column: {}'.format(j))
        if len(x) != 4:
            raise ValueError('bad non-vector passed to set_column: {}'.format(x))
        vals = list(self.m)
        for i in range(4):
            vals[i * 4 + j] = float(x[i])
        self._set_matrix(vals)

    # self = self * x
    def multiply_on_right(self, x):
        self._set_matrix(rn.times_matrix(self.get_array(), self._coerce(x)))

    # self = x * self
    def multiply_on_left(self, x):
        self._set_matrix(rn.times_matrix(self._coerce(x), self.get_array()))

    # self = c * self * c^-1
    def conjugate_by(self, c):
        self._set_matrix(rn.conjugate_by_matrix(self.get_array(), self._coerce(c)))

    def multiply_vector(self, v):
        return rn.matrix_times_vector(self.get_array(), v)

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # vector, compute Mx. If x is a scalar, compute xM.
    def mul(self, x):
        if isinstance(x, Matrix):
            return Matrix(rn.times_matrix(self.get_array(), x.get_array()))
        elif _isgoodnum(x):
            return Matrix(rn.times(x, self.get_array()))
        elif isinstance(x, (tuple, list)) and len(x) in (3, 4):
            return self.multiply_vector(x)
        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def get_inverse(self):
        return Matrix(rn.inverse(self.get_array()))

    def get_transpose(self):
        return Matrix(rn.transpose(self.get_array()))

    def get_determinant(self):
        return rn.determinant(self.get_array())

    def get_trace(self):
        return rn.trace(self.get_array())

    def is_special(self, tol=TOLERANCE):
        return rn.is_special_matrix(self.get_array(), tol)

    def equals(self, other, tol=TOLERANCE):
        return rn.equals(self.get_array(), self._coerce(other), tol)

    def __str__(self):
        return rn.matrix_to_string(self.get_array())
