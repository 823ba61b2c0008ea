## generic vector and square-matrix operations on flat lists

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
import random
import sys

from projgeom.log import get_logger

logger = get_logger(__name__)

## vectors are plain sequences of floats.  Matrices are flat row-major
## sequences of length n*n.  Every function that produces an array
## takes an optional dst list as its last argument: if dst is None a
## new list is returned, otherwise the result is copied into dst and
## dst is returned.  Results are always computed completely before dst
## is written, so dst may alias any of the inputs.

TOLERANCE = 1e-8

## largest float, returned as "infinity" for undefined angles and
## distances
MAX = sys.float_info.max


def _out(result, dst):
    if dst is None:
        return result
    dst[:] = result
    return dst


## return n for a matrix of length n*n, raising ValueError otherwise
def mysqrt(sq):
    if sq < 0:
        raise ValueError('bad matrix length: {}'.format(sq))
    n = math.isqrt(sq)
    if n * n != sq:
        raise ValueError('matrix length is not a perfect square: {}'.format(sq))
    return n


def _same_length(u, v, name):
    if len(u) != len(v):
        raise ValueError('bad vector lengths passed to {}: {} and {}'.format(
            name, len(u), len(v)))


## divide by the last coordinate unless it is (close to) zero
def dehomogenize(src, dst=None):
    factor = 1.0
    if abs(src[-1]) > 1e-10:
        factor = 1.0 / src[-1]
    return _out([factor * x for x in src], dst)


def set_to_value(dst, *values):
    if len(values) == 1:
        dst[:] = [values[0]] * len(dst)
        return dst
    if len(dst) != len(values):
        raise ValueError('bad length passed to set_to_value: {}'.format(len(dst)))
    dst[:] = list(values)
    return dst


def copy(src, dst=None):
    return _out(list(src), dst)


def abs_(src, dst=None):
    return _out([abs(x) for x in src], dst)


def add(u, v, dst=None):
    _same_length(u, v, 'add')
    return _out([a + b for a, b in zip(u, v)], dst)


def subtract(u, v, dst=None):
    _same_length(u, v, 'subtract')
    return _out([a - b for a, b in zip(u, v)], dst)


def negate(src, dst=None):
    return _out([-x for x in src], dst)


def times(factor, src, dst=None):
    return _out([factor * x for x in src], dst)


## dst = a*u + b*v
def linear_combination(a, u, b, v, dst=None):
    _same_length(u, v, 'linear_combination')
    return _out([a * x + b * y for x, y in zip(u, v)], dst)


def average(vlist, dst=None):
    if len(vlist) == 0:
        return None
    n = len(vlist[0])
    acc = [0.0] * n
    for v in vlist:
        if len(v) != n:
            raise ValueError('bad vector length passed to average: {}'.format(len(v)))
        for i in range(n):
            acc[i] += v[i]
    f = 1.0 / len(vlist)
    return _out([f * x for x in acc], dst)


def max_(u, v, dst=None):
    _same_length(u, v, 'max_')
    return _out([max(a, b) for a, b in zip(u, v)], dst)


def min_(u, v, dst=None):
    _same_length(u, v, 'min_')
    return _out([min(a, b) for a, b in zip(u, v)], dst)


def cross_product(u, v, dst=None):
    if len(u) < 3 or len(v) < 3:
        raise ValueError('vectors too short for cross product')
    return _out([u[1] * v[2] - u[2] * v[1],
                 u[2] * v[0] - u[0] * v[2],
                 u[0] * v[1] - u[1] * v[0]], dst)


## inner product; a length difference of exactly one is tolerated, in
## which case the shorter vector is treated as a dehomogenized point
## and only its entries are summed
def inner_product(u, v):
    n = min(len(u), len(v))
    if abs(len(u) - len(v)) > 1:
        raise ValueError('bad vector lengths passed to inner_product: {} and {}'.format(
            len(u), len(v)))
    return inner_product_n(u, v, n)


def inner_product_n(u, v, n):
    if len(u) < n or len(v) < n:
        raise ValueError('vectors shorter than {} passed to inner_product_n'.format(n))
    s = 0.0
    for i in range(n):
        s += u[i] * v[i]
    return s


def euclidean_norm_squared(v):
    return inner_product_n(v, v, len(v))


def euclidean_norm(v):
    return math.sqrt(euclidean_norm_squared(v))


def euclidean_distance_squared(u, v):
    return euclidean_norm_squared(subtract(u, v))


def euclidean_distance(u, v):
    return math.sqrt(euclidean_distance_squared(u, v))


def manhattan_norm(v):
    return sum(abs(x) for x in v)


def manhattan_norm_distance(u, v):
    return manhattan_norm(subtract(u, v))


def max_norm(v):
    return max(abs(x) for x in v)


def max_norm_distance(u, v):
    return max_norm(subtract(u, v))


## scale to unit euclidean length; the zero vector is returned unscaled
def normalize(src, dst=None):
    return set_euclidean_norm(src, 1.0, dst)


def set_euclidean_norm(src, length, dst=None):
    norm = euclidean_norm(src)
    if norm == 0.0:
        logger.warning('set_euclidean_norm: zero vector left unscaled')
        return _out(list(src), dst)
    return times(length / norm, src, dst)


## angle between two vectors, MAX if either is the zero vector
def euclidean_angle(u, v):
    _same_length(u, v, 'euclidean_angle')
    uu = inner_product(u, u)
    vv = inner_product(v, v)
    uv = inner_product(u, v)
    if uu == 0 or vv == 0:
        return MAX
    f = uv / math.sqrt(abs(uu * vv))
    f = max(-1.0, min(1.0, f))
    return math.acos(f)


def equals(u, v, tol=0.0):
    n = min(len(u), len(v))
    for i in range(n):
        d = u[i] - v[i]
        if d > tol or d < -tol:
            return False
    return True


def is_zero(v, tol=TOLERANCE):
    return all(abs(x) <= tol for x in v)


def is_nan(v):
    return any(math.isnan(x) for x in v)


## project src onto the line spanned by fixed
def project_onto(src, fixed, dst=None):
    d = inner_product(fixed, fixed)
    f = inner_product(fixed, src)
    return times(f / d, fixed, dst)


def project_onto_complement(src, fixed, dst=None):
    return subtract(src, project_onto(src, fixed), dst)


## plane with normal direction ds passing through the point ds2
def plane_parallel_to_passing_through(direction, point, dst=None):
    plane = [direction[0], direction[1], direction[2], 0.0]
    plane[3] = -inner_product_n(plane, point, 3)
    if len(point) > 3 and point[3] != 0.0:
        plane[3] /= point[3]
    return _out(plane, dst)


def bezier_combination(t, v0, t0, t1, v1, dst=None):
    tmp1 = 1 - t
    tmp2 = tmp1 * tmp1
    c0 = tmp2 * tmp1
    c1 = 3 * tmp2 * t
    c2 = 3 * tmp1 * t * t
    c3 = t * t * t
    return _out([c0 * a + c1 * b + c2 * c + c3 * d
                 for a, b, c, d in zip(v0, t0, t1, v1)], dst)


def bilinear_interpolation(u, v, vb, vt, cb, ct, dst=None):
    vv = linear_combination(1 - u, vb, u, vt)
    cc = linear_combination(1 - u, cb, u, ct)
    return linear_combination(1 - v, vv, v, cc, dst)


def barycentric_triangle_interp(corners, weights, dst=None):
    n = len(corners[0])
    acc = [0.0] * n
    for corner, w in zip(corners, weights):
        for i in range(n):
            acc[i] += w * corner[i]
    return _out(acc, dst)


## return [mins, maxs] over a list of vectors
def calculate_bounds(vlist):
    n = len(vlist[0])
    lo = [MAX] * n
    hi = [-MAX] * n
    for v in vlist:
        for i in range(n):
            lo[i] = min(lo[i], v[i])
            hi[i] = max(hi[i], v[i])
    return [lo, hi]


## matrices


def identity_matrix(n):
    m = [0.0] * (n * n)
    for i in range(n):
        m[i * n + i] = 1.0
    return m


def set_identity_matrix(m):
    m[:] = identity_matrix(mysqrt(len(m)))
    return m


def is_identity_matrix(m, tol=TOLERANCE):
    return equals(m, identity_matrix(mysqrt(len(m))), tol)


def diagonal_matrix(entries, dst=None):
    n = len(entries)
    m = identity_matrix(n)
    for i in range(n):
        m[i * n + i] = entries[i]
    return _out(m, dst)


## identity of dst's size with the leading diagonal replaced by diag
def set_diagonal_matrix(dst, diag):
    n = mysqrt(len(dst))
    if n < len(diag):
        raise ValueError('diagonal of length {} does not fit a {}x{} matrix'.format(
            len(diag), n, n))
    m = identity_matrix(n)
    for i in range(len(diag)):
        m[i * n + i] = diag[i]
    dst[:] = m
    return dst


def permutation_matrix(perm, dst=None):
    n = len(perm)
    m = [0.0] * (n * n)
    for i in range(n):
        m[i * n + perm[i]] = 1.0
    return transpose(m, dst)


def transpose(m, dst=None):
    n = mysqrt(len(m))
    return _out([m[j * n + i] for i in range(n) for j in range(n)], dst)


def trace(m):
    n = mysqrt(len(m))
    return sum(m[i * n + i] for i in range(n))


def times_matrix(a, b, dst=None):
    if len(a) != len(b):
        raise ValueError('bad matrix sizes passed to times_matrix: {} and {}'.format(
            len(a), len(b)))
    n = mysqrt(len(a))
    out = [0.0] * (n * n)
    for i in range(n):
        for j in range(n):
            s = 0.0
            for k in range(n):
                s += a[i * n + k] * b[k * n + j]
            out[i * n + j] = s
    return _out(out, dst)


## matrix times column vector.  A vector one shorter than the matrix
## size is treated as a point with weight 1 and the image is
## dehomogenized back to the length of the input.
def matrix_times_vector(m, v, dst=None):
    n = mysqrt(len(m))
    if len(v) == n:
        homog = False
        src = v
    elif len(v) + 1 == n:
        homog = True
        src = list(v) + [1.0]
    else:
        raise ValueError('bad vector length {} for {}x{} matrix'.format(len(v), n, n))
    out = [0.0] * n
    for i in range(n):
        s = 0.0
        for j in range(n):
            s += m[i * n + j] * src[j]
        out[i] = s
    if homog:
        out = dehomogenize(out)[:-1]
    return _out(out, dst)


def matrix_times_vector_array(m, vlist):
    return [matrix_times_vector(m, v) for v in vlist]


## value of the bilinear form u^T m v
def bilinear_form(m, u, v):
    return inner_product(matrix_times_vector(m, u), v)


def submatrix(m, row, column, dst=None):
    n = mysqrt(len(m))
    out = []
    for i in range(n):
        if i == row:
            continue
        for j in range(n):
            if j != column:
                out.append(m[i * n + j])
    return _out(out, dst)


## square block with columns l..r and rows t..b (inclusive)
def extract_submatrix(m, l, r, t, b, dst=None):
    if r - l != b - t:
        raise ValueError('(b-t) must equal (r-l)')
    n = mysqrt(len(m))
    out = [m[i * n + j] for i in range(t, b + 1) for j in range(l, r + 1)]
    return _out(out, dst)


def determinant(m):
    n = mysqrt(len(m))
    if n == 0:
        return 1.0
    if n == 1:
        return m[0]
    if n == 2:
        return m[0] * m[3] - m[2] * m[1]
    if n == 3:
        return (-(m[2] * m[4] * m[6]) + m[1] * m[5] * m[6] + m[2] * m[3] * m[7]
                - m[0] * m[5] * m[7] - m[1] * m[3] * m[8] + m[0] * m[4] * m[8])
    if n == 4:
        return (m[3] * m[6] * m[9] * m[12] - m[2] * m[7] * m[9] * m[12]
                - m[3] * m[5] * m[10] * m[12] + m[1] * m[7] * m[10] * m[12]
                + m[2] * m[5] * m[11] * m[12] - m[1] * m[6] * m[11] * m[12]
                - m[3] * m[6] * m[8] * m[13] + m[2] * m[7] * m[8] * m[13]
                + m[3] * m[4] * m[10] * m[13] - m[0] * m[7] * m[10] * m[13]
                - m[2] * m[4] * m[11] * m[13] + m[0] * m[6] * m[11] * m[13]
                + m[3] * m[5] * m[8] * m[14] - m[1] * m[7] * m[8] * m[14]
                - m[3] * m[4] * m[9] * m[14] + m[0] * m[7] * m[9] * m[14]
                + m[1] * m[4] * m[11] * m[14] - m[0] * m[5] * m[11] * m[14]
                - m[2] * m[5] * m[8] * m[15] + m[1] * m[6] * m[8] * m[15]
                + m[2] * m[4] * m[9] * m[15] - m[0] * m[6] * m[9] * m[15]
                - m[1] * m[4] * m[10] * m[15] + m[0] * m[5] * m[10] * m[15])
    ## Laplace expansion along the first row
    det = 0.0
    for i in range(n):
        tmp = m[i] * determinant(submatrix(m, 0, i))
        det += tmp if i % 2 == 0 else -tmp
    return det


## unsigned minor: determinant of m with row and column removed
def cofactor(m, row, column):
    return determinant(submatrix(m, row, column))


## matrix of signed cofactors, laid out like the input matrix
def adjugate(m, dst=None):
    n = mysqrt(len(m))
    out = [0.0] * (n * n)
    for i in range(n):
        for j in range(n):
            sign = -1.0 if (i + j) % 2 == 1 else 1.0
            out[i * n + j] = sign * cofactor(m, i, j)
    return _out(out, dst)


## Gauss-Jordan inversion with partial pivoting.  A zero pivot logs a
## warning and yields the identity matrix.
def inverse(m, dst=None):
    n = mysqrt(len(m))
    t = list(m)
    minv = identity_matrix(n)

    for i in range(n):
        largest = i
        largesq = t[n * i + i] * t[n * i + i]
        for j in range(i + 1, n):
            x = t[j * n + i] * t[j * n + i]
            if x > largesq:
                largest = j
                largesq = x
        if largest != i:
            for k in range(n):
                t[i * n + k], t[largest * n + k] = t[largest * n + k], t[i * n + k]
                minv[i * n + k], minv[largest * n + k] = minv[largest * n + k], minv[i * n + k]

        pivot = t[i * n + i]
        if pivot == 0.0:
            logger.warning('inverse: singular matrix, returning identity')
            return _out(identity_matrix(n), dst)
        for j in range(i + 1, n):
            f = t[j * n + i] / pivot
            if f == 0.0:
                continue
            for k in range(n):
                t[j * n + k] -= f * t[i * n + k]
                minv[j * n + k] -= f * minv[i * n + k]

    for i in range(n):
        f = 1.0 / t[i * n + i]
        for j in range(n):
            t[i * n + j] *= f
            minv[i * n + j] *= f

    for i in range(n - 1, -1, -1):
        for j in range(i - 1, -1, -1):
            f = t[j * n + i]
            for k in range(n):
                t[j * n + k] -= f * t[i * n + k]
                minv[j * n + k] -= f * minv[i * n + k]

    return _out(minv, dst)


## c * m * c^-1
def conjugate_by_matrix(m, c, dst=None):
    return times_matrix(c, times_matrix(m, inverse(c)), dst)


def is_special_matrix(m, tol):
    return abs(abs(determinant(m)) - 1) < tol


## polar decomposition m = q*s with q orthogonal and s symmetric,
## computed by averaging q with its inverse transpose.  Returns (q, s).
def polar_decompose(m):
    tol = 1e-11
    old = list(m)
    count = 0
    while True:
        qit = transpose(inverse(old))
        nw = times(0.5, add(old, qit))
        count += 1
        done = equals(nw, old, tol)
        old = nw
        if done or count >= 20:
            break
    q = old
    s = times_matrix(transpose(q), m)
    return q, s


## complete the rows of partial to a basis of R^n; each new row is the
## generalized cross product of the rows before it
def complete_basis(partial):
    dim = len(partial[0])
    size = len(partial)
    inline = [0.0] * (dim * dim)
    for i in range(size):
        for j in range(dim):
            inline[i * dim + j] = partial[i][j]
    for i in range(size, dim):
        for j in range(dim):
            inline[i * dim + j] = random.random()
    for i in range(size, dim):
        newrow = [(1 if (i + j) % 2 == 0 else -1) * determinant(submatrix(inline, i, j))
                  for j in range(dim)]
        for j in range(dim):
            inline[i * dim + j] = newrow[j]
    return [inline[i * dim:(i + 1) * dim] for i in range(dim)]


## formatting


def to_string(v, fmt='{:g}'):
    return '[' + ', '.join(fmt.format(x) for x in v) + ']'


def matrix_to_string(m, fmt='{:g}'):
    n = mysqrt(len(m))
    rows = []
    for i in range(n):
        rows.append('\t'.join(fmt.format(x) for x in m[i * n:(i + 1) * n]))
    return '\n'.join(rows) + '\n'
