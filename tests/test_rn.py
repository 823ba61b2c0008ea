import pytest
from projgeom import rn
## unit tests for projgeom rn.py

TOL = 1e-10


def close(u, v, tol=TOL):
    return all(abs(a - b) < tol for a, b in zip(u, v)) and len(u) == len(v)


class TestVectors:
    """unit tests for vector operations on plain lists"""

    def test_add_subtract(self):
        u = [1.0, 2.0, 3.0]
        v = [4.0, 5.0, 6.0]
        assert rn.add(u, v) == [5.0, 7.0, 9.0]
        assert rn.subtract(v, u) == [3.0, 3.0, 3.0]
        assert rn.negate(u) == [-1.0, -2.0, -3.0]

    def test_dst_may_alias_input(self):
        """Results are written into dst, which may be one of the inputs."""
        v = [1.0, 2.0, 3.0]
        out = rn.add(v, v, v)
        assert out is v
        assert v == [2.0, 4.0, 6.0]

    def test_cross_and_inner_product(self):
        assert rn.cross_product([1.0, 0.0, 0.0], [0.0, 1.0, 0.0]) == [0.0, 0.0, 1.0]
        assert rn.inner_product([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]) == 32.0
        assert rn.inner_product_n([1.0, 2.0, 3.0], [4.0, 5.0, 6.0], 2) == 14.0

    def test_norms(self):
        v = [3.0, 4.0]
        assert rn.euclidean_norm(v) == 5.0
        assert rn.max_norm([1.0, -7.0, 2.0]) == 7.0
        assert close(rn.normalize(v), [0.6, 0.8])
        assert close(rn.set_euclidean_norm(v, 10.0), [6.0, 8.0])

    def test_equals_and_is_zero(self):
        assert rn.equals([1.0, 2.0], [1.0, 2.0 + 1e-12], 1e-10)
        assert not rn.equals([1.0, 2.0], [1.0, 2.1], 1e-10)
        assert rn.is_zero([0.0, 1e-12, 0.0])


class TestMatrices:
    """unit tests for flat row-major matrices"""

    def test_identity_and_transpose(self):
        m = [1.0, 2.0, 3.0, 4.0]
        assert rn.transpose(m) == [1.0, 3.0, 2.0, 4.0]
        assert rn.identity_matrix(2) == [1.0, 0.0, 0.0, 1.0]
        assert rn.trace(rn.identity_matrix(4)) == 4.0

    def test_times_matrix_size_mismatch(self):
        with pytest.raises(ValueError):
            rn.times_matrix(rn.identity_matrix(3), rn.identity_matrix(4))

    def test_determinant(self):
        assert rn.determinant(rn.diagonal_matrix([2.0, 3.0, 4.0, 1.0])) == 24.0
        assert abs(rn.determinant([1.0, 2.0, 3.0, 0.0, 1.0, 4.0, 5.0, 6.0, 0.0]) - 1.0) < TOL
        assert rn.determinant([1.0, 2.0, 2.0, 4.0]) == 0.0

    def test_inverse(self):
        m = [1.0, 2.0, 0.0, 0.0,
             3.0, 4.0, 0.0, 0.0,
             0.0, 0.0, 1.0, 0.0,
             0.0, 0.0, 0.0, 1.0]
        minv = rn.inverse(m)
        assert close(rn.times_matrix(m, minv), rn.identity_matrix(4), 1e-12)
        assert close(rn.inverse(rn.identity_matrix(4)), rn.identity_matrix(4))

    def test_singular_inverse_is_identity(self):
        assert rn.inverse([0.0] * 16) == rn.identity_matrix(4)

    def test_matrix_times_vector(self):
        m = rn.identity_matrix(4)
        m[3] = 1.0
        assert rn.matrix_times_vector(m, [1.0, 2.0, 3.0, 1.0]) == [2.0, 2.0, 3.0, 1.0]
        ## one coordinate short: treated as a point with weight 1
        assert rn.matrix_times_vector(m, [1.0, 2.0, 3.0]) == [2.0, 2.0, 3.0]
        with pytest.raises(ValueError):
            rn.matrix_times_vector(m, [1.0, 2.0])

    def test_conjugate_by_matrix(self):
        c = rn.diagonal_matrix([2.0, 1.0])
        m = [0.0, 1.0, 1.0, 0.0]
        ## c * m * c^-1
        assert close(rn.conjugate_by_matrix(m, c), [0.0, 2.0, 0.5, 0.0])

    def test_polar_decompose(self):
        m = rn.diagonal_matrix([2.0, 3.0, 4.0])
        q, s = rn.polar_decompose(m)
        assert close(q, rn.identity_matrix(3), 1e-9)
        assert close(s, m, 1e-9)

    def test_is_special(self):
        assert rn.is_special_matrix(rn.identity_matrix(4), 1e-8)
        assert not rn.is_special_matrix(rn.diagonal_matrix([2.0, 1.0, 1.0, 1.0]), 1e-8)

    def test_submatrix(self):
        m = [float(x) for x in range(9)]
        assert rn.submatrix(m, 0, 0) == [4.0, 5.0, 7.0, 8.0]
        assert rn.extract_submatrix(m, 0, 1, 1, 2) == [3.0, 4.0, 6.0, 7.0]
        with pytest.raises(ValueError):
            rn.extract_submatrix(m, 0, 1, 0, 2)
