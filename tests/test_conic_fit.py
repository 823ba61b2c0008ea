import math
import pytest
from projgeom import conic, rn
## unit tests for projgeom conic.py

TOL = 1e-9

S = math.sqrt(0.5)
CIRCLE_POINTS = [(1, 0), (0, 1), (-1, 0), (0, -1), (S, S)]


def proportional(u, v, tol=TOL):
    """True if u = k*v for some nonzero k."""
    i = max(range(len(v)), key=lambda j: abs(v[j]))
    k = u[i] / v[i]
    return k != 0 and all(abs(a - k * b) < tol for a, b in zip(u, v))


class TestConicUtilities:
    """coefficient and matrix forms of conics"""

    def test_veronese(self):
        assert conic.veronese([2, 3]) == [4.0, 6.0, 9.0, 2.0, 3.0, 1.0]
        assert conic.veronese([1, 2, 0]) == [1.0, 2.0, 4.0, 0.0, 0.0, 0.0]
        with pytest.raises(ValueError):
            conic.veronese([1, 2, 3, 4])

    def test_q_and_array(self):
        coeffs = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        q = conic._array_to_q(*coeffs)
        assert q == [1.0, 1.0, 2.0, 1.0, 3.0, 2.5, 2.0, 2.5, 6.0]
        assert proportional(conic.convert_q_to_array(q), coeffs)
        assert abs(abs(rn.determinant(conic.convert_array_to_q(coeffs))) - 1.0) < TOL
        with pytest.raises(ValueError):
            conic.convert_array_to_q([1.0, 2.0])

    def test_normalize_coefficients(self):
        assert conic.normalize_coefficients([2.0, 0.0, -4.0, 0.0, 0.0, 1.0]) == \
            [0.5, 0.0, -1.0, 0.0, 0.0, 0.25]
        with pytest.raises(ValueError):
            conic.normalize_coefficients([0.0] * 6)

    def test_evaluate_and_polarize(self):
        q = conic._array_to_q(1.0, 0.0, 1.0, 0.0, 0.0, -1.0)
        assert conic.evaluate(q, (S, S)) == pytest.approx(0.0, abs=1e-12)
        assert conic.evaluate(q, (0, 0)) == -1.0
        ## polar of a circle point is its tangent
        assert conic.polarize(q, (1, 0)) == [1.0, 0.0, -1.0]

    def test_rank(self):
        assert conic.rank_of_q(rn.identity_matrix(3)) == 3
        assert conic.rank_of_q(conic.get_q_from_factors([1, 0, 0], [0, 1, 0])) == 2
        assert conic.rank_of_q(conic.get_q_from_factors([1, 1, 0], [1, 1, 0])) == 1
        assert conic.rank_of_q([0.0] * 9) == 0


class TestConicFit:
    """fitting conics through five points"""

    def test_circle(self):
        fit = conic.solve_conic_from_points_svd(CIRCLE_POINTS)
        assert fit.nullity == 1
        assert fit.rank == 3
        assert fit.conic_type == 'regular'
        assert proportional(list(fit.coefficients), [1.0, 0.0, 1.0, 0.0, 0.0, -1.0])

    def test_wrong_number_of_points(self):
        with pytest.raises(ValueError):
            conic.solve_conic_from_points_svd(CIRCLE_POINTS[:4])
        with pytest.raises(ValueError):
            conic.solve_conic_from_points_svd(None)

    def test_line_pair(self):
        pts = [(1, 0), (2, 0), (-1, 0), (0, 1), (0, 2)]
        fit = conic.solve_conic_from_points_svd(pts)
        assert fit.nullity == 1
        assert fit.rank == 2
        assert proportional(list(fit.coefficients), [0.0, 1.0, 0.0, 0.0, 0.0, 0.0])

    def test_four_collinear_points(self):
        pts = [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)]
        fit = conic.solve_conic_from_points_svd(pts)
        assert fit.nullity == 2
        assert fit.rank == 2
        q = conic._array_to_q(*fit.coefficients)
        for p in pts:
            assert abs(conic.evaluate(q, p)) < TOL

    def test_five_collinear_points(self):
        pts = [(0, 0), (1, 1), (2, 2), (3, 3), (-1, -1)]
        fit = conic.solve_conic_from_points_svd(pts)
        assert fit.nullity == 3
        assert fit.rank == 1
        assert fit.conic_type == 'double line'
        assert proportional(list(fit.double_line), [1.0, -1.0, 0.0])
        q = conic._array_to_q(*fit.coefficients)
        assert conic.rank_of_q(q) == 1
        for p in pts:
            assert abs(conic.evaluate(q, p)) < TOL


class TestFactoring:
    """splitting degenerate conics into lines"""

    def test_factor_pair(self):
        q = [1.0, 0.0, 0.0, 0.0, -1.0, 0.0, 0.0, 0.0, 0.0]
        lines = conic.factor_pair(q)
        assert len(lines) == 2
        found = sorted(round(l[1] / l[0]) for l in lines)
        assert found == [-1, 1]
        for l in lines:
            assert abs(l[2]) < TOL

    def test_factor_shifted_pair(self):
        ## (x - 1) * (y - 2)
        q = conic.get_q_from_factors([1, 0, -1], [0, 1, -2])
        lines = conic.factor_pair(q)
        assert any(proportional(l, [1.0, 0.0, -1.0], 1e-7) for l in lines)
        assert any(proportional(l, [0.0, 1.0, -2.0], 1e-7) for l in lines)

    def test_complex_pair(self):
        q = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
        assert conic.factor_pair(q) is None

    def test_factor_double_line(self):
        q = conic.get_q_from_factors([1, -1, 0], [1, -1, 0])
        line = conic.factor_double_line(q, [(1, 1), (2, 2)])
        assert proportional(line, [1.0, -1.0, 0.0], 1e-4)
