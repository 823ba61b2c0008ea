import pytest
from projgeom import pluecker, pn, rn
## unit tests for projgeom pluecker.py

TOL = 1e-10


def close(u, v, tol=TOL):
    return len(u) == len(v) and all(abs(a - b) < tol for a, b in zip(u, v))


class TestPlueckerLines:
    """lines of projective 3-space in Pluecker coordinates"""

    def test_line_from_points(self):
        x_axis = pluecker.line_from_points([0, 0, 0, 1], [1, 0, 0, 1])
        assert x_axis == [0, 0, -1, 0, 0, 0]
        assert pluecker.direction_vector(x_axis) == [-1, 0, 0]
        assert pluecker.is_valid_line(x_axis)
        assert not pluecker.is_infinite(x_axis)

    def test_needs_homogeneous_points(self):
        with pytest.raises(ValueError):
            pluecker.line_from_points([0, 0, 0], [1, 0, 0])

    def test_inner_product_of_a_line_with_itself(self):
        line = pluecker.line_from_points([1, 2, 3, 1], [-1, 0, 2, 1])
        assert abs(pluecker.inner_product(line, line)) < TOL

    def test_intersection_point(self):
        l0 = pluecker.line_from_points([0, 0, 0, 1], [1, 1, 0, 1])
        l1 = pluecker.line_from_points([1, 1, 0, 1], [2, 0, 0, 1])
        p = pluecker.intersection_point(l0, l1)
        assert close(pn.dehomogenize(p), [1.0, 1.0, 0.0, 1.0])

    def test_skew_lines(self):
        x_axis = pluecker.line_from_points([0, 0, 0, 1], [1, 0, 0, 1])
        other = pluecker.line_from_points([0, 0, 1, 1], [0, 1, 1, 1])
        assert abs(pluecker.inner_product(x_axis, other)) > TOL
        with pytest.raises(ValueError):
            pluecker.intersection_point(x_axis, other)

    def test_coincident_lines(self):
        l0 = pluecker.line_from_points([0, 0, 0, 1], [1, 0, 0, 1])
        with pytest.raises(ValueError):
            pluecker.intersection_point(l0, l0)

    def test_normalize(self):
        line = pluecker.line_from_points([0, 0, 0, 1], [3, 4, 0, 1])
        n = pluecker.normalize(line)
        assert abs(rn.euclidean_norm(pluecker.direction_vector(n)) - 1.0) < TOL

    def test_cosine_between_lines(self):
        l0 = pluecker.line_from_points([0, 0, 0, 1], [1, 0, 0, 1])
        l1 = pluecker.line_from_points([0, 0, 0, 1], [0, 1, 0, 1])
        assert abs(pluecker.cosine_between_lines(l0, l1)) < TOL
        assert abs(abs(pluecker.cosine_between_lines(l0, l0)) - 1.0) < TOL

    def test_dualize_twice(self):
        line = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
        assert pluecker.dualize_line(pluecker.dualize_line(line)) == line
