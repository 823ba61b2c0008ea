import math
import pytest
from projgeom import rn
from projgeom.sylvester import (SylvesterDecomposition, factor_rank1_double_line,
                                factor_real_rank2_line_pair,
                                imaginary_rank2_intersection_point)
## unit tests for projgeom sylvester.py

TOL = 1e-9


def close(u, v, tol=TOL):
    return len(u) == len(v) and all(abs(a - b) < tol for a, b in zip(u, v))


def ptqp(sd, q):
    p = sd.get_p()
    return rn.times_matrix(rn.transpose(p), rn.times_matrix(q, p))


class TestSylvesterDecomposition:
    """classifying conics by the signature of their matrix"""

    def test_real_oval(self):
        q = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, -1.0]
        sd = SylvesterDecomposition.from_quadratic_form_3x3(q)
        assert sd.is_real_oval()
        assert not sd.is_imaginary()
        assert sd.rank() == 3
        assert sd.signature_string() == '++-'
        assert close(ptqp(sd, q), sd.get_d())

    def test_imaginary(self):
        sd = SylvesterDecomposition.from_quadratic_form_3x3(rn.identity_matrix(3))
        assert sd.is_imaginary()
        assert not sd.is_real_oval()
        assert sd.get_inertia() == (3, 0, 0)

    def test_rows_and_asymmetric_input(self):
        ## the antisymmetric part of the input is ignored
        q = [[2.0, 3.0, 0.0], [-1.0, 2.0, 0.0], [0.0, 0.0, -1.0]]
        sd = SylvesterDecomposition.from_quadratic_form_3x3(q)
        assert sd.signature_string() == '++-'
        sym = [2.0, 1.0, 0.0, 1.0, 2.0, 0.0, 0.0, 0.0, -1.0]
        assert close(ptqp(sd, sym), sd.get_d())
        assert sorted(sd.get_eigenvalues()) == pytest.approx([-1.0, 1.0, 3.0])

    def test_canonical_order(self):
        sd = SylvesterDecomposition.from_quadratic_form_3x3(
            [-1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, -1.0])
        assert sd.signature_string() == '--+'
        sd = SylvesterDecomposition.from_quadratic_form_3x3(
            [0.0, 0.0, 0.0, 0.0, -1.0, 0.0, 0.0, 0.0, 1.0])
        assert sd.signature_string() == '+-0'
        sd = SylvesterDecomposition.from_quadratic_form_3x3(
            [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -3.0])
        assert sd.signature_string() == '00-'

    def test_real_line_pair(self):
        q = [1.0, 0.0, 0.0, 0.0, -1.0, 0.0, 0.0, 0.0, 0.0]
        sd = SylvesterDecomposition.from_quadratic_form_3x3(q)
        assert sd.is_rank2_real()
        lines = sd.factor_real_rank2_line_pair()
        assert len(lines) == 2
        for line in lines:
            assert abs(line[2]) < TOL
            assert abs(abs(line[0]) - abs(line[1])) < TOL
            assert abs(math.hypot(line[0], line[1]) - 1.0) < TOL
        ## one line through (1, 1), the other through (1, -1)
        on = [[abs(rn.inner_product(line, [1.0, s, 5.0])) < TOL for s in (1.0, -1.0)]
              for line in lines]
        assert sorted(on) == [[False, True], [True, False]]
        assert sd.imaginary_rank2_intersection_point() is None
        assert sd.factor_rank1_double_line() is None

    def test_imaginary_line_pair(self):
        q = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
        sd = SylvesterDecomposition.from_quadratic_form_3x3(q)
        assert sd.is_rank2_imaginary()
        assert sd.signature_string() == '++0'
        assert close(sd.imaginary_rank2_intersection_point(), [0.0, 0.0, 1.0])
        assert sd.factor_real_rank2_line_pair() is None

    def test_double_line(self):
        q = [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 1.0]
        assert SylvesterDecomposition.from_quadratic_form_3x3(q).is_rank1()
        line = factor_rank1_double_line(q)
        assert close([abs(x) for x in line], [0.0, 0.0, 1.0])

    def test_module_functions(self):
        assert factor_real_rank2_line_pair(rn.identity_matrix(3)) is None
        assert imaginary_rank2_intersection_point(rn.identity_matrix(3)) is None

    def test_eps(self):
        q = [1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1e-6]
        assert SylvesterDecomposition.from_quadratic_form_3x3(q).rank() == 3
        assert SylvesterDecomposition.from_quadratic_form_3x3(q, 1e-4).rank() == 2

    def test_to_dict(self):
        d = SylvesterDecomposition.from_quadratic_form_3x3(rn.identity_matrix(3)).to_dict()
        assert d["inertia"] == {"pos": 3, "neg": 0, "zero": 0}
        assert len(d["P"]) == 9

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            SylvesterDecomposition.from_quadratic_form_3x3([1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            SylvesterDecomposition.from_quadratic_form_3x3([[1.0, 0.0], [0.0, 1.0]])
