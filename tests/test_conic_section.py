import math
import pytest
from projgeom import conic
from projgeom.conic_section import ConicSection, choose_continuity
## unit tests for projgeom conic_section.py

S = math.sqrt(0.5)


class TestConicSection:
    """building conics from points, coefficients and matrices"""

    def test_default_unit_circle(self):
        cs = ConicSection()
        assert cs.get_rank() == 3
        assert cs.get_type() == 'regular'
        assert cs.get_coefficients() == [1.0, 0.0, 1.0, 0.0, 0.0, -1.0]
        assert cs.get_sylvester().is_real_oval()
        assert cs.get_lines() is None

    def test_only_one_source(self):
        with pytest.raises(ValueError):
            ConicSection(points=[(1, 0), (0, 1), (-1, 0), (0, -1), (S, S)],
                         coefficients=[1, 0, 1, 0, 0, -1])

    def test_bad_coefficients(self):
        with pytest.raises(ValueError):
            ConicSection(coefficients=[1, 0, 1, 0, 0])
        with pytest.raises(ValueError):
            ConicSection(coefficients=[0, 0, 0, 0, 0, 0])
        with pytest.raises(ValueError):
            ConicSection(q=[1, 0, 0, 1])

    def test_from_points(self):
        cs = ConicSection(points=[(2, 0), (0, 1), (-2, 0), (0, -1), (math.sqrt(2), S)])
        assert cs.get_rank() == 3
        ## x^2/4 + y^2 = 1
        c = cs.get_coefficients()
        assert abs(c[2] / c[0] - 4.0) < 1e-9
        assert abs(c[5] / c[0] + 4.0) < 1e-9

    def test_from_q(self):
        cs = ConicSection(q=[1, 0, 0, 0, 1, 0, 0, 0, -4])
        assert cs.get_rank() == 3
        assert abs(conic.evaluate(cs.get_q(), (2, 0))) < 1e-12

    def test_dual(self):
        cs = ConicSection()
        assert conic.rank_of_q(cs.get_dq()) == 3
        ## the dual of the unit circle is the unit circle
        assert abs(conic.evaluate(cs.get_dq(), (1, 0))) < 1e-12
        dc = cs.get_dual_coefficients()
        assert dc is not None
        assert abs(dc[0] - dc[2]) < 1e-12
        assert abs(dc[0] + dc[5]) < 1e-12

    def test_choose_continuity(self):
        assert choose_continuity([1.0, 2.0], None) == [1.0, 2.0]
        assert choose_continuity([1.0, 2.0], [-1.0, -2.1]) == [-1.0, -2.0]
        assert choose_continuity([1.0, 2.0], [0.9, 2.0]) == [1.0, 2.0]

    def test_sign_follows_previous(self):
        cs = ConicSection()
        cs.set_from_coefficients([-1, 0, -1, 0, 0, 1])
        assert cs.get_coefficients() == [1.0, 0.0, 1.0, 0.0, 0.0, -1.0]


class TestConicCurves:
    """sampling conics into polylines"""

    def test_unit_circle_curve(self):
        curve = ConicSection().get_indexed_line_set()
        assert curve.num_edges() == 1
        assert curve.num_points() == 251
        for v in curve.vertices:
            assert abs(math.hypot(v[0], v[1]) - 1.0) < 1e-12
            assert v[3] == 1.0

    def test_refinement(self):
        cs = ConicSection()
        cs.set_num_points(10)
        curve = cs.get_indexed_line_set()
        assert curve.num_points() == 161
        for v in curve.vertices:
            assert abs(math.hypot(v[0], v[1]) - 1.0) < 1e-12
        with pytest.raises(ValueError):
            cs.set_num_points(1)

    def test_refinement_point_cap(self):
        cs = ConicSection()
        cs.max_curve_points = 20
        cs.set_num_points(10)
        curve = cs.get_indexed_line_set()
        assert curve.num_points() == 20
        for v in curve.vertices:
            assert abs(math.hypot(v[0], v[1]) - 1.0) < 1e-12
        ## no room left for refinement
        cs.max_curve_points = 5
        cs.update_geom_repn()
        assert cs.get_indexed_line_set().num_points() == 11

    def test_hyperbola_breaks_at_infinity(self):
        cs = ConicSection(coefficients=[0, 1, 0, 0, 0, -1])
        curve = cs.get_indexed_line_set()
        assert curve.num_edges() == 2
        for v in curve.vertices:
            assert abs(v[0] * v[1] - 1.0) < 1e-6

    def test_viewport(self):
        cs = ConicSection()
        cs.set_viewport((-2, 2, -2, 2))
        assert cs.get_viewport() == (-2.0, 2.0, -2.0, 2.0)
        assert cs.get_indexed_line_set().num_edges() == 1
        with pytest.raises(ValueError):
            cs.set_viewport((1, 0, 0, 1))
        cs.set_viewport(None)
        assert cs.get_viewport() is None

    def test_imaginary_conic(self):
        cs = ConicSection(coefficients=[1, 0, 1, 0, 0, 1])
        assert cs.get_rank() == 3
        assert cs.get_sylvester().is_imaginary()
        assert cs.find_point_on_conic() is None
        assert cs.get_indexed_line_set().num_points() == 0

    def test_line_pair(self):
        cs = ConicSection(coefficients=[1, 0, -1, 0, 0, 0])
        assert cs.get_rank() == 2
        assert cs.get_type() == 'line pair'
        assert len(cs.get_lines()) == 2
        curve = cs.get_indexed_line_set()
        assert curve.num_edges() == 2
        assert curve.num_points() == 24
        for v in curve.vertices:
            assert abs(abs(v[0]) - abs(v[1])) < 1e-9

    def test_complex_line_pair(self):
        cs = ConicSection(coefficients=[1, 0, 1, 0, 0, 0])
        assert cs.get_rank() == 2
        assert cs.get_lines() is None
        assert cs.get_indexed_line_set().num_points() == 0

    def test_double_line(self):
        cs = ConicSection(points=[(0, 0), (1, 1), (2, 2), (3, 3), (-1, -1)])
        assert cs.get_rank() == 1
        assert cs.get_type() == 'double line'
        assert cs.get_dual_coefficients() is None
        line = cs.get_lines()[0]
        assert abs(line[0] + line[1]) < 1e-4
        assert abs(line[2]) < 1e-4
        curve = cs.get_indexed_line_set()
        assert curve.num_edges() == 1
        for v in curve.vertices:
            assert abs(v[0] - v[1]) < 1e-3

    def test_double_line_from_coefficients(self):
        ## (x - y)^2
        cs = ConicSection(coefficients=[1, -2, 1, 0, 0, 0])
        assert cs.get_rank() == 1
        assert cs.get_type() == 'double line'
        ## the adjugate of a double line vanishes
        assert cs.get_dual_coefficients() is None
        line = cs.get_lines()[0]
        assert abs(line[0] + line[1]) < 1e-6
        assert abs(line[0]) > 0.1
        assert abs(line[2]) < 1e-6
        curve = cs.get_indexed_line_set()
        assert curve.num_edges() == 1
        for v in curve.vertices:
            assert abs(v[0] - v[1]) < 1e-5

    def test_dual_curve(self):
        cs = ConicSection()
        dual = cs.get_dual_curve()
        assert dual.num_points() == cs.get_indexed_line_set().num_points()
        assert dual.edges == cs.get_indexed_line_set().edges
        for a, b, _, c in dual.vertices:
            assert abs(a * a + b * b - c * c) < 1e-9
