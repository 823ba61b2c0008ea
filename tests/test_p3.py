import math
import pytest
from projgeom import p3, pn, rn
from projgeom.quaternion import (make_rotation_quaternion_angle,
                                 quaternion_to_rotation_matrix)
## unit tests for projgeom p3.py

TOL = 1e-10


def close(u, v, tol=TOL):
    return len(u) == len(v) and all(abs(a - b) < tol for a, b in zip(u, v))


class TestIncidence:
    """planes and points of projective 3-space"""

    def test_plane_from_points(self):
        pts = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
        plane = p3.plane_from_points(*pts)
        assert plane == [0, 0, -1, 0]
        for p in pts:
            assert rn.inner_product(plane, list(p) + [1]) == 0
        assert rn.inner_product(plane, [0, 0, 1, 1]) != 0

    def test_plane_from_points_needs_3d(self):
        with pytest.raises(ValueError):
            p3.plane_from_points((0, 0), (1, 0), (0, 1))

    def test_collinear(self):
        assert p3.are_collinear([0, 0, 0, 1], [1, 1, 1, 1], [2, 2, 2, 1], 1e-12)
        assert not p3.are_collinear([0, 0, 0, 1], [1, 0, 0, 1], [0, 1, 0, 1], 1e-12)

    def test_line_intersect_plane(self):
        p = p3.line_intersect_plane([0, 0, -1, 1], [0, 0, 1, 1], [0, 0, 1, 0])
        assert close(p, [0.0, 0.0, 0.0, 1.0])
        p = p3.line_intersect_plane([1, 2, -3, 1], [1, 2, 1, 1], [0, 0, 1, -2])
        assert close(p, [1.0, 2.0, 2.0, 1.0])


class TestIsometries:
    """rotations, translations and reflections"""

    def test_rotation_z(self):
        m = p3.make_rotation_matrix((0, 0, 1), math.pi / 2)
        assert close(rn.matrix_times_vector(m, [1, 0, 0, 0]), [0.0, 1.0, 0.0, 0.0])
        assert close(m, p3.make_rotation_matrix_z(math.pi / 2))
        assert abs(rn.determinant(m) - 1.0) < TOL

    def test_rotation_matches_quaternion(self):
        axis = (1.0, 2.0, -0.5)
        angle = 0.7
        m = p3.make_rotation_matrix(axis, angle)
        mq = quaternion_to_rotation_matrix(make_rotation_quaternion_angle(angle, axis))
        assert close(m, mq, 1e-12)

    def test_rotation_axis_matrix(self):
        m = p3.make_rotation_axis_matrix([1, 0, 0], [0, 0, 2])
        assert close(rn.matrix_times_vector(m, [1, 0, 0, 0]), [0.0, 0.0, 1.0, 0.0])
        ## opposite directions
        m = p3.make_rotation_axis_matrix([1, 0, 0], [-1, 0, 0])
        assert close(rn.matrix_times_vector(m, [1, 0, 0, 0]), [-1.0, 0.0, 0.0, 0.0])

    def test_euclidean_translation(self):
        m = p3.make_translation_matrix([1, 2, 3], pn.EUCLIDEAN)
        assert (m[3], m[7], m[11]) == (1, 2, 3)
        assert close(rn.matrix_times_vector(m, [0, 0, 0, 1]), [1.0, 2.0, 3.0, 1.0])

    def test_elliptic_translation(self):
        m = p3.make_translation_matrix([0.6, 0.0, 0.0, 0.8], pn.ELLIPTIC)
        assert close(rn.matrix_times_vector(m, [0, 0, 0, 1]), [0.6, 0.0, 0.0, 0.8])
        ## elliptic isometries are orthogonal
        assert close(rn.times_matrix(m, rn.transpose(m)), rn.identity_matrix(4))

    def test_hyperbolic_translation(self):
        target = [0.5, 0.0, 0.0, 1.0]
        before = list(target)
        m = p3.make_translation_matrix(target, pn.HYPERBOLIC)
        assert target == before
        image = rn.matrix_times_vector(m, [0, 0, 0, 1])
        assert close(pn.dehomogenize(image), target)
        ## the absolute is preserved
        q = list(p3.Q_HYPERBOLIC)
        mtqm = rn.times_matrix(rn.transpose(m), rn.times_matrix(q, m))
        assert close(mtqm, q)

    def test_reflection(self):
        m = p3.make_reflection_matrix([0, 0, 1, 0], pn.EUCLIDEAN)
        assert close(m, rn.diagonal_matrix([1.0, 1.0, -1.0, 1.0]))
        with pytest.raises(ValueError):
            p3.make_reflection_matrix([0, 0, 1], pn.EUCLIDEAN)


class TestFactoring:
    """factoring a matrix into translation, rotation and stretch"""

    def test_factor_and_compose(self):
        t = p3.make_translation_matrix([1, 2, 3], pn.EUCLIDEAN)
        r = p3.make_rotation_matrix((0, 1, 0), 0.4)
        s = rn.diagonal_matrix([2.0, 3.0, 4.0, 1.0])
        m = rn.times_matrix(t, rn.times_matrix(r, s))
        trans, rot_q, srot_q, stretch, flipped = p3.factor_matrix(m, pn.EUCLIDEAN)
        assert not flipped
        assert close(trans, [1.0, 2.0, 3.0, 1.0])
        assert close(stretch, [2.0, 3.0, 4.0, 1.0], 1e-9)
        assert abs(rot_q.rotation_angle() - 0.4) < 1e-9
        again = p3.compose_matrix_from_factors(trans, rot_q, srot_q, stretch, flipped,
                                               pn.EUCLIDEAN)
        assert close(again, m, 1e-9)

    def test_factor_flipped(self):
        m = rn.diagonal_matrix([1.0, 1.0, -1.0, 1.0])
        trans, rot_q, srot_q, stretch, flipped = p3.factor_matrix(m, pn.EUCLIDEAN)
        assert flipped
        again = p3.compose_matrix_from_factors(trans, rot_q, srot_q, stretch, flipped,
                                               pn.EUCLIDEAN)
        assert close(again, m, 1e-9)
