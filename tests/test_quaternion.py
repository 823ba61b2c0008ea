import math
import pytest
from projgeom import p3, rn
from projgeom.quaternion import (Quaternion, linear_interpolation,
                                 make_rotation_quaternion_angle,
                                 quaternion_to_rotation_matrix,
                                 rotation_matrix_to_quaternion, convert_44_to_33)
## unit tests for projgeom quaternion.py


class TestQuaternion:
    """quaternion arithmetic"""

    def test_units(self):
        i = Quaternion(0, 1, 0, 0)
        j = Quaternion(0, 0, 1, 0)
        k = Quaternion(0, 0, 0, 1)
        assert i.times(j).equals(k)
        assert j.times(i).equals(k.negate())
        assert i.times(i).equals(Quaternion(-1, 0, 0, 0))

    def test_invert(self):
        q = Quaternion(1, 2, 3, 4)
        assert q.times(q.invert()).equals(Quaternion(1, 0, 0, 0))
        assert q.divide(q).equals(Quaternion(1, 0, 0, 0))

    def test_invert_zero(self):
        with pytest.raises(ValueError):
            Quaternion(0, 0, 0, 0).invert()

    def test_normalize(self):
        q = Quaternion(0, 3, 0, 4).normalize()
        assert abs(q.length() - 1.0) < 1e-12
        assert Quaternion(0, 0, 0, 0).normalize().as_list() == [0.0, 0.0, 0.0, 0.0]

    def test_exp(self):
        q = Quaternion(0, math.pi / 2, 0, 0).exp()
        assert q.equals(Quaternion(0, 1, 0, 0))


class TestRotations:
    """quaternions as rotations"""

    def test_angle_and_axis(self):
        q = make_rotation_quaternion_angle(math.pi / 3, [0, 0, 2])
        assert abs(q.rotation_angle() - math.pi / 3) < 1e-12
        assert rn.equals(q.rotation_axis(), [0.0, 0.0, 1.0], 1e-12)

    def test_sign_does_not_matter(self):
        q = make_rotation_quaternion_angle(1.0, [1, 1, 0])
        assert q.equals_rotation(q.negate())
        assert not q.equals(q.negate())

    def test_matrix_round_trip(self):
        q = make_rotation_quaternion_angle(2.5, [1, -2, 0.5])
        m = quaternion_to_rotation_matrix(q)
        assert rn.equals(m, p3.make_rotation_matrix([1, -2, 0.5], 2.5), 1e-12)
        assert rotation_matrix_to_quaternion(m).equals_rotation(q, 1e-10)
        assert rotation_matrix_to_quaternion(convert_44_to_33(m)).equals_rotation(q, 1e-10)

    def test_half_turn(self):
        m = p3.make_rotation_matrix([0, 0, 1], math.pi)
        q = rotation_matrix_to_quaternion(m)
        assert q.equals_rotation(Quaternion(0, 0, 0, 1), 1e-10)

    def test_bad_matrix(self):
        with pytest.raises(ValueError):
            rotation_matrix_to_quaternion([1.0, 0.0, 0.0, 1.0])

    def test_slerp(self):
        q0 = Quaternion(1, 0, 0, 0)
        q1 = make_rotation_quaternion_angle(math.pi / 2, [0, 0, 1])
        mid = linear_interpolation(q0, q1, 0.5)
        assert abs(mid.rotation_angle() - math.pi / 4) < 1e-12
        assert linear_interpolation(q0, q1, 0.0).equals(q0)
        assert linear_interpolation(q0, q1, 1.0).equals(q1)

    def test_slerp_takes_short_arc(self):
        q0 = Quaternion(1, 0, 0, 0)
        q1 = make_rotation_quaternion_angle(math.pi / 2, [0, 0, 1]).negate()
        mid = linear_interpolation(q0, q1, 0.5)
        assert abs(mid.rotation_angle() - math.pi / 4) < 1e-12
