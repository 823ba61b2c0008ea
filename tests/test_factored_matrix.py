import math
import pytest
from projgeom import p3, pn, rn
from projgeom.factored_matrix import FactoredMatrix
from projgeom.matrix import Matrix
## unit tests for projgeom factored_matrix.py

TOL = 1e-9


def close(u, v, tol=TOL):
    return len(u) == len(v) and all(abs(a - b) < tol for a, b in zip(u, v))


class TestFactoredMatrix:
    """keeping a matrix and its factors in sync"""

    def test_default_is_identity(self):
        fm = FactoredMatrix()
        assert fm.get_array() == rn.identity_matrix(4)
        assert fm.get_translation() == [0.0, 0.0, 0.0, 1.0]
        assert fm.get_stretch() == [1.0, 1.0, 1.0, 1.0]
        assert fm.is_special()
        assert not fm.is_reflection()

    def test_bad_metric(self):
        with pytest.raises(ValueError):
            FactoredMatrix(5)

    def test_translation(self):
        fm = FactoredMatrix()
        fm.set_translation(1, 2, 3)
        m = fm.get_array()
        assert (m[3], m[7], m[11]) == (1.0, 2.0, 3.0)
        assert close(fm.multiply_vector([0, 0, 0, 1]), [1.0, 2.0, 3.0, 1.0])

    def test_euclidean_translation_needs_finite_point(self):
        fm = FactoredMatrix()
        with pytest.raises(ValueError):
            fm.set_translation_vector([1.0, 0.0, 0.0, 0.0])
        fm.set_translation_vector([1.0, 0.0, 0.0])
        assert close(fm.get_translation(), [1.0, 0.0, 0.0, 1.0])

    def test_rotation(self):
        fm = FactoredMatrix()
        fm.set_rotation(math.pi / 2, [0, 0, 1])
        assert close(fm.multiply_vector([1, 0, 0, 1]), [0.0, 1.0, 0.0, 1.0])
        assert abs(fm.get_rotation_angle() - math.pi / 2) < TOL
        assert close(fm.get_rotation_axis(), [0.0, 0.0, 1.0])
        assert close(fm.get_rotation().get_array(), p3.make_rotation_matrix_z(math.pi / 2))
        fm.set_rotation_angle(math.pi)
        assert close(fm.multiply_vector([1, 0, 0, 1]), [-1.0, 0.0, 0.0, 1.0])

    def test_decompose_recompose(self):
        fm = FactoredMatrix()
        fm.set_translation(1, 2, 3)
        fm.set_rotation(math.pi / 3, [1, 1, 0])
        fm.set_stretch_components(2, 3, 4)
        m = fm.get_array()

        other = FactoredMatrix(pn.EUCLIDEAN, m)
        assert close(other.get_translation(), [1.0, 2.0, 3.0, 1.0])
        assert close(other.get_stretch(), [2.0, 3.0, 4.0, 1.0])
        assert other.get_rotation_quaternion().equals_rotation(fm.get_rotation_quaternion(), TOL)
        assert not other.is_special()
        ## recompose from the factors found
        other.set_stretch_components(*other.get_stretch()[:3])
        assert close(other.get_array(), m)

    def test_noneuclidean_decompose_recompose(self):
        cases = [(pn.HYPERBOLIC, [0.3, 0.2, 0.0, 1.0]),
                 (pn.ELLIPTIC, [0.6, 0.0, 0.0, 0.8])]
        for metric, target in cases:
            fm = FactoredMatrix(metric)
            fm.set_translation_vector(target)
            fm.set_rotation(0.7, [0, 1, 1])
            m = fm.get_array()
            assert fm.is_special()

            other = FactoredMatrix(metric, m)
            assert close(other.get_array(), m)
            assert close(pn.normalize(other.get_translation(), metric),
                         pn.normalize(target, metric), 1e-7)
            assert close(other.get_stretch(), [1.0, 1.0, 1.0, 1.0], 1e-7)
            assert not other.is_reflection()
            assert other.get_rotation_quaternion().equals_rotation(
                fm.get_rotation_quaternion(), 1e-7)
            ## recompose from the factors found
            other.set_stretch_components(*other.get_stretch()[:3])
            assert close(other.get_array(), m, 1e-7)

    def test_center(self):
        fm = FactoredMatrix()
        fm.set_center([1, 0, 0])
        fm.set_rotation(math.pi, [0, 0, 1])
        assert fm.use_center()
        assert close(fm.multiply_vector([0, 0, 0, 1]), [2.0, 0.0, 0.0, 1.0])
        assert close(fm.multiply_vector([1, 0, 0, 1]), [1.0, 0.0, 0.0, 1.0])
        fm.set_center(None)
        assert fm.get_center() is None

    def test_center_keep_matrix(self):
        fm = FactoredMatrix()
        fm.set_rotation(math.pi / 2, [0, 0, 1])
        m = fm.get_array()
        fm.set_center([1, 0, 0], keep_matrix=True)
        assert close(fm.get_array(), m)
        ## factors are now taken relative to the center
        assert close(fm.get_translation(), [-1.0, 1.0, 0.0, 1.0])

    def test_set_entry_refactors(self):
        fm = FactoredMatrix()
        fm.set_entry(1, 3, 5.0)
        assert close(fm.get_translation(), [0.0, 5.0, 0.0, 1.0])
        fm.set_array(p3.make_stretch_matrix(2.0))
        assert close(fm.get_stretch(), [2.0, 2.0, 2.0, 1.0])
        assert close(fm.get_translation(), [0.0, 0.0, 0.0, 1.0])

    def test_reflection(self):
        fm = FactoredMatrix(pn.EUCLIDEAN, rn.diagonal_matrix([1.0, 1.0, -1.0, 1.0]))
        assert fm.is_reflection()
        ## without the flip only the half turn about z remains
        fm.set_is_reflection(False)
        assert not fm.is_reflection()
        assert close(fm.get_array(), rn.diagonal_matrix([-1.0, -1.0, 1.0, 1.0]))

    def test_inverse(self):
        fm = FactoredMatrix()
        fm.set_translation(1, 2, 3)
        fm.set_rotation(0.5, [0, 1, 0])
        inv = fm.get_inverse_factored()
        assert isinstance(inv, FactoredMatrix)
        assert close(rn.times_matrix(fm.get_array(), inv.get_array()), rn.identity_matrix(4))
        assert close(inv.get_translation(), rn.matrix_times_vector(inv.get_array(), [0, 0, 0, 1]))

    def test_elliptic(self):
        fm = FactoredMatrix(pn.ELLIPTIC)
        fm.set_translation_vector([0.6, 0.0, 0.0, 0.8])
        assert close(fm.multiply_vector([0, 0, 0, 1]), [0.6, 0.0, 0.0, 0.8])
        assert fm.is_special()
        copy = fm.copy()
        assert copy.get_metric() == pn.ELLIPTIC
        assert close(copy.get_array(), fm.get_array())

    def test_from_matrix(self):
        fm = FactoredMatrix.from_matrix(Matrix(p3.make_translation_matrix([0, 0, 4],
                                                                          pn.EUCLIDEAN)))
        assert close(fm.get_translation(), [0.0, 0.0, 4.0, 1.0])
