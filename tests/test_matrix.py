import math
import pytest
from projgeom.matrix import Matrix
from projgeom import p3, pn
## unit tests for projgeom matrix.py

class TestMatrix:
    """unit tests for 4x4 matrix operations"""

    def test_matrix(self):
        foo = Matrix([1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16])
        fooT = foo.get_transpose()
        bar = Matrix([[1,0,0,1],[0,1,0,1],[0,0,1,1],[0,0,0,1]])
        baz = [1, 2, 3, 1]
        I = Matrix()
        a = 10.0
        assert(I.mul(bar).m == bar.m)
        assert(I.mul(foo).m == foo.m)
        assert(I.mul(fooT).m == fooT.mul(I).m)
        assert(I.mul(I).m == I.m)
        assert(foo.mul(bar).m == [1,2,3,10,5,6,7,26,9,10,11,42,13,14,15,58])
        assert(foo.mul(baz) == [18, 46, 74, 102])
        assert(foo.mul(a).m == [10.0,20.0,30.0,40.0,
                                50.0,60.0,70.0,80.0,
                                90.0,100.0,110.0,120.0,
                                130.0,140.0,150.0,160.0])
        assert(I.mul(baz) == baz)
        ## homogeneous coordinates test
        assert(foo.mul([1, 2, 3]) == pytest.approx([18.0/102.0, 46.0/102.0, 74.0/102.0]))

    def test_bad_init(self):
        with pytest.raises(ValueError):
            Matrix([1, 2, 3])
        with pytest.raises(ValueError):
            Matrix([[1, 2], [3, 4]])
        with pytest.raises(ValueError):
            Matrix([True] * 16)
        with pytest.raises(ValueError):
            Matrix().mul('x')

    def test_entries(self):
        m = Matrix()
        m.set_entry(0, 3, 5)
        assert m.get_entry(0, 3) == 5.0
        assert m.get_column(3) == [5.0, 0.0, 0.0, 1.0]
        assert m.get_row(0) == [1.0, 0.0, 0.0, 5.0]
        assert m.matrix_changed
        with pytest.raises(ValueError):
            m.set_entry(4, 0, 1.0)
        with pytest.raises(ValueError):
            m.get_entry(0, -1)
        with pytest.raises(ValueError):
            m.set_row(0, [1, 2, 3])

    def test_multiply_in_place(self):
        t = p3.make_translation_matrix([1, 2, 3], pn.EUCLIDEAN)
        m = Matrix()
        m.multiply_on_right(t)
        m.multiply_on_left(t)
        assert m.mul([0, 0, 0, 1]) == [2, 4, 6, 1]

    def test_inverse_and_determinant(self):
        m = Matrix(p3.make_rotation_matrix_z(0.3))
        assert m.mul(m.get_inverse()).equals(Matrix(), 1e-12)
        assert abs(m.get_determinant() - 1.0) < 1e-12
        assert m.is_special()
        assert not m.mul(2.0).is_special()
        assert m.get_trace() == pytest.approx(2.0 + 2.0 * math.cos(0.3))
