"""Tests for immutable points."""

import numpy as np
import pytest

from voro3d.point import Point


class TestPoint:
    """Coordinates, arithmetic and identity semantics."""

    def test_coordinates(self):
        p = Point(1, 2, 3)

        assert (p.x, p.y, p.z) == (1.0, 2.0, 3.0)
        assert list(p) == [1.0, 2.0, 3.0]
        assert p[1] == 2.0
        assert len(p) == 3

    def test_from_array(self):
        p = Point(np.array([4.0, 5.0, 6.0]))
        q = Point(p)

        np.testing.assert_array_equal(np.asarray(q), [4.0, 5.0, 6.0])
        assert q is not p

    def test_wrong_shape(self):
        with pytest.raises(ValueError):
            Point([1.0, 2.0])

    def test_read_only(self):
        p = Point(1, 2, 3)

        with pytest.raises(ValueError):
            p.xyz[0] = 10.0

        with pytest.raises(ValueError):
            np.asarray(p)[0] = 10.0

        # An explicit copy is writeable and detached.
        a = np.array(p)
        a[0] = 10.0
        assert p.x == 1.0

    def test_arithmetic(self):
        p = Point(1, 2, 3)
        q = Point(3, 2, 1)

        assert (p + q).isclose((4, 4, 4))
        assert (p - q).isclose((-2, 0, 2))
        assert (p + (1, 1, 1)).isclose((2, 3, 4))
        assert (2 * p).isclose((2, 4, 6))
        assert (p * 0.5).isclose((0.5, 1, 1.5))
        assert (-p).isclose((-1, -2, -3))
        assert isinstance(p + q, Point)

    def test_lerp(self):
        p = Point(0, 0, 0)
        q = Point(10, -10, 4)

        assert p.lerp(q, 0.5).isclose((5, -5, 2))
        assert p.lerp(q, 0.0).isclose(p)
        assert p.lerp(q, 1.0).isclose(q)
        assert p.lerp(q, 0.0) is not p

    def test_identity(self):
        p = Point(1, 2, 3)
        q = Point(1, 2, 3)

        assert p.isclose(q)
        assert p != q
        assert len({p: 0, q: 1}) == 2
        assert p == p
