# Copyright 2024, m3shware
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS
# IN THE SOFTWARE.

""" Points in 3-space.

Coordinates of a :class:`Point` are stored in a read-only NumPy array. A
point is an immutable value, but mesh algorithms rely on its *identity*:
two points with equal coordinates are different mesh vertices unless they
are the very same object. For this reason :class:`Point` neither overrides
``__eq__`` nor ``__hash__``.
"""

import numpy as np


class Point:
    """ Immutable point in 3-space.

    Parameters
    ----------
    x : float or array_like
        First coordinate, or all three coordinates if `y` and `z` are
        omitted.
    y, z : float, optional
        Second and third coordinate.

    Raises
    ------
    ValueError
        If the coordinates do not form a vector of shape (3, ).


    Both of the following create points with identical coordinates

    >>> p = Point(1.0, 2.0, 3.0)
    >>> q = Point([1.0, 2.0, 3.0])

    but ``p is q`` is false and a mesh treats them as distinct vertices.
    """

    __slots__ = ('_xyz', )

    def __init__(self, x, y=None, z=None):
        if y is None and z is None:
            xyz = np.array(x, dtype=float)
        else:
            xyz = np.array((x, y, z), dtype=float)

        if xyz.shape != (3, ):
            msg = f'expected 3 coordinates, got array of shape {xyz.shape}'
            raise ValueError(msg)

        xyz.setflags(write=False)
        self._xyz = xyz

    def __repr__(self):
        return f'Point({self.x!r}, {self.y!r}, {self.z!r})'

    def __str__(self):
        return f'({self.x:g}, {self.y:g}, {self.z:g})'

    def __len__(self):
        return 3

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index):
        return float(self._xyz[index])

    def __array__(self, dtype=None, copy=None):
        """ NumPy support.

        Parameters
        ----------
        dtype : data-type, optional
            The desired data type for the array.
        copy : bool, optional
            If :obj:`True` a writeable copy is returned, otherwise the
            read-only coordinate array itself (or a converted copy if
            `dtype` requires it).

        Returns
        -------
        ~numpy.ndarray, shape (3, )
            Point coordinates.
        """
        if copy:
            return np.array(self._xyz, dtype=dtype)

        if dtype is None:
            return self._xyz

        return self._xyz.astype(dtype)

    def __add__(self, other):
        return Point(self._xyz + np.asarray(other, dtype=float))

    __radd__ = __add__

    def __sub__(self, other):
        return Point(self._xyz - np.asarray(other, dtype=float))

    def __rsub__(self, other):
        return Point(np.asarray(other, dtype=float) - self._xyz)

    def __mul__(self, scalar):
        return Point(self._xyz * float(scalar))

    __rmul__ = __mul__

    def __neg__(self):
        return Point(-self._xyz)

    @property
    def x(self):
        """ First coordinate.

        :type: float
        """
        return float(self._xyz[0])

    @property
    def y(self):
        """ Second coordinate.

        :type: float
        """
        return float(self._xyz[1])

    @property
    def z(self):
        """ Third coordinate.

        :type: float
        """
        return float(self._xyz[2])

    @property
    def xyz(self):
        """ Coordinate array (read-only).

        :type: ~numpy.ndarray
        """
        return self._xyz

    def lerp(self, other, t):
        """ Linear interpolation.

        Parameters
        ----------
        other : Point or array_like
            End point of the segment.
        t : float
            Segment parameter, ``0`` yields a copy of ``self`` and ``1``
            a copy of `other`.

        Returns
        -------
        Point
            A new point ``self + t * (other - self)``.
        """
        other = np.asarray(other, dtype=float)
        return Point(self._xyz + t * (other - self._xyz))

    def isclose(self, other, tol=1e-9):
        """ Coordinate comparison.

        Parameters
        ----------
        other : Point or array_like
            Point to compare with.
        tol : float, optional
            Absolute tolerance per coordinate.

        Returns
        -------
        bool
            :obj:`True` if all coordinates differ by at most `tol`.
        """
        delta = self._xyz - np.asarray(other, dtype=float)
        return bool(np.all(np.abs(delta) <= tol))
