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

""" Planes and half-spaces.

A :class:`Plane` is stored in implicit form, :math:`Ax + By + Cz + D = 0`
with unit normal :math:`(A, B, C)`. Classifications use the absolute
tolerance :data:`EPS` unless a plane is given its own.
"""

import numpy as np

import voro3d.linalg as linalg

from voro3d.flags import Side
from voro3d.point import Point


EPS = 1e-3
""" Absolute tolerance of geometric predicates. """


class Plane:
    """ Oriented plane.

    Parameters
    ----------
    origin : Point or array_like
        A point on the plane.
    direction : array_like, shape (3, )
        Normal direction, not required to be of unit length. The positive
        half-space is the side `direction` points to.
    eps : float, optional
        Tolerance of side tests and of the parallel segment test.

    Raises
    ------
    ValueError
        If `direction` vanishes.
    """

    def __init__(self, origin, direction, *, eps=EPS):
        direction = np.asarray(direction, dtype=float)
        length = linalg.norm(direction)

        # Also catches nan entries.
        if not length > 0.0:
            raise ValueError('plane direction vector must not vanish')

        self._normal = direction / length
        self._normal.setflags(write=False)
        self._d = -linalg.dot(self._normal, np.asarray(origin, dtype=float))
        self._eps = eps

    def __repr__(self):
        a, b, c = self._normal
        return f'Plane({a:g}*x + {b:g}*y + {c:g}*z + {self._d:g} = 0)'

    @property
    def normal(self):
        """ Unit normal vector :math:`(A, B, C)`.

        :type: ~numpy.ndarray
        """
        return self._normal

    @property
    def offset(self):
        """ Constant term :math:`D`.

        :type: float
        """
        return float(self._d)

    def evaluate(self, p):
        """ Signed distance.

        Parameters
        ----------
        p : Point or array_like
            Point to evaluate.

        Returns
        -------
        float
            Signed distance of `p` from the plane.
        """
        return float(linalg.dot(self._normal, np.asarray(p)) + self._d)

    def side(self, p):
        """ Tri-state side test.

        Parameters
        ----------
        p : Point or array_like
            Point to classify.

        Returns
        -------
        Side
            :attr:`~Side.ON` if `p` is within `eps` of the plane,
            :attr:`~Side.ABOVE` or :attr:`~Side.BELOW` otherwise.
        """
        t = self.evaluate(p)

        if t < -self._eps:
            return Side.BELOW

        if t > self._eps:
            return Side.ABOVE

        return Side.ON

    def sides_of(self, points):
        """ Classify a set of points.

        Parameters
        ----------
        points : iterable of Point
            Points to classify.

        Returns
        -------
        dict
            Maps each point (by identity) to its :class:`Side`.
        """
        return {p: self.side(p) for p in points}

    def segment_intersection(self, v0, v1):
        """ Intersection with a line segment.

        Parameters
        ----------
        v0, v1 : Point
            Segment end points.

        Returns
        -------
        Point or None
            A **new** point on the segment, or :obj:`None` if the segment
            is (nearly) parallel to the plane or does not reach it.
        """
        p0 = np.asarray(v0)
        p1 = np.asarray(v1)

        denom = linalg.dot(self._normal, p0 - p1)

        if -self._eps < denom < self._eps:
            return None

        u = (linalg.dot(self._normal, p0) + self._d) / denom

        if u < 0.0 or u > 1.0:
            return None

        return Point(p0 + u * (p1 - p0))

    def edge_intersections(self, halfedges, sides=None):
        """ Intersections with mesh edges.

        Each undirected edge is visited once. Only edges whose end points
        lie strictly on opposite sides are intersected, an edge touching
        the plane with one of its end points keeps that end point as its
        on-plane vertex.

        Parameters
        ----------
        halfedges : iterable of Halfedge
            Paired halfedges. Halfedges without pair are skipped.
        sides : dict, optional
            Point classification as returned by :meth:`sides_of`. Computed
            on the fly if omitted.

        Returns
        -------
        dict
            Maps each crossing halfedge *and* its pair to the same
            intersection point.
        """
        side = self.side if sides is None else sides.__getitem__

        inters = dict()
        visited = set()

        for h in halfedges:
            if h.pair is None or h in visited:
                continue

            visited.add(h)
            visited.add(h.pair)

            v = h.origin
            w = h.target

            if side(v) * side(w) >= 0:
                continue

            p = self.segment_intersection(v, w)

            if p is not None:
                inters[h] = p
                inters[h.pair] = p

        return inters
