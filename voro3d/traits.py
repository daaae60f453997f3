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

""" Geometric mesh traits.

Convenience functions to compute geometric properties of faces and closed
meshes.
"""

import numpy as np

import voro3d.linalg as linalg


def bounds(points):
    r""" Bounding box vertices.

    Corner vertices of the axis-aligned bounding box.

    Parameters
    ----------
    points : array_like, shape (n, k)
        Coordinates of :math:`n` points in :math:`\mathbb{R}^k`,
        one point per row.

    Returns
    -------
    a : ~numpy.ndarray
        Holds the minimum value for each dimension.
    b : ~numpy.ndarray
        Holds the maximum value for each dimension.
    """
    return np.min(points, axis=0), np.max(points, axis=0)


def _area_vector(face):
    """ Sum of cross products of consecutive vertices.

    For a planar polygon the result is normal to the polygon and its
    length is twice the polygon's area.
    """
    vector = np.zeros(3, dtype=float)

    for h in face._hiter():
        vector += linalg.cross(h.origin.xyz, h.target.xyz)

    return vector


def face_normal(face):
    """ Face normal.

    Parameters
    ----------
    face : Face
        A planar polygon.

    Returns
    -------
    ~numpy.ndarray, shape (3, )
        Unit normal vector, oriented by the face's vertex order (right hand
        rule).

    Note
    ----
    The normal of a degenerate face with vanishing area is not defined,
    its entries are nan.
    """
    vector = _area_vector(face)
    length = linalg.norm(vector)

    if length == 0.0:
        return np.full(3, np.nan)

    return vector / length


def face_area(face):
    """ Face area.

    Parameters
    ----------
    face : Face
        A planar, not necessarily triangular, polygon.

    Returns
    -------
    float
        Face area.
    """
    return 0.5 * linalg.norm(_area_vector(face))


def volume(mesh):
    """ Enclosed volume.

    Sum of signed volumes of the tetrahedra spanned by the origin and a
    fan triangulation of each face (divergence theorem).

    Parameters
    ----------
    mesh : Mesh
        Closed mesh with consistently oriented faces.

    Returns
    -------
    float
        Absolute enclosed volume. The sign of the raw sum only depends on
        the orientation of the faces.
    """
    total = 0.0

    for f in mesh:
        p = f.halfedge.origin.xyz

        for h in f._hiter():
            q = h.origin.xyz
            r = h.target.xyz
            total += linalg.dot(p, linalg.cross(q, r))

    return abs(total) / 6.0
