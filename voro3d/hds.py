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

""" Halfedge data structure.

A closed, orientable 2-manifold polyhedral surface is described by three
containers managed by the :class:`Mesh` class:

    - a list of :class:`~voro3d.point.Point` objects,
    - a list of :class:`Halfedge` objects,
    - and a list of :class:`Face` objects.

Vertices are matched by **identity**. Two halfedges are paired if the
origin of one is the very same point object as the target of the other and
vice versa. Coordinates are never compared to decide adjacency.

Faces are never modified in place. Clipping a mesh by a plane creates new
halfedges and faces, see :meth:`Mesh.clipped`.

Note
----
To ease debugging, this module relies on assertions which can slow down
script execution. You can disable assertions by running in optimized mode
via the "-O" command line argument.
"""

import numpy as np

import voro3d.lattice as lattice
import voro3d.linalg as linalg

from voro3d.flags import FaceFlag
from voro3d.flags import Side
from voro3d.plane import EPS
from voro3d.plane import Plane
from voro3d.point import Point


class Mesh:
    """ Mesh kernel.

    Parameters
    ----------
    points : sequence of Point or array_like, optional
        Vertex coordinates. Items that are not :class:`Point` instances
        are converted.
    faces : sequence of sequence of int, optional
        Face definitions, 0-based vertex indexing.
    name : str, optional
        Name tag.

    Raises
    ------
    NonManifoldError
        When trying to initialize a mesh from non-manifold data.
    """

    def __init__(self, points=None, faces=None, *, name=None):
        """ Initialize from vertex and face lists.
        """
        if points is None and faces is not None:
            msg = "face definitions require 'points' argument != None"
            raise ValueError(msg)

        self._points = []
        self._halfs = []
        self._faces = []

        if points is not None:
            self.build_mesh(points, [] if faces is None else faces)

        self.name = name

    def __repr__(self):
        v, e, f = self.size
        return f'Mesh({self._name!r}, {v} vertices, {e} edges, {f} faces)'

    def __iter__(self):
        """ Face iterator.

        Yields
        ------
        Face
            Next face in insertion order traversal.
        """
        return iter(self._faces)

    def __bool__(self):
        return True

    @property
    def vertices(self):
        """ Vertex list.

        Read access to the vertex list. This list should not be modified
        directly.

        :type: list[Point]
        """
        return self._points

    @property
    def points(self):
        """ Vertex coordinate array.

        A fresh array, changing it does not affect the mesh.

        :type: ~numpy.ndarray, shape (n, 3)
        """
        return np.array([p.xyz for p in self._points],
                        dtype=float).reshape(-1, 3)

    @property
    def halfedges(self):
        """ Halfedge list.

        :type: list[Halfedge]
        """
        return self._halfs

    @property
    def faces(self):
        """ Face list.

        :type: list[Face]
        """
        return self._faces

    @property
    def size(self):
        """ Mesh size.

        The attribute value :math:`(v, e, f)` holds the number of vertices,
        the number of edges, and the number of faces.

        :type: (int, int, int)
        """
        return (len(self._points),
                len(self._halfs) // 2,
                len(self._faces))

    @property
    def closed(self):
        """ Topological state.

        A mesh is closed if every halfedge has a pair.

        :type: bool
        """
        return all(h._pair is not None for h in self._halfs)

    @property
    def name(self):
        """ Name property.

        :type: str or None
        """
        return self._name

    @name.setter
    def name(self, value):
        self._name = value

    def build_mesh(self, points, faces):
        """ Build halfedge representation.

        Creates one halfedge per (face, vertex) occurrence, links the
        halfedges of each face into a loop and pairs halfedges running in
        opposite directions along the same edge. Replaces the current
        contents of the mesh.

        Parameters
        ----------
        points : sequence of Point or array_like
            Shared vertex list.
        faces : sequence of sequence of int
            Face definitions, each an ordered list of indices into
            `points`.

        Raises
        ------
        NonManifoldError
            If two faces use an edge in the same direction.
        IndexError
            If the given vertex indices are out of bounds.
        ValueError
            If the given arguments do not define a valid face.
        """
        CWHITERED = '\33[41m'               # white on red background
        CEND = '\33[0m'

        points = [p if isinstance(p, Point) else Point(p) for p in points]
        halfs = []
        loops = []

        for face in faces:
            face = list(face)
            n = len(face)

            # All vertices have to be topologically different. If this test
            # is passed there still need to be at least three vertices.
            if len(set(face)) != n:
                raise ValueError('face contains duplicate vertices')

            if n < 3:
                raise ValueError('face has less than three vertices')

            for i in face:
                if not 0 <= i < len(points):
                    msg = f'vertex index {i} out of range(0, {len(points)})'
                    raise IndexError(msg)

            loop = [Halfedge(points[i]) for i in face]

            loops.append(Face(loop))
            halfs.extend(loop)

        _pair_halfedges(halfs)

        # Typically one does not expect isolated vertices in a mesh.
        used = {h._origin for h in halfs}

        if any(p not in used for p in points):
            print(f'{CWHITERED}there are isolated vertices{CEND}')

        self._points = points
        self._halfs = halfs
        self._faces = loops

    def split_mesh(self, plane, site):
        """ Clip mesh in-place.

        Keep the part of the mesh on the side of `plane` that contains
        `site`. See :meth:`clipped` for details.

        Parameters
        ----------
        plane : Plane
            Clipping plane.
        site : Point or array_like
            Reference point, determines the retained half-space.
        """
        mesh = self.clipped(plane, site)

        self._points = mesh._points
        self._halfs = mesh._halfs
        self._faces = mesh._faces

    def clipped(self, plane, site):
        """ Clip mesh.

        Faces are clipped to the half-space containing `site` and the hole
        left along the plane is closed by a new face flagged
        :attr:`~voro3d.flags.FaceFlag.CUT`. Nothing is clipped if `site`
        lies on the plane or if no vertex lies strictly on the other side.

        Parameters
        ----------
        plane : Plane
            Clipping plane.
        site : Point or array_like
            Reference point, determines the retained half-space.

        Raises
        ------
        NonManifoldError
            If the cut boundary does not form closed loops.

        Returns
        -------
        Mesh
            A new mesh. Retained vertices are shared with ``self``, this
            mesh itself is not modified.
        """
        mesh = Mesh(name=self._name)
        side = plane.side(site)

        clip = self._clip(plane, side) if side != Side.ON else None

        if clip is None:
            mesh._points = list(self._points)
            mesh._halfs = list(self._halfs)
            mesh._faces = list(self._faces)

            return mesh

        points, halfs, faces, unpaired = clip

        for cap in _close_loops(unpaired, len(halfs), FaceFlag.CUT):
            faces.append(cap)
            halfs.extend(cap._hiter())

        mesh._points = points
        mesh._halfs = halfs
        mesh._faces = faces

        return mesh

    def cross_section(self, origin, normal, *, eps=EPS):
        """ Planar cross-section.

        Parameters
        ----------
        origin : Point or array_like
            A point on the section plane.
        normal : array_like, shape (3, )
            Section plane normal.
        eps : float, optional
            Side test tolerance of the section plane. Mesh vertices within
            `eps` of the plane are on the plane.

        Returns
        -------
        Face or None
            The section polygon flagged
            :attr:`~voro3d.flags.FaceFlag.SECTION`, or :obj:`None` if the
            plane does not cut the mesh or `normal` vanishes.

        Note
        ----
        The mesh is not modified. Vertices of the returned face are either
        new intersection points or mesh vertices that lie on the plane.
        """
        normal = np.asarray(normal, dtype=float)

        # A vanishing normal puts origin + normal on the plane.
        if not linalg.norm(normal) > 0.0:
            return None

        plane = Plane(origin, normal, eps=eps)
        side = plane.side(Point(origin) + normal)

        if side == Side.ON:
            return None

        # A plane that only touches the mesh has no section.
        if all(plane.side(p) != side for p in self._points):
            return None

        clip = self._clip(plane, side)

        if clip is None:
            return None

        _, halfs, _, unpaired = clip

        if not unpaired:
            return None

        caps = _close_loops(unpaired, len(halfs), FaceFlag.SECTION)

        return caps[0] if caps else None

    def _clip(self, plane, side):
        """ Clip faces to a half-space.

        Parameters
        ----------
        plane : Plane
            Clipping plane.
        side : Side
            Retained side, not :attr:`~Side.ON`.

        Returns
        -------
        tuple or None
            Lists of retained points, new halfedges, new faces and the
            unpaired new halfedges along the cut. :obj:`None` if no vertex
            lies strictly on the discarded side.
        """
        assert side != Side.ON

        sides = plane.sides_of(self._points)

        # Nothing to remove.
        if all(s != -side for s in sides.values()):
            return None

        inters = plane.edge_intersections(self._halfs, sides)

        # Insertion ordered set of retained and newly created points.
        points = dict()
        halfs = []
        faces = []

        for f in self._faces:
            verts = f.vertices_of(side, sides, inters)

            # Faces reduced to an edge or a single vertex are gone.
            if len(verts) < 3:
                continue

            loop = [Halfedge(p) for p in verts]

            faces.append(Face(loop, flags=f._flags))
            halfs.extend(loop)
            points.update(dict.fromkeys(verts))

        unpaired = _pair_halfedges(halfs)

        return list(points), halfs, faces, unpaired

    def _check(self):
        """ Perform sanity checks.
        """
        points = set(self._points)
        halfs = set(self._halfs)

        assert len(halfs) == len(self._halfs)

        for f in self._faces:
            f._check()

            for h in f._hiter():
                assert h in halfs

        for h in self._halfs:
            h._check()

            assert h._origin in points
            assert h._face is not None


class Halfedge:
    """ Halfedge base class.

    Halfedges store references to their origin, the successor, and the
    twin halfedge as well as the incident face. A closed loop of halfedges
    defines a face and its orientation.

    Parameters
    ----------
    origin : Point
        Origin vertex of the halfedge.

    Note
    ----
    The target vertex is not stored. It is the origin of the successor
    and thus undefined until the halfedge becomes part of a face.
    """

    def __init__(self, origin):
        self._origin = origin

        self._next = None
        self._pair = None
        self._face = None

    def __repr__(self):
        return f'Halfedge({self._origin!r}, {self.target!r})'

    def __str__(self):
        return f'h ({self._origin}, {self.target})'

    def __bool__(self):
        return True

    def __iter__(self):
        """ Vertex iterator.

        Yields
        ------
        Point
            Origin and target vertex.
        """
        yield self._origin
        yield self.target

    @property
    def origin(self):
        """ Halfedge origin vertex.

        :type: Point
        """
        return self._origin

    @property
    def target(self):
        """ Halfedge target vertex.

        :type: Point or None
        """
        return self._next._origin if self._next is not None else None

    @property
    def next(self):
        """ Successor halfedge.

        :type: Halfedge or None
        """
        return self._next

    @property
    def pair(self):
        """ Opposite halfedge.

        Halfedge pointing in the opposite direction, :obj:`None` for an
        unpaired halfedge.

        :type: Halfedge or None
        """
        return self._pair

    @property
    def face(self):
        """ Incident face.

        :type: Face or None
        """
        return self._face

    @property
    def boundary(self):
        """ Topological state.

        A halfedge without pair is a boundary halfedge.

        :type: bool
        """
        return self._pair is None

    def _check(self):
        """ Perform sanity checks.
        """
        assert self._next is not None
        assert self._pair is not None

        assert self._pair._pair is self
        assert self._pair._origin is self.target
        assert self._pair.target is self._origin

        assert self._next._face is self._face


class Face:
    """ Face base class.

    A face is defined by the closed loop of halfedges starting at the
    :attr:`halfedge` attribute. The constructor links the given halfedges
    into this loop.

    Parameters
    ----------
    halfedges : sequence of Halfedge
        Halfedges in loop order, at least three.
    flags : FaceFlag, optional
        Initial face flags.

    Raises
    ------
    ValueError
        If fewer than three halfedges are given.
    """

    def __init__(self, halfedges, flags=None):
        halfedges = list(halfedges)
        n = len(halfedges)

        if n < 3:
            raise ValueError('face has less than three halfedges')

        for i, h in enumerate(halfedges):
            h._next = halfedges[(i + 1) % n]
            h._face = self

        self._halfedge = halfedges[0]
        self._valence = n
        self._flags = FaceFlag(0) if flags is None else flags

    def __repr__(self):
        return f'Face([{", ".join(str(p) for p in self)}])'

    def __len__(self):
        """ Face valence.

        Returns
        -------
        int
            Number of vertices.
        """
        return self._valence

    def __bool__(self):
        return True

    def __iter__(self):
        """ Vertex iterator.

        Yields
        ------
        Point
            Next vertex in loop order, starting at ``self.halfedge.origin``.
        """
        return (h._origin for h in self._hiter())

    def __array__(self, dtype=None, copy=None):
        """ NumPy support.

        Returns
        -------
        ~numpy.ndarray, shape (n, 3)
            Array of vertex coordinates.
        """
        return np.array([p.xyz for p in self], dtype=dtype)

    @property
    def halfedge(self):
        """ Incident halfedge.

        First halfedge of the face loop.

        :type: Halfedge
        """
        return self._halfedge

    @property
    def flags(self):
        """ Face flags.

        Read and write access to face flags.

        :type: FaceFlag
        """
        return self._flags

    @flags.setter
    def flags(self, value):
        self._flags = value

    @property
    def barycenter(self):
        """ Face barycenter.

        Arithmetic mean of vertex coordinates.

        :type: ~numpy.ndarray
        """
        return sum(p.xyz for p in self) / len(self)

    def vertices_of(self, ref_side, sides, inters):
        """ Clipped vertex loop.

        Parameters
        ----------
        ref_side : Side
            Retained side of the clipping plane.
        sides : dict
            Maps each vertex of the face to its :class:`Side`.
        inters : dict
            Maps halfedges crossing the plane to intersection points.

        Returns
        -------
        list[Point]
            Vertices on the retained side or on the plane, in loop order,
            with intersection points inserted after the origin of their
            crossing halfedge. Fewer than three vertices mean the face has
            been clipped away.
        """
        verts = []

        for h in self._hiter():
            v = h._origin

            if sides[v] * ref_side >= 0:
                verts.append(v)

            p = inters.get(h)

            if p is not None:
                verts.append(p)

        return verts

    def row_span(self, y):
        """ Horizontal chord.

        Intersect the boundary of the face with the line at height `y` in
        the xy-plane.

        Parameters
        ----------
        y : float
            Line height.

        Returns
        -------
        tuple(float, float) or None
            Sorted x-values where the line enters and leaves the face.
            :obj:`None` unless there are exactly two such values after
            merging values within :data:`~voro3d.plane.EPS`.
        """
        xs = sorted(x for h in self._hiter() for x in line_crossings(h, y))
        merged = []

        for x in xs:
            if not merged or x - merged[-1] > EPS:
                merged.append(x)

        if len(merged) != 2:
            return None

        return merged[0], merged[1]

    def count_grid_points(self, cx, cy, resolution, max_steps=100_000):
        """ Number of interior lattice points.

        Parameters
        ----------
        cx, cy : float
            Lattice anchor in the xy-plane.
        resolution : float
            Lattice spacing.
        max_steps : int, optional
            Maximum number of lattice rows (and columns per row).

        Raises
        ------
        ScanLimitError
            If a scan exceeds `max_steps`.

        Returns
        -------
        int
            See :meth:`get_grid_points`.
        """
        return sum(len(xs) for _, xs in self._scan(cx, cy, resolution,
                                                   max_steps))

    def get_grid_points(self, cx, cy, resolution, max_steps=100_000):
        """ Interior lattice points.

        The face is treated as a planar polygon in a plane of constant
        z-coordinate, taken from its first vertex. Lattice points are of
        the form ``(cx + i * resolution, cy + j * resolution, z)``. Only
        points strictly inside count, up to the float noise margin
        :data:`~voro3d.lattice.TOL`.

        Parameters
        ----------
        cx, cy : float
            Lattice anchor in the xy-plane.
        resolution : float
            Lattice spacing.
        max_steps : int, optional
            Maximum number of lattice rows (and columns per row).

        Raises
        ------
        ScanLimitError
            If a scan exceeds `max_steps`.

        Returns
        -------
        ~numpy.ndarray, shape (n, 3)
            Lattice points, rows scanned outward from `cy`.
        """
        z = self._halfedge._origin.z
        grid = [(x, y, z) for y, xs in self._scan(cx, cy, resolution,
                                                   max_steps) for x in xs]

        return np.array(grid, dtype=float).reshape(-1, 3)

    def _scan(self, cx, cy, resolution, max_steps):
        """ Lattice rows.

        Yields
        ------
        tuple(float, list[float])
            Row height and interior lattice x-values of non-empty rows.
        """
        if not resolution > 0.0:
            raise ValueError(f'resolution must be positive, got {resolution}')

        ys = [p.y for p in self]
        rows = lattice.axis(cy, resolution, min(ys) + lattice.TOL,
                            max(ys) - lattice.TOL, max_steps)

        for y in rows:
            span = self.row_span(y)

            if span is None:
                continue

            xs = lattice.axis(cx, resolution, span[0] + lattice.TOL,
                              span[1] - lattice.TOL, max_steps)

            if xs:
                yield y, xs

    def _check(self):
        """ Perform sanity checks.
        """
        assert self._halfedge._face is self
        assert self._valence == sum(1 for _ in self._hiter())
        assert self._valence >= 3

    def _hiter(self):
        """ Incident halfedge iterator.
        """
        h = self._halfedge

        while True:
            yield h
            h = h._next

            if h is self._halfedge:
                return


def line_crossings(halfedge, y):
    """ Intersect edge with horizontal line.

    Works in the xy-plane, z-coordinates are ignored.

    Parameters
    ----------
    halfedge : Halfedge
        Edge with known target.
    y : float
        Line height.

    Returns
    -------
    tuple(float, ...)
        Empty if the edge does not reach the line, both end point
        x-values if the edge is horizontal, else the single crossing.
    """
    p = halfedge.origin
    q = halfedge.target

    if y < min(p.y, q.y) or max(p.y, q.y) < y:
        return ()

    dy = q.y - p.y

    # Horizontal edge, no division.
    if abs(dy) < EPS:
        return p.x, q.x

    return (p.x + (y - p.y) * (q.x - p.x) / dy, )


def _pair_halfedges(halfs):
    """ Pair halfedges.

    Halfedges without pair are matched with the halfedge running in the
    opposite direction between the same vertices.

    Parameters
    ----------
    halfs : list[Halfedge]
        Halfedges that are part of faces.

    Raises
    ------
    NonManifoldError
        If two halfedges connect the same vertices in the same direction.

    Returns
    -------
    list[Halfedge]
        Halfedges left unpaired, in input order.
    """
    waiting = dict()
    seen = set()

    for h in halfs:
        if h._pair is not None:
            continue

        v = h._origin
        w = h.target

        if (v, w) in seen:
            raise NonManifoldError(f'edge {v} -> {w} is non-manifold')

        seen.add((v, w))
        g = waiting.pop((w, v), None)

        if g is not None:
            h._pair = g
            g._pair = h
        else:
            waiting[v, w] = h

    return [h for h in halfs if h._pair is None]


def _close_loops(unpaired, limit, flags):
    """ Close boundary loops.

    Each loop of unpaired halfedges is closed by a face of new halfedges
    wound opposite to the loop, every new halfedge is paired with the
    boundary halfedge it covers. A loop of two halfedges is closed by
    pairing its halfedges with each other.

    Parameters
    ----------
    unpaired : list[Halfedge]
        Boundary halfedges.
    limit : int
        Upper bound on the number of halfedges around a vertex.
    flags : FaceFlag
        Flags of the new faces.

    Raises
    ------
    NonManifoldError
        If a loop does not close.

    Returns
    -------
    list[Face]
        New faces, one per loop of three or more halfedges.
    """
    border = set(unpaired)
    closed = set()
    caps = []

    for start in unpaired:
        if start in closed:
            continue

        loop = _trace_loop(start, border, limit)

        if closed.intersection(loop):
            raise NonManifoldError('boundary loops are not disjoint')

        closed.update(loop)

        if len(loop) == 2:
            h, g = loop
            h._pair = g
            g._pair = h

            continue

        cap = []

        for h in loop:
            c = Halfedge(h.target)
            c._pair = h
            h._pair = c

            cap.append(c)

        cap.reverse()
        caps.append(Face(cap, flags=flags))

    return caps


def _trace_loop(start, border, limit):
    """ Boundary loop starting at a boundary halfedge.

    The successor of a boundary halfedge is found by rotating around its
    target, ``h.next``, ``h.next.pair.next``, ..., until a boundary
    halfedge is reached.
    """
    loop = [start]
    h = start

    while True:
        g = h._next
        steps = 0

        while g not in border:
            g = g._pair._next
            steps += 1

            if steps > limit:
                msg = f'vertex {h.target} is not on a closed boundary'
                raise NonManifoldError(msg)

        if g is start:
            break

        loop.append(g)
        h = g

        if len(loop) > len(border):
            raise NonManifoldError('boundary loop does not close')

    if len(loop) < 2:
        raise NonManifoldError('degenerate boundary loop')

    return loop


class NonManifoldError(Exception):
    """ Manifold exception base class.

    Raised if an operation results in a topological configuration that
    violates the manifold condition.
    """

    pass
