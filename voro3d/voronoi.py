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

""" Voronoi partition of a box.

Every site owns a convex cell that starts out as the bounding box and is
clipped by bisector planes. Cells are sampled by horizontal cross-sections
to estimate their interior lattice.

>>> vd = Voronoi(0, 10, 0, 10, 0, 10)
>>> vd.add_site((0, 6, 5))
0
>>> vd.add_site((0, 4, 4))
1
>>> vd.create_cells()
>>> counts = [vd.count_grids(i, 1.0) for i in range(2)]
"""

import operator

from time import time

import numpy as np

import voro3d.lattice as lattice
import voro3d.linalg as linalg
import voro3d.traits as traits

from voro3d.hds import Mesh
from voro3d.plane import Plane
from voro3d.point import Point


# Quadrilaterals of the bounding box, indices into the corner list built
# in Voronoi.__init__.
_BOX_FACES = [[0, 1, 2, 3], [1, 0, 4, 5], [0, 3, 7, 4],
              [2, 1, 5, 6], [5, 4, 7, 6], [3, 2, 6, 7]]

_UP = (0.0, 0.0, 1.0)


class Voronoi:
    """ Voronoi partition.

    Parameters
    ----------
    x0, x1, y0, y1, z0, z1 : float
        Bounding box, ``x0 < x1`` etc.
    max_steps : int, optional
        Maximum number of lattice positions along one axis a grid query
        may visit.

    Raises
    ------
    ValueError
        If the bounding box is empty.
    """

    def __init__(self, x0, x1, y0, y1, z0, z1, *, max_steps=100_000):
        for axis, lo, hi in (('x', x0, x1), ('y', y0, y1), ('z', z0, z1)):
            if not lo < hi:
                raise ValueError(f'invalid {axis}-range ({lo}, {hi})')

        self._box = ((x0, x1), (y0, y1), (z0, z1))
        self._corners = [Point(x1, y1, z1), Point(x0, y1, z1),
                         Point(x0, y1, z0), Point(x1, y1, z0),
                         Point(x1, y0, z1), Point(x0, y0, z1),
                         Point(x0, y0, z0), Point(x1, y0, z0)]

        self._max_steps = max_steps
        self._sites = []
        self._cells = None

    def __repr__(self):
        return f'Voronoi({self._box}, {len(self._sites)} sites)'

    @property
    def box(self):
        """ Bounding box.

        :type: tuple((float, float), (float, float), (float, float))
        """
        return self._box

    @property
    def sites(self):
        """ Site list.

        :type: tuple(Point, ...)
        """
        return tuple(self._sites)

    @property
    def cells(self):
        """ Cell list, parallel to :attr:`sites`.

        :type: tuple(Mesh, ...)

        Raises
        ------
        RuntimeError
            If cells have not been created.
        """
        self._require_cells()
        return tuple(self._cells)

    def add_site(self, point):
        """ Add a site.

        Parameters
        ----------
        point : Point or array_like
            Site coordinates.

        Returns
        -------
        int
            Index of the new site.

        Note
        ----
        Existing cells are not updated, call :meth:`create_cells` before
        the next grid query.
        """
        self._sites.append(point if isinstance(point, Point)
                           else Point(point))

        return len(self._sites) - 1

    def create_cells(self, adjacency=None, weights=None, *, quiet=True):
        """ Create Voronoi cells.

        Discards all cells and clips a fresh copy of the bounding box for
        each site. Without tables, cell ``i`` is clipped by the bisector
        planes of all other sites. With an adjacency table only the sites
        ``adjacency[i]`` are used. A weight table moves the plane between
        site ``i`` and its ``k``-th neighbor to the point at fraction
        ``weights[i][k]`` of the way towards the neighbor, ``0.5`` being
        the ordinary bisector.

        Parameters
        ----------
        adjacency : sequence of sequence of int, optional
            Neighbor indices of each site.
        weights : sequence of sequence of float, optional
            Plane positions, same shape as `adjacency`.
        quiet : bool, optional
            Suppress console output.

        Raises
        ------
        ValueError
            If the tables are malformed.
        IndexError
            If a neighbor index is out of bounds.

        Note
        ----
        Coincident sites do not define a bisector and are skipped.
        """
        CBOLD = '\33[1m'                    # bold text, white on black
        CEND = '\33[0m'

        neighbors = self._neighbors(adjacency, weights)

        if not quiet:
            start = time()
            print(f'creating {CBOLD}{len(self._sites)}{CEND} cells',
                  end=' ...')

        cells = []
        num_planes = 0

        for i, site in enumerate(self._sites):
            cell = Mesh(self._corners, _BOX_FACES, name=f'cell-{i}')

            for j, w in neighbors[i]:
                other = self._sites[j]
                direction = site.xyz - other.xyz

                # No bisector for coincident sites.
                if linalg.norm(direction) == 0.0:
                    continue

                cell.split_mesh(Plane(site.lerp(other, w), direction), site)
                num_planes += 1

            cells.append(cell)

        self._cells = cells

        if not quiet:
            print(f' done ({time()-start:.3f} sec)')
            print(f'\t\u251c\u2500 {num_planes} clipping planes')
            print(f'\t\u2514\u2500 {sum(len(c.faces) for c in cells)} faces')

    def cell(self, index):
        """ Cell of a site.

        Parameters
        ----------
        index : int
            Site index.

        Raises
        ------
        RuntimeError
            If cells have not been created.
        IndexError
            If `index` is out of bounds.

        Returns
        -------
        Mesh
            Convex cell of the site.
        """
        self._require_cells()
        index = operator.index(index)

        if not 0 <= index < len(self._sites):
            msg = f'site index {index} out of range(0, {len(self._sites)})'
            raise IndexError(msg)

        return self._cells[index]

    def count_grids(self, index, resolution):
        """ Number of interior lattice points of a cell.

        Parameters
        ----------
        index : int
            Site index.
        resolution : float
            Lattice spacing, positive.

        Raises
        ------
        RuntimeError
            If cells have not been created.
        ScanLimitError
            If the lattice is too fine for the cell.

        Returns
        -------
        int
            See :meth:`get_grids`.
        """
        return sum(f.count_grid_points(*cxy, resolution, self._max_steps)
                   for cxy, f in self._sections(index, resolution))

    def get_grids(self, index, resolution):
        """ Interior lattice points of a cell.

        The lattice is anchored at the site. The cell is cut by horizontal
        planes through the site and at multiples of `resolution` above and
        below, within the cell's extent, and each cross-section is sampled
        in the xy-plane.

        Parameters
        ----------
        index : int
            Site index.
        resolution : float
            Lattice spacing, positive.

        Raises
        ------
        RuntimeError
            If cells have not been created.
        ScanLimitError
            If the lattice is too fine for the cell.

        Returns
        -------
        ~numpy.ndarray, shape (n, 3)
            Lattice points, slices in outward scan order.
        """
        grids = [f.get_grid_points(*cxy, resolution, self._max_steps)
                 for cxy, f in self._sections(index, resolution)]

        if not grids:
            return np.empty((0, 3), dtype=float)

        return np.concatenate(grids)

    def _sections(self, index, resolution):
        """ Horizontal cross-sections of a cell.

        Yields
        ------
        tuple((float, float), Face)
            Lattice anchor in the xy-plane and section polygon.
        """
        index = operator.index(index)
        cell = self.cell(index)
        site = self._sites[index]

        if not resolution > 0.0:
            raise ValueError(f'resolution must be positive, got {resolution}')

        # Sites outside the box may end up with an empty cell.
        if not cell.faces:
            return

        lo, hi = traits.bounds(cell.points)
        levels = lattice.axis(site.z, resolution, lo[2] + lattice.TOL,
                              hi[2] - lattice.TOL, self._max_steps)

        # Levels may lie very close to a horizontal face of the cell.
        for z in levels:
            face = cell.cross_section((0.0, 0.0, z), _UP, eps=lattice.TOL)

            if face is not None:
                yield (site.x, site.y), face

    def _neighbors(self, adjacency, weights):
        """ Validated neighbor lists.

        Returns
        -------
        list[list[tuple(int, float)]]
            Neighbor index and plane position for each site.
        """
        n = len(self._sites)

        if adjacency is None:
            if weights is not None:
                raise ValueError('weight table requires an adjacency table')

            return [[(j, 0.5) for j in range(n) if j != i] for i in range(n)]

        if len(adjacency) != n:
            msg = f'adjacency table has {len(adjacency)} rows, expected {n}'
            raise ValueError(msg)

        if weights is not None and len(weights) != n:
            msg = f'weight table has {len(weights)} rows, expected {n}'
            raise ValueError(msg)

        neighbors = []

        for i, row in enumerate(adjacency):
            row = [operator.index(j) for j in row]

            for j in row:
                if not 0 <= j < n:
                    msg = (f'neighbor index {j} of site {i} '
                           f'out of range(0, {n})')
                    raise IndexError(msg)

                if j == i:
                    raise ValueError(f'site {i} is listed as its own neighbor')

            if weights is None:
                ws = [0.5] * len(row)
            else:
                ws = [float(w) for w in weights[i]]

                if len(ws) != len(row):
                    msg = (f'weight row {i} has {len(ws)} entries, '
                           f'expected {len(row)}')
                    raise ValueError(msg)

                if any(not 0.0 <= w <= 1.0 for w in ws):
                    raise ValueError(f'weights of site {i} not in [0, 1]')

            neighbors.append(list(zip(row, ws)))

        return neighbors

    def _require_cells(self):
        if self._cells is None or len(self._cells) != len(self._sites):
            msg = 'cells are not up to date, call create_cells() first'
            raise RuntimeError(msg)


def _main():
    import argparse

    parser = argparse.ArgumentParser(
        description='count lattice points of 3D Voronoi cells')
    parser.add_argument('--box', nargs=6, type=float, default=None,
                        metavar=('X0', 'X1', 'Y0', 'Y1', 'Z0', 'Z1'),
                        help='bounding box (default 0 10 0 10 0 10)')
    parser.add_argument('--site', nargs=3, type=float, action='append',
                        metavar=('X', 'Y', 'Z'), help='add a site')
    parser.add_argument('--resolution', type=float, default=1.0,
                        help='lattice spacing')
    parser.add_argument('--points', action='store_true',
                        help='print lattice points')
    parser.add_argument('--verbose', action='store_true',
                        help='report progress')

    args = parser.parse_args()

    box = args.box if args.box is not None else (0, 10, 0, 10, 0, 10)
    sites = args.site if args.site else [(0, 6, 5), (0, 4, 4)]

    vd = Voronoi(*box)

    for site in sites:
        vd.add_site(site)

    vd.create_cells(quiet=not args.verbose)

    for i, site in enumerate(vd.sites):
        if args.points:
            grid = vd.get_grids(i, args.resolution)
            print(site, len(grid))

            for p in grid:
                print(f'\t{p[0]:g} {p[1]:g} {p[2]:g}')
        else:
            print(site, vd.count_grids(i, args.resolution))


if __name__ == '__main__':
    _main()
