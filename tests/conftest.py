import math

import numpy as np
import pytest

from voro3d.hds import Mesh
from voro3d.lattice import TOL
from voro3d.point import Point


BOX_FACES = [[0, 1, 2, 3], [1, 0, 4, 5], [0, 3, 7, 4],
             [2, 1, 5, 6], [5, 4, 7, 6], [3, 2, 6, 7]]


def box_points(x0, x1, y0, y1, z0, z1):
    return [Point(x1, y1, z1), Point(x0, y1, z1),
            Point(x0, y1, z0), Point(x1, y1, z0),
            Point(x1, y0, z1), Point(x0, y0, z1),
            Point(x0, y0, z0), Point(x1, y0, z0)]


def _axis_values(anchor, resolution, lo, hi):
    k0 = math.ceil((lo - anchor) / resolution) - 1
    k1 = math.floor((hi - anchor) / resolution) + 1
    values = anchor + np.arange(k0, k1 + 1) * resolution

    return values[(values > lo + TOL) & (values < hi - TOL)]


@pytest.fixture
def cube():
    """ Closed box mesh (0, 10)^3. """
    return Mesh(box_points(0, 10, 0, 10, 0, 10), BOX_FACES, name='cube')


@pytest.fixture
def nearest_site_counts():
    """ Brute force lattice classification.

    Returns a function that counts, for each site, the interior lattice
    points of the box that are closer to it than to any other site.
    """
    def count(box, sites, resolution, anchor):
        axes = [_axis_values(a, resolution, lo, hi)
                for a, (lo, hi) in zip(anchor, box)]
        grid = np.stack(np.meshgrid(*axes, indexing='ij'), axis=-1)
        grid = grid.reshape(-1, 3)

        sites = np.asarray(sites, dtype=float)
        dist = np.linalg.norm(grid[:, None, :] - sites[None, :, :], axis=2)

        # Test configurations avoid lattice points on bisector planes.
        ordered = np.sort(dist, axis=1)
        assert np.all(ordered[:, 1] - ordered[:, 0] > 1e-9)

        return np.bincount(np.argmin(dist, axis=1), minlength=len(sites))

    return count
