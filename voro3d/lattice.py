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

""" Regular lattices.

Lattice positions along one axis are anchored at a center value and spaced
by a fixed resolution. Scans start at the center and proceed outward in
alternating directions, ``center, center + r, center - r, ...``, but never
leave the interval being sampled.
"""

import math


TOL = 1e-9
""" Float noise margin of interior tests.

Lattice values closer than this to the boundary of a sampled region are on
the boundary, e.g. ``0.0 + 30 * 0.1`` at the end of the interval (0, 3).
"""


class ScanLimitError(RuntimeError):
    """ Lattice scan exception.

    Raised when sampling an interval would visit more lattice positions
    than allowed. Usually caused by a resolution that is far too fine for
    the sampled region.
    """

    pass


def axis(center, resolution, lo, hi, max_steps):
    """ Lattice values inside an open interval.

    Parameters
    ----------
    center : float
        Lattice anchor.
    resolution : float
        Lattice spacing, positive.
    lo, hi : float
        Open interval to sample.
    max_steps : int
        Maximum number of lattice positions to examine.

    Raises
    ------
    ScanLimitError
        If the interval holds more than `max_steps` lattice positions.

    Returns
    -------
    list[float]
        Values ``center + k * resolution`` with ``lo < value < hi`` in
        outward scan order.
    """
    assert resolution > 0.0

    if not lo < hi:
        return []

    # One extra step on each side, the strict comparisons below decide.
    k0 = math.ceil((lo - center) / resolution) - 1
    k1 = math.floor((hi - center) / resolution) + 1

    if k1 - k0 + 1 > max_steps:
        msg = (f'interval ({lo:g}, {hi:g}) holds more than {max_steps} '
               f'lattice positions at resolution {resolution:g}')
        raise ScanLimitError(msg)

    # Sorting by (|k|, k < 0) yields 0, 1, -1, 2, -2, ...
    steps = sorted(range(k0, k1 + 1), key=lambda k: (abs(k), k < 0))
    values = (center + k * resolution for k in steps)

    return [t for t in values if lo < t < hi]
