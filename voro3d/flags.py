# Copyright 2022-2024, m3sh76
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

""" Classification flags.

Note
----
Plane sides are integer valued. The product of two sides is a plain
:class:`int` which downstream code compares against zero.
"""

from enum import Flag
from enum import IntEnum
from enum import auto


class Side(IntEnum):
    """ Position of a point relative to a plane.
    """

    BELOW = -1
    """ Negative half-space. """

    ON = 0
    """ On the plane, within tolerance. """

    ABOVE = 1
    """ Positive half-space, the side the plane normal points to. """


class FaceFlag(Flag):
    """ Face flags enumeration.
    """

    CUT = auto()
    """ Cut flag.

    Set on faces that close the hole left by clipping a mesh with a
    plane."""

    SECTION = auto()
    """ Section flag.

    Set on polygons returned by a mesh cross-section."""
