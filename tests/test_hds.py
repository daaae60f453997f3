"""Tests for the halfedge mesh, clipping and cross-sections."""

import math

import numpy as np
import pytest

import voro3d.traits as traits

from voro3d.flags import FaceFlag
from voro3d.hds import Face
from voro3d.hds import Halfedge
from voro3d.hds import Mesh
from voro3d.hds import NonManifoldError
from voro3d.hds import line_crossings
from voro3d.lattice import ScanLimitError
from voro3d.lattice import TOL
from voro3d.plane import Plane
from voro3d.point import Point

from conftest import BOX_FACES
from conftest import box_points


def polygon(*xy, z=0.0):
    """ Free standing face in a horizontal plane. """
    return Face([Halfedge(Point(x, y, z)) for x, y in xy])


def assert_consistent(mesh):
    """ Closed, orientable, every pair symmetric. """
    mesh._check()

    assert mesh.closed
    v, e, f = mesh.size
    assert v - e + f == 2


class TestBuildMesh:
    """Construction from vertex and face lists."""

    def test_box(self, cube):
        assert cube.size == (8, 12, 6)
        assert cube.name == 'cube'
        assert_consistent(cube)

    def test_shared_vertices(self, cube):
        # One halfedge per face corner, vertices shared by identity.
        assert len(cube.halfedges) == 24
        assert {id(h.origin) for h in cube.halfedges} == \
            {id(p) for p in cube.vertices}

        for h in cube.halfedges:
            assert h.pair.origin is h.target
            assert h.pair.target is h.origin
            assert not h.boundary

    def test_points_array(self, cube):
        points = cube.points

        assert points.shape == (8, 3)
        points[0] = -1.0
        assert cube.vertices[0].isclose((10, 10, 10))

    def test_coordinates_are_not_matched(self):
        # Coincident but distinct points do not share an edge.
        points = [Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0),
                  Point(0, 0, 0)]
        mesh = Mesh(points, [[0, 1, 2], [3, 2, 1]])

        assert len(mesh.halfedges) == 6
        assert not mesh.closed
        assert sum(h.boundary for h in mesh.halfedges) == 4

    def test_open_triangle(self):
        mesh = Mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [[0, 1, 2]])

        assert not mesh.closed
        assert all(h.boundary for h in mesh.halfedges)
        assert all(isinstance(p, Point) for p in mesh.vertices)

    def test_face_loops(self, cube):
        for f in cube:
            assert len(f) == 4
            assert f.flags == FaceFlag(0)
            assert len(list(f)) == 4
            assert np.asarray(f).shape == (4, 3)

            h = f.halfedge
            for _ in range(4):
                assert h.face is f
                h = h.next
            assert h is f.halfedge

    def test_empty(self):
        mesh = Mesh()

        assert mesh.size == (0, 0, 0)
        assert mesh.points.shape == (0, 3)

    def test_faces_without_points(self):
        with pytest.raises(ValueError):
            Mesh(faces=[[0, 1, 2]])

    def test_duplicate_vertex(self):
        points = box_points(0, 1, 0, 1, 0, 1)

        with pytest.raises(ValueError):
            Mesh(points, [[0, 1, 1, 2]])

    def test_short_face(self):
        with pytest.raises(ValueError):
            Mesh(box_points(0, 1, 0, 1, 0, 1), [[0, 1]])

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            Mesh(box_points(0, 1, 0, 1, 0, 1), [[0, 1, 8]])

    def test_non_manifold(self):
        points = box_points(0, 1, 0, 1, 0, 1)

        with pytest.raises(NonManifoldError):
            Mesh(points, [[0, 1, 2], [0, 1, 3]])

    def test_isolated_vertices(self, capsys):
        points = box_points(0, 1, 0, 1, 0, 1) + [Point(5, 5, 5)]
        Mesh(points, BOX_FACES)

        assert 'isolated vertices' in capsys.readouterr().out

    def test_rebuild(self, cube):
        cube.build_mesh([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [[0, 1, 2]])

        assert len(cube.vertices) == 3
        assert len(cube.faces) == 1


class TestClip:
    """Half-space clipping."""

    def test_half_cube(self, cube):
        before = list(cube.vertices)
        cube.split_mesh(Plane((0, 0, 5), (0, 0, 1)), Point(5, 5, 2))

        assert cube.size == (8, 12, 6)
        assert traits.volume(cube) == pytest.approx(500.0)
        assert_consistent(cube)

        lo, hi = traits.bounds(cube.points)
        np.testing.assert_allclose(lo, [0, 0, 0])
        np.testing.assert_allclose(hi, [10, 10, 5])

        # The bottom vertices are retained by identity.
        kept = [p for p in before if p.z == 0.0]
        assert all(any(p is q for q in cube.vertices) for p in kept)

        cut = [f for f in cube if f.flags & FaceFlag.CUT]
        assert len(cut) == 1
        assert all(p.z == pytest.approx(5.0) for p in cut[0])

    def test_corner(self, cube):
        cube.split_mesh(Plane((9, 9, 9), (1, 1, 1)), (5, 5, 5))

        assert cube.size == (10, 15, 7)
        assert traits.volume(cube) == pytest.approx(995.5)
        assert_consistent(cube)

        (cap, ) = [f for f in cube if f.flags & FaceFlag.CUT]
        assert len(cap) == 3
        assert traits.face_area(cap) == pytest.approx(4.5 * math.sqrt(3))

    def test_through_vertices(self, cube):
        # The plane x = y only passes through vertices, no edge crosses it.
        cube.split_mesh(Plane((0, 0, 0), (1, -1, 0)), (8, 2, 5))

        assert cube.size == (6, 9, 5)
        assert traits.volume(cube) == pytest.approx(500.0)
        assert_consistent(cube)

    def test_orientation_preserved(self, cube):
        cell = cube.clipped(Plane((5, 5, 5), (1, 2, 3)), (0, 0, 0))

        # Outward normals of a convex solid point away from an interior
        # point, consistently for all faces.
        center = np.mean(cell.points, axis=0)
        signs = {np.sign(np.dot(traits.face_normal(f), f.barycenter - center))
                 for f in cell}

        assert len(signs) == 1
        assert_consistent(cell)

    def test_clipped_copy(self, cube):
        before = list(cube.vertices)
        mesh = cube.clipped(Plane((0, 0, 5), (0, 0, 1)), (5, 5, 8))

        assert cube.size == (8, 12, 6)
        assert all(p is q for p, q in zip(cube.vertices, before))
        assert mesh is not cube
        assert mesh.name == 'cube'
        assert traits.volume(mesh) == pytest.approx(500.0)

    def test_repeated_clip(self, cube):
        planes = [Plane((6, 0, 0), (1, 0, 0)), Plane((0, 7, 0), (0, 1, 0)),
                  Plane((0, 0, 8), (0, 0, 1)), Plane((2, 2, 2), (-1, -1, -1))]

        for plane in planes:
            cube.split_mesh(plane, (3, 3, 3))
            assert_consistent(cube)

        assert traits.volume(cube) == pytest.approx(6 * 7 * 8 - 6**3 / 6)

    def test_site_on_plane(self, cube):
        before = list(cube.vertices)
        cube.split_mesh(Plane((0, 0, 5), (0, 0, 1)), (1, 1, 5))

        assert len(cube.vertices) == 8
        assert all(p is q for p, q in zip(cube.vertices, before))

    @pytest.mark.parametrize('height', [10.0, 12.0, 10.0005])
    def test_no_op(self, cube, height):
        before = list(cube.vertices)
        faces = list(cube.faces)
        cube.split_mesh(Plane((0, 0, height), (0, 0, 1)), (5, 5, 5))

        assert len(cube.vertices) == 8
        assert all(p is q for p, q in zip(cube.vertices, before))
        assert all(f is g for f, g in zip(cube.faces, faces))

    def test_everything_removed(self, cube):
        cube.split_mesh(Plane((0, 0, 20), (0, 0, 1)), (5, 5, 30))

        assert cube.size == (0, 0, 0)


class TestCrossSection:
    """Non-destructive planar sections."""

    def test_square(self, cube):
        face = cube.cross_section((0, 0, 2.5), (0, 0, 1))

        assert len(face) == 4
        assert face.flags == FaceFlag.SECTION
        assert all(p.z == pytest.approx(2.5) for p in face)
        assert traits.face_area(face) == pytest.approx(100.0)
        assert cube.size == (8, 12, 6)

    def test_pentagon(self, cube):
        cube.split_mesh(Plane((9, 9, 9), (1, 1, 1)), (5, 5, 5))
        face = cube.cross_section((0, 0, 9.5), (0, 0, 1))

        assert len(face) == 5
        assert traits.face_area(face) == pytest.approx(96.875)

    def test_hexagon(self, cube):
        face = cube.cross_section((5, 5, 5), (1, 1, 1))

        assert len(face) == 6
        assert all(sum(p) == pytest.approx(15.0) for p in face)
        assert traits.face_area(face) == pytest.approx(75 * math.sqrt(3))

    def test_normal_orientation(self, cube):
        up = cube.cross_section((0, 0, 5), (0, 0, 1))
        down = cube.cross_section((0, 0, 5), (0, 0, -1))

        assert traits.face_area(up) == pytest.approx(100.0)
        assert traits.face_area(down) == pytest.approx(100.0)
        assert abs(traits.face_normal(up)[2]) == pytest.approx(1.0)

    def test_new_points(self, cube):
        face = cube.cross_section((0, 0, 5), (0, 0, 1))

        assert not any(p is q for p in face for q in cube.vertices)

    @pytest.mark.parametrize('height', [10.0, 11.0, -0.5, 0.0])
    def test_outside(self, cube, height):
        assert cube.cross_section((0, 0, height), (0, 0, 1)) is None

    def test_vanishing_normal(self, cube):
        assert cube.cross_section((0, 0, 5), (0, 0, 0)) is None
        assert cube.cross_section((0, 0, 5), np.zeros(3)) is None

    def test_tolerance(self, cube):
        # The top face is within the default tolerance of the plane.
        assert cube.cross_section((0, 0, 9.9995), (0, 0, 1)) is None

        face = cube.cross_section((0, 0, 9.9995), (0, 0, 1), eps=TOL)

        assert len(face) == 4
        assert all(p.z == pytest.approx(9.9995) for p in face)
        assert traits.face_area(face) == pytest.approx(100.0)


class TestFaceGrid:
    """Lattice sampling of planar polygons."""

    def test_square(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4), z=3.0)

        assert square.count_grid_points(2, 2, 1.0) == 9

        grid = square.get_grid_points(2, 2, 1.0)
        assert grid.shape == (9, 3)
        np.testing.assert_allclose(grid[0], [2, 2, 3])
        assert np.all(grid[:, 2] == 3.0)

    def test_anchor_outside(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4))

        assert square.count_grid_points(-3.5, 10.5, 1.0) == 16

    def test_boundary_excluded(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4))

        # Lattice points on the boundary are not interior.
        assert square.count_grid_points(0, 0, 2.0) == 1
        assert square.count_grid_points(0, 0, 4.0) == 0

    def test_close_to_boundary(self):
        # Rows and columns just inside the boundary are interior.
        rect = polygon((0, 0), (10, 0), (10, 5.00075), (-0.0005, 5.00075))

        assert rect.count_grid_points(5, 2, 1.0) == 50
        assert rect.get_grid_points(5, 2, 1.0)[:, 1].max() == 5.0

    def test_float_noise(self):
        square = polygon((0, 0), (3, 0), (3, 3), (0, 3))

        # 0.1 * 30 exceeds 3 by float noise only.
        assert square.count_grid_points(0, 0, 0.1) == 29**2
        assert square.count_grid_points(1.5, 1.5, 0.1) == 29**2

    def test_triangle(self):
        triangle = polygon((0, 0), (4, 0), (0, 4))

        assert triangle.count_grid_points(0, 0, 1.0) == 3

        points = {tuple(p[:2]) for p in triangle.get_grid_points(0, 0, 1.0)}
        assert points == {(1.0, 1.0), (2.0, 1.0), (1.0, 2.0)}

    def test_empty(self):
        sliver = polygon((0, 0), (10, 0), (10, 0.5))

        assert sliver.count_grid_points(0, 0, 1.0) == 0
        assert sliver.get_grid_points(0, 0, 1.0).shape == (0, 3)

    def test_resolution(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4))

        with pytest.raises(ValueError):
            square.count_grid_points(0, 0, 0.0)

        with pytest.raises(ScanLimitError):
            square.count_grid_points(0, 0, 0.01, max_steps=10)

    def test_row_span(self):
        diamond = polygon((2, 0), (0, 2), (-2, 0), (0, -2))

        assert diamond.row_span(0.0) == pytest.approx((-2.0, 2.0))
        assert diamond.row_span(1.0) == pytest.approx((-1.0, 1.0))
        assert diamond.row_span(2.0) is None
        assert diamond.row_span(3.0) is None

    def test_line_crossings(self):
        horizontal = polygon((0, 1), (3, 1), (3, 5)).halfedge
        slanted = polygon((0, 0), (2, 2), (0, 2)).halfedge

        assert line_crossings(horizontal, 1.0) == (0.0, 3.0)
        assert line_crossings(slanted, 1.0) == pytest.approx((1.0, ))
        assert line_crossings(slanted, 3.0) == ()


class TestFace:

    def test_too_small(self):
        with pytest.raises(ValueError):
            Face([Halfedge(Point(0, 0, 0)), Halfedge(Point(1, 0, 0))])

    def test_barycenter(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4), z=1.0)

        np.testing.assert_allclose(square.barycenter, [2, 2, 1])

    def test_flags(self):
        square = polygon((0, 0), (4, 0), (4, 4), (0, 4))
        square.flags |= FaceFlag.CUT

        assert square.flags & FaceFlag.CUT
        assert not square.flags & FaceFlag.SECTION
