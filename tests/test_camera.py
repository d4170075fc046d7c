"""Tests for Camera class."""

import pytest
import math
from spherecast.vec3 import Vec3, Point3
from spherecast.camera import Camera


@pytest.fixture
def reference_camera():
    return Camera(640, 480, viewport_height=2.0)


class TestCameraCreation:
    """Test Camera construction."""

    def test_defaults(self):
        cam = Camera(4, 3)
        assert cam.eye == Point3(0, 0, 0)
        assert cam.focal_offset == Vec3(0, 0, -1)
        assert cam.viewport_height == 2.0

    def test_viewport_width_derived_from_pixels(self, reference_camera):
        assert math.isclose(reference_camera.viewport_width, 2.0 * 640 / 480)
        assert math.isclose(reference_camera.aspect_ratio, 4 / 3)

    def test_from_aspect_ratio(self):
        cam = Camera.from_aspect_ratio(480, 4.0 / 3.0)
        assert cam.image_width == 640
        assert cam.image_height == 480

    def test_from_aspect_ratio_truncates_width(self):
        cam = Camera.from_aspect_ratio(10, 1.55)
        assert cam.image_width == 15

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            Camera(width, height)

    def test_invalid_viewport(self):
        with pytest.raises(ValueError):
            Camera(10, 10, viewport_height=0)

    def test_invalid_aspect_ratio(self):
        with pytest.raises(ValueError):
            Camera.from_aspect_ratio(10, 0)


class TestCameraGeometry:
    """Test viewport vectors and pixel placement."""

    def test_viewport_vectors(self, reference_camera):
        assert reference_camera.viewport_u == Vec3(2.0 * 640 / 480, 0, 0)
        assert reference_camera.viewport_v == Vec3(0, -2.0, 0)

    def test_pixel_deltas(self, reference_camera):
        assert reference_camera.pixel_delta_u == Vec3(1 / 240, 0, 0)
        assert reference_camera.pixel_delta_v == Vec3(0, -1 / 240, 0)

    def test_top_left_pixel_center(self, reference_camera):
        expected = Point3(-4 / 3 + 1 / 480, 1 - 1 / 480, -1)
        assert reference_camera.pixel00 == expected
        assert reference_camera.pixel_center(0, 0) == expected

    def test_row_zero_is_top(self, reference_camera):
        top = reference_camera.pixel_center(0, 0)
        bottom = reference_camera.pixel_center(0, 479)
        assert top.y > 0 > bottom.y

    def test_column_zero_is_left(self, reference_camera):
        left = reference_camera.pixel_center(0, 0)
        right = reference_camera.pixel_center(639, 0)
        assert left.x < 0 < right.x

    def test_center_pixel(self, reference_camera):
        assert reference_camera.pixel_center(320, 240) == Point3(1 / 480, -1 / 480, -1)

    def test_symmetric_corners(self, reference_camera):
        tl = reference_camera.pixel_center(0, 0)
        br = reference_camera.pixel_center(639, 479)
        assert math.isclose(tl.x, -br.x)
        assert math.isclose(tl.y, -br.y)

    def test_eye_and_focal_offset_translate_viewport(self):
        cam = Camera(2, 2, eye=Point3(1, 2, 3), focal_offset=Vec3(0, 0, -2))
        base = Camera(2, 2, focal_offset=Vec3(0, 0, -2))
        assert cam.pixel_center(1, 1) == base.pixel_center(1, 1) + Vec3(1, 2, 3)

    def test_pixel_out_of_range(self, reference_camera):
        with pytest.raises(IndexError):
            reference_camera.pixel_center(640, 0)
        with pytest.raises(IndexError):
            reference_camera.get_ray(0, -1)


class TestCameraRays:
    """Test ray generation."""

    def test_ray_starts_at_eye(self):
        cam = Camera(4, 3, eye=Point3(1, 1, 1))
        ray = cam.get_ray(2, 1)
        assert ray.origin == Point3(1, 1, 1)

    def test_ray_direction_unnormalized(self, reference_camera):
        ray = reference_camera.get_ray(0, 0)
        assert ray.direction == reference_camera.pixel_center(0, 0)
        assert ray.direction.z == -1.0
        assert ray.direction.magnitude() > 1

    def test_ray_passes_through_pixel_center(self):
        cam = Camera(8, 6, eye=Point3(0.5, -0.5, 2))
        ray = cam.get_ray(5, 2)
        assert ray.at(1) == cam.pixel_center(5, 2)

    def test_row_rays(self):
        cam = Camera(5, 4)
        rays = cam.row_rays(2)
        assert len(rays) == 5
        assert rays[3].direction == cam.get_ray(3, 2).direction

    def test_iter_rays_row_major(self):
        cam = Camera(3, 2)
        order = [(i, j) for i, j, _ in cam.iter_rays()]
        assert order == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]

    def test_iter_rays_count(self):
        cam = Camera(7, 5)
        assert sum(1 for _ in cam.iter_rays()) == 35

    def test_repr(self, reference_camera):
        assert "640x480" in repr(reference_camera)
