"""Tests for PPM output."""

import pytest
import numpy as np
from PIL import Image

from spherecast.vec3 import Color
from spherecast.ppm import (
    ImageWriteError, ImageFormatError,
    to_rgb_triplet, to_rgb_array, iter_ppm_lines, format_ppm,
    write_ppm, save_image, read_ppm
)


def solid_image(width, height, value):
    return np.full((height, width, 3), value, dtype=np.float64)


class TestColorMapping:
    """Test float to integer channel conversion."""

    def test_background_gray(self):
        assert to_rgb_triplet(Color(0.2, 0.2, 0.2)) == (51, 51, 51)

    def test_extremes(self):
        assert to_rgb_triplet(Color(0, 0, 0)) == (0, 0, 0)
        assert to_rgb_triplet(Color(1, 1, 1)) == (255, 255, 255)

    def test_truncates(self):
        assert to_rgb_triplet(Color(0.5, 0.25, 0.999)) == (127, 63, 255)

    def test_no_clamp_by_default(self):
        assert to_rgb_triplet(Color(1.01, 0.5, -0.1)) == (258, 127, -25)

    def test_clamp(self):
        assert to_rgb_triplet(Color(1.01, 0.5, -0.1), clamp=True) == (255, 127, 0)

    def test_array_matches_triplet(self):
        image = np.array([[[0.2, 0.5, 1.0], [1.01, -0.1, 0.0]]])
        rgb = to_rgb_array(image)
        assert rgb.tolist() == [[[51, 127, 255], [258, -25, 0]]]
        assert to_rgb_array(image, clamp=True).tolist() == [[[51, 127, 255], [255, 0, 0]]]


class TestFormat:
    """Test P3 serialization."""

    def test_header(self):
        lines = list(iter_ppm_lines(solid_image(4, 2, 0.0)))
        assert lines[:3] == ["P3", "4 2", "255"]

    def test_pixel_lines_row_major(self):
        image = np.zeros((2, 2, 3))
        image[0, 1] = (1, 0, 0)
        image[1, 0] = (0, 1, 0)
        assert format_ppm(image) == "P3\n2 2\n255\n0 0 0\n255 0 0\n0 255 0\n0 0 0\n"

    def test_line_count(self):
        lines = format_ppm(solid_image(7, 5, 0.2)).splitlines()
        assert len(lines) == 3 + 7 * 5
        assert set(lines[3:]) == {"51 51 51"}


class TestWritePPM:
    """Test writing images to disk."""

    def test_write(self, tmp_path):
        path = tmp_path / "out.ppm"
        write_ppm(solid_image(3, 2, 0.2), path)
        assert path.read_text() == "P3\n3 2\n255\n" + "51 51 51\n" * 6

    def test_overwrite(self, tmp_path):
        path = tmp_path / "out.ppm"
        path.write_text("old")
        write_ppm(solid_image(1, 1, 0.0), path)
        assert path.read_text() == "P3\n1 1\n255\n0 0 0\n"

    def test_missing_directory(self, tmp_path):
        path = tmp_path / "missing" / "out.ppm"
        with pytest.raises(ImageWriteError):
            write_ppm(solid_image(2, 2, 0.5), path)
        assert not path.exists()

    def test_failed_write_leaves_no_files(self, tmp_path):
        target = tmp_path / "taken.ppm"
        target.mkdir()
        with pytest.raises(ImageWriteError):
            write_ppm(solid_image(2, 2, 0.5), target)
        assert [p.name for p in tmp_path.iterdir()] == ["taken.ppm"]
        assert target.is_dir()

    def test_clamp_option(self, tmp_path):
        path = tmp_path / "out.ppm"
        write_ppm(solid_image(1, 1, 1.5), path, clamp=True)
        assert path.read_text().splitlines()[3] == "255 255 255"


class TestSaveImage:
    """Test extension-based saving."""

    def test_ppm_extension(self, tmp_path):
        path = save_image(solid_image(2, 2, 0.2), tmp_path / "out.PPM")
        assert path.read_text().startswith("P3\n2 2\n255\n")

    def test_png(self, tmp_path):
        image = solid_image(3, 2, 0.2)
        image[0, 0] = (1.2, 0.5, -0.3)
        path = save_image(image, tmp_path / "out.png")
        with Image.open(path) as png:
            assert png.size == (3, 2)
            assert png.getpixel((0, 0)) == (255, 127, 0)
            assert png.getpixel((2, 1)) == (51, 51, 51)

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(ImageWriteError):
            save_image(solid_image(2, 2, 0.2), tmp_path / "out.nope")


class TestReadPPM:
    """Test reading P3 files."""

    def test_read_written_image(self, tmp_path):
        path = tmp_path / "out.ppm"
        image = np.zeros((2, 3, 3))
        image[1, 2] = (0.2, 0.5, 1.0)
        write_ppm(image, path)
        rgb = read_ppm(path)
        assert rgb.shape == (2, 3, 3)
        assert rgb[1, 2].tolist() == [51, 127, 255]

    def test_comments_ignored(self, tmp_path):
        path = tmp_path / "c.ppm"
        path.write_text("P3\n# made by hand\n1 1\n255\n1 2 3\n")
        assert read_ppm(path).tolist() == [[[1, 2, 3]]]

    def test_binary_file(self, tmp_path):
        path = tmp_path / "bin.ppm"
        path.write_bytes(b"P6\n1 1\n255\n\xff\x80\x00")
        with pytest.raises(ImageFormatError):
            read_ppm(path)

    @pytest.mark.parametrize("text", [
        "P6\n1 1\n255\n0 0 0\n",
        "P3\n1 1\n255\n0 0\n",
        "P3\n1 1\n15\n0 0 0\n",
        "P3\n1 x\n255\n0 0 0\n",
        "",
    ])
    def test_malformed(self, tmp_path, text):
        path = tmp_path / "bad.ppm"
        path.write_text(text)
        with pytest.raises(ImageFormatError):
            read_ppm(path)
