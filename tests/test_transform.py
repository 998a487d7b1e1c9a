"""Tests for image rotation and face cropping."""

import numpy as np
import pytest


class TestRotation:
    """Test cases for rotate_image and orientation policy."""

    def test_quarter_turns_are_clockwise(self):
        """90 degrees turns the image clockwise."""
        from face_verify.imaging import rotate_image

        image = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)

        rotated = rotate_image(image, 90)

        assert rotated.shape == (3, 2, 3)
        assert np.array_equal(rotated, np.rot90(image, k=-1))
        # Top-left pixel ends up top-right
        assert np.array_equal(rotated[0, 1], image[0, 0])

    @pytest.mark.parametrize("angle,k", [(180, 2), (270, 1), (-90, 1), (450, -1)])
    def test_other_quarter_turns(self, angle, k):
        """Multiples of 90 are exact, including negative and > 360 angles."""
        from face_verify.imaging import rotate_image

        image = np.arange(4 * 5 * 3, dtype=np.uint8).reshape(4, 5, 3)

        assert np.array_equal(rotate_image(image, angle), np.rot90(image, k=k))

    def test_zero_returns_copy(self, sample_image):
        """No rotation still returns a new array."""
        from face_verify.imaging import rotate_image

        rotated = rotate_image(sample_image, 360)

        assert np.array_equal(rotated, sample_image)
        assert rotated is not sample_image

    def test_arbitrary_angle_expands_canvas(self):
        """Non-quarter angles keep the whole image on a larger canvas."""
        from face_verify.imaging import rotate_image

        image = np.full((10, 10, 3), 200, dtype=np.uint8)

        rotated = rotate_image(image, 45)

        assert rotated.shape == (14, 14, 3)
        # Corners of the canvas are padding, the center is image content
        assert rotated[0, 0].tolist() == [0, 0, 0]
        assert rotated[7, 7].tolist() == [200, 200, 200]

    def test_compose_rotation(self):
        """Sensor and device angles add modulo 360."""
        from face_verify.imaging import compose_rotation

        assert compose_rotation(90, 0) == 90
        assert compose_rotation(270, 180) == 90
        assert compose_rotation(90, 270) == 0

    def test_rotation_for_format(self):
        """BGRA uses the sensor angle only, NV21 composes both."""
        from face_verify.imaging import PixelFormat, rotation_for_format

        assert rotation_for_format(PixelFormat.BGRA8888, 90, 180) == 90
        assert rotation_for_format(PixelFormat.NV21, 90, 180) == 270
        assert rotation_for_format(PixelFormat.NV21, 270, 90) == 0


class TestCrop:
    """Test cases for crop_image."""

    def test_crop_size_and_origin(self, sample_image):
        """Crop has the box size and starts at the box origin."""
        from face_verify.imaging import BoundingBox, crop_image

        box = BoundingBox(left=10, top=20, width=30, height=40)

        face = crop_image(sample_image, box)

        assert face.shape == (40, 30, 3)
        assert np.array_equal(face[0, 0], sample_image[20, 10])
        assert np.array_equal(face[-1, -1], sample_image[59, 39])

    def test_fractional_box_truncated(self, sample_image):
        """Coordinates are truncated toward zero."""
        from face_verify.imaging import BoundingBox, crop_image

        box = BoundingBox(left=10.9, top=5.5, width=20.7, height=15.2)

        face = crop_image(sample_image, box)

        assert face.shape == (15, 20, 3)
        assert np.array_equal(face[0, 0], sample_image[5, 10])

    def test_crop_is_independent_copy(self, sample_image):
        """Writing to the crop leaves the source alone."""
        from face_verify.imaging import BoundingBox, crop_image

        original = sample_image.copy()
        face = crop_image(sample_image, BoundingBox(0, 0, 8, 8))
        face[:] = 0

        assert np.array_equal(sample_image, original)

    def test_full_image_box(self, sample_image):
        """A box covering the whole image is in bounds."""
        from face_verify.imaging import BoundingBox, crop_image

        face = crop_image(sample_image, BoundingBox(0, 0, 160, 120))
        assert np.array_equal(face, sample_image)

    @pytest.mark.parametrize(
        "box",
        [
            (-1, 0, 10, 10),
            (0, -5, 10, 10),
            (155, 0, 10, 10),
            (0, 115, 10, 10),
            (0, 0, 0, 10),
            (0, 0, 10, 0.5),
        ],
    )
    def test_out_of_bounds(self, sample_image, box):
        """Boxes leaving the image or collapsing to nothing are rejected."""
        from face_verify import OutOfBoundsError
        from face_verify.imaging import BoundingBox, crop_image

        with pytest.raises(OutOfBoundsError):
            crop_image(sample_image, BoundingBox.from_xywh(box))

    def test_clamp_partial_box(self, sample_image):
        """With clamp, partially outside boxes are cut to the image."""
        from face_verify.imaging import BoundingBox, crop_image

        face = crop_image(sample_image, BoundingBox(150, -5, 20, 15), clamp=True)

        assert face.shape == (10, 10, 3)
        assert np.array_equal(face[0, 0], sample_image[0, 150])

    def test_clamp_disjoint_box(self, sample_image):
        """With clamp, boxes entirely outside still fail."""
        from face_verify import OutOfBoundsError
        from face_verify.imaging import BoundingBox, crop_image

        with pytest.raises(OutOfBoundsError):
            crop_image(sample_image, BoundingBox(200, 0, 10, 10), clamp=True)


class TestBoundingBox:
    """Test cases for BoundingBox."""

    def test_properties(self):
        """Derived edges and area."""
        from face_verify.imaging import BoundingBox

        box = BoundingBox.from_corners(10, 20, 50, 100)

        assert (box.width, box.height) == (40, 80)
        assert (box.right, box.bottom) == (50, 100)
        assert box.area == 3200
        assert box.to_pixels() == (10, 20, 40, 80)
