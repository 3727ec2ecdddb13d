from __future__ import annotations

import unittest

import numpy as np

from art_que.services.morphology_service import MorphologyService


class MorphologyServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.service = MorphologyService()

    def test_disk_kernel_rows_use_floor_sqrt(self) -> None:
        kernel = self.service.disk_kernel(3)
        self.assertEqual(kernel.shape, (7, 7))
        self.assertEqual(kernel.sum(axis=1).tolist(), [1, 5, 5, 7, 5, 5, 1])
        self.assertEqual(int(kernel.sum()), 29)

    def test_negative_radius_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.service.disk_kernel(-1)

    def test_dilate_single_pixel_gives_disk(self) -> None:
        mask = np.zeros((21, 21), dtype=np.uint8)
        mask[10, 10] = 1
        out = self.service.dilate(mask, 3)
        self.assertEqual(int(np.count_nonzero(out)), 29)
        self.assertEqual(set(np.unique(out).tolist()), {0, 255})
        self.assertEqual(out[10, 13], 255)
        self.assertEqual(out[13, 10], 255)
        self.assertEqual(out[12, 12], 255)   # 2² + 2² = 8 <= 9
        self.assertEqual(out[13, 11], 0)     # 3² + 1² = 10 > 9

    def test_dilate_clips_at_image_bounds(self) -> None:
        mask = np.zeros((10, 10), dtype=np.uint8)
        mask[0, 0] = 255
        out = self.service.dilate(mask, 3)
        self.assertEqual(int(np.count_nonzero(out)), 11)
        # no wraparound to the opposite edges
        self.assertFalse(out[:, -1].any())
        self.assertFalse(out[-1, :].any())

    def test_erode_keeps_only_pixels_whose_disk_fits(self) -> None:
        mask = np.zeros((20, 20), dtype=np.uint8)
        mask[5:12, 5:12] = 255   # 7x7 block, exactly one disk of radius 3 fits
        out = self.service.erode(mask, 3)
        self.assertEqual(int(np.count_nonzero(out)), 1)
        self.assertEqual(out[8, 8], 255)

    def test_erode_treats_outside_as_foreground(self) -> None:
        mask = np.full((6, 6), 255, dtype=np.uint8)
        out = self.service.erode(mask, 2)
        self.assertTrue((out == 255).all())

    def test_radius_zero_is_identity(self) -> None:
        mask = np.zeros((5, 5), dtype=np.uint8)
        mask[1, 3] = 7
        np.testing.assert_array_equal(self.service.dilate(mask, 0), (mask != 0) * 255)
        np.testing.assert_array_equal(self.service.erode(mask, 0), (mask != 0) * 255)

    def test_closing_fills_small_hole_and_keeps_shape(self) -> None:
        mask = np.zeros((30, 30), dtype=np.uint8)
        mask[8:21, 8:21] = 255
        mask[14, 14] = 0
        mask[14, 15] = 0
        closed = self.service.close(mask, 3)
        self.assertEqual(closed[14, 14], 255)
        self.assertEqual(closed[14, 15], 255)
        self.assertTrue((closed[8:21, 8:21] == 255).all())
        self.assertEqual(closed[14, 4], 0)

    def test_inputs_are_not_modified(self) -> None:
        mask = np.zeros((9, 9), dtype=np.uint8)
        mask[4, 4] = 255
        before = mask.copy()
        self.service.close(mask, 2)
        np.testing.assert_array_equal(mask, before)


if __name__ == "__main__":
    unittest.main()
