"""
Tests for fingerprint extraction.
"""

from fractions import Fraction

import numpy as np
import pytest
from PIL import Image

from quadmatch.config import MatchConfig
from quadmatch.scanner import (
    analyze_image,
    cell_index,
    divide_evenly,
    extract_fingerprint,
    extract_pixels,
    find_background_colors,
)


def raster_from(array):
    return Image.fromarray(np.asarray(array, dtype=np.uint8), 'RGB')


def pack(r, g, b):
    return (r << 16) | (g << 8) | b


# 2x2 cells, nothing discarded
PLAIN_2x2 = MatchConfig(split_quadrants=4, background_removal_fraction=0)


class TestDivideEvenly:
    """Tests for divide_evenly."""

    def test_remainder_goes_first(self):
        assert divide_evenly(10, 3) == [4, 3, 3]

    def test_exact_division(self):
        assert divide_evenly(250, 5) == [50] * 5

    def test_more_parts_than_length(self):
        assert divide_evenly(3, 5) == [1, 1, 1, 0, 0]

    def test_sum_and_spread(self):
        for length in (0, 1, 7, 125, 249, 250):
            for parts in (1, 2, 3, 16, 40):
                chunks = divide_evenly(length, parts)
                assert len(chunks) == parts
                assert sum(chunks) == length
                assert max(chunks) - min(chunks) <= 1
                assert chunks == sorted(chunks, reverse=True)

    def test_rejects_zero_parts(self):
        with pytest.raises(ValueError):
            divide_evenly(10, 0)


class TestCellIndex:
    """Tests for mapping coordinates to chunks."""

    def test_uneven_chunks(self):
        coords = np.arange(10)
        assert cell_index(coords, [4, 3, 3]).tolist() == [0, 0, 0, 0, 1, 1, 1, 2, 2, 2]

    def test_empty_chunks_never_used(self):
        assert cell_index(np.arange(3), [1, 1, 1, 0, 0]).tolist() == [0, 1, 2]


class TestExtractPixels:
    """Tests for pixel enumeration."""

    def test_column_major_order(self):
        array = np.zeros((3, 2, 3), dtype=np.uint8)
        array[1, 0] = (1, 2, 3)  # x=0, y=1
        array[0, 1] = (4, 5, 6)  # x=1, y=0
        pixels = extract_pixels(raster_from(array))

        assert len(pixels) == 6
        assert pixels.xs.tolist() == [0, 0, 0, 1, 1, 1]
        assert pixels.ys.tolist() == [0, 1, 2, 0, 1, 2]
        assert pixels.rgb[1].tolist() == [1, 2, 3]
        assert pixels.rgb[3].tolist() == [4, 5, 6]
        assert pixels.packed[1] == pack(1, 2, 3)


class TestFindBackgroundColors:
    """Tests for background color selection."""

    def _four_colors(self):
        array = np.zeros((2, 2, 3), dtype=np.uint8)
        array[0, 0] = (10, 0, 0)  # x=0, y=0
        array[1, 0] = (20, 0, 0)  # x=0, y=1
        array[0, 1] = (30, 0, 0)  # x=1, y=0
        array[1, 1] = (40, 0, 0)  # x=1, y=1
        return extract_pixels(raster_from(array))

    def test_ties_broken_by_first_appearance(self):
        pixels = self._four_colors()
        assert find_background_colors(pixels, 0.25).tolist() == [pack(10, 0, 0)]
        # Column-major: the second pixel seen is (x=0, y=1)
        assert find_background_colors(pixels, 0.5).tolist() == [pack(10, 0, 0), pack(20, 0, 0)]

    def test_most_frequent_first(self):
        array = np.zeros((2, 3, 3), dtype=np.uint8)
        array[:, 1:] = (99, 99, 99)
        pixels = extract_pixels(raster_from(array))
        assert find_background_colors(pixels, 0.5).tolist() == [pack(99, 99, 99)]

    def test_count_is_floored(self):
        pixels = self._four_colors()
        assert len(find_background_colors(pixels, 0.24)) == 0
        assert len(find_background_colors(pixels, Fraction(3, 4))) == 3

    def test_single_color_survives_default_fraction(self):
        pixels = extract_pixels(Image.new('RGB', (5, 5), color=(1, 2, 3)))
        assert len(find_background_colors(pixels, 0.05)) == 0


class TestExtractFingerprint:
    """Tests for extract_fingerprint."""

    def test_cells_follow_global_coordinates(self):
        # Left half red, right half green: the right column of cells
        # must hold all the green, whatever the chunk origin.
        array = np.zeros((4, 4, 3), dtype=np.uint8)
        array[:, :2] = (255, 0, 0)
        array[:, 2:] = (0, 255, 0)
        fp = extract_fingerprint(raster_from(array), PLAIN_2x2)

        assert fp.red.tolist() == [[1020, 0], [1020, 0]]
        assert fp.green.tolist() == [[0, 1020], [0, 1020]]
        assert fp.blue.tolist() == [[0, 0], [0, 0]]

    def test_grid_is_indexed_row_then_column(self):
        array = np.zeros((4, 4, 3), dtype=np.uint8)
        array[0, 3] = (255, 255, 255)  # top-right pixel
        fp = extract_fingerprint(raster_from(array), PLAIN_2x2)
        assert fp.red.tolist() == [[0, 255], [0, 0]]

    def test_uneven_cells(self):
        # width 5 -> [3, 2], height 3 -> [2, 1]
        raster = Image.new('RGB', (5, 3), color=(10, 20, 30))
        fp = extract_fingerprint(raster, PLAIN_2x2)
        assert fp.red.tolist() == [[60, 40], [30, 20]]
        assert fp.green.tolist() == [[120, 80], [60, 40]]
        assert fp.blue.tolist() == [[180, 120], [90, 60]]

    def test_background_color_removed_everywhere(self):
        array = np.full((10, 10, 3), 200, dtype=np.uint8)
        for i in range(19):
            array[i // 10, i % 10] = (i + 1, 0, 0)
        # 20 distinct colors at 5% -> the dominant gray is dropped
        config = MatchConfig(split_quadrants=2, background_removal_fraction=0.05)
        fp = extract_fingerprint(raster_from(array), config)

        assert fp.red.tolist() == [[sum(range(1, 20))]]
        assert fp.green.tolist() == [[0]]
        assert fp.blue.tolist() == [[0]]

    def test_single_color_image_keeps_its_color(self):
        raster = Image.new('RGB', (20, 20), color=(10, 20, 30))
        fp = extract_fingerprint(raster, MatchConfig(split_quadrants=4))
        assert fp.red.tolist() == [[1000, 1000], [1000, 1000]]

    def test_all_background_gives_zero_grids(self):
        raster = Image.new('RGB', (20, 20), color=(10, 20, 30))
        fp = extract_fingerprint(raster, MatchConfig(split_quadrants=4, background_removal_fraction=1))
        assert fp.total_intensity == 0
        assert fp.shape == (2, 2)

    def test_default_grid_shape(self):
        for size in [(250, 125), (40, 250), (250, 250), (3, 250)]:
            fp = extract_fingerprint(Image.new('RGB', size, color='white'))
            assert fp.shape == (16, 16)
            assert fp.red.dtype == np.int64

    def test_more_cells_than_pixels(self):
        # 3 px wide with 16 cells per axis: trailing cells stay empty
        fp = extract_fingerprint(Image.new('RGB', (3, 250), color=(1, 1, 1)), MatchConfig(background_removal_fraction=0))
        assert fp.red[:, 3:].sum() == 0
        assert fp.red[:, :3].sum() == 3 * 250

    def test_deterministic(self, sample_images):
        first = analyze_image(sample_images['photo']).fingerprint
        second = analyze_image(sample_images['photo']).fingerprint
        for a, b in zip(first.channels, second.channels):
            assert np.array_equal(a, b)
