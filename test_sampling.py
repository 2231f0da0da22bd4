"""Tests for polyline sampling and label sizing."""

import pytest

from connectordraw.labels import label_box, wrap_text
from connectordraw.sampling import (
    cumulative_lengths,
    locate,
    polyline_length,
    sample_at,
)
from connectordraw.types import Point


@pytest.fixture
def l_path():
    return [Point(0, 0), Point(100, 0), Point(100, 100)]


class TestLengths:
    def test_cumulative_lengths(self, l_path):
        assert cumulative_lengths(l_path) == [0.0, 100.0, 200.0]

    def test_polyline_length(self, l_path):
        assert polyline_length(l_path) == 200.0

    def test_empty(self):
        assert cumulative_lengths([]) == []
        assert polyline_length([]) == 0


class TestLocate:
    def test_midpoint_of_straight_line(self):
        assert sample_at([Point(0, 0), Point(100, 0)], 0.5) == Point(50, 0)

    def test_point_on_second_segment(self, l_path):
        position = locate(l_path, 0.75)
        assert position.point == Point(100, 50)
        assert position.segment_index == 1
        assert position.distance == 150
        assert position.total == 200

    def test_endpoints_are_exact(self, l_path):
        assert sample_at(l_path, 0) == Point(0, 0)
        assert sample_at(l_path, 1) == Point(100, 100)

    def test_out_of_range_t_clamps_to_ends(self, l_path):
        assert sample_at(l_path, -1) == Point(0, 0)
        assert sample_at(l_path, 3) == Point(100, 100)

    def test_zero_length_segments_are_skipped(self):
        position = locate([Point(0, 0), Point(0, 0), Point(100, 0)], 0.5)
        assert position.point == Point(50, 0)
        assert position.segment_index == 1

    def test_zero_total_length_returns_first_point(self):
        assert sample_at([Point(7, 8), Point(7, 8)], 0.5) == Point(7, 8)

    def test_single_point(self):
        assert sample_at([Point(3, 4)], 0.5) == Point(3, 4)

    def test_empty_returns_origin(self):
        assert sample_at([], 0.5) == Point(0, 0)

    def test_offset_is_added(self):
        assert sample_at([Point(0, 0), Point(100, 0)], 0.5, Point(0, -12)) == Point(50, -12)


class TestLabels:
    def test_label_box_from_character_count(self):
        box = label_box("Yes")
        assert box.font_size == 14
        assert box.width == pytest.approx(3 * 14 * 0.6 + 14 * 1.6)
        assert box.height == pytest.approx(14 * 1.8)

    def test_label_box_has_minimum_width(self):
        assert label_box("").width == pytest.approx(28)

    def test_label_box_custom_font_size(self):
        box = label_box("No", 20)
        assert box.width == pytest.approx(2 * 12 + 32)
        assert box.height == pytest.approx(36)

    def test_wrap_text_breaks_between_words(self):
        assert wrap_text("alpha beta gamma", 60, 10) == ["alpha beta", "gamma"]

    def test_wrap_text_keeps_long_word(self):
        assert wrap_text("supercalifragilistic", 30, 10) == ["supercalifragilistic"]
