"""Tests for point cleaning, geometry summary, smoothing, corners and descriptors."""

import math

import numpy as np
import pytest

from sketchsnap.config import DEFAULT_CONFIG, RecognizerConfig
from sketchsnap.errors import (
    DegenerateGeometry, InsufficientPoints, InsufficientSignal, InvalidStroke,
)
from sketchsnap.features import (
    FEATURE_NAMES, as_points, circularity, clean_points, convexity_and_right_angles,
    detect_corners, extract_features, lookahead_window, path_length, smooth_points,
    straightness, summarize_geometry,
)
from sketchsnap.strokes import trace_circle, trace_line


class TestAsPoints:
    def test_empty(self):
        assert as_points([]).shape == (0, 2)

    def test_wrong_shape(self):
        with pytest.raises(InvalidStroke):
            as_points([[1, 2, 3], [4, 5, 6]])

    def test_non_finite(self):
        with pytest.raises(InvalidStroke):
            as_points([[0, 0], [np.nan, 1]])

    def test_ragged(self):
        with pytest.raises(InvalidStroke):
            as_points([[0, 0]] * 10 + [[1, 2, 3]] + [[5, 5]] * 10)

    def test_non_numeric(self):
        with pytest.raises(InvalidStroke):
            as_points([["a", "b"], ["c", "d"]])

    def test_none_coordinate(self):
        with pytest.raises(InvalidStroke):
            as_points([[0, 0], [None, {}]])

    def test_invalid_stroke_is_value_error(self):
        with pytest.raises(ValueError):
            as_points([[0, 0], [np.inf, 1]])


class TestCleanPoints:
    def test_too_few_points(self):
        with pytest.raises(InsufficientPoints):
            clean_points(trace_line((0, 0), (100, 0), num_points=14))

    def test_drops_near_duplicates(self):
        pts = trace_line((0, 0), (190, 0), num_points=20)   # spacing 10
        noisy = np.repeat(pts, 2, axis=0)
        cleaned = clean_points(noisy)
        assert len(cleaned) == 20
        np.testing.assert_allclose(cleaned, pts)

    def test_first_point_kept(self):
        pts = trace_line((5, 7), (200, 7), num_points=20)
        assert tuple(clean_points(pts)[0]) == (5.0, 7.0)

    def test_kept_points_respect_noise_floor(self):
        rng = np.random.default_rng(1)
        pts = np.cumsum(rng.uniform(-3, 3, (200, 2)), axis=0)
        cleaned = clean_points(pts)
        gaps = np.linalg.norm(np.diff(cleaned, axis=0), axis=1)
        assert np.all(gaps > DEFAULT_CONFIG.noise_floor)

    def test_insufficient_signal(self):
        rng = np.random.default_rng(0)
        pts = rng.uniform(0, 1, (20, 2))
        with pytest.raises(InsufficientSignal):
            clean_points(pts)


class TestSummarizeGeometry:
    def test_square_closed(self, square_stroke):
        s = summarize_geometry(clean_points(square_stroke))
        assert s.is_closed
        assert s.width == pytest.approx(200)
        assert s.height == pytest.approx(200)
        assert s.aspect == pytest.approx(1.0)
        assert s.squareness == pytest.approx(1.0)
        assert s.diagonal == pytest.approx(200 * math.sqrt(2))

    def test_rectangle_aspect_and_squareness(self, rectangle_stroke):
        s = summarize_geometry(clean_points(rectangle_stroke))
        assert s.aspect == pytest.approx(2.5)
        assert s.squareness == pytest.approx(0.4)

    def test_line_open(self, line_stroke):
        s = summarize_geometry(clean_points(line_stroke))
        assert not s.is_closed

    def test_center(self, circle_stroke):
        s = summarize_geometry(clean_points(circle_stroke))
        assert s.center == pytest.approx((200, 200))

    def test_small_closed_stroke_is_degenerate(self):
        pts = trace_circle((50, 50), 6, num_points=16)
        pts = np.vstack([pts, pts[:1]])
        with pytest.raises(DegenerateGeometry):
            summarize_geometry(clean_points(pts))

    def test_closure_tolerance_configurable(self, square_stroke):
        # last sample sits 10 units from the first on a 200-wide box
        tight = RecognizerConfig(closure_tolerance=0.01)
        assert not summarize_geometry(clean_points(square_stroke, tight), tight).is_closed


class TestSmoothPoints:
    def test_shape_preserved(self, square_stroke):
        assert smooth_points(square_stroke, True).shape == square_stroke.shape

    def test_straight_line_unchanged_inside(self):
        pts = trace_line((0, 0), (190, 0), num_points=20)
        out = smooth_points(pts, False)
        np.testing.assert_allclose(out[4:-4], pts[4:-4])

    def test_closed_keeps_centroid(self, circle_stroke):
        out = smooth_points(circle_stroke, True)
        np.testing.assert_allclose(out.mean(axis=0), circle_stroke.mean(axis=0))

    def test_zero_passes_identity(self, square_stroke):
        cfg = RecognizerConfig(smoothing_passes=0)
        np.testing.assert_allclose(smooth_points(square_stroke, True, cfg), square_stroke)


class TestPathMeasures:
    def test_path_length(self):
        assert path_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11)

    def test_straight_line(self):
        assert straightness(trace_line((0, 0), (100, 50), 30)) == pytest.approx(1.0)

    def test_detour(self):
        assert straightness([(0, 0), (50, 50), (100, 0)]) == pytest.approx(math.sqrt(2))

    def test_coincident_endpoints(self):
        assert straightness([(0, 0), (10, 0), (0, 0)]) == 1.0


class TestCorners:
    def test_lookahead_window(self):
        assert lookahead_window(80) == 4
        assert lookahead_window(10) == DEFAULT_CONFIG.min_lookahead

    def test_square_has_four(self, square_stroke):
        smoothed = smooth_points(square_stroke, True)
        indices, angles = detect_corners(smoothed, True, 200, 200)
        assert len(indices) == 4
        for a in angles:
            assert DEFAULT_CONFIG.min_corner_angle < a < DEFAULT_CONFIG.max_corner_angle

    def test_circle_has_none(self, circle_stroke):
        smoothed = smooth_points(circle_stroke, True)
        indices, _ = detect_corners(smoothed, True, 200, 200)
        assert indices == []

    def test_open_margins_skipped(self):
        # a hook right at the start of an open stroke cannot be a corner
        pts = np.vstack([[(0, 20), (0, 10)], trace_line((0, 0), (300, 0), 30)])
        smoothed = smooth_points(pts, False)
        indices, _ = detect_corners(smoothed, False, 300, 20)
        step = lookahead_window(len(pts))
        assert all(step <= i < len(pts) - step for i in indices)

    def test_corners_spatially_separated(self, square_stroke):
        smoothed = smooth_points(square_stroke, True)
        indices, _ = detect_corners(smoothed, True, 200, 200)
        min_sep = 200 * DEFAULT_CONFIG.corner_dedup_fraction
        for i in indices:
            for j in indices:
                if i != j:
                    assert np.linalg.norm(smoothed[i] - smoothed[j]) >= min_sep


class TestDescriptors:
    def test_circularity_open_is_zero(self, line_stroke):
        s = summarize_geometry(clean_points(line_stroke))
        assert circularity(line_stroke, s) == 0.0

    def test_circularity_circle(self, circle_stroke):
        s = summarize_geometry(clean_points(circle_stroke))
        assert circularity(circle_stroke, s) > 0.98

    def test_unit_square(self):
        convex, right = convexity_and_right_angles([(0, 0), (1, 0), (1, 1), (0, 1)])
        assert convex
        assert right == pytest.approx(1.0)

    def test_concave(self):
        arrow = [(0, 0), (10, 0), (5, 3), (10, 10), (0, 10)]
        convex, _ = convexity_and_right_angles(arrow)
        assert not convex

    def test_fewer_than_three_vertices(self):
        assert convexity_and_right_angles([(0, 0), (5, 5)]) == (False, 0.0)

    def test_collinear_vertices(self):
        assert convexity_and_right_angles([(0, 0), (10, 0), (20, 0), (30, 0)]) == (True, 0.0)

    def test_equilateral_has_no_right_angles(self):
        tri = [(0, 0), (10, 0), (5, 10 * math.sqrt(3) / 2)]
        convex, right = convexity_and_right_angles(tri)
        assert convex
        assert right == 0.0


class TestExtractFeatures:
    def test_square(self, square_stroke):
        f = extract_features(square_stroke)
        assert f.is_closed
        assert f.corners == 4
        assert f.right_angle_score == pytest.approx(1.0)
        assert 0.8 < f.circularity < 0.9
        assert f.is_convex
        assert len(f.corner_points) == len(f.corner_indices) == len(f.corner_angles) == 4

    def test_rectangle(self, rectangle_stroke):
        f = extract_features(rectangle_stroke)
        assert f.corners == 4
        assert f.right_angle_score == pytest.approx(1.0)
        assert f.circularity < 0.75

    def test_circle(self, circle_stroke):
        f = extract_features(circle_stroke)
        assert f.is_closed
        assert f.corners == 0
        assert f.circularity > 0.95
        assert min(f.width, f.height) / 2 == pytest.approx(100, rel=0.01)

    def test_line(self, line_stroke):
        f = extract_features(line_stroke)
        assert not f.is_closed
        assert f.straightness < 1.05
        assert f.circularity == 0.0
        assert f.start_x < 20
        assert f.end_x > 280

    def test_triangle(self, triangle_stroke):
        assert extract_features(triangle_stroke).corners == 3

    def test_pentagon(self, pentagon_stroke):
        assert extract_features(pentagon_stroke).corners == 5

    def test_hexagon(self, hexagon_stroke):
        f = extract_features(hexagon_stroke)
        assert f.corners == 6
        assert f.is_convex

    def test_vector_order(self, square_stroke):
        f = extract_features(square_stroke)
        vec = f.to_vector()
        assert vec.shape == (len(FEATURE_NAMES),)
        assert vec[FEATURE_NAMES.index("corners")] == 4
        assert vec[FEATURE_NAMES.index("closed")] == 1.0

    def test_deterministic(self, square_stroke):
        assert extract_features(square_stroke) == extract_features(square_stroke.copy())
