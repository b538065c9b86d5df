"""
Tests for config validation, defaults and planning
"""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from ball_tracking.config import (
    DEFAULT_SECTIONS,
    build_plan,
    load_config_with_env,
    validate_config_full,
    validate_config_pydantic,
)


def zone(zone_id, x, y, radius=0.05):
    return {"id": zone_id, "x": x, "y": y, "radius": radius}


class TestConfigValidation(unittest.TestCase):
    """Test validate_config_full errors and warnings."""

    def test_empty_config_is_valid(self):
        """Test every section is optional."""
        result = validate_config_full({})

        self.assertTrue(result.valid)
        self.assertIn("No zones configured - using default mat layout", result.warnings)

    def test_defaults_are_valid(self):
        result = validate_config_full(load_config_with_env({}))
        self.assertTrue(result.valid, result.errors)

    def test_not_a_mapping(self):
        result = validate_config_full(["zones"])
        self.assertFalse(result.valid)

    def test_confidence_out_of_range(self):
        result = validate_config_full({"detection": {"confidence_threshold": 1.5}})

        self.assertFalse(result.valid)
        self.assertIn("detection.confidence_threshold must be between 0.0 and 1.0", result.errors)

    def test_model_file_format(self):
        result = validate_config_full({"detection": {"model_file": "model.onnx"}})

        self.assertFalse(result.valid)
        self.assertTrue(any(".pt format" in e for e in result.errors))

    def test_missing_model_file_is_warning(self):
        result = validate_config_full({"detection": {"model_file": "does-not-exist.pt"}})

        self.assertTrue(result.valid)
        self.assertTrue(any("Model file not found" in w for w in result.warnings))

    def test_unknown_selection(self):
        result = validate_config_full({"detection": {"selection": "closest"}})
        self.assertFalse(result.valid)

    def test_empty_accepted_classes(self):
        result = validate_config_full({"detection": {"accepted_classes": []}})
        self.assertFalse(result.valid)

    def test_trail_settings(self):
        result = validate_config_full({"trail": {"capacity": 0, "fade_window_ms": -1}})

        self.assertFalse(result.valid)
        self.assertIn("trail.capacity must be a positive integer", result.errors)
        self.assertIn("trail.fade_window_ms must be positive", result.errors)

    def test_sample_every_n(self):
        result = validate_config_full({"tracking": {"sample_every_n": 0}})
        self.assertIn("tracking.sample_every_n must be a positive integer", result.errors)

    def test_auto_calibrate_can_be_disabled(self):
        result = validate_config_full({"tracking": {"auto_calibrate_after_frames": None}})
        self.assertTrue(result.valid)

    def test_unknown_zone_resolution(self):
        result = validate_config_full({"tracking": {"zone_resolution": "first"}})
        self.assertFalse(result.valid)

    def test_dimensions_set_together(self):
        result = validate_config_full({"display": {"width": 640}})

        self.assertFalse(result.valid)
        self.assertIn("display.width and display.height must be set together", result.errors)

    def test_camera_fps(self):
        result = validate_config_full({"camera": {"fps": 0}})
        self.assertIn("camera.fps must be positive", result.errors)

    @patch.dict(os.environ, {}, clear=True)
    def test_section_not_a_mapping(self):
        """Test a list where a section mapping belongs is an error, not a crash."""
        result = validate_config_full(load_config_with_env({"trail": [1]}))

        self.assertFalse(result.valid)
        self.assertIn("'trail' must be a mapping", result.errors)

    def test_every_section_type_checked(self):
        result = validate_config_full(
            {"detection": "yolo", "tracking": 3, "camera": [0], "runtime": True}
        )

        self.assertFalse(result.valid)
        for section in ("detection", "tracking", "camera", "runtime"):
            self.assertIn(f"'{section}' must be a mapping", result.errors)

    def test_overlap_check_with_invalid_tracking_section(self):
        result = validate_config_full(
            {"tracking": [], "zones": [zone(1, 0.5, 0.5, 0.2), zone(2, 0.6, 0.5, 0.2)]}
        )

        self.assertIn("'tracking' must be a mapping", result.errors)
        self.assertIn(
            "Zones 1 and 2 overlap - zone 2 wins inside the overlap", result.warnings
        )


class TestZoneValidation(unittest.TestCase):
    """Test zone checks in validate_config_full."""

    def test_valid_zones(self):
        result = validate_config_full({"zones": [zone(1, 0.5, 0.8), zone(2, 0.2, 0.8)]})

        self.assertTrue(result.valid)
        self.assertEqual(result.derived["zone_ids"], [1, 2])
        self.assertEqual(result.warnings, [])

    def test_empty_zone_list(self):
        result = validate_config_full({"zones": []})

        self.assertFalse(result.valid)
        self.assertIn("At least one zone is required", result.errors)

    def test_duplicate_zone_id(self):
        result = validate_config_full({"zones": [zone(1, 0.5, 0.8), zone(1, 0.2, 0.8)]})

        self.assertFalse(result.valid)
        self.assertIn("zones[1]: duplicate zone id 1", result.errors)

    def test_coordinates_out_of_range(self):
        result = validate_config_full({"zones": [zone(1, 1.5, 0.8)]})
        self.assertIn("zones[0].x must be 0-1", result.errors)

    def test_missing_radius(self):
        result = validate_config_full({"zones": [{"id": 1, "x": 0.5, "y": 0.5}]})
        self.assertIn("zones[0].radius is required", result.errors)

    def test_zero_radius(self):
        result = validate_config_full({"zones": [zone(1, 0.5, 0.5, radius=0)]})
        self.assertFalse(result.valid)

    def test_overlap_warning(self):
        """Test overlapping zones are allowed but flagged with the winner."""
        result = validate_config_full(
            {"zones": [zone(1, 0.5, 0.5, 0.2), zone(2, 0.6, 0.5, 0.2)]}
        )

        self.assertTrue(result.valid)
        self.assertIn(
            "Zones 1 and 2 overlap - zone 2 wins inside the overlap", result.warnings
        )

    def test_overlap_warning_nearest(self):
        result = validate_config_full(
            {
                "tracking": {"zone_resolution": "nearest"},
                "zones": [zone(1, 0.5, 0.5, 0.2), zone(2, 0.6, 0.5, 0.2)],
            }
        )

        self.assertTrue(
            any("nearer center wins" in w for w in result.warnings), result.warnings
        )


class TestPydanticSchema(unittest.TestCase):
    """Test the pydantic schema."""

    def test_defaults(self):
        config = validate_config_pydantic(load_config_with_env({}))

        self.assertEqual(config.detection.confidence_threshold, 0.65)
        self.assertEqual(config.trail.capacity, 30)
        self.assertEqual(len(config.zones), 6)
        self.assertIsNone(config.display.width)

    def test_unknown_key_rejected(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"trail": {"length": 30}})

    def test_duplicate_zone_ids_rejected(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"zones": [zone(1, 0.5, 0.8), zone(1, 0.2, 0.8)]})

    def test_empty_zones_rejected(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"zones": []})

    def test_threshold_bounds(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"detection": {"confidence_threshold": -0.1}})


class TestLoadConfigWithEnv(unittest.TestCase):
    """Test default filling and environment overrides."""

    @patch.dict(os.environ, {}, clear=True)
    def test_fills_missing_sections(self):
        config = load_config_with_env(None)

        for section in DEFAULT_SECTIONS:
            self.assertIn(section, config)
        self.assertEqual(config["camera"]["url"], 0)
        self.assertNotIn("zones", config)

    @patch.dict(os.environ, {}, clear=True)
    def test_keeps_explicit_values(self):
        config = load_config_with_env({"trail": {"capacity": 5}})

        self.assertEqual(config["trail"]["capacity"], 5)
        self.assertEqual(config["trail"]["fade_window_ms"], 1000)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_not_shared(self):
        first = load_config_with_env({})
        first["detection"]["accepted_classes"].append("frisbee")

        second = load_config_with_env({})

        self.assertNotIn("frisbee", second["detection"]["accepted_classes"])

    @patch.dict(os.environ, {"CAMERA_URL": "2"}, clear=True)
    def test_camera_index_from_env(self):
        config = load_config_with_env({})
        self.assertEqual(config["camera"]["url"], 2)

    @patch.dict(os.environ, {"CAMERA_URL": "rtsp://mat-cam/stream"}, clear=True)
    def test_camera_url_from_env(self):
        config = load_config_with_env({"camera": {"url": 0}})
        self.assertEqual(config["camera"]["url"], "rtsp://mat-cam/stream")

    @patch.dict(os.environ, {"BALL_TRACKING_MODEL": "custom.pt"}, clear=True)
    def test_model_file_from_env(self):
        config = load_config_with_env({})
        self.assertEqual(config["detection"]["model_file"], "custom.pt")

    @patch.dict(os.environ, {"CAMERA_URL": "1"}, clear=True)
    def test_env_override_skips_invalid_section(self):
        """Test a malformed camera section is left for validation to report."""
        config = load_config_with_env({"camera": [0]})
        self.assertEqual(config["camera"], [0])


class TestBuildPlan(unittest.TestCase):
    """Test the resolved tracking plan."""

    @patch.dict(os.environ, {}, clear=True)
    def test_default_plan(self):
        plan = build_plan(load_config_with_env({}))

        self.assertEqual([z["id"] for z in plan.zones], [1, 2, 3, 4, 5, 6])
        self.assertEqual(plan.overlaps, [])
        self.assertEqual(plan.tracking["sample_every_n"], 3)
        self.assertEqual(plan.frame_dims["source"], {"width": 300, "height": 300})

    @patch.dict(os.environ, {}, clear=True)
    def test_plan_reports_overlaps(self):
        config = load_config_with_env(
            {"zones": [zone(2, 0.6, 0.5, 0.2), zone(1, 0.5, 0.5, 0.2)]}
        )

        plan = build_plan(config)

        self.assertEqual([z["id"] for z in plan.zones], [1, 2])
        self.assertEqual(plan.overlaps, [(1, 2)])


if __name__ == "__main__":
    unittest.main()
