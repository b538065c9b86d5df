"""
Tests for zone containment and overlap resolution
"""

import unittest

from ball_tracking.config.geometry import build_zone_map, find_overlapping_zones, parse_zones
from ball_tracking.core.zones import ZoneMapper, contains, normalize
from ball_tracking.models import ConfigValidationError, Position, Zone, ZoneMap


class TestContainment(unittest.TestCase):
    """Test point-in-zone checks."""

    def setUp(self):
        self.mapper = ZoneMapper(ZoneMap([Zone(1, 0.5, 0.8, 0.05)]))

    def test_point_inside(self):
        """Test a point near the center is in the zone."""
        self.assertEqual(self.mapper.zone_at(0.51, 0.79), 1)

    def test_point_outside(self):
        """Test a point 0.1 away from a 0.05-radius zone is not."""
        self.assertIsNone(self.mapper.zone_at(0.6, 0.8))

    def test_boundary_is_outside(self):
        """Test containment is strict: a point on the circle is outside."""
        zone = Zone(1, 0.0, 0.0, 0.5)
        self.assertFalse(contains(zone, 0.5, 0.0))
        self.assertTrue(contains(zone, 0.49, 0.0))


class TestOverlapResolution(unittest.TestCase):
    """Test which zone wins when zones overlap."""

    def setUp(self):
        self.zones = ZoneMap([Zone(1, 0.5, 0.5, 0.2), Zone(2, 0.6, 0.5, 0.2)])

    def test_last_match_picks_higher_id(self):
        """Test the later zone wins even when the point is nearer the earlier one."""
        mapper = ZoneMapper(self.zones)
        self.assertEqual(mapper.zone_at(0.45, 0.5), 2)

    def test_last_match_ignores_input_order(self):
        zones = ZoneMap([Zone(2, 0.6, 0.5, 0.2), Zone(1, 0.5, 0.5, 0.2)])
        self.assertEqual(ZoneMapper(zones).zone_at(0.45, 0.5), 2)

    def test_nearest_picks_closest_center(self):
        mapper = ZoneMapper(self.zones, resolution="nearest")
        self.assertEqual(mapper.zone_at(0.45, 0.5), 1)
        self.assertEqual(mapper.zone_at(0.65, 0.5), 2)

    def test_nearest_tie_goes_to_later_zone(self):
        zones = ZoneMap([Zone(1, 0.25, 0.5, 0.5), Zone(2, 0.75, 0.5, 0.5)])
        mapper = ZoneMapper(zones, resolution="nearest")
        self.assertEqual(mapper.zone_at(0.5, 0.5), 2)

    def test_invalid_resolution(self):
        with self.assertRaises(ValueError):
            ZoneMapper(self.zones, resolution="first")

    def test_find_overlapping_zones(self):
        self.assertEqual(find_overlapping_zones(self.zones), [(1, 2)])


class TestLocate(unittest.TestCase):
    """Test display-pixel positions mapped through normalization."""

    def test_normalize(self):
        position = Position(x=150.0, y=240.0, timestamp=0)
        self.assertEqual(normalize(position, (300, 300)), (0.5, 0.8))

    def test_normalize_rejects_zero_dims(self):
        with self.assertRaises(ValueError):
            normalize(Position(x=1.0, y=1.0, timestamp=0), (0, 300))

    def test_locate_default_layout(self):
        """Test each default zone center maps back to its zone."""
        mapper = ZoneMapper(parse_zones({}))
        for zone in mapper.zones.values():
            position = Position(
                x=zone.center_x * 640, y=zone.center_y * 480, timestamp=0
            )
            self.assertEqual(mapper.locate(position, (640, 480)), zone.id)

    def test_locate_none(self):
        mapper = ZoneMapper(parse_zones({}))
        self.assertIsNone(mapper.locate(None, (300, 300)))

    def test_default_layout_has_no_overlaps(self):
        self.assertEqual(find_overlapping_zones(parse_zones({})), [])


class TestZoneConfigParsing(unittest.TestCase):
    """Test building zone maps from config."""

    def test_ids_default_to_position(self):
        zone_map = build_zone_map(
            [{"x": 0.1, "y": 0.1, "radius": 0.05}, {"x": 0.9, "y": 0.9, "radius": 0.05}]
        )
        self.assertEqual(list(zone_map), [1, 2])

    def test_missing_field(self):
        with self.assertRaises(ConfigValidationError):
            build_zone_map([{"x": 0.1, "radius": 0.05}])

    def test_duplicate_ids(self):
        with self.assertRaises(ConfigValidationError):
            build_zone_map(
                [
                    {"id": 1, "x": 0.1, "y": 0.1, "radius": 0.05},
                    {"id": 1, "x": 0.9, "y": 0.9, "radius": 0.05},
                ]
            )

    def test_empty_zones_rejected(self):
        """Test an explicitly empty zone list is an error, not the defaults."""
        with self.assertRaises(ConfigValidationError):
            parse_zones({"zones": []})

    def test_absent_zones_use_defaults(self):
        zone_map = parse_zones({"zones": None})
        self.assertEqual(list(zone_map), [1, 2, 3, 4, 5, 6])
        self.assertEqual(zone_map[1].description, "bottom middle")


if __name__ == "__main__":
    unittest.main()
