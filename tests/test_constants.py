"""
Unit tests for constants module.

Tests the weights and thresholds used by the scoring engine.
"""

import unittest

from stargazer.api.core.constants import (
    CRITICAL_CLOUD_COVER,
    HIGH_LATITUDE_THRESHOLD,
    IMAGING_IMPOSSIBLE_CLOUD_COVER,
    MAX_SCORE_DELTA,
    MAX_SIQS,
    MIN_SIQS,
    NIGHTTIME_WEIGHTS,
    PRECIPITATION_SCORE_CAP,
    SIQS_WEIGHTS,
    VIABLE_THRESHOLD,
)


class TestConstants(unittest.TestCase):
    """Test suite for constants module"""

    def test_score_bounds(self):
        """Test the SIQS range"""
        self.assertEqual(MIN_SIQS, 0.0)
        self.assertEqual(MAX_SIQS, 10.0)
        self.assertTrue(MIN_SIQS < VIABLE_THRESHOLD < MAX_SIQS)

    def test_weights_sum_to_one(self):
        """Test factor weights are normalised"""
        self.assertAlmostEqual(sum(SIQS_WEIGHTS.values()), 1.0)
        self.assertAlmostEqual(sum(NIGHTTIME_WEIGHTS.values()), 1.0)

    def test_cloud_weight_dominates(self):
        """Test cloud cover carries the largest weight"""
        self.assertEqual(max(SIQS_WEIGHTS, key=SIQS_WEIGHTS.__getitem__), "cloud")
        self.assertEqual(NIGHTTIME_WEIGHTS["cloud"], 0.8)

    def test_weights_read_only(self):
        """Test weight tables cannot be modified"""
        with self.assertRaises(TypeError):
            SIQS_WEIGHTS["cloud"] = 1.0  # type: ignore[index]

    def test_thresholds(self):
        """Test correction thresholds"""
        self.assertEqual(IMAGING_IMPOSSIBLE_CLOUD_COVER, 40.0)
        self.assertEqual(CRITICAL_CLOUD_COVER, 80.0)
        self.assertEqual(MAX_SCORE_DELTA, 4.0)
        self.assertEqual(PRECIPITATION_SCORE_CAP, 6.0)
        self.assertEqual(HIGH_LATITUDE_THRESHOLD, 45.0)


if __name__ == "__main__":
    unittest.main()
