"""
Unit tests for siqs/calculator.py

Tests weighted aggregation, the six-factor SIQS and the fallback estimate.
"""

import math
import unittest

from stargazer.api.core.constants import NIGHTTIME_WEIGHTS, SIQS_WEIGHTS
from stargazer.api.core.exceptions import InvalidBortleScaleError
from stargazer.api.siqs.calculator import (
    SiqsInputs,
    SiqsResult,
    calculate_fallback_siqs,
    calculate_siqs,
    is_missing,
    weighted_score,
)


class TestWeightedScore(unittest.TestCase):
    """Test suite for weighted_score function"""

    def test_weights_sum_to_one(self) -> None:
        """Test the standard weight tables are normalised"""
        self.assertAlmostEqual(sum(SIQS_WEIGHTS.values()), 1.0)
        self.assertAlmostEqual(sum(NIGHTTIME_WEIGHTS.values()), 1.0)

    def test_all_factors(self) -> None:
        """Test weighted average with every factor present"""
        scores = {name: 10.0 for name in SIQS_WEIGHTS}
        self.assertAlmostEqual(weighted_score(scores), 10.0)

    def test_renormalises_missing_factors(self) -> None:
        """Test missing factors are dropped and weights re-normalised"""
        scores = {"cloud": 10.0, "light_pollution": 0.0, "temperature": None, "humidity": float("nan")}
        # 0.35 * 10 / (0.35 + 0.25)
        self.assertAlmostEqual(weighted_score(scores), 3.5 / 0.6)

    def test_no_factors(self) -> None:
        """Test that no usable factor gives 0"""
        self.assertEqual(weighted_score({}), 0.0)
        self.assertEqual(weighted_score({"cloud": None}), 0.0)

    def test_unknown_factor_ignored(self) -> None:
        """Test factors without a weight are ignored"""
        self.assertAlmostEqual(weighted_score({"cloud": 8.0, "seeing": 0.0}), 8.0)


class TestIsMissing(unittest.TestCase):
    """Test suite for is_missing function"""

    def test_missing_values(self) -> None:
        """Test None and NaN are missing"""
        self.assertTrue(is_missing(None))
        self.assertTrue(is_missing(math.nan))
        self.assertFalse(is_missing(0.0))


class TestCalculateSiqs(unittest.TestCase):
    """Test suite for calculate_siqs function"""

    def test_perfect_conditions(self) -> None:
        """Test ideal weather at a dark site"""
        inputs = SiqsInputs(
            bortle_scale=1,
            cloud_cover=0,
            temperature=12,
            humidity=30,
            wind_speed=5,
            precipitation=0,
        )
        result = calculate_siqs(inputs)
        # 0.35*10 + 0.25*9.1 + 0.4*10
        self.assertAlmostEqual(result.score, 9.775, delta=0.06)
        self.assertTrue(result.is_viable)
        self.assertEqual(len(result.factors), 6)
        self.assertEqual(result.factors[0].name, "Cloud Cover")
        self.assertEqual(result.factors[1].name, "Light Pollution")

    def test_overcast_city(self) -> None:
        """Test cloudy sky in a city is not viable"""
        inputs = SiqsInputs(bortle_scale=9, cloud_cover=100, humidity=95, wind_speed=50, precipitation=3)
        result = calculate_siqs(inputs)
        self.assertLess(result.score, 4.0)
        self.assertFalse(result.is_viable)

    def test_only_bortle(self) -> None:
        """Test that Bortle alone still produces a score"""
        result = calculate_siqs(SiqsInputs(bortle_scale=3))
        self.assertEqual(result.score, 7.3)
        self.assertEqual(len(result.factors), 1)

    def test_score_rounded_to_one_decimal(self) -> None:
        """Test the score has at most one decimal"""
        result = calculate_siqs(SiqsInputs(bortle_scale=4.5, cloud_cover=33, humidity=61))
        self.assertEqual(result.score, round(result.score, 1))
        self.assertGreaterEqual(result.score, 0.0)
        self.assertLessEqual(result.score, 10.0)

    def test_viable_threshold(self) -> None:
        """Test viability follows the configured threshold"""
        inputs = SiqsInputs(bortle_scale=5, cloud_cover=50)
        score = calculate_siqs(inputs).score
        self.assertFalse(calculate_siqs(inputs, viable_threshold=score + 0.1).is_viable)
        self.assertTrue(calculate_siqs(inputs, viable_threshold=score).is_viable)

    def test_invalid_bortle(self) -> None:
        """Test that an invalid Bortle raises"""
        with self.assertRaises(InvalidBortleScaleError):
            calculate_siqs(SiqsInputs(bortle_scale=12))

    def test_custom_weights(self) -> None:
        """Test nighttime weights ignore other factors"""
        inputs = SiqsInputs(bortle_scale=1, cloud_cover=10, wind_speed=80)
        result = calculate_siqs(inputs, NIGHTTIME_WEIGHTS, calculation_type="nighttime")
        # 0.8*10 + 0.2*9.1
        self.assertEqual(result.score, 9.8)
        self.assertEqual(result.calculation_type, "nighttime")
        self.assertNotIn("Wind", [f.name for f in result.factors])

    def test_result_serialises(self) -> None:
        """Test to_dict contains the factors"""
        result = calculate_siqs(SiqsInputs(bortle_scale=2, cloud_cover=20))
        data = result.to_dict()
        self.assertEqual(data["score"], result.score)
        self.assertEqual(len(data["factors"]), 2)

    def test_with_source(self) -> None:
        """Test with_source returns a relabelled copy"""
        result = SiqsResult(score=5.0, is_viable=True)
        cached = result.with_source("cached")
        self.assertEqual(cached.source, "cached")
        self.assertEqual(result.source, "calculated")


class TestCalculateFallbackSiqs(unittest.TestCase):
    """Test suite for calculate_fallback_siqs function"""

    def test_mid_latitude(self) -> None:
        """Test fallback equals light pollution score at mid latitudes"""
        result = calculate_fallback_siqs(35.0, 3)
        self.assertEqual(result.score, 7.3)
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.calculation_type, "fallback")
        self.assertEqual(len(result.factors), 1)

    def test_high_latitude_bonus(self) -> None:
        """Test high latitude sites get a bonus"""
        self.assertEqual(calculate_fallback_siqs(60.0, 3).score, 8.3)
        self.assertEqual(calculate_fallback_siqs(-50.0, 3).score, 8.3)

    def test_boundary_latitude(self) -> None:
        """Test exactly 45 degrees gets no bonus"""
        self.assertEqual(calculate_fallback_siqs(45.0, 3).score, 7.3)

    def test_capped_at_ten(self) -> None:
        """Test the bonus never exceeds 10"""
        self.assertLessEqual(calculate_fallback_siqs(70.0, 1).score, 10.0)

    def test_city_not_viable(self) -> None:
        """Test Bortle 9 fallback is not viable"""
        result = calculate_fallback_siqs(30.0, 9)
        self.assertEqual(result.score, 1.9)
        self.assertFalse(result.is_viable)

    def test_invalid_bortle(self) -> None:
        """Test that an invalid Bortle raises"""
        with self.assertRaises(InvalidBortleScaleError):
            calculate_fallback_siqs(30.0, 0)


if __name__ == "__main__":
    unittest.main()
