"""
Unit tests for siqs/factors.py

Tests the individual 0-10 factor scores and their descriptions.
"""

import unittest

import deal

from stargazer.api.siqs.factors import (
    clamp_score,
    cloud_cover_score,
    describe_cloud_cover,
    describe_precipitation,
    describe_temperature,
    humidity_score,
    light_pollution_score,
    precipitation_score,
    temperature_score,
    wind_score,
)


class TestCloudCoverScore(unittest.TestCase):
    """Test suite for cloud_cover_score function"""

    def test_clear_sky(self) -> None:
        """Test that 10% or less cloud scores 10"""
        self.assertEqual(cloud_cover_score(0), 10.0)
        self.assertEqual(cloud_cover_score(10), 10.0)

    def test_overcast(self) -> None:
        """Test that 90% or more cloud scores 0"""
        self.assertEqual(cloud_cover_score(90), 0.0)
        self.assertEqual(cloud_cover_score(100), 0.0)

    def test_linear_between(self) -> None:
        """Test linear interpolation between 10% and 90%"""
        self.assertAlmostEqual(cloud_cover_score(50), 5.0)
        self.assertAlmostEqual(cloud_cover_score(30), 7.5)

    def test_out_of_range_is_clamped(self) -> None:
        """Test that impossible cloud values are clamped with a warning"""
        with self.assertLogs("stargazer.api.siqs.factors", level="WARNING"):
            self.assertEqual(cloud_cover_score(-20), 10.0)
        with self.assertLogs("stargazer.api.siqs.factors", level="WARNING"):
            self.assertEqual(cloud_cover_score(150), 0.0)


class TestLightPollutionScore(unittest.TestCase):
    """Test suite for light_pollution_score function"""

    def test_darkest_and_brightest(self) -> None:
        """Test Bortle 1 and 9"""
        self.assertAlmostEqual(light_pollution_score(1), 9.1)
        self.assertAlmostEqual(light_pollution_score(9), 1.9)

    def test_half_step(self) -> None:
        """Test half-step Bortle values"""
        self.assertAlmostEqual(light_pollution_score(4.5), 5.95)

    def test_invalid_bortle_violates_contract(self) -> None:
        """Test that Bortle outside 1-9 violates the precondition"""
        with self.assertRaises(deal.PreContractError):
            light_pollution_score(0)
        with self.assertRaises(deal.PreContractError):
            light_pollution_score(10)


class TestTemperatureScore(unittest.TestCase):
    """Test suite for temperature_score function"""

    def test_ideal_range(self) -> None:
        """Test that 5-20°C scores 10"""
        for temp in (5, 12.5, 20):
            self.assertEqual(temperature_score(temp), 10.0)

    def test_cold(self) -> None:
        """Test 0.4 point loss per degree below 5°C"""
        self.assertAlmostEqual(temperature_score(0), 8.0)
        self.assertAlmostEqual(temperature_score(-10), 4.0)

    def test_hot(self) -> None:
        """Test 0.5 point loss per degree above 20°C"""
        self.assertAlmostEqual(temperature_score(30), 5.0)

    def test_floor_at_zero(self) -> None:
        """Test extreme temperatures never go negative"""
        self.assertEqual(temperature_score(-60), 0.0)
        self.assertEqual(temperature_score(60), 0.0)


class TestHumidityScore(unittest.TestCase):
    """Test suite for humidity_score function"""

    def test_bounds(self) -> None:
        """Test dry and saturated air"""
        self.assertEqual(humidity_score(30), 10.0)
        self.assertEqual(humidity_score(40), 10.0)
        self.assertEqual(humidity_score(95), 0.0)
        self.assertEqual(humidity_score(100), 0.0)

    def test_midpoint(self) -> None:
        """Test linear interpolation"""
        self.assertAlmostEqual(humidity_score(67.5), 5.0)


class TestWindScore(unittest.TestCase):
    """Test suite for wind_score function"""

    def test_calm(self) -> None:
        """Test calm wind scores 10"""
        self.assertEqual(wind_score(0), 10.0)
        self.assertEqual(wind_score(10), 10.0)

    def test_strong(self) -> None:
        """Test strong wind scores 0"""
        self.assertEqual(wind_score(40), 0.0)
        self.assertEqual(wind_score(80), 0.0)

    def test_midpoint(self) -> None:
        """Test linear interpolation"""
        self.assertAlmostEqual(wind_score(25), 5.0)


class TestPrecipitationScore(unittest.TestCase):
    """Test suite for precipitation_score function"""

    def test_dry(self) -> None:
        """Test no precipitation scores 10"""
        self.assertEqual(precipitation_score(0), 10.0)

    def test_light_rain(self) -> None:
        """Test any precipitation starts at 5"""
        self.assertAlmostEqual(precipitation_score(0.5), 4.5)
        self.assertAlmostEqual(precipitation_score(2), 3.0)

    def test_heavy_rain(self) -> None:
        """Test heavy precipitation scores 0"""
        self.assertEqual(precipitation_score(12), 0.0)


class TestNanInputs(unittest.TestCase):
    """Test suite for NaN factor inputs"""

    def test_nan_rejected(self) -> None:
        """Test every weather factor rejects NaN instead of scoring it"""
        for scorer in (cloud_cover_score, temperature_score, humidity_score, wind_score, precipitation_score):
            with self.subTest(scorer=scorer), self.assertRaises(ValueError):
                scorer(float("nan"))


class TestClampScore(unittest.TestCase):
    """Test suite for clamp_score function"""

    def test_clamp(self) -> None:
        """Test values are limited to 0-10"""
        self.assertEqual(clamp_score(-1), 0.0)
        self.assertEqual(clamp_score(11), 10.0)
        self.assertEqual(clamp_score(7.3), 7.3)


class TestDescriptions(unittest.TestCase):
    """Test suite for factor description helpers"""

    def test_cloud_bands(self) -> None:
        """Test cloud cover description bands"""
        self.assertIn("Clear skies", describe_cloud_cover(5))
        self.assertIn("Mostly clear", describe_cloud_cover(15))
        self.assertIn("Partly cloudy", describe_cloud_cover(35))
        self.assertIn("Considerable clouds", describe_cloud_cover(55))
        self.assertIn("Mostly cloudy", describe_cloud_cover(75))
        self.assertIn("Heavy cloud cover", describe_cloud_cover(95))

    def test_temperature(self) -> None:
        """Test temperature descriptions"""
        self.assertIn("Cold", describe_temperature(-5))
        self.assertIn("Comfortable", describe_temperature(15))
        self.assertIn("Warm", describe_temperature(28))

    def test_precipitation(self) -> None:
        """Test precipitation descriptions"""
        self.assertEqual(describe_precipitation(0), "No precipitation")
        self.assertIn("Light", describe_precipitation(0.3))


if __name__ == "__main__":
    unittest.main()
