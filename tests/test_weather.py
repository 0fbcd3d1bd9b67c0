"""
Unit tests for weather.py

Tests Open-Meteo payload decoding and forecast fetching.
"""

import asyncio
import unittest
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
from returns.result import Failure, Success

from stargazer.api.core.exceptions import WeatherFetchError, WeatherParseError
from stargazer.api.core.settings import SiqsSettings
from stargazer.api.location.weather import WeatherForecast, fetch_forecast, parse_forecast_payload


def sample_payload() -> dict[str, Any]:
    return {
        "timezone": "America/Denver",
        "utc_offset_seconds": -21600,
        "current": {
            "time": "2024-06-01T20:00",
            "temperature_2m": 14.2,
            "relative_humidity_2m": 45,
            "cloud_cover": 12,
            "wind_speed_10m": 8.5,
            "precipitation": 0.0,
        },
        "hourly": {
            "time": ["2024-06-01T20:00", "2024-06-01T21:00", "not-a-time"],
            "temperature_2m": [14.0, 12.5, 11.0],
            "relative_humidity_2m": [45, 50, 55],
            "cloud_cover": [10, None, 30],
            "wind_speed_10m": [8.0, 6.0],
            "precipitation": [0.0, 0.0, 0.1],
        },
    }


def mock_client_session(mock_session_class: MagicMock, response: AsyncMock) -> AsyncMock:
    mock_get_context = AsyncMock()
    mock_get_context.__aenter__ = AsyncMock(return_value=response)
    mock_get_context.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    mock_session.get = MagicMock(return_value=mock_get_context)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    mock_session_class.return_value = mock_session
    return mock_session


class TestParseForecastPayload(unittest.TestCase):
    """Test suite for parse_forecast_payload function"""

    def test_parse_complete_payload(self) -> None:
        """Test decoding current conditions and hourly forecast"""
        result = parse_forecast_payload(sample_payload())
        self.assertIsInstance(result, Success)
        forecast = result.unwrap()

        self.assertEqual(forecast.timezone, "America/Denver")
        self.assertEqual(forecast.utc_offset_seconds, -21600)
        self.assertEqual(forecast.current.cloud_cover_percent, 12.0)
        self.assertEqual(forecast.current.observed_at, datetime(2024, 6, 1, 20, 0))

        # Unparseable timestamp skipped
        self.assertEqual(len(forecast.hourly), 2)
        self.assertEqual(forecast.hourly[0].cloud_cover_percent, 10.0)
        self.assertIsNone(forecast.hourly[1].cloud_cover_percent)
        self.assertEqual(forecast.hourly[1].wind_speed_kmh, 6.0)

    def test_short_columns(self) -> None:
        """Test missing trailing column values become None"""
        payload = sample_payload()
        payload["hourly"]["time"] = ["2024-06-01T20:00", "2024-06-01T21:00", "2024-06-01T22:00"]
        forecast = parse_forecast_payload(payload).unwrap()
        self.assertIsNone(forecast.hourly[2].wind_speed_kmh)

    def test_nan_values(self) -> None:
        """Test NaN values become None"""
        payload = sample_payload()
        payload["current"]["cloud_cover"] = float("nan")
        forecast = parse_forecast_payload(payload).unwrap()
        self.assertIsNone(forecast.current.cloud_cover_percent)

    def test_only_hourly(self) -> None:
        """Test a payload without current conditions"""
        payload = sample_payload()
        del payload["current"]
        forecast = parse_forecast_payload(payload).unwrap()
        self.assertIsNone(forecast.current)
        self.assertEqual(len(forecast.hourly), 2)

    def test_invalid_payloads(self) -> None:
        """Test payloads that cannot be decoded"""
        self.assertIsInstance(parse_forecast_payload([1, 2, 3]), Failure)
        self.assertIsInstance(parse_forecast_payload({"timezone": "UTC"}), Failure)

    def test_scalar_hourly_column(self) -> None:
        """Test an hourly column that is not a list fails"""
        payload = sample_payload()
        payload["hourly"]["cloud_cover"] = 50
        result = parse_forecast_payload(payload)
        self.assertIsInstance(result, Failure)
        self.assertIn("cloud_cover", result.failure())

        payload = sample_payload()
        payload["hourly"]["time"] = "2024-06-01T20:00"
        self.assertIsInstance(parse_forecast_payload(payload), Failure)


class TestWeatherForecast(unittest.TestCase):
    """Test suite for WeatherForecast class"""

    def test_local_now_is_naive(self) -> None:
        """Test local time has no tzinfo"""
        forecast = WeatherForecast(current=parse_forecast_payload(sample_payload()).unwrap().current)
        self.assertIsNone(forecast.local_now().tzinfo)


class TestFetchForecast(unittest.TestCase):
    """Test suite for fetch_forecast function"""

    @patch("stargazer.api.location.weather.aiohttp.ClientSession")
    def test_fetch_success(self, mock_session_class: MagicMock) -> None:
        """Test successful forecast fetch"""
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value=sample_payload())
        mock_session = mock_client_session(mock_session_class, mock_response)

        forecast = asyncio.run(fetch_forecast(39.7, -105.0, settings=SiqsSettings(forecast_days=3)))

        self.assertEqual(forecast.current.temperature_c, 14.2)
        self.assertEqual(len(forecast.hourly), 2)
        params = mock_session.get.call_args.kwargs["params"]
        self.assertEqual(params["forecast_days"], 3)
        self.assertEqual(params["timezone"], "auto")
        self.assertIn("cloud_cover", params["hourly"])

    @patch("stargazer.api.location.weather.aiohttp.ClientSession")
    def test_fetch_days_override(self, mock_session_class: MagicMock) -> None:
        """Test explicit days override the settings"""
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value=sample_payload())
        mock_session = mock_client_session(mock_session_class, mock_response)

        asyncio.run(fetch_forecast(39.7, -105.0, days=1))

        self.assertEqual(mock_session.get.call_args.kwargs["params"]["forecast_days"], 1)

    @patch("stargazer.api.location.weather.aiohttp.ClientSession")
    def test_fetch_http_error(self, mock_session_class: MagicMock) -> None:
        """Test non-200 status raises WeatherFetchError"""
        mock_response = AsyncMock()
        mock_response.status = 500
        mock_client_session(mock_session_class, mock_response)

        with self.assertRaises(WeatherFetchError):
            asyncio.run(fetch_forecast(39.7, -105.0))

    @patch("stargazer.api.location.weather.aiohttp.ClientSession")
    def test_fetch_network_error(self, mock_session_class: MagicMock) -> None:
        """Test network failures raise WeatherFetchError"""
        mock_session = mock_client_session(mock_session_class, AsyncMock())
        mock_session.get = MagicMock(side_effect=aiohttp.ClientError("Network error"))

        with self.assertRaises(WeatherFetchError):
            asyncio.run(fetch_forecast(39.7, -105.0))

    @patch("stargazer.api.location.weather.aiohttp.ClientSession")
    def test_fetch_bad_payload(self, mock_session_class: MagicMock) -> None:
        """Test undecodable payload raises WeatherParseError"""
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value={"error": True})
        mock_client_session(mock_session_class, mock_response)

        with self.assertRaises(WeatherParseError):
            asyncio.run(fetch_forecast(39.7, -105.0))


if __name__ == "__main__":
    unittest.main()
