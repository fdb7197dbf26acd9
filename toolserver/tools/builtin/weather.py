"""Weather tool — daily forecast via Open-Meteo (no API key required)."""
import functools
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

import httpx

from ...config import Settings
from ...contracts import Param, text_output_contract
from ..errors import ToolFailure
from ..registry import ToolDescriptor

logger = logging.getLogger(__name__)

DESCRIPTION = "Gets a weather forecast for a latitude/longitude, timezone and number of days."

MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 16

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode"

# WMO weather interpretation codes
WEATHER_CODES: Dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def clamp_forecast_days(days: Union[int, float]) -> int:
    return int(max(MIN_FORECAST_DAYS, min(MAX_FORECAST_DAYS, days)))


def describe_weather_code(code: Optional[int]) -> str:
    if code is None:
        return "unknown"
    return WEATHER_CODES.get(int(code), f"code {code}")


def _new_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout)


def _fmt(value: Optional[float], unit: str) -> str:
    return "n/a" if value is None else f"{value:.1f}{unit}"


def _fmt_day(raw: str) -> str:
    try:
        return f"{date.fromisoformat(raw):%b %d (%a)}"
    except ValueError:
        return raw


def format_forecast(latitude: float, longitude: float, timezone: str, days: int, daily: Dict[str, List[Any]]) -> str:
    dates = daily.get("time") or []
    max_temps = daily.get("temperature_2m_max") or []
    min_temps = daily.get("temperature_2m_min") or []
    precipitation = daily.get("precipitation_sum") or []
    codes = daily.get("weathercode") or []

    def at(values: List[Any], i: int) -> Any:
        return values[i] if i < len(values) else None

    lines = [
        f"Latitude: {latitude}, Longitude: {longitude}",
        f"Timezone: {timezone}",
        f"Forecast days: {days}",
        "",
        "Forecast:",
        "─" * 50,
    ]
    for i, day in enumerate(dates):
        lines.append(_fmt_day(day))
        lines.append(f"  Weather: {describe_weather_code(at(codes, i))}")
        lines.append(f"  High: {_fmt(at(max_temps, i), '°C')}")
        lines.append(f"  Low: {_fmt(at(min_temps, i), '°C')}")
        lines.append(f"  Precipitation: {_fmt(at(precipitation, i), 'mm')}")
        lines.append("")
    return "\n".join(lines)


async def weather(
    latitude: float,
    longitude: float,
    timezone: str = "auto",
    forecastDays: Union[int, float] = 7,
    *,
    settings: Settings,
) -> str:
    days = clamp_forecast_days(forecastDays)
    try:
        async with _new_client(settings) as client:
            resp = await client.get(
                settings.open_meteo_url,
                params={
                    "latitude": str(latitude),
                    "longitude": str(longitude),
                    "timezone": timezone,
                    "forecast_days": str(days),
                    "daily": DAILY_FIELDS,
                },
            )
            if not resp.is_success:
                raise ToolFailure(f"upstream status code {resp.status_code}")
            data = resp.json()
        daily = data.get("daily") if isinstance(data, dict) else None
        if not daily:
            raise ToolFailure("no forecast data returned")
        return format_forecast(latitude, longitude, timezone, days, daily)
    except ToolFailure as e:
        raise ToolFailure(f"weather lookup failed: {e}") from e
    except (httpx.HTTPError, ValueError, TypeError) as e:
        logger.error(f"Open-Meteo error: {e}")
        raise ToolFailure(f"weather lookup failed: {e}") from e


def descriptor(settings: Settings) -> ToolDescriptor:
    return ToolDescriptor(
        name="weather",
        description=DESCRIPTION,
        params=(
            Param("latitude", type="number", description="latitude (e.g. 37.5665)"),
            Param("longitude", type="number", description="longitude (e.g. 126.9780)"),
            Param(
                "timezone",
                required=False,
                default="auto",
                description="IANA timezone (e.g. Asia/Seoul, America/New_York). Default: auto",
            ),
            Param(
                "forecastDays",
                type="number",
                required=False,
                default=7,
                description="forecast days (1-16, default: 7)",
            ),
        ),
        handler=functools.partial(weather, settings=settings),
        output=tuple(text_output_contract("weather forecast")),
    )
