from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from config.settings import Settings, get_settings


# WMO weather interpretation codes, as reported by Open-Meteo.
WEATHER_CODES: Dict[int, str] = {
    0: "Clear",
    1: "Mostly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Rime fog",
    51: "Light drizzle",
    53: "Drizzle",
    55: "Heavy drizzle",
    61: "Light rain",
    63: "Rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Snow",
    75: "Heavy snow",
    80: "Rain showers",
    81: "Heavy showers",
    82: "Violent showers",
    95: "Thunderstorm",
    96: "Thunderstorm + hail",
    99: "Thunderstorm + heavy hail",
}


class WeatherError(RuntimeError):
    pass


def weather_code_to_text(code: Any) -> str:
    try:
        return WEATHER_CODES.get(int(code), "Conditions")
    except (TypeError, ValueError, OverflowError):
        return "Conditions"


def _simplify_current(data: Dict[str, Any]) -> Dict[str, Any]:
    current = data.get("current") if isinstance(data, dict) else None
    if not isinstance(current, dict):
        raise WeatherError("Weather response has no current conditions")

    try:
        temp_f = round(float(current["temperature_2m"]))
        wind_mph = round(float(current["wind_speed_10m"]))
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise WeatherError(f"Weather response is incomplete: {exc}") from exc

    return {
        "tempF": temp_f,
        "windMph": wind_mph,
        "summary": weather_code_to_text(current.get("weather_code")),
    }


def fetch_current_weather(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> Dict[str, Any]:
    settings = settings or get_settings()
    params = {
        "latitude": settings.weather_latitude,
        "longitude": settings.weather_longitude,
        "current": "temperature_2m,weather_code,wind_speed_10m",
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
        "timezone": settings.weather_timezone,
    }

    try:
        with httpx.Client(timeout=settings.weather_timeout, transport=transport) as client:
            response = client.get(settings.weather_api_url, params=params)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise WeatherError(f"Weather API call failed: {exc}") from exc
    except ValueError as exc:
        raise WeatherError("Weather API returned non-JSON") from exc

    return _simplify_current(data)
