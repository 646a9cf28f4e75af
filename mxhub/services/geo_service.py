"""Address and weather lookups against public APIs (Nominatim, Open-Meteo)."""

import logging
from typing import Optional

from fastapi import HTTPException

from ..core.config import Config
from ..core.http import get_json


logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 5
ADDRESS_NOT_FOUND = "Address not found"
CURRENT_FIELDS = "temperature_2m,precipitation,wind_speed_10m,weather_code"


def celsius_to_fahrenheit(celsius: float) -> int:
    return round(celsius * 9 / 5 + 32)


def weather_condition(code: int) -> str:
    """Collapse a WMO weather code into the handful of conditions we show."""
    if 0 <= code <= 3:
        return "clear"
    if 45 <= code <= 48:
        return "fog"
    if 51 <= code <= 67:
        return "rain"
    if 71 <= code <= 77:
        return "snow"
    return "cloudy"


def require_coordinates(track: dict) -> tuple[float, float]:
    latitude, longitude = track.get("latitude"), track.get("longitude")
    if latitude in (None, "") or longitude in (None, ""):
        raise HTTPException(status_code=400, detail="Track has no coordinates")
    return float(latitude), float(longitude)


def search_addresses(query: str) -> list[dict]:
    query = query.strip()
    if not query:
        return []

    results = get_json(
        f"{Config.NOMINATIM_URL.rstrip('/')}/search",
        params={"format": "json", "q": query, "limit": SUGGESTION_LIMIT},
    )
    suggestions = []
    for item in results or []:
        try:
            suggestions.append({
                "display_name": item["display_name"],
                "latitude": float(item["lat"]),
                "longitude": float(item["lon"]),
            })
        except (KeyError, TypeError, ValueError):
            logger.warning(f"Skipping malformed address suggestion: {item!r}")
    return suggestions


def reverse_geocode(latitude: float, longitude: float) -> str:
    try:
        data = get_json(
            f"{Config.NOMINATIM_URL.rstrip('/')}/reverse",
            params={"format": "json", "lat": latitude, "lon": longitude},
        )
    except HTTPException:
        return ADDRESS_NOT_FOUND

    address: Optional[str] = data.get("display_name") if isinstance(data, dict) else None
    return address or ADDRESS_NOT_FOUND


def current_weather(latitude: float, longitude: float) -> dict:
    data = get_json(
        Config.OPEN_METEO_URL,
        params={
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "timezone": "auto",
        },
    )
    try:
        current = data["current"]
        temperature = current["temperature_2m"]
        code = int(current["weather_code"])
        return {
            "temperature_c": temperature,
            "temperature_f": celsius_to_fahrenheit(temperature),
            "precipitation": current.get("precipitation"),
            "wind_speed": current.get("wind_speed_10m"),
            "weather_code": code,
            "condition": weather_condition(code),
        }
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Unexpected weather payload for {latitude},{longitude}: {e}")
        raise HTTPException(status_code=502, detail="Unexpected weather response")
