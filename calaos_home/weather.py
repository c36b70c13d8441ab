"""Current weather and daily forecast fetched from the OpenWeatherMap API."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import requests

log = logging.getLogger(__name__)

KELVIN_ZERO = 273.15
API_BASE = "http://api.openweathermap.org/data/2.5"
WEATHER_URL = f"{API_BASE}/weather"
FORECAST_URL = f"{API_BASE}/forecast/daily"
FORECAST_DAYS = 5
_TIMEOUT = 30


def convert_temp(kelvin: float) -> str:
    """Kelvin to whole degrees Celsius, rounding halves away from zero."""
    celsius = kelvin - KELVIN_ZERO
    rounded = math.floor(celsius + 0.5) if celsius >= 0 else math.ceil(celsius - 0.5)
    return str(int(rounded))


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class WeatherData:
    """Weather for one moment or one day."""

    day_of_week: str = ""
    weather_icon: str = ""
    weather_code: int = 0
    weather_description: str = "--"
    weather_text: str = "--"
    temperature: str = "--"
    temperature_min: str = "--"
    temperature_max: str = "--"
    pressure: str = "--"
    humidity: str = "--"
    is_night: bool = False

    def set_weather_data(self, obj: dict[str, Any]) -> None:
        """Fill from one weather record of the API."""
        timestamp = int(_number(obj.get("dt")))
        self.day_of_week = datetime.fromtimestamp(timestamp).strftime("%a")

        conditions = obj.get("weather")
        if isinstance(conditions, list) and conditions:
            first = conditions[0] if isinstance(conditions[0], dict) else {}
            self.weather_icon = _string(first.get("icon"))
            code = first.get("id")
            self.weather_code = int(code) if isinstance(code, (int, float)) and not isinstance(code, bool) else 0
            self.weather_text = _string(first.get("main"))
            self.weather_description = _string(first.get("description"))

        main = obj.get("main")
        main = main if isinstance(main, dict) else {}
        self.temperature = convert_temp(_number(main.get("temp")))
        self.temperature_min = convert_temp(_number(main.get("temp_min")))
        self.temperature_max = convert_temp(_number(main.get("temp_max")))
        self.pressure = _string(main.get("pressure"))
        self.humidity = _string(main.get("humidity"))

        self.is_night = self.weather_icon.endswith("n")


class WeatherModel:
    """Current weather and forecast for the position stored in the configuration."""

    def __init__(self, config: Any, app_id: str, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.app_id = app_id
        self.session = session or requests.Session()
        self.weather = WeatherData()
        self._forecast: list[WeatherData] = []

    def _query(self, **extra: str) -> dict[str, str]:
        params = {
            "lat": self.config.get_option("latitude"),
            "lon": self.config.get_option("longitude"),
            "mode": "json",
        }
        params.update(extra)
        params["APPID"] = self.app_id
        return params

    def _fetch(self, url: str, params: dict[str, str]) -> Optional[Any]:
        """Decoded JSON body, ``...`` for an unreadable body, None on error."""
        try:
            response = self.session.get(url, params=params, timeout=_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as exc:
            log.warning("Error in weather request %s: %s", url, exc)
            return None
        try:
            return response.json()
        except ValueError:
            return ...

    def refresh(self) -> None:
        """Fetch the current weather, then the daily forecast."""
        current = self._fetch(WEATHER_URL, self._query())
        if isinstance(current, dict):
            self.weather.set_weather_data(current)

        forecast = self._fetch(FORECAST_URL, self._query(cnt=str(FORECAST_DAYS)))
        if forecast is None:
            return
        self._forecast.clear()
        if isinstance(forecast, dict):
            days = forecast.get("list")
            for day in days if isinstance(days, list) else []:
                data = WeatherData()
                data.set_weather_data(day if isinstance(day, dict) else {})
                self._forecast.append(data)

    def forecast_count(self) -> int:
        return len(self._forecast)

    def forecast_at(self, idx: int) -> WeatherData:
        """Forecast of one day; raises IndexError for a missing day."""
        if not 0 <= idx < len(self._forecast):
            raise IndexError(f"no forecast for day {idx}")
        return self._forecast[idx]