"""
Mock weather service backing the get_weather tool.
"""

import json
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..errors import ToolError
from ..models import ToolCallResult, text_content


class DailyForecast(BaseModel):
    date: str = Field(..., description="Forecast date (YYYY-MM-DD)")
    high: float = Field(..., description="High temperature in Celsius")
    low: float = Field(..., description="Low temperature in Celsius")
    condition: str = Field(..., description="Weather condition")


class TodayWeather(BaseModel):
    high: float
    low: float
    condition: str


class WeatherReport(BaseModel):
    """Structured output of get_weather."""
    forecast: List[DailyForecast] = Field(..., min_length=1)
    today: TodayWeather


# Canned forecasts keyed by lower-cased city name
_FORECASTS: Dict[str, List[Dict[str, Any]]] = {
    "beijing": [
        {"date": "2025-09-28", "high": 28, "low": 21, "condition": "sunny"},
        {"date": "2025-09-29", "high": 27, "low": 22, "condition": "cloudy"},
        {"date": "2025-09-30", "high": 26, "low": 20, "condition": "light rain"},
    ],
    "shanghai": [
        {"date": "2025-09-28", "high": 30, "low": 24, "condition": "cloudy"},
        {"date": "2025-09-29", "high": 29, "low": 24, "condition": "light rain"},
        {"date": "2025-09-30", "high": 28, "low": 23, "condition": "cloudy"},
    ],
    "shenzhen": [
        {"date": "2025-09-28", "high": 32, "low": 26, "condition": "rain"},
        {"date": "2025-09-29", "high": 31, "low": 26, "condition": "thunderstorm"},
        {"date": "2025-09-30", "high": 31, "low": 25, "condition": "rain"},
    ],
}

_UNKNOWN_CITY_FORECAST = [
    {"date": "2025-09-28", "high": 25, "low": 18, "condition": "unknown"},
]

# Output contract advertised in the tool descriptor
WEATHER_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "forecast": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "date": {"type": "string"},
                    "high": {"type": "number"},
                    "low": {"type": "number"},
                    "condition": {"type": "string"}
                },
                "required": ["date", "high", "low", "condition"]
            }
        },
        "today": {
            "type": "object",
            "properties": {
                "high": {"type": "number"},
                "low": {"type": "number"},
                "condition": {"type": "string"}
            },
            "required": ["high", "low", "condition"]
        }
    },
    "required": ["forecast", "today"]
}


def lookup_weather(city: str) -> WeatherReport:
    """Forecast for a city; unknown cities get a generic single-day forecast."""
    days = _FORECASTS.get(city.strip().lower(), _UNKNOWN_CITY_FORECAST)
    forecast = [DailyForecast(**day) for day in days]
    first = forecast[0]
    return WeatherReport(
        forecast=forecast,
        today=TodayWeather(high=first.high, low=first.low, condition=first.condition)
    )


def get_weather(arguments: Dict[str, Any]) -> ToolCallResult:
    city = arguments.get("city")
    if not isinstance(city, str) or not city.strip():
        raise ToolError("Missing required argument: city")

    report = lookup_weather(city).model_dump(mode="json")
    return ToolCallResult(
        content=[text_content(json.dumps(report))],
        structuredContent=report
    )
