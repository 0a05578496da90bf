from __future__ import annotations

from dataclasses import dataclass, field

from app.errors import EmptyLocationError


# CWA element name -> ForecastWindow attribute
ELEMENT_FIELDS = {
    "Wx": "weather",
    "PoP": "rain",
    "MinT": "min_temp",
    "MaxT": "max_temp",
    "CI": "comfort",
    "WS": "wind_speed",
}

DISPLAY_SUFFIXES = {
    "rain": "%",
    "min_temp": "°C",
    "max_temp": "°C",
}


@dataclass
class ForecastWindow:
    start_time: str = ""
    end_time: str = ""
    weather: str = ""
    rain: str = ""
    min_temp: str = ""
    max_temp: str = ""
    comfort: str = ""
    wind_speed: str = ""

    def to_dict(self) -> dict:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "weather": self.weather,
            "rain": _with_suffix(self.rain, "rain"),
            "minTemp": _with_suffix(self.min_temp, "min_temp"),
            "maxTemp": _with_suffix(self.max_temp, "max_temp"),
            "comfort": self.comfort,
            "windSpeed": self.wind_speed,
        }


@dataclass
class ForecastReport:
    city: str
    update_time: str
    windows: list[ForecastWindow] = field(default_factory=list)


def normalize_forecast(payload: dict, location_name: str = "") -> ForecastReport:
    """Merge the per-element CWA time series into one list of windows.

    The first element's series is the alignment axis: it fixes the window
    count and the start/end times. Other elements contribute a reading only
    where their own series reaches that index.
    """
    locations = [location for location in payload.get("locations") or [] if isinstance(location, dict)]
    if not locations:
        raise EmptyLocationError(location_name or "此縣市")

    location = locations[0]
    elements = [element for element in _as_list(location.get("weatherElement")) if isinstance(element, dict)]
    report = ForecastReport(
        city=location.get("locationName") or location_name,
        update_time=payload.get("update_time") or "",
    )
    if not elements:
        return report

    axis = _series(elements[0])
    for idx, slot in enumerate(axis):
        window = ForecastWindow(
            start_time=slot.get("startTime") or "",
            end_time=slot.get("endTime") or "",
        )
        for element in elements:
            attr = ELEMENT_FIELDS.get(element.get("elementName"))
            if attr is None:
                continue
            series = _series(element)
            if idx < len(series):
                setattr(window, attr, _parameter_name(series[idx]))
        report.windows.append(window)

    return report


def _series(element: dict) -> list[dict]:
    return [slot if isinstance(slot, dict) else {} for slot in _as_list(element.get("time"))]


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else []


def _parameter_name(slot: dict) -> str:
    parameter = slot.get("parameter")
    if not isinstance(parameter, dict):
        return ""
    value = parameter.get("parameterName")
    return "" if value is None else str(value)


def _with_suffix(value: str, attr: str) -> str:
    if not value:
        return value
    return value + DISPLAY_SUFFIXES[attr]
