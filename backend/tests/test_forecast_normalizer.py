import pytest

from app.errors import EmptyLocationError
from app.services.forecast_normalizer import normalize_forecast


def _slot(start: str, end: str, value: str) -> dict:
    return {"startTime": start, "endTime": end, "parameter": {"parameterName": value}}


SLOTS = [
    ("2026-02-19 18:00:00", "2026-02-20 06:00:00"),
    ("2026-02-20 06:00:00", "2026-02-20 18:00:00"),
    ("2026-02-20 18:00:00", "2026-02-21 06:00:00"),
]


def _element(name: str, values: list[str]) -> dict:
    return {
        "elementName": name,
        "time": [_slot(start, end, value) for (start, end), value in zip(SLOTS, values)],
    }


def _payload(*elements: dict) -> dict:
    return {
        "update_time": "三十六小時天氣預報",
        "locations": [{"locationName": "臺北市", "weatherElement": list(elements)}],
    }


def test_normalize_forecast_merges_elements_per_window() -> None:
    payload = _payload(
        _element("Wx", ["多雲", "晴時多雲", "陰短暫雨"]),
        _element("PoP", ["10", "20", "60"]),
        _element("MinT", ["18", "19", "17"]),
        _element("CI", ["舒適", "舒適", "稍有寒意"]),
        _element("MaxT", ["22", "26", "21"]),
        _element("WS", ["<= 1", "2", "3"]),
    )

    report = normalize_forecast(payload, "臺北市")

    assert report.city == "臺北市"
    assert report.update_time == "三十六小時天氣預報"
    assert len(report.windows) == 3
    second = report.windows[1].to_dict()
    assert second == {
        "startTime": "2026-02-20 06:00:00",
        "endTime": "2026-02-20 18:00:00",
        "weather": "晴時多雲",
        "rain": "20%",
        "minTemp": "19°C",
        "maxTemp": "26°C",
        "comfort": "舒適",
        "windSpeed": "2",
    }


def test_window_count_follows_first_element_when_others_are_shorter() -> None:
    payload = _payload(
        _element("Wx", ["多雲", "晴", "陰"]),
        _element("MaxT", ["22"]),
    )

    windows = normalize_forecast(payload).windows

    assert len(windows) == 3
    assert windows[0].max_temp == "22"
    assert windows[2].max_temp == ""
    assert windows[2].to_dict()["maxTemp"] == ""


def test_window_count_follows_first_element_when_others_are_longer() -> None:
    payload = _payload(
        _element("PoP", ["10"]),
        _element("Wx", ["多雲", "晴", "陰"]),
    )

    windows = normalize_forecast(payload).windows

    assert len(windows) == 1
    assert windows[0].weather == "多雲"
    assert windows[0].rain == "10"


def test_unknown_elements_are_ignored_and_missing_readings_stay_empty() -> None:
    payload = _payload(
        _element("Wx", ["多雲", "晴"]),
        _element("UVI", ["7", "8"]),
    )

    window = normalize_forecast(payload).windows[0].to_dict()

    assert window["weather"] == "多雲"
    assert window["rain"] == ""
    assert window["comfort"] == ""
    assert window["windSpeed"] == ""


def test_location_without_elements_yields_no_windows() -> None:
    report = normalize_forecast({"update_time": "", "locations": [{"locationName": "金門縣"}]})

    assert report.city == "金門縣"
    assert report.windows == []


def test_empty_location_list_raises_not_found() -> None:
    with pytest.raises(EmptyLocationError) as exc_info:
        normalize_forecast({"update_time": "", "locations": []}, "澎湖縣")

    assert exc_info.value.status_code == 404
    assert "澎湖縣" in exc_info.value.message


def test_non_dict_locations_are_skipped() -> None:
    payload = {"update_time": "", "locations": [None, "臺北市", {"locationName": "臺北市", "weatherElement": []}]}

    assert normalize_forecast(payload).city == "臺北市"

    with pytest.raises(EmptyLocationError):
        normalize_forecast({"update_time": "", "locations": [None, "臺北市"]}, "臺北市")
