import asyncio
from datetime import date

import httpx
import pytest
import respx

from app.config import Settings
from app.errors import ConfigurationError, UpstreamError
from app.services.cwa_client import CwaClient


BASE_URL = "https://cwa.test/api"
FORECAST_URL = f"{BASE_URL}/v1/rest/datastore/F-C0032-001"
TEMP_DIFF_URL = f"{BASE_URL}/v1/rest/datastore/F-A0085-005"
SUNRISE_URL = f"{BASE_URL}/v1/rest/datastore/A-B0062-001"


def _client(api_key: str | None = "test-key") -> CwaClient:
    return CwaClient(settings=Settings(cwa_api_base_url=BASE_URL, cwa_api_key=api_key))


def _run(coro):
    return asyncio.run(coro)


@respx.mock
def test_fetch_forecast_sends_credential_and_canonicalizes_records() -> None:
    route = respx.get(FORECAST_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "success": "true",
                "records": {
                    "datasetDescription": "三十六小時天氣預報",
                    "location": [{"locationName": "臺北市", "weatherElement": []}],
                },
            },
        )
    )

    payload = _run(_client().fetch_forecast("臺北市"))

    params = route.calls.last.request.url.params
    assert params["Authorization"] == "test-key"
    assert params["locationName"] == "臺北市"
    assert payload == {
        "update_time": "三十六小時天氣預報",
        "locations": [{"locationName": "臺北市", "weatherElement": []}],
    }


@pytest.mark.parametrize("capitalized", [True, False])
@respx.mock
def test_fetch_temp_difference_accepts_both_casings(capitalized: bool) -> None:
    def key(name: str) -> str:
        return name if capitalized else name[0].lower() + name[1:]

    respx.get(TEMP_DIFF_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "records": {
                    key("Locations"): [
                        {
                            "LocationsName": "高雄市",
                            key("Location"): [
                                {
                                    key("LocationName"): "前鎮區",
                                    key("Time"): [
                                        {
                                            key("IssueTime"): "2026-02-20T11:00:00+08:00",
                                            key("WeatherElements"): {
                                                "TemperatureDifferenceIndex": "8",
                                                "TemperatureDifferenceWarning": "溫差稍大",
                                            },
                                        }
                                    ],
                                }
                            ],
                        }
                    ]
                }
            },
        )
    )

    payload = _run(_client().fetch_temp_difference("高雄市"))

    assert payload["location_name"] == "高雄市"
    assert payload["towns"] == [
        {
            "name": "前鎮區",
            "records": [
                {"issue_time": "2026-02-20T11:00:00+08:00", "index": "8", "warning": "溫差稍大"}
            ],
        }
    ]


@respx.mock
def test_fetch_temp_difference_without_locations_is_empty() -> None:
    respx.get(TEMP_DIFF_URL).mock(return_value=httpx.Response(200, json={"records": {}}))

    payload = _run(_client().fetch_temp_difference("連江縣"))

    assert payload == {"location_name": "連江縣", "towns": []}


@respx.mock
def test_fetch_sunrise_relays_records_for_date() -> None:
    records = {"dataid": "A-B0062-001", "locations": {"location": [{"CountyName": "臺中市"}]}}
    route = respx.get(SUNRISE_URL).mock(return_value=httpx.Response(200, json={"records": records}))

    result = _run(_client().fetch_sunrise("臺中市", date(2026, 2, 20)))

    params = route.calls.last.request.url.params
    assert params["CountyName"] == "臺中市"
    assert params["Date"] == "2026-02-20"
    assert result == records


@respx.mock
def test_missing_credential_fails_before_any_request() -> None:
    route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json={}))

    with pytest.raises(ConfigurationError):
        _run(_client(api_key=None).fetch_forecast("臺北市"))

    assert not route.called


@respx.mock
def test_upstream_status_and_message_are_propagated() -> None:
    route = respx.get(FORECAST_URL).mock(
        return_value=httpx.Response(401, json={"message": "Unauthorized: invalid key"})
    )

    with pytest.raises(UpstreamError) as exc_info:
        _run(_client().fetch_forecast("臺北市"))

    error = exc_info.value
    assert route.call_count == 1
    assert error.kind == "http"
    assert error.status_code == 401
    assert error.message == "Unauthorized: invalid key"
    assert error.details == {"message": "Unauthorized: invalid key"}


@respx.mock
def test_transport_failure_is_not_retried() -> None:
    route = respx.get(FORECAST_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

    with pytest.raises(UpstreamError) as exc_info:
        _run(_client().fetch_forecast("臺北市"))

    assert route.call_count == 1
    assert exc_info.value.kind == "transport"
    assert exc_info.value.status_code == 502


@respx.mock
def test_invalid_json_is_an_upstream_failure() -> None:
    respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, text="<html>maintenance</html>"))

    with pytest.raises(UpstreamError) as exc_info:
        _run(_client().fetch_forecast("臺北市"))

    assert exc_info.value.status_code == 502


@respx.mock
def test_fetch_forecast_drops_non_dict_locations() -> None:
    respx.get(FORECAST_URL).mock(
        return_value=httpx.Response(
            200,
            json={"records": {"location": [None, "臺北市", {"locationName": "臺北市", "weatherElement": []}]}},
        )
    )

    payload = _run(_client().fetch_forecast("臺北市"))

    assert payload["locations"] == [{"locationName": "臺北市", "weatherElement": []}]
