from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import httpx

from app.config import Settings
from app.errors import ConfigurationError, UpstreamError


logger = logging.getLogger(__name__)


@dataclass
class CwaClient:
    """Thin async gateway to the CWA open-data datastore.

    Responses are reshaped into one canonical structure per dataset so that
    downstream code never deals with the upstream casing variants.
    """

    settings: Settings
    _client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_forecast(self, location_name: str) -> dict:
        payload = await self._get_dataset(
            self.settings.forecast_dataset,
            params={"locationName": location_name},
        )
        records = _as_dict(payload.get("records"))
        return {
            "update_time": records.get("datasetDescription") or "",
            "locations": [
                location
                for location in _as_list(_first_present(records, "location", "Location"))
                if isinstance(location, dict)
            ],
        }

    async def fetch_temp_difference(self, location_name: str) -> dict:
        payload = await self._get_dataset(
            self.settings.temp_difference_dataset,
            params={"locationName": location_name},
        )
        records = _as_dict(payload.get("records"))
        counties = _as_list(_first_present(records, "Locations", "locations"))
        county = _as_dict(counties[0]) if counties else {}
        return {
            "location_name": _first_present(county, "LocationsName", "locationsName") or location_name,
            "towns": [_normalize_town(town) for town in _as_list(_first_present(county, "Location", "location"))],
        }

    async def fetch_sunrise(self, location_name: str, on_date: date) -> Any:
        return await self._fetch_astronomy(self.settings.sunrise_dataset, location_name, on_date)

    async def fetch_moonrise(self, location_name: str, on_date: date) -> Any:
        return await self._fetch_astronomy(self.settings.moonrise_dataset, location_name, on_date)

    async def _fetch_astronomy(self, dataset_id: str, location_name: str, on_date: date) -> Any:
        payload = await self._get_dataset(
            dataset_id,
            params={"CountyName": location_name, "Date": on_date.isoformat()},
        )
        return payload.get("records")

    async def _get_dataset(self, dataset_id: str, *, params: dict[str, Any]) -> dict:
        api_key = self.settings.cwa_api_key
        if not api_key:
            raise ConfigurationError("請在 .env 檔案中設定 CWA_API_KEY")

        url = f"{self.settings.cwa_api_base_url}/v1/rest/datastore/{dataset_id}"
        logger.debug("Requesting CWA dataset %s with %s", dataset_id, params)

        try:
            response = await self._client.get(url, params={"Authorization": api_key, **params})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            details = _safe_json(exc.response)
            message = details.get("message") if isinstance(details, dict) else None
            logger.error("CWA dataset %s returned HTTP %s", dataset_id, exc.response.status_code)
            raise UpstreamError(
                message or "無法取得天氣資料",
                status_code=exc.response.status_code,
                kind="http",
                details=details,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("CWA dataset %s request failed: %s", dataset_id, exc)
            raise UpstreamError("無法連線至 CWA 服務，請稍後再試", details=str(exc)) from exc
        except ValueError as exc:
            logger.error("CWA dataset %s returned invalid JSON: %s", dataset_id, exc)
            raise UpstreamError("CWA 回應格式錯誤", details=str(exc)) from exc

        if not isinstance(payload, dict):
            raise UpstreamError("CWA 回應格式錯誤", details=payload)
        return payload


def _normalize_town(town: object) -> dict:
    town = _as_dict(town)
    records: list[dict] = []
    for entry in _as_list(_first_present(town, "Time", "time")):
        entry = _as_dict(entry)
        elements = _as_dict(_first_present(entry, "WeatherElements", "weatherElements"))
        records.append(
            {
                "issue_time": _first_present(entry, "IssueTime", "issueTime") or "",
                "index": elements.get("TemperatureDifferenceIndex"),
                "warning": elements.get("TemperatureDifferenceWarning") or "",
            }
        )
    return {
        "name": _first_present(town, "LocationName", "locationName") or "",
        "records": records,
    }


def _first_present(mapping: dict, *keys: str) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _as_dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: object) -> list:
    return value if isinstance(value, list) else []


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
