from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from app.localities import require_locality
from app.services.advisory import NO_DATA_ADVICE, ClothingAdvice, advise
from app.services.cwa_client import CwaClient
from app.services.forecast_normalizer import normalize_forecast
from app.services.temp_diff import extract_peak, parse_int


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedAdvisory:
    temp_diff_index: int | None
    temp_diff_warning: str
    location_name: str
    clothing_advice: ClothingAdvice
    summary: str

    def to_dict(self) -> dict:
        return {
            "tempDiffIndex": self.temp_diff_index,
            "tempDiffWarning": self.temp_diff_warning,
            "locationName": self.location_name,
            "clothingAdvice": self.clothing_advice.to_dict(),
            "desc": self.summary,
        }


async def build_temp_diff_advisory(client: CwaClient, city_key: str, *, today: date) -> AggregatedAdvisory:
    location_name = require_locality(city_key)
    payload = await client.fetch_temp_difference(location_name)
    peak = extract_peak(payload, today)

    if not peak.found:
        return AggregatedAdvisory(
            temp_diff_index=None,
            temp_diff_warning="",
            location_name=location_name,
            clothing_advice=NO_DATA_ADVICE,
            summary="暫無資料",
        )

    max_temp, min_temp = await _fetch_today_bounds(client, location_name)
    return AggregatedAdvisory(
        temp_diff_index=peak.index,
        temp_diff_warning=peak.warning,
        location_name=location_name,
        clothing_advice=advise(peak.index, max_temp=max_temp, min_temp=min_temp),
        summary=f"最大溫差指數 {peak.index}",
    )


async def _fetch_today_bounds(client: CwaClient, location_name: str) -> tuple[int | None, int | None]:
    """Best-effort (max, min) from the first forecast window.

    Any failure returns ``(None, None)``, which puts the advice in index-only mode.
    """
    try:
        report = normalize_forecast(await client.fetch_forecast(location_name), location_name)
    except Exception as exc:
        logger.warning("Temperature bounds unavailable for %s, using index-only advice: %s", location_name, exc)
        return None, None

    if not report.windows:
        return None, None
    first = report.windows[0]
    return parse_int(first.max_temp), parse_int(first.min_temp)
