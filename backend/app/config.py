from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"


@dataclass(frozen=True)
class Settings:
    app_name: str = "Taiwan Weather API"
    app_version: str = "1.0.0"
    cwa_api_base_url: str = "https://opendata.cwa.gov.tw/api"
    cwa_api_key: str | None = None
    forecast_dataset: str = "F-C0032-001"
    temp_difference_dataset: str = "F-A0085-005"
    sunrise_dataset: str = "A-B0062-001"
    moonrise_dataset: str = "A-B0063-001"
    local_timezone: str = "Asia/Taipei"
    request_timeout_seconds: float = 12.0
    frontend_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    port: int = 3000


def get_settings() -> Settings:
    load_dotenv()

    api_key_raw = os.getenv("CWA_API_KEY", "").strip()
    base_url_raw = os.getenv("CWA_API_BASE_URL", "").strip()
    timezone_raw = os.getenv("LOCAL_TIMEZONE", "").strip()
    origins_raw = os.getenv("FRONTEND_ORIGINS", "").strip()
    log_level_raw = os.getenv("LOG_LEVEL", "").strip()
    timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS", "").strip()
    port_raw = os.getenv("PORT", "").strip()

    parsed_origins = tuple(item.strip() for item in origins_raw.split(",") if item.strip())

    try:
        request_timeout_seconds = float(timeout_raw) if timeout_raw else 12.0
    except ValueError:
        request_timeout_seconds = 12.0

    try:
        port = int(port_raw) if port_raw else 3000
    except ValueError:
        port = 3000

    return Settings(
        cwa_api_base_url=base_url_raw.rstrip("/") or Settings.cwa_api_base_url,
        cwa_api_key=api_key_raw or None,
        local_timezone=timezone_raw or Settings.local_timezone,
        request_timeout_seconds=max(1.0, request_timeout_seconds),
        frontend_origins=parsed_origins or Settings.frontend_origins,
        log_level=log_level_raw.upper() or Settings.log_level,
        port=port,
    )


def configure_logging(level_name: str) -> None:
    """Route every logger through one stdout handler on the root logger.

    Existing root handlers are removed first so repeated calls (reloads, test
    imports) never duplicate output.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
