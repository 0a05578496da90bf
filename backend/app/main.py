from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import configure_logging, get_settings
from app.errors import CwaServiceError
from app.localities import CITY_MAP, require_locality
from app.schemas import RelayResponse, TempDiffResponse, WeatherResponse
from app.services.cwa_client import CwaClient
from app.services.forecast_normalizer import normalize_forecast
from app.services.temp_diff_advisory import build_temp_diff_advisory


settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

cwa_client = CwaClient(settings=settings)

app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.frontend_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

FEATURES = [
    {
        "name": "一般天氣預報 (36H)",
        "endpoint": "/api/weather/:city",
        "description": "取得今明 36 小時的天氣預報，包含溫度、降雨機率、舒適度等。",
    },
    {
        "name": "健康氣象 - 溫差提醒",
        "endpoint": "/api/health/temp-difference/:city",
        "description": "未來 72 小時的氣溫變化與溫差警示指數及穿搭建議。",
    },
    {
        "name": "天文 - 日出日沒",
        "endpoint": "/api/astronomy/sun/:city",
        "description": "年度逐日日出日沒時刻資料。",
    },
    {
        "name": "天文 - 月出月沒",
        "endpoint": "/api/astronomy/moon/:city",
        "description": "年度逐日月出月沒時刻資料。",
    },
]


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await cwa_client.close()


@app.exception_handler(CwaServiceError)
async def cwa_service_error_handler(request: Request, exc: CwaServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "找不到此路徑"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while serving %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "伺服器錯誤", "message": str(exc)})


@app.get("/")
async def index() -> dict:
    return {
        "message": "歡迎使用 CWA 天氣預報 API",
        "description": "整合中央氣象署 (CWA) 開放資料，提供全台縣市天氣、健康氣象與天文資訊。",
        "usage": {
            "base_url": "http://<host>:<port>",
            "params": {":city": "縣市英文代碼 (參考 cities 列表)"},
        },
        "features": FEATURES,
        "examples": [
            "/api/weather/taipei",
            "/api/health/temp-difference/kaohsiung",
            "/api/astronomy/sun/taichung",
        ],
        "endpoints": {
            "weather": "/api/weather/:city",
            "tempDiff": "/api/health/temp-difference/:city",
            "sun": "/api/astronomy/sun/:city",
            "moon": "/api/astronomy/moon/:city",
            "health": "/api/health",
        },
        "cities": CITY_MAP,
    }


@app.get("/api/health")
async def health() -> dict:
    return {"status": "OK", "timestamp": datetime.now(tz=timezone.utc).isoformat()}


@app.get("/api/weather/{city}", response_model=WeatherResponse)
async def weather_by_city(city: str) -> dict:
    location_name = require_locality(city)
    report = normalize_forecast(await cwa_client.fetch_forecast(location_name), location_name)
    return {
        "success": True,
        "data": {
            "city": report.city,
            "cityKey": city,
            "updateTime": report.update_time,
            "forecasts": [window.to_dict() for window in report.windows],
        },
    }


@app.get("/api/health/temp-difference/{city}", response_model=TempDiffResponse)
async def temp_difference_by_city(city: str) -> dict:
    advisory = await build_temp_diff_advisory(cwa_client, city, today=_local_today())
    return {"success": True, "data": advisory.to_dict()}


@app.get("/api/astronomy/sun/{city}", response_model=RelayResponse)
async def sun_schedule_by_city(city: str) -> dict:
    location_name = require_locality(city)
    records = await cwa_client.fetch_sunrise(location_name, _local_today())
    return {"success": True, "data": records}


@app.get("/api/astronomy/moon/{city}", response_model=RelayResponse)
async def moon_schedule_by_city(city: str) -> dict:
    location_name = require_locality(city)
    records = await cwa_client.fetch_moonrise(location_name, _local_today())
    return {"success": True, "data": records}


def _local_today() -> date:
    return datetime.now(tz=ZoneInfo(settings.local_timezone)).date()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
