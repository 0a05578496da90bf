from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ForecastWindowOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    weather: str = ""
    rain: str = Field(default="", description="Probability of precipitation, e.g. '20%'.")
    min_temp: str = Field(default="", alias="minTemp")
    max_temp: str = Field(default="", alias="maxTemp")
    comfort: str = ""
    wind_speed: str = Field(default="", alias="windSpeed")


class WeatherData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    city: str
    city_key: str = Field(alias="cityKey")
    update_time: str = Field(alias="updateTime")
    forecasts: list[ForecastWindowOut]


class WeatherResponse(BaseModel):
    success: bool = True
    data: WeatherData


class ClothingAdviceOut(BaseModel):
    zh: str = Field(min_length=1)
    en: str = Field(min_length=1)


class TempDiffData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temp_diff_index: int | None = Field(alias="tempDiffIndex")
    temp_diff_warning: str = Field(alias="tempDiffWarning")
    location_name: str = Field(alias="locationName")
    clothing_advice: ClothingAdviceOut = Field(alias="clothingAdvice")
    desc: str


class TempDiffResponse(BaseModel):
    success: bool = True
    data: TempDiffData


class RelayResponse(BaseModel):
    success: bool = True
    data: Any = None
