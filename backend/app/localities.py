from __future__ import annotations

from dataclasses import dataclass

from app.errors import UnknownLocalityError


CITY_MAP: dict[str, str] = {
    "taipei": "臺北市",
    "newtaipei": "新北市",
    "taoyuan": "桃園市",
    "taichung": "臺中市",
    "tainan": "臺南市",
    "kaohsiung": "高雄市",
    "keelung": "基隆市",
    "hsinchu_city": "新竹市",
    "hsinchu_county": "新竹縣",
    "miaoli": "苗栗縣",
    "changhua": "彰化縣",
    "nantou": "南投縣",
    "yunlin": "雲林縣",
    "chiayi_city": "嘉義市",
    "chiayi_county": "嘉義縣",
    "pingtung": "屏東縣",
    "yilan": "宜蘭縣",
    "hualien": "花蓮縣",
    "taitung": "臺東縣",
    "penghu": "澎湖縣",
    "kinmen": "金門縣",
    "lienchiang": "連江縣",
}


@dataclass(frozen=True)
class LocalityNotFound:
    key: str
    available: tuple[str, ...]


def resolve_locality(key: str) -> str | LocalityNotFound:
    name = CITY_MAP.get((key or "").strip().lower())
    if name is None:
        return LocalityNotFound(key=key, available=tuple(CITY_MAP))
    return name


def require_locality(key: str) -> str:
    resolved = resolve_locality(key)
    if isinstance(resolved, LocalityNotFound):
        raise UnknownLocalityError(resolved.key, resolved.available)
    return resolved
