from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class ClothingAdvice:
    zh: str
    en: str

    def to_dict(self) -> dict:
        return {"zh": self.zh, "en": self.en}


@dataclass(frozen=True)
class AdviceRule:
    name: str
    applies: Callable[[int, int, int], bool]
    advice: ClothingAdvice


NO_DATA_ADVICE = ClothingAdvice(zh="暫無建議", en="No advice")

HOT_ALL_DAY = ClothingAdvice(
    zh="全天炎熱，雖有溫差但低溫仍高，建議穿著透氣散熱衣物，多補充水分。",
    en="Hot all day! Wear breathable clothes and stay hydrated.",
)
HOT_DAY_COOL_NIGHT = ClothingAdvice(
    zh="白天炎熱但夜間稍涼，建議短袖搭配極薄外套，方便穿脫。",
    en="Hot day, cool night. Short sleeves with a thin jacket recommended.",
)
EXTREME_SWING = ClothingAdvice(
    zh="溫差極大！早晚偏涼，建議洋蔥式穿搭 (透氣內層+保暖外層)。",
    en="Extreme temp diff! Onion-style dressing recommended.",
)
NOTICEABLE_SWING = ClothingAdvice(
    zh="日夜溫差稍大，建議攜帶薄外套。",
    en="Large temp diff. A light jacket is recommended.",
)
HOT = ClothingAdvice(
    zh="天氣炎熱，建議穿著短袖衣物並注意防曬。",
    en="It's hot. Short sleeves and sun protection advised.",
)
COMFORTABLE = ClothingAdvice(
    zh="氣候舒適，建議穿著短袖或薄長袖。",
    en="Comfortable weather. Short sleeves or light long sleeves.",
)
SLIGHTLY_COOL = ClothingAdvice(
    zh="稍有涼意，建議穿著薄長袖或搭配背心。",
    en="Slightly cool. Long sleeves or a vest recommended.",
)
COLD = ClothingAdvice(
    zh="氣溫較低，建議穿著保暖衣物與外套。",
    en="It's cold. Warm clothes and a jacket are recommended.",
)

INDEX_ONLY_EXTREME = ClothingAdvice(
    zh="溫差極大！建議洋蔥式穿搭 (透氣內層+保暖外層)。",
    en="Extreme temp diff! Onion-style dressing recommended.",
)
INDEX_ONLY_MODERATE = ClothingAdvice(
    zh="日夜溫差稍大，建議攜帶薄外套。",
    en="Large temp diff. Bringing a light jacket is advised.",
)
INDEX_ONLY_COMFORTABLE = ClothingAdvice(
    zh="溫差舒適，依氣溫穿著即可。",
    en="Comfortable temp diff. Dress according to current temp.",
)

# Evaluated top to bottom; the first rule whose predicate holds wins.
# Predicates take (index, max_temp, min_temp).
TEMPERATURE_RULES: tuple[AdviceRule, ...] = (
    AdviceRule("hot_all_day", lambda idx, hi, lo: lo >= 26, HOT_ALL_DAY),
    AdviceRule("hot_day_cool_night", lambda idx, hi, lo: hi >= 30 and lo <= 25, HOT_DAY_COOL_NIGHT),
    AdviceRule("extreme_swing", lambda idx, hi, lo: idx >= 10, EXTREME_SWING),
    AdviceRule("noticeable_swing", lambda idx, hi, lo: idx >= 6, NOTICEABLE_SWING),
    AdviceRule("hot", lambda idx, hi, lo: hi > 30, HOT),
    AdviceRule("comfortable", lambda idx, hi, lo: hi >= 25, COMFORTABLE),
    AdviceRule("slightly_cool", lambda idx, hi, lo: hi >= 20, SLIGHTLY_COOL),
    AdviceRule("cold", lambda idx, hi, lo: True, COLD),
)

INDEX_ONLY_RULES: tuple[AdviceRule, ...] = (
    AdviceRule("extreme_swing", lambda idx, hi, lo: idx >= 10, INDEX_ONLY_EXTREME),
    AdviceRule("moderate_swing", lambda idx, hi, lo: idx >= 6, INDEX_ONLY_MODERATE),
    AdviceRule("comfortable", lambda idx, hi, lo: True, INDEX_ONLY_COMFORTABLE),
)


def select_rule(index: int, max_temp: int | None = None, min_temp: int | None = None) -> AdviceRule:
    if max_temp is None or min_temp is None:
        rules, hi, lo = INDEX_ONLY_RULES, 0, 0
    else:
        rules, hi, lo = TEMPERATURE_RULES, max_temp, min_temp

    for rule in rules:
        if rule.applies(index, hi, lo):
            return rule
    # both cascades end in a catch-all rule
    raise RuntimeError("Advice cascade has no terminal rule.")


def advise(index: int, max_temp: int | None = None, min_temp: int | None = None) -> ClothingAdvice:
    return select_rule(index, max_temp=max_temp, min_temp=min_temp).advice
