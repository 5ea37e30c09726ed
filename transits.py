"""
Gochara (transit) mapping.

Current planet positions are read against the natal Lagna: a transiting
planet's house is counted from the birth ascendant sign, exactly as a natal
placement would be. Each (planet, house) pair then gets a fixed
interpretation from TRANSIT_EFFECTS.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from dasha import format_date
from ephemeris import EphemerisSnapshot
from exceptions import InvalidInputError
from zodiac import (
    Graha,
    Rashi,
    degree_in_sign,
    house_of_sign,
    parse_graha,
    rashi_from_longitude,
    round_half_up,
)

logger = logging.getLogger(__name__)


class TransitQuality(str, Enum):
    GOOD = "good"
    NEUTRAL = "neutral"
    CHALLENGING = "challenging"


_G = TransitQuality.GOOD
_N = TransitQuality.NEUTRAL
_C = TransitQuality.CHALLENGING


def _effects(*rows: Tuple[TransitQuality, str]) -> Mapping[int, Tuple[TransitQuality, str]]:
    """Twelve (quality, brief) rows, one per house from 1."""
    return MappingProxyType({house: row for house, row in enumerate(rows, start=1)})


TRANSIT_EFFECTS: Mapping[Graha, Mapping[int, Tuple[TransitQuality, str]]] = MappingProxyType({
    Graha.SUN: _effects(
        (_C, 'Health and ego challenges'),
        (_C, 'Financial stress'),
        (_G, 'Courage and victory'),
        (_C, 'Domestic unrest'),
        (_N, 'Mixed results for children'),
        (_G, 'Victory over enemies'),
        (_C, 'Partnership friction'),
        (_C, 'Health concerns'),
        (_N, 'Spiritual introspection'),
        (_G, 'Career recognition'),
        (_G, 'Financial gains'),
        (_C, 'Expenses and isolation'),
    ),
    Graha.MOON: _effects(
        (_G, 'Emotional well-being'),
        (_C, 'Financial fluctuations'),
        (_G, 'Social connections'),
        (_C, 'Mental restlessness'),
        (_N, 'Creative thinking'),
        (_C, 'Health awareness'),
        (_G, 'Relationship harmony'),
        (_C, 'Emotional turbulence'),
        (_G, 'Spiritual inclination'),
        (_G, 'Public recognition'),
        (_G, 'Gains and happiness'),
        (_C, 'Expenses, need for rest'),
    ),
    Graha.MARS: _effects(
        (_C, 'Aggression and accidents'),
        (_C, 'Financial conflicts'),
        (_G, 'Courage and initiative'),
        (_C, 'Property disputes'),
        (_C, 'Risky decisions'),
        (_G, 'Victory over competition'),
        (_C, 'Relationship conflicts'),
        (_C, 'Accidents, surgeries'),
        (_N, 'Active pursuits'),
        (_G, 'Career drive'),
        (_G, 'Financial gains'),
        (_C, 'Hidden enemies active'),
    ),
    Graha.MERCURY: _effects(
        (_G, 'Sharp communication'),
        (_G, 'Financial intelligence'),
        (_G, 'Learning and travel'),
        (_N, 'Domestic discussions'),
        (_G, 'Creative expression'),
        (_G, 'Problem-solving ability'),
        (_G, 'Business partnerships'),
        (_N, 'Research and investigation'),
        (_G, 'Higher learning'),
        (_G, 'Professional communication'),
        (_G, 'Networking gains'),
        (_N, 'Introspective thinking'),
    ),
    Graha.JUPITER: _effects(
        (_C, 'Overconfidence, weight gain'),
        (_G, 'Wealth accumulation'),
        (_N, 'Steady progress'),
        (_N, 'Domestic changes'),
        (_G, 'Children, wisdom, fortune'),
        (_C, 'Debt or health issues'),
        (_G, 'Marriage and partnerships'),
        (_C, 'Obstacles and delays'),
        (_G, 'Fortune, spirituality, travel'),
        (_N, 'Career shifts'),
        (_G, 'Major gains and success'),
        (_C, 'Expenses, spiritual growth'),
    ),
    Graha.VENUS: _effects(
        (_G, 'Charm and attractiveness'),
        (_G, 'Financial prosperity'),
        (_G, 'Social enjoyment'),
        (_G, 'Domestic happiness'),
        (_G, 'Romance and creativity'),
        (_C, 'Relationship stress'),
        (_G, 'Love and harmony'),
        (_N, 'Hidden attractions'),
        (_G, 'Cultural pursuits'),
        (_G, 'Career through charm'),
        (_G, 'Financial gains'),
        (_N, 'Private pleasures'),
    ),
    Graha.SATURN: _effects(
        (_C, 'Hard work, discipline needed'),
        (_C, 'Financial pressure'),
        (_G, 'Determination pays off'),
        (_C, 'Domestic burdens'),
        (_C, 'Delayed results'),
        (_G, 'Overcoming obstacles'),
        (_C, 'Relationship tests'),
        (_C, 'Major life lessons'),
        (_C, 'Faith tested'),
        (_N, 'Career responsibility'),
        (_G, 'Steady long-term gains'),
        (_C, 'Isolation, spiritual depth'),
    ),
    Graha.RAHU: _effects(
        (_C, 'Identity confusion'),
        (_C, 'Unconventional finances'),
        (_G, 'Bold communication'),
        (_C, 'Domestic disruption'),
        (_C, 'Risky speculation'),
        (_G, 'Victory over enemies'),
        (_C, 'Unusual relationships'),
        (_C, 'Sudden transformations'),
        (_N, 'Unconventional beliefs'),
        (_G, 'Ambitious career moves'),
        (_G, 'Unexpected gains'),
        (_C, 'Hidden anxieties'),
    ),
    Graha.KETU: _effects(
        (_C, 'Spiritual seeking'),
        (_C, 'Detachment from wealth'),
        (_G, 'Intuitive insights'),
        (_N, 'Inner searching'),
        (_C, 'Unconventional thinking'),
        (_G, 'Mystical healing'),
        (_C, 'Relationship detachment'),
        (_N, 'Occult interests'),
        (_G, 'Spiritual breakthroughs'),
        (_C, 'Career uncertainty'),
        (_G, 'Spiritual gains'),
        (_G, 'Liberation, moksha'),
    ),
})

DEFAULT_EFFECT: Tuple[TransitQuality, str] = (TransitQuality.NEUTRAL, 'Transit in progress')


def transit_effect(graha: Graha, house: int) -> Tuple[TransitQuality, str]:
    return TRANSIT_EFFECTS.get(graha, {}).get(house, DEFAULT_EFFECT)


@dataclass(frozen=True)
class TransitEntry:
    graha: Graha
    rashi: Rashi
    degree: int
    retrograde: bool
    natal_house: int
    quality: TransitQuality
    brief: str
    moon_house: Optional[int] = None


@dataclass(frozen=True)
class TransitResult:
    date: str
    instant: datetime
    entries: Tuple[TransitEntry, ...]

    def summary(self) -> Dict[TransitQuality, int]:
        """Number of entries per quality."""
        counts = {quality: 0 for quality in TransitQuality}
        for entry in self.entries:
            counts[entry.quality] += 1
        return counts


def compute_transits(lagna: Rashi,
                     snapshot: EphemerisSnapshot,
                     moon_sign: Optional[Rashi] = None) -> TransitResult:
    """
    Map a snapshot of current positions onto the natal house frame.

    Entries follow the snapshot order; unknown bodies and repeats are
    skipped. When `moon_sign` (the natal Moon's sign) is given, each entry
    also carries its house counted from the Moon.
    """
    entries: List[TransitEntry] = []
    seen = set()

    for planet in snapshot.planets:
        graha = parse_graha(planet.name)
        if graha is None or graha in seen:
            logger.debug("Skipping transit body %r", planet.name)
            continue
        try:
            longitude = float(planet.longitude)
        except (TypeError, ValueError):
            longitude = math.nan
        if not math.isfinite(longitude):
            raise InvalidInputError(f"Transit longitude for {graha.value} is not a finite number")

        seen.add(graha)
        rashi = rashi_from_longitude(longitude)
        house = house_of_sign(rashi, lagna)
        quality, brief = transit_effect(graha, house)
        entries.append(TransitEntry(
            graha=graha,
            rashi=rashi,
            degree=round_half_up(degree_in_sign(longitude)),
            retrograde=bool(planet.is_retrograde),
            natal_house=house,
            quality=quality,
            brief=brief,
            moon_house=house_of_sign(rashi, moon_sign) if moon_sign is not None else None,
        ))

    return TransitResult(
        date=format_date(snapshot.instant),
        instant=snapshot.instant,
        entries=tuple(entries),
    )
