"""
Natal (D1) chart construction.

A chart is a Lagna plus twelve whole-sign houses. It is fully determined by
the ascendant sign and the list of planet positions and never changes once
built; divisional charts reuse the same structure.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

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
    sign_of_house,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """A planet's position inside one chart."""
    graha: Graha
    house: int
    rashi: Rashi
    degree: int
    retrograde: bool = False


@dataclass(frozen=True)
class House:
    number: int
    rashi: Rashi
    placements: Tuple[Placement, ...] = ()


@dataclass(frozen=True)
class Chart:
    """Whole-sign chart: house n holds the sign n-1 places after the Lagna."""
    lagna: Rashi
    houses: Mapping[int, House] = field(hash=False)
    name: str = 'D1'
    chart_type: str = 'Rasi'

    @classmethod
    def build(cls,
              lagna: Rashi,
              positions: Iterable[Tuple[Graha, Rashi, int, bool]],
              name: str = 'D1',
              chart_type: str = 'Rasi') -> "Chart":
        """Assemble a chart from (graha, rashi, degree, retrograde) tuples."""
        occupants = {number: [] for number in range(1, 13)}
        for graha, rashi, degree, retrograde in positions:
            house = house_of_sign(rashi, lagna)
            occupants[house].append(Placement(graha, house, rashi, degree, retrograde))

        houses = MappingProxyType({
            number: House(number, sign_of_house(lagna, number), tuple(occupants[number]))
            for number in range(1, 13)
        })
        return cls(lagna=lagna, houses=houses, name=name, chart_type=chart_type)

    def placements(self) -> List[Placement]:
        """All placements in house order."""
        return [p for number in range(1, 13) for p in self.houses[number].placements]

    def placement(self, graha: Graha) -> Optional[Placement]:
        for p in self.placements():
            if p.graha == graha:
                return p
        return None

    def house_of(self, graha: Graha) -> Optional[int]:
        p = self.placement(graha)
        return p.house if p else None

    def planets_in_house(self, house: int) -> Tuple[Placement, ...]:
        return self.houses[house].placements

    def sign_of_house(self, house: int) -> Rashi:
        return self.houses[house].rashi

    def lord_of_house(self, house: int) -> Graha:
        return self.houses[house].rashi.lord

    def are_conjunct(self, first: Graha, second: Graha) -> bool:
        h1 = self.house_of(first)
        return h1 is not None and h1 == self.house_of(second)


def _finite(value) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def build_natal_chart(snapshot: EphemerisSnapshot) -> Chart:
    """
    Build the D1 chart from an ephemeris snapshot.

    Unknown body names (Uranus, Chiron, ...) and repeated planets are
    dropped. A missing or non-finite ascendant, or a non-finite planet
    longitude, raises InvalidInputError.
    """
    asc = snapshot.ascendant_longitude
    if asc is None or not _finite(asc):
        raise InvalidInputError("Ascendant longitude is missing or not a finite number")

    lagna = rashi_from_longitude(float(asc))
    seen = set()
    positions = []

    for planet in snapshot.planets:
        graha = parse_graha(planet.name)
        if graha is None:
            logger.debug("Ignoring unknown body %r", planet.name)
            continue
        if graha in seen:
            logger.debug("Ignoring duplicate entry for %s", graha.value)
            continue
        if not _finite(planet.longitude):
            raise InvalidInputError(f"Longitude for {graha.value} is not a finite number")

        seen.add(graha)
        longitude = float(planet.longitude)
        positions.append((
            graha,
            rashi_from_longitude(longitude),
            round_half_up(degree_in_sign(longitude)),
            bool(planet.is_retrograde),
        ))

    return Chart.build(lagna, positions, name='D1', chart_type='Rasi')
