"""
Sidereal zodiac primitives shared by every chart calculation.

Signs (Rashi) and planets (Graha) are closed enumerations and every table
below is total over them, so lookups never fail for a well-formed chart.
Houses are whole-sign: house n holds the sign n-1 steps after the Lagna.
"""

import math
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class Rashi(str, Enum):
    MESHA = "Mesha"
    VRISHABHA = "Vrishabha"
    MITHUNA = "Mithuna"
    KARKA = "Karka"
    SIMHA = "Simha"
    KANYA = "Kanya"
    TULA = "Tula"
    VRISHCHIKA = "Vrishchika"
    DHANU = "Dhanu"
    MAKARA = "Makara"
    KUMBHA = "Kumbha"
    MEENA = "Meena"

    @property
    def position(self) -> int:
        return _RASHI_INDEX[self]

    @property
    def english(self) -> str:
        return RASHI_ENGLISH[self]

    @property
    def lord(self) -> "Graha":
        return SIGN_LORD[self]

    @property
    def is_odd(self) -> bool:
        """Mesha is the 1st (odd) sign, so odd signs have even indices."""
        return self.position % 2 == 0


class Graha(str, Enum):
    SUN = "Sun"
    MOON = "Moon"
    MARS = "Mars"
    MERCURY = "Mercury"
    JUPITER = "Jupiter"
    VENUS = "Venus"
    SATURN = "Saturn"
    RAHU = "Rahu"
    KETU = "Ketu"


class Element(Enum):
    FIRE = 0
    EARTH = 1
    AIR = 2
    WATER = 3


class Quality(Enum):
    MOVABLE = 0
    FIXED = 1
    DUAL = 2


RASHI_ORDER: Tuple[Rashi, ...] = tuple(Rashi)
_RASHI_INDEX = {rashi: idx for idx, rashi in enumerate(RASHI_ORDER)}

GRAHA_ORDER: Tuple[Graha, ...] = tuple(Graha)
NODES = frozenset({Graha.RAHU, Graha.KETU})

RASHI_ENGLISH: Mapping[Rashi, str] = MappingProxyType({
    Rashi.MESHA: "Aries",
    Rashi.VRISHABHA: "Taurus",
    Rashi.MITHUNA: "Gemini",
    Rashi.KARKA: "Cancer",
    Rashi.SIMHA: "Leo",
    Rashi.KANYA: "Virgo",
    Rashi.TULA: "Libra",
    Rashi.VRISHCHIKA: "Scorpio",
    Rashi.DHANU: "Sagittarius",
    Rashi.MAKARA: "Capricorn",
    Rashi.KUMBHA: "Aquarius",
    Rashi.MEENA: "Pisces",
})

SIGN_LORD: Mapping[Rashi, Graha] = MappingProxyType({
    Rashi.MESHA: Graha.MARS,
    Rashi.VRISHABHA: Graha.VENUS,
    Rashi.MITHUNA: Graha.MERCURY,
    Rashi.KARKA: Graha.MOON,
    Rashi.SIMHA: Graha.SUN,
    Rashi.KANYA: Graha.MERCURY,
    Rashi.TULA: Graha.VENUS,
    Rashi.VRISHCHIKA: Graha.MARS,
    Rashi.DHANU: Graha.JUPITER,
    Rashi.MAKARA: Graha.SATURN,
    Rashi.KUMBHA: Graha.SATURN,
    Rashi.MEENA: Graha.JUPITER,
})

OWN_SIGNS: Mapping[Graha, frozenset] = MappingProxyType({
    Graha.SUN: frozenset({Rashi.SIMHA}),
    Graha.MOON: frozenset({Rashi.KARKA}),
    Graha.MARS: frozenset({Rashi.MESHA, Rashi.VRISHCHIKA}),
    Graha.MERCURY: frozenset({Rashi.MITHUNA, Rashi.KANYA}),
    Graha.JUPITER: frozenset({Rashi.DHANU, Rashi.MEENA}),
    Graha.VENUS: frozenset({Rashi.VRISHABHA, Rashi.TULA}),
    Graha.SATURN: frozenset({Rashi.MAKARA, Rashi.KUMBHA}),
    Graha.RAHU: frozenset(),
    Graha.KETU: frozenset(),
})

EXALTATION_SIGN: Mapping[Graha, Rashi] = MappingProxyType({
    Graha.SUN: Rashi.MESHA,
    Graha.MOON: Rashi.VRISHABHA,
    Graha.MARS: Rashi.MAKARA,
    Graha.MERCURY: Rashi.KANYA,
    Graha.JUPITER: Rashi.KARKA,
    Graha.VENUS: Rashi.MEENA,
    Graha.SATURN: Rashi.TULA,
    Graha.RAHU: Rashi.MITHUNA,
    Graha.KETU: Rashi.DHANU,
})

DEBILITATION_SIGN: Mapping[Graha, Rashi] = MappingProxyType({
    Graha.SUN: Rashi.TULA,
    Graha.MOON: Rashi.VRISHCHIKA,
    Graha.MARS: Rashi.KARKA,
    Graha.MERCURY: Rashi.MEENA,
    Graha.JUPITER: Rashi.MAKARA,
    Graha.VENUS: Rashi.KANYA,
    Graha.SATURN: Rashi.MESHA,
    Graha.RAHU: Rashi.DHANU,
    Graha.KETU: Rashi.MITHUNA,
})

NATURAL_BENEFICS = frozenset({Graha.JUPITER, Graha.VENUS, Graha.MERCURY, Graha.MOON})

KENDRA_HOUSES = frozenset({1, 4, 7, 10})
TRIKONA_HOUSES = frozenset({1, 5, 9})
DUSTHANA_HOUSES = frozenset({6, 8, 12})


def normalize_degrees(deg: float) -> float:
    """Normalize degrees to 0-360 range."""
    return deg % 360


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rashi_at(index: int) -> Rashi:
    return RASHI_ORDER[index % 12]


def rashi_index_from_longitude(longitude: float) -> int:
    return int(normalize_degrees(longitude) // 30) % 12


def rashi_from_longitude(longitude: float) -> Rashi:
    return RASHI_ORDER[rashi_index_from_longitude(longitude)]


def degree_in_sign(longitude: float) -> float:
    return normalize_degrees(longitude) % 30


def element_of(rashi: Rashi) -> Element:
    return Element(rashi.position % 4)


def quality_of(rashi: Rashi) -> Quality:
    return Quality(rashi.position % 3)


def house_of_sign(rashi: Rashi, lagna: Rashi) -> int:
    """Whole-sign house (1-12) occupied by a sign for the given Lagna."""
    return (rashi.position - lagna.position + 12) % 12 + 1


def sign_of_house(lagna: Rashi, house: int) -> Rashi:
    return rashi_at(lagna.position + house - 1)


def house_distance(from_house: int, to_house: int) -> int:
    """
    Inclusive Vedic house count: the 1st from a house is the house itself.
    From H3 to H3 is 1, from H3 to H6 is 4.
    """
    return (to_house - from_house + 12) % 12 + 1


def house_from(base_house: int, nth: int) -> int:
    """The house that is the nth (1-indexed) counted from base_house."""
    return (base_house + nth - 2) % 12 + 1


def is_own_sign(graha: Graha, rashi: Rashi) -> bool:
    return rashi in OWN_SIGNS[graha]


def is_exalted(graha: Graha, rashi: Rashi) -> bool:
    return EXALTATION_SIGN[graha] == rashi


def is_debilitated(graha: Graha, rashi: Rashi) -> bool:
    return DEBILITATION_SIGN[graha] == rashi


def is_dignified(graha: Graha, rashi: Rashi) -> bool:
    """Own sign or exaltation."""
    return is_exalted(graha, rashi) or is_own_sign(graha, rashi)


def is_kendra(house: int) -> bool:
    return house in KENDRA_HOUSES


def is_trikona(house: int) -> bool:
    return house in TRIKONA_HOUSES


def exalted_in(rashi: Rashi) -> Optional[Graha]:
    """First planet (in Graha order) whose exaltation sign is rashi."""
    for graha in GRAHA_ORDER:
        if EXALTATION_SIGN[graha] == rashi:
            return graha
    return None


def parse_graha(name: Optional[str]) -> Optional[Graha]:
    """Map an ephemeris body name onto a Graha; unknown names give None."""
    if not name:
        return None
    try:
        return Graha(name)
    except ValueError:
        return None
