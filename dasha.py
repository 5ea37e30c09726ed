"""
Vimshottari Dasha.

The 120-year cycle runs Ketu (7) -> Venus (20) -> Sun (6) -> Moon (10) ->
Mars (7) -> Rahu (18) -> Jupiter (16) -> Saturn (19) -> Mercury (17). The
Moon's nakshatra at birth picks the first Mahadasha; how far the Moon has
travelled through that nakshatra is how much of the first Mahadasha has
already elapsed. Each period splits into nine sub-periods in the same order,
starting from its own lord, with durations proportional to the year weights.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

from zodiac import Graha, normalize_degrees, round_half_up

DASHA_SEQUENCE: Tuple[Graha, ...] = (
    Graha.KETU, Graha.VENUS, Graha.SUN, Graha.MOON, Graha.MARS,
    Graha.RAHU, Graha.JUPITER, Graha.SATURN, Graha.MERCURY,
)

DASHA_YEARS: Mapping[Graha, int] = MappingProxyType({
    Graha.KETU: 7,
    Graha.VENUS: 20,
    Graha.SUN: 6,
    Graha.MOON: 10,
    Graha.MARS: 7,
    Graha.RAHU: 18,
    Graha.JUPITER: 16,
    Graha.SATURN: 19,
    Graha.MERCURY: 17,
})

GRAND_CYCLE_YEARS = 120
DAYS_PER_YEAR = 365.25
NAKSHATRA_SPAN = 360.0 / 27.0

MONTHS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


class DashaLevel(Enum):
    MAHA = "MAHA DASHA"
    ANTAR = "ANTARDASHA"
    PRATYANTAR = "PRATYANTARDASHA"


@dataclass(frozen=True)
class DashaPeriod:
    level: DashaLevel
    planet: Graha
    start: datetime
    end: datetime
    years: float

    @property
    def duration(self) -> str:
        return format_duration(self.years)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class DashaResult:
    """The running Maha, Antar and Pratyantar periods at a reference instant."""
    periods: Tuple[DashaPeriod, DashaPeriod, DashaPeriod]
    flow: str


def format_duration(years: float) -> str:
    if years >= 1:
        return f"{years:.1f}y"
    months = years * 12
    if months >= 1:
        return f"{round_half_up(months)}m"
    return f"{round_half_up(years * 365)}d"


def format_date(dt: datetime) -> str:
    return f"{dt.day} {MONTHS[dt.month - 1]} {dt.year}"


def _years_to_delta(years: float) -> timedelta:
    return timedelta(days=years * DAYS_PER_YEAR)


def _sequence_from(lord: Graha) -> List[Graha]:
    idx = DASHA_SEQUENCE.index(lord)
    return list(DASHA_SEQUENCE[idx:] + DASHA_SEQUENCE[:idx])


def birth_nakshatra(moon_longitude: float) -> Tuple[int, float]:
    """Nakshatra index (0-26) and the fraction of it already traversed."""
    lon = normalize_degrees(moon_longitude)
    idx = int(lon // NAKSHATRA_SPAN) % 27
    elapsed = (lon - idx * NAKSHATRA_SPAN) / NAKSHATRA_SPAN
    return idx, min(max(elapsed, 0.0), 1.0)


def vimshottari_timeline(moon_longitude: float, birth: datetime) -> List[DashaPeriod]:
    """
    The nine Mahadashas of one full cycle.

    The first period is returned with its nominal start, which lies before
    birth by the elapsed share of the birth nakshatra, so that every period
    satisfies start == end - years.
    """
    nak_idx, elapsed = birth_nakshatra(moon_longitude)
    first_lord = DASHA_SEQUENCE[nak_idx % 9]

    cursor = birth - _years_to_delta(DASHA_YEARS[first_lord] * elapsed)
    timeline = []
    for lord in _sequence_from(first_lord):
        years = float(DASHA_YEARS[lord])
        end = cursor + _years_to_delta(years)
        timeline.append(DashaPeriod(DashaLevel.MAHA, lord, cursor, end, years))
        cursor = end
    return timeline


def sub_periods(parent: DashaPeriod, level: DashaLevel) -> List[DashaPeriod]:
    """
    Split a period into its nine children starting from the parent's lord.
    Child years = parent years * weight / 120; the last child closes
    exactly on the parent's end.
    """
    periods = []
    cursor = parent.start
    sequence = _sequence_from(parent.planet)
    for i, lord in enumerate(sequence):
        years = parent.years * DASHA_YEARS[lord] / GRAND_CYCLE_YEARS
        end = parent.end if i == len(sequence) - 1 else cursor + _years_to_delta(years)
        periods.append(DashaPeriod(level, lord, cursor, end, years))
        cursor = end
    return periods


def _select(periods: List[DashaPeriod], instant: datetime) -> DashaPeriod:
    """Period containing instant, saturating to the first or last one."""
    if instant < periods[0].start:
        return periods[0]
    for period in periods:
        if period.contains(instant):
            return period
    return periods[-1]


def compute_dasha(moon_longitude: float, birth: datetime, reference: datetime) -> DashaResult:
    """Running Maha / Antar / Pratyantar periods at `reference`."""
    maha = _select(vimshottari_timeline(moon_longitude, birth), reference)
    antar = _select(sub_periods(maha, DashaLevel.ANTAR), reference)
    pratyantar = _select(sub_periods(antar, DashaLevel.PRATYANTAR), reference)

    flow = f"{maha.planet.value} → {antar.planet.value} → {pratyantar.planet.value}"
    return DashaResult(periods=(maha, antar, pratyantar), flow=flow)
