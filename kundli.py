"""
Kundli assembly: one ephemeris call, then every derived analysis.

The ephemeris is a collaborator passed in by the caller; anything offering
`compute_natal` and `compute_current_planets` will do.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import pytz

from dasha import DashaPeriod, DashaResult, compute_dasha, format_date, vimshottari_timeline
from ephemeris import EphemerisSnapshot, SwissEphemeris, to_utc
from exceptions import InvalidInputError
from natal import Chart, build_natal_chart
from transits import TransitResult, compute_transits
from varga import compute_all_vargas
from yogas import YOGA_CATEGORY_LABELS, YogaResult, evaluate_yogas
from zodiac import Graha

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KundliReport:
    birth_utc: datetime
    snapshot: EphemerisSnapshot
    chart: Chart
    dasha: DashaResult
    timeline: List[DashaPeriod]
    yogas: List[YogaResult]
    vargas: List[Chart]


def moon_longitude(snapshot: EphemerisSnapshot) -> float:
    longitude = snapshot.longitude_of(Graha.MOON.value)
    if longitude is None:
        raise InvalidInputError("Ephemeris snapshot has no Moon position")
    return longitude


def compute_kundli(ephemeris,
                   birth_date: datetime,
                   latitude: float,
                   longitude: float,
                   timezone: Optional[str] = None,
                   reference: Optional[datetime] = None) -> KundliReport:
    """
    Natal chart, running Dasha, Vimshottari timeline, yogas and vargas.

    `reference` is the instant the running Dasha is evaluated at; it is
    read in the birth timezone when naive and defaults to the birth
    instant itself.
    """
    snapshot = ephemeris.compute_natal(birth_date, latitude, longitude, timezone)
    birth_utc = snapshot.instant
    reference_utc = to_utc(reference, timezone) if reference is not None else birth_utc

    chart = build_natal_chart(snapshot)
    moon = moon_longitude(snapshot)
    logger.debug("Kundli for %s: lagna %s", birth_utc.isoformat(), chart.lagna.value)

    return KundliReport(
        birth_utc=birth_utc,
        snapshot=snapshot,
        chart=chart,
        dasha=compute_dasha(moon, birth_utc, reference_utc),
        timeline=vimshottari_timeline(moon, birth_utc),
        yogas=evaluate_yogas(chart),
        vargas=compute_all_vargas(chart),
    )


def compute_current_transits(ephemeris,
                             chart: Chart,
                             instant: datetime,
                             timezone: Optional[str] = None) -> TransitResult:
    """Transits at `instant` against a natal chart, with houses from Lagna and Moon."""
    snapshot = ephemeris.compute_current_planets(instant, timezone)
    moon = chart.placement(Graha.MOON)
    return compute_transits(chart.lagna, snapshot, moon.rashi if moon else None)


def format_report_text(report: KundliReport) -> str:
    """Human-readable summary of a report."""
    chart = report.chart
    lines = []
    lines.append("=" * 75)
    lines.append("JANMA KUNDLI")
    lines.append("=" * 75)
    lines.append(f"Birth (UTC):  {report.birth_utc.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"Lagna:        {chart.lagna.value} ({chart.lagna.english})")
    lines.append("")

    lines.append("PLANETS")
    lines.append("-" * 75)
    for p in chart.placements():
        retro = " R" if p.retrograde else ""
        lines.append(f"{p.graha.value:10} {p.rashi.value:12} {p.degree:3}°  H{p.house}{retro}")

    lines.append("")
    lines.append("DASHA")
    lines.append("-" * 75)
    lines.append(report.dasha.flow)
    for period in report.dasha.periods:
        lines.append(f"{period.level.value:16} {period.planet.value:8} "
                     f"{format_date(period.start)} - {format_date(period.end)} ({period.duration})")

    lines.append("")
    lines.append("YOGAS")
    lines.append("-" * 75)
    if not report.yogas:
        lines.append("None")
    for yoga in report.yogas:
        label = YOGA_CATEGORY_LABELS[yoga.category]
        lines.append(f"{yoga.name:30} {label:20} {yoga.strength.value}")
        lines.append(f"    {yoga.description}")

    return "\n".join(lines)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    ephemeris = SwissEphemeris()
    birth = datetime(1990, 1, 15, 10, 30, 0)
    report = compute_kundli(
        ephemeris,
        birth_date=birth,
        latitude=28.6139,
        longitude=77.2090,
        timezone='Asia/Kolkata',
        reference=datetime.now(pytz.UTC),
    )
    print(format_report_text(report))
    print()

    transits = compute_current_transits(ephemeris, report.chart, datetime.now(pytz.UTC))
    print(f"TRANSITS ({transits.date})")
    print("-" * 75)
    for entry in transits.entries:
        print(f"{entry.graha.value:10} {entry.rashi.value:12} H{entry.natal_house:<3} "
              f"{entry.quality.value:12} {entry.brief}")
