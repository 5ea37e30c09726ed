"""
Swiss Ephemeris adapter.

Supplies the raw snapshot the chart engine consumes: the sidereal ascendant
longitude plus longitude and retrograde flag for the nine grahas. Rahu is the
lunar node (mean or true), Ketu is the point opposite it. Nothing here is
retried; a failing calculation surfaces as EphemerisUnavailableError.
"""

import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Union

import pytz
import swisseph as swe

from config import settings
from exceptions import (
    EphemerisUnavailableError,
    InvalidCoordinatesError,
    InvalidTimezoneError,
)
from zodiac import normalize_degrees

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanetLongitude:
    """One body as reported by the ephemeris."""
    name: str
    longitude: float
    is_retrograde: bool = False


@dataclass(frozen=True)
class EphemerisSnapshot:
    """Complete ephemeris output for one instant (ascendant only for natal)."""
    instant: datetime
    planets: Sequence[PlanetLongitude]
    ascendant_longitude: Optional[float] = None

    def longitude_of(self, name: str) -> Optional[float]:
        for planet in self.planets:
            if planet.name == name:
                return planet.longitude
        return None


def parse_timezone(timezone: Optional[Union[str, pytz.tzinfo.BaseTzInfo]]):
    if timezone is None:
        return None
    if isinstance(timezone, str):
        try:
            return pytz.timezone(timezone)
        except pytz.exceptions.UnknownTimeZoneError:
            raise InvalidTimezoneError(f"Unknown timezone: {timezone}")
    return timezone


def to_utc(dt: datetime, timezone: Optional[Union[str, pytz.tzinfo.BaseTzInfo]] = None) -> datetime:
    """
    Convert a birth or transit time to aware UTC.

    Aware datetimes are converted directly. Naive ones are read in
    `timezone`, falling back to settings.DEFAULT_TIMEZONE. Ambiguous wall
    times take standard time, non-existent ones are shifted as DST.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(pytz.UTC)
    tz = parse_timezone(timezone if timezone is not None else settings.DEFAULT_TIMEZONE)
    try:
        local_dt = tz.localize(dt, is_dst=None)
    except pytz.exceptions.AmbiguousTimeError:
        local_dt = tz.localize(dt, is_dst=False)
    except pytz.exceptions.NonExistentTimeError:
        local_dt = tz.localize(dt, is_dst=True)
    return local_dt.astimezone(pytz.UTC)


class SwissEphemeris:
    """Sidereal positions and whole-sign ascendant from the Swiss Ephemeris."""

    BODIES = {
        'Sun': swe.SUN,
        'Moon': swe.MOON,
        'Mars': swe.MARS,
        'Mercury': swe.MERCURY,
        'Jupiter': swe.JUPITER,
        'Venus': swe.VENUS,
        'Saturn': swe.SATURN,
    }

    NODE_BODIES = {
        'mean': swe.MEAN_NODE,
        'true': swe.TRUE_NODE,
    }

    def __init__(self,
                 ephemeris_path: Optional[str] = None,
                 sidereal_mode: Optional[int] = None,
                 node_type: Optional[str] = None):
        self.sidereal_mode = settings.SIDEREAL_MODE if sidereal_mode is None else sidereal_mode
        self.node_type = (node_type or settings.NODE_TYPE).lower()
        if self.node_type not in self.NODE_BODIES:
            raise ValueError(f"Unknown node type: {self.node_type}")
        self._use_moshier = True
        self._init_ephemeris(ephemeris_path if ephemeris_path is not None else settings.EPHE_PATH)

    def _init_ephemeris(self, ephemeris_path: Optional[str]) -> None:
        if ephemeris_path and os.path.isdir(ephemeris_path):
            try:
                files = os.listdir(ephemeris_path)
            except OSError as e:
                logger.warning("Cannot read ephemeris path %s: %s", ephemeris_path, e)
                files = []
            if any(f.endswith('.se1') for f in files):
                swe.set_ephe_path(ephemeris_path)
                self._use_moshier = False

        swe.set_sid_mode(self.sidereal_mode, 0, 0)

    def _calculate_julian_day(self, dt: datetime) -> float:
        hour_decimal = dt.hour + dt.minute / 60.0 + dt.second / 3600.0 + dt.microsecond / 3600000000.0
        return swe.julday(dt.year, dt.month, dt.day, hour_decimal)

    def _get_calc_flags(self) -> int:
        flags = swe.FLG_MOSEPH if self._use_moshier else swe.FLG_SWIEPH
        return flags | swe.FLG_SPEED | swe.FLG_SIDEREAL

    def _calculate_planets(self, jd: float) -> List[PlanetLongitude]:
        flags = self._get_calc_flags()
        planets = []
        for name, body_id in self.BODIES.items():
            result, _ = swe.calc_ut(jd, body_id, flags)
            planets.append(PlanetLongitude(name, normalize_degrees(result[0]), result[3] < 0))

        node, _ = swe.calc_ut(jd, self.NODE_BODIES[self.node_type], flags)
        rahu_long = normalize_degrees(node[0])
        node_retro = node[3] < 0
        planets.append(PlanetLongitude('Rahu', rahu_long, node_retro))
        planets.append(PlanetLongitude('Ketu', normalize_degrees(rahu_long + 180), node_retro))
        return planets

    def _calculate_ascendant(self, jd: float, latitude: float, longitude: float) -> float:
        flags = swe.FLG_SIDEREAL
        if self._use_moshier:
            flags |= swe.FLG_MOSEPH
        _, ascmc = swe.houses_ex(jd, latitude, longitude, b'W', flags)
        return normalize_degrees(ascmc[0])

    def compute_natal(self, instant: datetime, latitude: float, longitude: float,
                      timezone: Optional[str] = None) -> EphemerisSnapshot:
        """Ascendant and planets for a birth instant and place."""
        if not (isinstance(latitude, (int, float)) and math.isfinite(latitude) and -90 <= latitude <= 90):
            raise InvalidCoordinatesError("Latitude must be between -90 and 90")
        if not (isinstance(longitude, (int, float)) and math.isfinite(longitude) and -180 <= longitude <= 180):
            raise InvalidCoordinatesError("Longitude must be between -180 and 180")

        instant_utc = to_utc(instant, timezone)
        try:
            jd = self._calculate_julian_day(instant_utc)
            planets = self._calculate_planets(jd)
            ascendant = self._calculate_ascendant(jd, latitude, longitude)
        except Exception as e:
            logger.error("Natal ephemeris calculation failed for %s: %s", instant_utc.isoformat(), e)
            raise EphemerisUnavailableError(f"Ephemeris calculation failed: {e}") from e

        return EphemerisSnapshot(
            instant=instant_utc,
            planets=tuple(planets),
            ascendant_longitude=ascendant,
        )

    def compute_current_planets(self, instant: datetime,
                                timezone: Optional[str] = None) -> EphemerisSnapshot:
        """Planets only, for transit work."""
        instant_utc = to_utc(instant, timezone)
        try:
            jd = self._calculate_julian_day(instant_utc)
            planets = self._calculate_planets(jd)
        except Exception as e:
            logger.error("Transit ephemeris calculation failed for %s: %s", instant_utc.isoformat(), e)
            raise EphemerisUnavailableError(f"Ephemeris calculation failed: {e}") from e

        return EphemerisSnapshot(instant=instant_utc, planets=tuple(planets))
