"""
Divisional (Varga) charts.

A D-N chart cuts each 30° sign into N parts and sends every part to a sign
chosen by that chart's rule. The rules fall into a handful of families,
described by a tagged VargaRule; the Trimsamsa (D30) alone uses a fixed
table of five unequal bands per sign.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from exceptions import InvalidInputError
from natal import Chart
from zodiac import Rashi, element_of, quality_of, rashi_at, round_half_up

logger = logging.getLogger(__name__)


class RuleFamily(Enum):
    CYCLIC = "cyclic"        # start from the sign itself, advance `step` per part
    HORA = "hora"            # Simha / Karka halves by sign parity
    PARITY = "parity"        # start chosen by odd / even sign
    ELEMENT = "element"      # start chosen by fire / earth / air / water
    QUALITY = "quality"      # start chosen by movable / fixed / dual
    TRIMSAMSA = "trimsamsa"  # fixed unequal bands


@dataclass(frozen=True)
class VargaRule:
    family: RuleFamily
    step: int = 1
    starts: Tuple[int, ...] = ()
    relative: bool = False


@dataclass(frozen=True)
class VargaDefinition:
    division: int
    id: str
    name: str
    sanskrit: str
    purpose: str
    description: str
    rule: VargaRule


# Parashara's Trimsamsa bands: (upper bound in degrees, target sign index).
# Odd signs run Mars, Saturn, Jupiter, Mercury, Venus; even signs reverse it.
TRIMSAMSA_ODD: Tuple[Tuple[int, int], ...] = ((5, 0), (10, 10), (18, 8), (25, 2), (30, 6))
TRIMSAMSA_EVEN: Tuple[Tuple[int, int], ...] = ((5, 6), (10, 2), (18, 8), (25, 10), (30, 0))

GENERIC_RULE = VargaRule(RuleFamily.CYCLIC, step=1)

VARGA_DEFINITIONS: Tuple[VargaDefinition, ...] = (
    VargaDefinition(
        1, 'D1', 'Rasi', 'राशि', 'Overall Life & Personality',
        'The birth chart itself: body, temperament, health and the general '
        'direction of life. Every other chart refines it.',
        VargaRule(RuleFamily.CYCLIC, step=0)),
    VargaDefinition(
        2, 'D2', 'Hora', 'होरा', 'Wealth & Family Resources',
        'Ability to earn and keep money, family resources and financial '
        'stability.',
        VargaRule(RuleFamily.HORA)),
    VargaDefinition(
        3, 'D3', 'Drekkana', 'द्रेक्काण', 'Siblings & Courage',
        'Relations with siblings, courage, willpower and initiative.',
        VargaRule(RuleFamily.CYCLIC, step=4)),
    VargaDefinition(
        4, 'D4', 'Chaturthamsa', 'चतुर्थांश', 'Property & Fortune',
        'Land, homes, fixed assets and material security.',
        VargaRule(RuleFamily.CYCLIC, step=1)),
    VargaDefinition(
        7, 'D7', 'Saptamsa', 'सप्तांश', 'Children & Progeny',
        'Children, the bond with them and creative energy.',
        VargaRule(RuleFamily.PARITY, starts=(0, 6), relative=True)),
    VargaDefinition(
        9, 'D9', 'Navamsa', 'नवांश', 'Marriage & Dharma',
        'Marriage, the nature of the spouse, life purpose and the inner '
        'strength of each planet. Read alongside D1 before any major '
        'prediction.',
        VargaRule(RuleFamily.ELEMENT, starts=(0, 9, 6, 3))),
    VargaDefinition(
        10, 'D10', 'Dasamsa', 'दशांश', 'Career & Profession',
        'Career path, reputation, achievements and standing in one\'s field.',
        VargaRule(RuleFamily.PARITY, starts=(0, 8), relative=True)),
    VargaDefinition(
        12, 'D12', 'Dwadasamsa', 'द्वादशांश', 'Parents & Ancestry',
        'Parents, family lineage and inherited patterns.',
        VargaRule(RuleFamily.CYCLIC, step=1)),
    VargaDefinition(
        16, 'D16', 'Shodasamsa', 'षोडशांश', 'Vehicles & Comforts',
        'Vehicles, luxuries and everyday comforts.',
        VargaRule(RuleFamily.QUALITY, starts=(0, 4, 8))),
    VargaDefinition(
        20, 'D20', 'Vimsamsa', 'विंशांश', 'Spiritual Progress',
        'Devotion, meditation and spiritual growth.',
        VargaRule(RuleFamily.QUALITY, starts=(0, 8, 4))),
    VargaDefinition(
        24, 'D24', 'Chaturvimsamsa', 'चतुर्विंशांश', 'Education & Learning',
        'Learning ability, academic success and fields of knowledge.',
        VargaRule(RuleFamily.PARITY, starts=(4, 3))),
    VargaDefinition(
        27, 'D27', 'Bhamsa', 'भांश', 'Strengths & Weaknesses',
        'Physical and mental stamina, resilience and hidden weaknesses.',
        VargaRule(RuleFamily.ELEMENT, starts=(0, 3, 6, 9))),
    VargaDefinition(
        30, 'D30', 'Trimsamsa', 'त्रिंशांश', 'Misfortunes & Challenges',
        'Setbacks, health troubles and areas of vulnerability.',
        VargaRule(RuleFamily.TRIMSAMSA)),
    VargaDefinition(
        40, 'D40', 'Khavedamsa', 'खवेदांश', 'Auspicious Effects',
        'Good fortune, lucky periods and latent blessings.',
        VargaRule(RuleFamily.PARITY, starts=(0, 6))),
    VargaDefinition(
        45, 'D45', 'Akshavedamsa', 'अक्षवेदांश', 'Character & Conduct',
        'Ethics, conduct and the values behind decisions.',
        VargaRule(RuleFamily.QUALITY, starts=(0, 4, 8))),
    VargaDefinition(
        60, 'D60', 'Shashtiamsa', 'षष्ट्यंश', 'Past Life Karma',
        'Karma carried from past lives; the finest division of the sign.',
        VargaRule(RuleFamily.CYCLIC, step=1)),
)

VARGAS_BY_DIVISION: Mapping[int, VargaDefinition] = MappingProxyType(
    {d.division: d for d in VARGA_DEFINITIONS}
)

SUPPORTED_DIVISIONS: Tuple[int, ...] = tuple(d.division for d in VARGA_DEFINITIONS)


def get_varga_definition(division: int) -> Optional[VargaDefinition]:
    return VARGAS_BY_DIVISION.get(division)


def _trimsamsa_sign(sign_idx: int, degree: float) -> int:
    bands = TRIMSAMSA_ODD if sign_idx % 2 == 0 else TRIMSAMSA_EVEN
    for upper, target in bands:
        if degree < upper:
            return target
    return bands[-1][1]


def target_sign_index(rule: VargaRule, sign_idx: int, part_idx: int, degree: float) -> int:
    """Sign index (0-11) a part of a sign is sent to under `rule`."""
    family = rule.family
    rashi = rashi_at(sign_idx)

    if family is RuleFamily.CYCLIC:
        return (sign_idx + part_idx * rule.step) % 12
    if family is RuleFamily.HORA:
        # Simha (4) for the Sun's half, Karka (3) for the Moon's
        if rashi.is_odd:
            return 4 if part_idx == 0 else 3
        return 3 if part_idx == 0 else 4
    if family is RuleFamily.PARITY:
        start = rule.starts[0] if rashi.is_odd else rule.starts[1]
        if rule.relative:
            start += sign_idx
        return (start + part_idx) % 12
    if family is RuleFamily.ELEMENT:
        return (rule.starts[element_of(rashi).value] + part_idx) % 12
    if family is RuleFamily.QUALITY:
        return (rule.starts[quality_of(rashi).value] + part_idx) % 12
    if family is RuleFamily.TRIMSAMSA:
        return _trimsamsa_sign(sign_idx, degree)
    raise ValueError(f"Unhandled varga rule family: {family}")


def divide(sign_idx: int, degree: float, division: int, rule: VargaRule) -> Tuple[Rashi, int]:
    """
    Map a position (sign index, degree within sign) into a D-N chart.

    Returns the target sign and the degree within it. A degree of exactly
    30 stays in the last part of its own sign.
    """
    degree = min(max(degree, 0.0), 30.0)
    part_idx = min(int(math.floor(degree * division / 30)), division - 1)
    target = target_sign_index(rule, sign_idx, part_idx, degree)
    degree_in_part = degree * division - part_idx * 30
    return rashi_at(target), round_half_up(degree_in_part)


def compute_varga(chart: Chart, division: int) -> Chart:
    """
    Derive the D-N chart from a D1 chart.

    The varga Lagna is the D1 Lagna sign's starting point mapped through the
    same rule. Divisions outside VARGA_DEFINITIONS use the generic cyclic
    rule.
    """
    if division < 1:
        raise InvalidInputError(f"Division must be a positive integer, got {division}")

    definition = get_varga_definition(division)
    if definition is None:
        logger.debug("D%s is not a standard varga, using the generic cyclic rule", division)
        rule, name, chart_type = GENERIC_RULE, f'D{division}', f'D{division}'
    else:
        rule, name, chart_type = definition.rule, definition.id, definition.name

    lagna, _ = divide(chart.lagna.position, 0, division, rule)
    positions = []
    for p in chart.placements():
        rashi, degree = divide(p.rashi.position, p.degree, division, rule)
        positions.append((p.graha, rashi, degree, p.retrograde))

    return Chart.build(lagna, positions, name=name, chart_type=chart_type)


def compute_all_vargas(chart: Chart) -> List[Chart]:
    """All standard divisional charts except D1, in division order."""
    return [compute_varga(chart, d.division) for d in VARGA_DEFINITIONS if d.division > 1]
