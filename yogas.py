"""
Yoga (planetary combination) rules.

Each rule is a pure function of a chart returning the yogas it finds. Rules
never look at each other's output, so `YOGA_RULES` can be evaluated in any
order; `evaluate_yogas` walks it once and keeps the results that are present.
Conditions follow Brihat Parashara Hora Shastra as commonly simplified; the
Kemadruma cancellation and Manglik mitigation checks are deliberately
partial.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple

from natal import Chart, Placement
from zodiac import (
    DUSTHANA_HOUSES,
    KENDRA_HOUSES,
    NATURAL_BENEFICS,
    TRIKONA_HOUSES,
    Graha,
    exalted_in,
    house_distance,
    house_from,
    is_debilitated,
    is_dignified,
    is_exalted,
    is_kendra,
    is_trikona,
)


class YogaCategory(str, Enum):
    MAHAPURUSHA = "mahapurusha"
    RAJA = "raja"
    DHANA = "dhana"
    LUNAR = "lunar"
    SPECIAL = "special"
    DOSHA = "dosha"


class YogaStrength(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


YOGA_CATEGORY_LABELS: Mapping[YogaCategory, str] = MappingProxyType({
    YogaCategory.MAHAPURUSHA: 'Pancha Mahapurusha',
    YogaCategory.RAJA: 'Raj Yoga',
    YogaCategory.DHANA: 'Wealth (Dhana)',
    YogaCategory.LUNAR: 'Lunar Yogas',
    YogaCategory.SPECIAL: 'Special Yogas',
    YogaCategory.DOSHA: 'Doshas',
})


@dataclass(frozen=True)
class YogaResult:
    name: str
    category: YogaCategory
    is_present: bool
    is_benefic: bool
    strength: YogaStrength
    planets: Tuple[Graha, ...]
    houses: Tuple[int, ...]
    description: str
    effect: str
    detail: str = ''
    sanskrit: str = ''


YogaRule = Callable[[Chart], List[YogaResult]]

# Grahas that count for Sunapha, Anapha, Durudhara and Kemadruma
LUNAR_SUPPORT = (Graha.MARS, Graha.MERCURY, Graha.JUPITER, Graha.VENUS, Graha.SATURN)

# Benefics counted for Adhi Yoga (the Moon is the reference, not a member)
ADHI_BENEFICS = (Graha.JUPITER, Graha.VENUS, Graha.MERCURY)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f"{n}{suffix}"


def _names(placements) -> str:
    return ', '.join(p.graha.value for p in placements)


def _in_sign_exchange(chart: Chart, lord1: Graha, house1: int, lord2: Graha, house2: int) -> bool:
    """Parivartana: each lord sits in the sign of the other's house."""
    p1 = chart.placement(lord1)
    p2 = chart.placement(lord2)
    if p1 is None or p2 is None:
        return False
    return p1.rashi == chart.sign_of_house(house2) and p2.rashi == chart.sign_of_house(house1)


# ─── Pancha Mahapurusha ───

@dataclass(frozen=True)
class _MahapurushaDef:
    name: str
    sanskrit: str
    graha: Graha
    effect: str
    detail: str


MAHAPURUSHA_DEFS: Tuple[_MahapurushaDef, ...] = (
    _MahapurushaDef(
        'Ruchaka Yoga', 'रुचक', Graha.MARS,
        'Valorous, wealthy, famous, strong leadership qualities',
        'Mars angular in Aries, Scorpio or Capricorn. Gives courage, physical '
        'strength and a commanding presence; natives often rise in the '
        'military, sport, policing or other competitive fields.'),
    _MahapurushaDef(
        'Bhadra Yoga', 'भद्र', Graha.MERCURY,
        'Eloquent, intelligent, authority in communication and trade',
        'Mercury angular in Gemini or Virgo. Gives a quick analytical mind and '
        'persuasive speech; favours trade, writing, teaching and technology.'),
    _MahapurushaDef(
        'Hamsa Yoga', 'हंस', Graha.JUPITER,
        'Scholarly, spiritual, ethical, respected among learned people',
        'Jupiter angular in Sagittarius, Pisces or Cancer. The swan that '
        'separates milk from water: discernment, learning and a pull towards '
        'teaching, counsel or spiritual leadership.'),
    _MahapurushaDef(
        'Malavya Yoga', 'मालव्य', Graha.VENUS,
        'Prosperous, charming, artistic, marital happiness, luxuries',
        'Venus angular in Taurus, Libra or Pisces. Gives grace, artistic taste '
        'and comforts, with wealth through creative work and a happy marriage.'),
    _MahapurushaDef(
        'Shasha Yoga', 'शश', Graha.SATURN,
        'Powerful, successful in politics/law, disciplined, long-lived',
        'Saturn angular in Capricorn, Aquarius or Libra. Gives patience, '
        'discipline and organising ability; a slow but steady rise to '
        'authority in administration, law or public life.'),
)


def _mahapurusha_rule(definition: _MahapurushaDef) -> YogaRule:
    def rule(chart: Chart) -> List[YogaResult]:
        p = chart.placement(definition.graha)
        if p is None or not (is_kendra(p.house) and is_dignified(p.graha, p.rashi)):
            return []
        exalted = is_exalted(p.graha, p.rashi)
        return [YogaResult(
            name=definition.name,
            sanskrit=definition.sanskrit,
            category=YogaCategory.MAHAPURUSHA,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG if exalted else YogaStrength.MODERATE,
            planets=(p.graha,),
            houses=(p.house,),
            description=f"{p.graha.value} in Kendra (H{p.house}) in {'exalted' if exalted else 'own'} sign",
            effect=definition.effect,
            detail=definition.detail,
        )]
    rule.__name__ = f"mahapurusha_{definition.graha.value.lower()}"
    return rule


# ─── Raj Yogas ───

def yogakaraka(chart: Chart) -> List[YogaResult]:
    """A single planet lording both a kendra and a trikona, once per planet."""
    results = []
    seen = set()
    for kendra in sorted(KENDRA_HOUSES):
        for trikona in sorted(TRIKONA_HOUSES):
            if kendra == trikona:
                continue
            lord = chart.lord_of_house(kendra)
            if lord != chart.lord_of_house(trikona) or lord in seen:
                continue
            p = chart.placement(lord)
            if p is None:
                continue
            seen.add(lord)

            well_placed = is_kendra(p.house) or is_trikona(p.house)
            strong = is_dignified(lord, p.rashi) and well_placed
            results.append(YogaResult(
                name='Raj Yoga (Yogakaraka)',
                sanskrit='योगकारक',
                category=YogaCategory.RAJA,
                is_present=True,
                is_benefic=True,
                strength=YogaStrength.STRONG if strong else YogaStrength.MODERATE,
                planets=(lord,),
                houses=(p.house,),
                description=f"{lord.value} lords both H{kendra} (Kendra) and H{trikona} (Trikona), placed in H{p.house}",
                effect='Extremely powerful Raj Yoga: authority, fame, success in career and life purpose',
                detail='One planet carries the angular strength of a Kendra and the fortune of a '
                       'Trikona at once. Its Dasha commonly brings promotion, recognition and '
                       'alignment between personal purpose and worldly success.',
            ))
    return results


def kendra_trikona_raj_yoga(chart: Chart) -> List[YogaResult]:
    """Different kendra and trikona lords joined by conjunction or exchange."""
    results = []
    seen = set()
    for kendra in sorted(KENDRA_HOUSES):
        for trikona in sorted(TRIKONA_HOUSES):
            k_lord = chart.lord_of_house(kendra)
            t_lord = chart.lord_of_house(trikona)
            if k_lord == t_lord:
                continue
            k_info = chart.placement(k_lord)
            t_info = chart.placement(t_lord)
            if k_info is None or t_info is None:
                continue

            conjunct = k_info.house == t_info.house
            exchange = _in_sign_exchange(chart, k_lord, kendra, t_lord, trikona)
            if not conjunct and not exchange:
                continue

            key = (frozenset((k_lord, t_lord)), conjunct)
            if key in seen:
                continue
            seen.add(key)

            any_strong = is_dignified(k_lord, k_info.rashi) or is_dignified(t_lord, t_info.rashi)
            if conjunct:
                description = (f"{k_lord.value} (H{kendra} lord) conjunct with {t_lord.value} "
                               f"(H{trikona} lord) in H{k_info.house}")
                houses = (k_info.house,)
            else:
                description = (f"{k_lord.value} (H{kendra} lord) in sign exchange with "
                               f"{t_lord.value} (H{trikona} lord)")
                houses = (k_info.house, t_info.house)

            results.append(YogaResult(
                name='Raj Yoga',
                sanskrit='राज',
                category=YogaCategory.RAJA,
                is_present=True,
                is_benefic=True,
                strength=YogaStrength.STRONG if any_strong else YogaStrength.MODERATE,
                planets=(k_lord, t_lord),
                houses=houses,
                description=description,
                effect='Authority, fame, power, rise in status and career',
                detail='The lord of a Kendra (1, 4, 7, 10) meets the lord of a Trikona (1, 5, 9) '
                       'by conjunction or mutual sign exchange, joining structural power with '
                       'fortune. Results show most in the Dashas of the two planets.',
            ))
    return results


# ─── Dhana Yogas ───

def lakshmi_yoga(chart: Chart) -> List[YogaResult]:
    lagna_lord = chart.lord_of_house(1)
    lord9 = chart.lord_of_house(9)
    ll = chart.placement(lagna_lord)
    l9 = chart.placement(lord9)
    if ll is None or l9 is None:
        return []
    if not (is_kendra(l9.house) and is_dignified(lord9, l9.rashi) and is_dignified(lagna_lord, ll.rashi)):
        return []
    return [YogaResult(
        name='Lakshmi Yoga',
        sanskrit='लक्ष्मी',
        category=YogaCategory.DHANA,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.STRONG,
        planets=(lord9, lagna_lord),
        houses=(l9.house, ll.house),
        description=f"9th lord {lord9.value} strong in Kendra (H{l9.house}), "
                    f"Lagna lord {lagna_lord.value} also strong",
        effect='Great wealth, prosperity, fortune, and spiritual blessings',
        detail='The lord of fortune (9th) is dignified and angular while the Lagna lord is '
               'dignified too. Past merit ripens as wealth and opportunity that seem to '
               'arrive without strain.',
    )]


def dhana_yoga(chart: Chart) -> List[YogaResult]:
    lord2 = chart.lord_of_house(2)
    lord11 = chart.lord_of_house(11)
    if lord2 == lord11:
        return []
    conjunct = chart.are_conjunct(lord2, lord11)
    exchange = _in_sign_exchange(chart, lord2, 2, lord11, 11)
    if not conjunct and not exchange:
        return []
    l2 = chart.placement(lord2)
    l11 = chart.placement(lord11)
    return [YogaResult(
        name='Dhana Yoga',
        sanskrit='धन',
        category=YogaCategory.DHANA,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.MODERATE,
        planets=(lord2, lord11),
        houses=(l2.house,) if conjunct else (l2.house, l11.house),
        description=f"2nd lord {lord2.value} {'conjunct' if conjunct else 'in sign exchange with'} "
                    f"11th lord {lord11.value}",
        effect='Accumulation of wealth, financial gains, material abundance',
        detail='The lords of accumulated wealth (2nd) and of gains (11th) are joined. Often '
               'seen as several income streams, good investments or inheritance, more so '
               'when the pair occupies a Kendra or Trikona.',
    )]


def chandra_mangala_yoga(chart: Chart) -> List[YogaResult]:
    if not chart.are_conjunct(Graha.MOON, Graha.MARS):
        return []
    moon = chart.placement(Graha.MOON)
    return [YogaResult(
        name='Chandra-Mangala Yoga',
        sanskrit='चन्द्र-मंगल',
        category=YogaCategory.DHANA,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.STRONG if is_kendra(moon.house) else YogaStrength.MODERATE,
        planets=(Graha.MOON, Graha.MARS),
        houses=(moon.house,),
        description=f"Moon and Mars conjunct in H{moon.house}",
        effect='Wealth through enterprise, courage, determination',
        detail='Mind and drive act together: money earned through bold, quick decisions in '
               'business, property, sport or other competitive work.',
    )]


# ─── Lunar Yogas ───

def gajakesari_yoga(chart: Chart) -> List[YogaResult]:
    moon = chart.placement(Graha.MOON)
    jupiter = chart.placement(Graha.JUPITER)
    if moon is None or jupiter is None:
        return []
    dist = house_distance(moon.house, jupiter.house)
    if dist not in KENDRA_HOUSES:
        return []
    where = 'conjunct Moon' if dist == 1 else f"in {_ordinal(dist)} from Moon"
    return [YogaResult(
        name='Gajakesari Yoga',
        sanskrit='गजकेसरी',
        category=YogaCategory.LUNAR,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.STRONG if is_dignified(Graha.JUPITER, jupiter.rashi) else YogaStrength.MODERATE,
        planets=(Graha.MOON, Graha.JUPITER),
        houses=(moon.house, jupiter.house),
        description=f"Jupiter {where} (H{jupiter.house})",
        effect='Wisdom, reputation, intelligence, wealth, lasting fame',
        detail='"Elephant-lion": Jupiter in a Kendra from the Moon. Respect, sound judgement '
               'and a memory for what matters; such people often end up guiding or '
               'teaching others.',
    )]


def moon_support_yogas(chart: Chart) -> List[YogaResult]:
    """Durudhara, Sunapha or Anapha; otherwise Kemadruma unless cancelled."""
    moon = chart.placement(Graha.MOON)
    if moon is None:
        return []

    second = house_from(moon.house, 2)
    twelfth = house_from(moon.house, 12)
    in_2 = [p for p in chart.planets_in_house(second) if p.graha in LUNAR_SUPPORT]
    in_12 = [p for p in chart.planets_in_house(twelfth) if p.graha in LUNAR_SUPPORT]

    if in_2 and in_12:
        return [YogaResult(
            name='Durudhara Yoga',
            sanskrit='दुरुधरा',
            category=YogaCategory.LUNAR,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG,
            planets=(Graha.MOON,) + tuple(p.graha for p in in_2) + tuple(p.graha for p in in_12),
            houses=(moon.house, second, twelfth),
            description=f"Planets flanking Moon: 2nd (H{second}): {_names(in_2)}; "
                        f"12th (H{twelfth}): {_names(in_12)}",
            effect='Wealth, eloquence, charitable nature, enjoyment of comforts',
            detail='The Moon is supported on both sides, giving a steady mind with both '
                   'material comfort and an inner life. Ranked above Sunapha and Anapha.',
        )]
    if in_2:
        return [YogaResult(
            name='Sunapha Yoga',
            sanskrit='सुनफा',
            category=YogaCategory.LUNAR,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.MODERATE,
            planets=(Graha.MOON,) + tuple(p.graha for p in in_2),
            houses=(moon.house, second),
            description=f"{_names(in_2)} in 2nd from Moon (H{second})",
            effect='Self-made wealth, intelligence, fame through own efforts',
            detail='Planets in the 2nd from the Moon give material footing and good speech; '
                   'wealth is earned rather than inherited, coloured by the planet involved.',
        )]
    if in_12:
        return [YogaResult(
            name='Anapha Yoga',
            sanskrit='अनफा',
            category=YogaCategory.LUNAR,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.MODERATE,
            planets=(Graha.MOON,) + tuple(p.graha for p in in_12),
            houses=(moon.house, twelfth),
            description=f"{_names(in_12)} in 12th from Moon (H{twelfth})",
            effect='Good health, magnetic personality, fame, respected in society',
            detail='Planets in the 12th from the Moon give intuition, charisma and '
                   'self-reliance, with respect earned through character.',
        )]

    moon_in_kendra = is_kendra(moon.house)
    moon_conjunct = any(p.graha in LUNAR_SUPPORT for p in chart.planets_in_house(moon.house))
    if moon_in_kendra or moon_conjunct:
        return []
    return [YogaResult(
        name='Kemadruma Yoga',
        sanskrit='केमद्रुम',
        category=YogaCategory.DOSHA,
        is_present=True,
        is_benefic=False,
        strength=YogaStrength.MODERATE,
        planets=(Graha.MOON,),
        houses=(moon.house,),
        description='No planets in 2nd or 12th from Moon, and Moon neither in Kendra nor conjunct a planet',
        effect='Financial instability, periods of loneliness; eased by a well-supported Moon',
        detail='An isolated Moon can bring emotional ups and downs and uneven finances. '
               'The yoga is frequently cancelled by other factors, and many charts carry only '
               'a technical Kemadruma.',
    )]


# ─── Special Yogas ───

COMBUSTION_ORB = 14


def budhaditya_yoga(chart: Chart) -> List[YogaResult]:
    if not chart.are_conjunct(Graha.SUN, Graha.MERCURY):
        return []
    sun = chart.placement(Graha.SUN)
    mercury = chart.placement(Graha.MERCURY)
    if not (is_kendra(sun.house) or is_trikona(sun.house)):
        return []
    gap = abs(sun.degree - mercury.degree)
    if gap < COMBUSTION_ORB:
        return []
    return [YogaResult(
        name='Budhaditya Yoga',
        sanskrit='बुधादित्य',
        category=YogaCategory.SPECIAL,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.STRONG if is_dignified(Graha.MERCURY, mercury.rashi) else YogaStrength.MODERATE,
        planets=(Graha.SUN, Graha.MERCURY),
        houses=(sun.house,),
        description=f"Sun and Mercury conjunct in H{sun.house} ({gap}° apart, not combust)",
        effect='Sharp intellect, success in education, eloquence, analytical ability',
        detail='Sun and Mercury share a Kendra or Trikona with Mercury far enough from the '
               'Sun to keep its own light. Authority through knowledge and clear expression.',
    )]


def amala_yoga(chart: Chart) -> List[YogaResult]:
    """A natural benefic in the 10th from Lagna, else from the Moon."""
    refs = [('Lagna', 10)]
    moon_house = chart.house_of(Graha.MOON)
    if moon_house:
        refs.append(('Moon', house_from(moon_house, 10)))

    for label, tenth in refs:
        occupants = chart.planets_in_house(tenth)
        benefics = [p for p in occupants if p.graha in NATURAL_BENEFICS]
        if not benefics:
            continue
        only_benefics = all(p.graha in NATURAL_BENEFICS for p in occupants)
        return [YogaResult(
            name='Amala Yoga',
            sanskrit='अमल',
            category=YogaCategory.SPECIAL,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG if only_benefics else YogaStrength.MODERATE,
            planets=tuple(p.graha for p in benefics),
            houses=(tenth,),
            description=f"{_names(benefics)} in 10th from {label} (H{tenth})",
            effect='Lasting fame, virtuous character, charitable, respected in society',
            detail='"Spotless": a benefic in the house of career and reputation. A clean public '
                   'image built through ethical work; strongest with no malefic sharing the house.',
        )]
    return []


def adhi_yoga(chart: Chart) -> List[YogaResult]:
    """Two or more of Jupiter/Venus/Mercury in the 6th, 7th, 8th from Moon, else Lagna."""
    refs = []
    moon_house = chart.house_of(Graha.MOON)
    if moon_house:
        refs.append(('Moon', moon_house))
    refs.append(('Lagna', 1))

    for label, base in refs:
        targets = [house_from(base, n) for n in (6, 7, 8)]
        found = [p for h in targets for p in chart.planets_in_house(h) if p.graha in ADHI_BENEFICS]
        if len(found) < 2:
            continue
        houses = tuple(h for h in targets
                       if any(p.graha in ADHI_BENEFICS for p in chart.planets_in_house(h)))
        return [YogaResult(
            name='Adhi Yoga',
            sanskrit='अधि',
            category=YogaCategory.SPECIAL,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG if len(found) >= 3 else YogaStrength.MODERATE,
            planets=tuple(p.graha for p in found),
            houses=houses,
            description=f"Benefics ({_names(found)}) in 6/7/8th from {label}",
            effect='Leadership, trustworthy, commands authority, wealthy',
            detail='Benefics around the 7th from the reference point: the yoga of ministers '
                   'and administrators, people trusted with influence and resources.',
        )]
    return []


SARASWATI_HOUSES = KENDRA_HOUSES | TRIKONA_HOUSES | {2}


def saraswati_yoga(chart: Chart) -> List[YogaResult]:
    jupiter = chart.placement(Graha.JUPITER)
    venus = chart.placement(Graha.VENUS)
    mercury = chart.placement(Graha.MERCURY)
    if jupiter is None or venus is None or mercury is None:
        return []
    if not all(p.house in SARASWATI_HOUSES for p in (jupiter, venus, mercury)):
        return []
    if not is_dignified(Graha.JUPITER, jupiter.rashi):
        return []
    return [YogaResult(
        name='Saraswati Yoga',
        sanskrit='सरस्वती',
        category=YogaCategory.SPECIAL,
        is_present=True,
        is_benefic=True,
        strength=YogaStrength.STRONG,
        planets=(Graha.JUPITER, Graha.VENUS, Graha.MERCURY),
        houses=(jupiter.house, venus.house, mercury.house),
        description=f"Jupiter (strong, H{jupiter.house}), Venus (H{venus.house}), "
                    f"Mercury (H{mercury.house}) all in Kendra/Trikona/2nd",
        effect='Exceptional knowledge, mastery of arts and sciences, eloquence, literary fame',
        detail='The three planets of learning, art and speech are all well placed with '
               'Jupiter dignified. Scholars, writers, musicians and gifted teachers.',
    )]


@dataclass(frozen=True)
class _ViparitaDef:
    name: str
    house: int
    detail: str


VIPARITA_DEFS: Tuple[_ViparitaDef, ...] = (
    _ViparitaDef(
        'Harsha', 6,
        'The 6th lord (enemies, disease, debt) sits in a dusthana. Rivals are overcome '
        'with ease and illness tends to pass quickly; gains through competition or law.'),
    _ViparitaDef(
        'Sarala', 8,
        'The 8th lord (crisis, inheritance, hidden matters) sits in a dusthana. Resilience '
        'through upheaval, with possible unexpected legacies or research breakthroughs.'),
    _ViparitaDef(
        'Vimala', 12,
        'The 12th lord (loss, expense, foreign lands) sits in a dusthana. Spending is '
        'contained, and foreign ties or charitable work turn into gains.'),
)


def _viparita_rule(definition: _ViparitaDef) -> YogaRule:
    def rule(chart: Chart) -> List[YogaResult]:
        lord = chart.lord_of_house(definition.house)
        p = chart.placement(lord)
        if p is None or p.house not in DUSTHANA_HOUSES:
            return []
        return [YogaResult(
            name=f"Viparita Raja ({definition.name})",
            sanskrit='विपरीत राज',
            category=YogaCategory.SPECIAL,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG if p.house == definition.house else YogaStrength.MODERATE,
            planets=(lord,),
            houses=(p.house,),
            description=f"{_ordinal(definition.house)} lord {lord.value} placed in H{p.house} (dusthana)",
            effect="Success through adversity, gains from enemies' losses, unexpected fortune",
            detail=definition.detail,
        )]
    rule.__name__ = f"viparita_{definition.name.lower()}"
    return rule


def _neechabhanga_reason(chart: Chart, debilitated: Placement) -> Optional[str]:
    dispositor = debilitated.rashi.lord
    disp = chart.placement(dispositor)
    exalt_lord = exalted_in(debilitated.rashi)
    exalt = chart.placement(exalt_lord) if exalt_lord else None

    if disp is not None and is_kendra(disp.house):
        return f"Dispositor {dispositor.value} in Kendra (H{disp.house})"
    if exalt is not None and is_kendra(exalt.house):
        return (f"{exalt_lord.value} (exalted in {debilitated.rashi.value}) "
                f"in Kendra (H{exalt.house})")
    if disp is not None and disp.house == debilitated.house:
        return f"Dispositor {dispositor.value} conjunct in H{debilitated.house}"
    if is_kendra(debilitated.house):
        return f"Debilitated planet in Kendra (H{debilitated.house})"
    return None


def neechabhanga_raja_yoga(chart: Chart) -> List[YogaResult]:
    """Cancelled debilitation, checked for every debilitated planet."""
    results = []
    for p in chart.placements():
        if not is_debilitated(p.graha, p.rashi):
            continue
        reason = _neechabhanga_reason(chart, p)
        if reason is None:
            continue
        results.append(YogaResult(
            name='Neechabhanga Raja Yoga',
            sanskrit='नीचभंग राज',
            category=YogaCategory.SPECIAL,
            is_present=True,
            is_benefic=True,
            strength=YogaStrength.STRONG,
            planets=(p.graha, p.rashi.lord),
            houses=(p.house,),
            description=f"{p.graha.value} debilitated in {p.rashi.value}, cancelled: {reason}",
            effect='Rise from humble beginnings, overcoming obstacles leads to great success',
            detail='A debilitated planet whose weakness is cancelled works like a compressed '
                   'spring. Conditions checked: dispositor in Kendra, the planet exalted in that '
                   'sign in Kendra, dispositor conjunct, or the planet itself in Kendra.',
        ))
    return results


# ─── Doshas ───

MANGLIK_HOUSES = frozenset({1, 4, 7, 8, 12})
JUPITER_ASPECT_DISTANCES = frozenset({1, 5, 7, 9})


def manglik_dosha(chart: Chart) -> List[YogaResult]:
    mars = chart.placement(Graha.MARS)
    if mars is None or mars.house not in MANGLIK_HOUSES:
        return []

    mars_strong = is_dignified(Graha.MARS, mars.rashi)
    jupiter = chart.placement(Graha.JUPITER)
    jupiter_aspects = (jupiter is not None
                       and house_distance(jupiter.house, mars.house) in JUPITER_ASPECT_DISTANCES)
    mitigated = mars_strong or jupiter_aspects

    description = f"Mars in H{mars.house}"
    if mitigated:
        reason = 'Mars in own/exalted sign' if mars_strong else 'Jupiter aspect'
        description += f" (mitigated: {reason})"

    return [YogaResult(
        name='Manglik Dosha',
        sanskrit='मांगलिक दोष',
        category=YogaCategory.DOSHA,
        is_present=True,
        is_benefic=False,
        strength=YogaStrength.WEAK if mitigated else YogaStrength.MODERATE,
        planets=(Graha.MARS,),
        houses=(mars.house,),
        description=description,
        effect='Challenges in marriage and partnerships; severity depends on other chart factors',
        detail='Mars in the 1st, 4th, 7th, 8th or 12th from Lagna can bring friction and '
               'dominance issues into partnerships. Mars dignified, or aspected by Jupiter, '
               'softens it considerably.',
    )]


def kaal_sarp_yoga(chart: Chart) -> List[YogaResult]:
    """All non-node planets strictly on one side of the Rahu-Ketu axis."""
    rahu = chart.placement(Graha.RAHU)
    ketu = chart.placement(Graha.KETU)
    if rahu is None or ketu is None:
        return []

    span_rk = (ketu.house - rahu.house + 12) % 12
    span_kr = (rahu.house - ketu.house + 12) % 12
    forward = span_rk > 0
    backward = span_kr > 0

    for p in chart.placements():
        if p.graha in (Graha.RAHU, Graha.KETU):
            continue
        from_rahu = (p.house - rahu.house + 12) % 12
        if from_rahu == 0 or from_rahu >= span_rk:
            forward = False
        from_ketu = (p.house - ketu.house + 12) % 12
        if from_ketu == 0 or from_ketu >= span_kr:
            backward = False

    if not (forward or backward):
        return []
    return [YogaResult(
        name='Kaal Sarp Yoga',
        sanskrit='काल सर्प',
        category=YogaCategory.DOSHA,
        is_present=True,
        is_benefic=False,
        strength=YogaStrength.STRONG,
        planets=(Graha.RAHU, Graha.KETU),
        houses=(rahu.house, ketu.house),
        description=f"All planets hemmed between Rahu (H{rahu.house}) and Ketu (H{ketu.house})",
        effect='Karmic obstacles, struggles, delays, with potential for transformation',
        detail='Every visible planet is confined to one side of the nodal axis. Life tends to '
               'extremes: recurring obstacles, or an intense drive that carries the native far.',
    )]


YOGA_RULES: Tuple[YogaRule, ...] = (
    *(_mahapurusha_rule(d) for d in MAHAPURUSHA_DEFS),
    yogakaraka,
    kendra_trikona_raj_yoga,
    lakshmi_yoga,
    dhana_yoga,
    chandra_mangala_yoga,
    gajakesari_yoga,
    moon_support_yogas,
    budhaditya_yoga,
    amala_yoga,
    adhi_yoga,
    saraswati_yoga,
    *(_viparita_rule(d) for d in VIPARITA_DEFS),
    neechabhanga_raja_yoga,
    manglik_dosha,
    kaal_sarp_yoga,
)


def evaluate_yogas(chart: Chart) -> List[YogaResult]:
    """Run every rule against the chart and keep the yogas that are present."""
    return [result for rule in YOGA_RULES for result in rule(chart) if result.is_present]
