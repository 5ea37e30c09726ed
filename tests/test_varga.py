"""
Unit tests for divisional charts.
"""

import pytest

from conftest import NATAL_LONGITUDES, make_chart, make_snapshot
from exceptions import InvalidInputError
from natal import Chart, build_natal_chart
from varga import (
    SUPPORTED_DIVISIONS,
    VARGA_DEFINITIONS,
    VARGAS_BY_DIVISION,
    compute_all_vargas,
    compute_varga,
    divide,
    get_varga_definition,
)
from zodiac import Graha, Rashi, house_of_sign


def _d(division, rashi, degree):
    """Target sign of one position under a standard varga rule."""
    sign, _ = divide(rashi.position, degree, division, VARGAS_BY_DIVISION[division].rule)
    return sign


@pytest.fixture
def natal_chart():
    return build_natal_chart(make_snapshot(NATAL_LONGITUDES, ascendant=250.0))


class TestDefinitions:
    """Tests for the varga table."""

    def test_sixteen_divisions(self):
        assert SUPPORTED_DIVISIONS == (1, 2, 3, 4, 7, 9, 10, 12, 16, 20, 24, 27, 30, 40, 45, 60)
        assert len(VARGA_DEFINITIONS) == 16

    def test_definition_metadata(self):
        navamsa = get_varga_definition(9)
        assert navamsa.id == "D9"
        assert navamsa.name == "Navamsa"
        assert navamsa.purpose

    def test_unknown_division(self):
        assert get_varga_definition(5) is None


class TestDivisionRules:
    """Tests for each rule family."""

    def test_navamsa_earth_sign_starts_from_makara(self):
        # 40° is Vrishabha 10°: part 3 counted from Makara
        chart = make_chart(Rashi.MESHA, {Graha.SUN: (Rashi.VRISHABHA, 10)})
        d9 = compute_varga(chart, 9)

        sun = d9.placement(Graha.SUN)
        assert sun.rashi == Rashi.MESHA
        assert sun.degree == 0

    @pytest.mark.parametrize("rashi,degree,expected", [
        (Rashi.MESHA, 0, Rashi.MESHA),
        (Rashi.MESHA, 29, Rashi.DHANU),
        (Rashi.SIMHA, 0, Rashi.MESHA),
        (Rashi.KARKA, 5, Rashi.SIMHA),
        (Rashi.MEENA, 29, Rashi.MEENA),
    ])
    def test_navamsa(self, rashi, degree, expected):
        assert _d(9, rashi, degree) == expected

    @pytest.mark.parametrize("rashi,degree,expected", [
        (Rashi.MESHA, 10, Rashi.SIMHA),
        (Rashi.MESHA, 20, Rashi.KARKA),
        (Rashi.VRISHABHA, 10, Rashi.KARKA),
        (Rashi.VRISHABHA, 20, Rashi.SIMHA),
    ])
    def test_hora(self, rashi, degree, expected):
        assert _d(2, rashi, degree) == expected

    def test_drekkana_steps_by_trines(self):
        assert _d(3, Rashi.MESHA, 5) == Rashi.MESHA
        assert _d(3, Rashi.MESHA, 15) == Rashi.SIMHA
        assert _d(3, Rashi.MESHA, 25) == Rashi.DHANU

    def test_saptamsa_even_sign_starts_from_seventh(self):
        assert _d(7, Rashi.MESHA, 0) == Rashi.MESHA
        assert _d(7, Rashi.VRISHABHA, 0) == Rashi.VRISHCHIKA

    def test_dasamsa(self):
        assert _d(10, Rashi.MITHUNA, 10) == Rashi.KANYA
        assert _d(10, Rashi.VRISHABHA, 0) == Rashi.MAKARA

    def test_chaturvimsamsa_absolute_starts(self):
        assert _d(24, Rashi.MESHA, 0) == Rashi.SIMHA
        assert _d(24, Rashi.VRISHABHA, 0) == Rashi.KARKA
        assert _d(24, Rashi.TULA, 0) == Rashi.SIMHA

    def test_quality_families(self):
        assert _d(16, Rashi.KARKA, 0) == Rashi.MESHA
        assert _d(16, Rashi.SIMHA, 0) == Rashi.SIMHA
        assert _d(20, Rashi.VRISHABHA, 0) == Rashi.DHANU
        assert _d(20, Rashi.MEENA, 0) == Rashi.SIMHA
        assert _d(45, Rashi.DHANU, 0) == Rashi.DHANU

    def test_bhamsa(self):
        assert _d(27, Rashi.VRISHABHA, 0) == Rashi.KARKA
        assert _d(27, Rashi.KUMBHA, 0) == Rashi.TULA

    @pytest.mark.parametrize("rashi,degree,expected", [
        (Rashi.MESHA, 3, Rashi.MESHA),
        (Rashi.MESHA, 7, Rashi.KUMBHA),
        (Rashi.MESHA, 12, Rashi.DHANU),
        (Rashi.MESHA, 20, Rashi.MITHUNA),
        (Rashi.MESHA, 28, Rashi.TULA),
        (Rashi.VRISHABHA, 3, Rashi.TULA),
        (Rashi.VRISHABHA, 7, Rashi.MITHUNA),
        (Rashi.VRISHABHA, 20, Rashi.KUMBHA),
        (Rashi.VRISHABHA, 27, Rashi.MESHA),
    ])
    def test_trimsamsa_bands(self, rashi, degree, expected):
        assert _d(30, rashi, degree) == expected

    def test_khavedamsa(self):
        assert _d(40, Rashi.MITHUNA, 0) == Rashi.MESHA
        assert _d(40, Rashi.KARKA, 0) == Rashi.TULA

    def test_shashtiamsa(self):
        assert _d(60, Rashi.MESHA, 29) == Rashi.KUMBHA
        assert _d(60, Rashi.KARKA, 0) == Rashi.KARKA

    def test_degree_thirty_stays_in_last_part(self):
        sign, degree = divide(Rashi.MESHA.position, 30, 9, VARGAS_BY_DIVISION[9].rule)
        assert sign == Rashi.DHANU
        assert degree == 30

    def test_degree_within_part(self):
        _, degree = divide(Rashi.MESHA.position, 10, 9, VARGAS_BY_DIVISION[9].rule)
        assert degree == 0
        _, degree = divide(Rashi.MESHA.position, 11, 9, VARGAS_BY_DIVISION[9].rule)
        assert degree == 9


class TestComputeVarga:
    """Tests for whole-chart transformation."""

    def test_d1_is_identity(self, natal_chart):
        assert compute_varga(natal_chart, 1) == natal_chart

    def test_varga_lagna(self):
        chart = make_chart(Rashi.VRISHABHA, {})
        assert compute_varga(chart, 9).lagna == Rashi.MAKARA
        assert compute_varga(chart, 2).lagna == Rashi.KARKA

    def test_names(self, natal_chart):
        d10 = compute_varga(natal_chart, 10)
        assert d10.name == "D10"
        assert d10.chart_type == "Dasamsa"

    def test_whole_sign_invariant(self, natal_chart):
        for varga in compute_all_vargas(natal_chart):
            for number, house in varga.houses.items():
                assert house_of_sign(house.rashi, varga.lagna) == number
                for p in house.placements:
                    assert p.house == number

    def test_planet_count_preserved(self, natal_chart):
        for varga in compute_all_vargas(natal_chart):
            assert len(varga.placements()) == len(natal_chart.placements())

    def test_retrograde_carried(self):
        chart = Chart.build(Rashi.MESHA, [(Graha.SATURN, Rashi.TULA, 12, True)])
        assert compute_varga(chart, 9).placement(Graha.SATURN).retrograde

    def test_all_vargas_order(self, natal_chart):
        names = [v.name for v in compute_all_vargas(natal_chart)]
        assert names == [f"D{n}" for n in SUPPORTED_DIVISIONS if n > 1]

    def test_unsupported_division_uses_cyclic_rule(self):
        chart = make_chart(Rashi.MESHA, {Graha.SUN: (Rashi.MESHA, 10)})
        d5 = compute_varga(chart, 5)

        assert d5.name == "D5"
        assert d5.lagna == Rashi.MESHA
        assert d5.placement(Graha.SUN).rashi == Rashi.VRISHABHA

    @pytest.mark.parametrize("division", [0, -3])
    def test_non_positive_division_rejected(self, division, natal_chart):
        with pytest.raises(InvalidInputError):
            compute_varga(natal_chart, division)
