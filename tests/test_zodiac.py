"""
Unit tests for sign, planet and house primitives.
"""

import pytest

from zodiac import (
    Element,
    Graha,
    Quality,
    Rashi,
    degree_in_sign,
    element_of,
    exalted_in,
    house_distance,
    house_from,
    house_of_sign,
    is_debilitated,
    is_dignified,
    parse_graha,
    quality_of,
    rashi_from_longitude,
    round_half_up,
    sign_of_house,
)


class TestRashi:
    """Tests for sign properties."""

    def test_cyclic_order(self):
        assert Rashi.MESHA.position == 0
        assert Rashi.MEENA.position == 11

    def test_lords(self):
        assert Rashi.MESHA.lord == Graha.MARS
        assert Rashi.KARKA.lord == Graha.MOON
        assert Rashi.KUMBHA.lord == Graha.SATURN

    def test_odd_signs_have_even_index(self):
        assert Rashi.MESHA.is_odd
        assert not Rashi.VRISHABHA.is_odd
        assert Rashi.DHANU.is_odd

    def test_element_and_quality(self):
        assert element_of(Rashi.SIMHA) == Element.FIRE
        assert element_of(Rashi.MEENA) == Element.WATER
        assert quality_of(Rashi.TULA) == Quality.MOVABLE
        assert quality_of(Rashi.VRISHCHIKA) == Quality.FIXED
        assert quality_of(Rashi.MEENA) == Quality.DUAL

    def test_english_names(self):
        assert Rashi.MESHA.english == "Aries"
        assert Rashi.MEENA.english == "Pisces"


class TestLongitudes:
    """Tests for longitude to sign conversion."""

    @pytest.mark.parametrize("longitude,expected", [
        (0.0, Rashi.MESHA),
        (29.999, Rashi.MESHA),
        (30.0, Rashi.VRISHABHA),
        (359.9, Rashi.MEENA),
        (360.0, Rashi.MESHA),
        (-10.0, Rashi.MEENA),
        (725.0, Rashi.MESHA),
    ])
    def test_rashi_from_longitude(self, longitude, expected):
        assert rashi_from_longitude(longitude) == expected

    def test_degree_in_sign_normalizes(self):
        assert degree_in_sign(-10.0) == pytest.approx(20.0)
        assert degree_in_sign(95.5) == pytest.approx(5.5)

    def test_round_half_up(self):
        assert round_half_up(14.5) == 15
        assert round_half_up(15.5) == 16
        assert round_half_up(14.49) == 14


class TestHouses:
    """Tests for whole-sign house arithmetic."""

    def test_lagna_sign_is_first_house(self):
        for lagna in Rashi:
            assert house_of_sign(lagna, lagna) == 1

    def test_house_of_sign_wraps(self):
        assert house_of_sign(Rashi.MESHA, Rashi.DHANU) == 5
        assert house_of_sign(Rashi.VRISHCHIKA, Rashi.DHANU) == 12

    def test_sign_of_house_inverts_house_of_sign(self):
        for lagna in Rashi:
            for house in range(1, 13):
                assert house_of_sign(sign_of_house(lagna, house), lagna) == house

    def test_house_distance_is_inclusive(self):
        assert house_distance(3, 3) == 1
        assert house_distance(3, 6) == 4
        assert house_distance(10, 1) == 4

    def test_house_from(self):
        assert house_from(1, 10) == 10
        assert house_from(5, 2) == 6
        assert house_from(1, 12) == 12
        assert house_from(12, 2) == 1


class TestDignity:
    """Tests for dignity lookups."""

    def test_dignified(self):
        assert is_dignified(Graha.MARS, Rashi.MAKARA)
        assert is_dignified(Graha.MARS, Rashi.VRISHCHIKA)
        assert not is_dignified(Graha.MARS, Rashi.KARKA)

    def test_nodes_have_no_own_sign(self):
        assert is_dignified(Graha.RAHU, Rashi.MITHUNA)
        assert not is_dignified(Graha.RAHU, Rashi.KUMBHA)
        assert is_debilitated(Graha.KETU, Rashi.MITHUNA)

    def test_exalted_in(self):
        assert exalted_in(Rashi.MESHA) == Graha.SUN
        assert exalted_in(Rashi.KARKA) == Graha.JUPITER
        assert exalted_in(Rashi.SIMHA) is None

    def test_parse_graha(self):
        assert parse_graha("Saturn") == Graha.SATURN
        assert parse_graha("Uranus") is None
        assert parse_graha(None) is None
