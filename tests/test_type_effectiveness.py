import pytest

from hlai.helpers import POKEMON_TYPES, TYPE_CHART, normalize_name, type_effectiveness_modifier


@pytest.mark.parametrize(
    "attacking, defending, expected",
    [
        ("water", ["fire"], 2.0),
        ("fire", ["water"], 0.5),
        ("water", ["fire", "ground"], 4.0),
        ("grass", ["fire", "flying"], 0.25),
        ("electric", ["ground"], 0.0),
        ("electric", ["water", "ground"], 0.0),
        ("normal", ["normal"], 1.0),
        ("dragon", ["fairy"], 0.0),
    ],
)
def test_documented_multipliers(attacking, defending, expected):
    assert type_effectiveness_modifier(attacking, defending) == expected


def test_type_names_are_case_insensitive():
    assert type_effectiveness_modifier("Water", ["Fire", "Ground"]) == 4.0


def test_unknown_types_are_neutral():
    assert type_effectiveness_modifier("shadow", ["fire"]) == 1.0
    assert type_effectiveness_modifier("water", ["stellar"]) == 1.0
    assert type_effectiveness_modifier(None, ["fire"]) == 1.0
    assert type_effectiveness_modifier("water", []) == 1.0
    assert type_effectiveness_modifier("water", None) == 1.0


def test_every_single_type_factor_is_a_known_multiplier():
    for attacking in POKEMON_TYPES:
        for defending in POKEMON_TYPES:
            assert type_effectiveness_modifier(attacking, [defending]) in {0.0, 0.5, 1.0, 2.0}


def test_dual_type_products_stay_in_range():
    allowed = {0.0, 0.25, 0.5, 1.0, 2.0, 4.0}
    for attacking in POKEMON_TYPES:
        for first in POKEMON_TYPES:
            for second in POKEMON_TYPES:
                if first == second:
                    continue
                assert type_effectiveness_modifier(attacking, [first, second]) in allowed


def test_lookup_is_pure():
    before = {k: dict(v) for k, v in TYPE_CHART.items()}
    first = type_effectiveness_modifier("ice", ["dragon", "flying"])
    second = type_effectiveness_modifier("ice", ["dragon", "flying"])
    assert first == second == 4.0
    assert TYPE_CHART == before


def test_normalize_name():
    assert normalize_name("Stealth Rock") == "stealthrock"
    assert normalize_name("U-turn") == "uturn"
    assert normalize_name(None) == ""
