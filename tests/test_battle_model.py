import constants
from hlai.battle import (
    Battle,
    Move,
    MoveAction,
    PassAction,
    Pokemon,
    Side,
    SwitchAction,
    TeamPickAction,
    action_from_dict,
    action_identifier,
)


def test_move_from_showdown_dict():
    move = Move.from_dict({
        "id": "recover",
        "name": "Recover",
        "category": "Status",
        "type": "Normal",
        "accuracy": True,
        "heal": [1, 2],
    })
    assert move.id == "recover"
    assert move.accuracy is None
    assert move.heal == 0.5
    assert move.is_recovery
    assert move.is_status


def test_move_self_boosts_count_as_setup():
    move = Move.from_dict({
        "name": "Shell Smash",
        "category": "Status",
        "type": "Normal",
        "boosts": {"def": -1, "spd": -1},
        "self": {"boosts": {"atk": 2, "spa": 2, "spe": 2}},
    })
    assert move.is_setup
    assert move.self_boosts[constants.SPEED] == 2


def test_negative_boosts_are_not_setup():
    assert not Move(name="Growl", boosts={"atk": -1}).is_setup


def test_damaging_requires_base_power():
    assert Move(name="Surf", category="Special", type="Water", base_power=90).is_damaging
    assert not Move(name="Night Shade", category="Special", type="Ghost").is_damaging


def test_hazard_moves_are_detected_by_id():
    assert Move(name="Stealth Rock").is_hazard
    assert Move(name="Toxic Spikes").is_hazard
    assert not Move(name="Spiky Shield").is_hazard


def test_pokemon_health_defaults():
    unknown = Pokemon(name="mystery")
    assert (unknown.hp, unknown.max_hp) == (100, 100)

    only_hp = Pokemon(name="partial", hp=250)
    assert (only_hp.hp, only_hp.max_hp) == (250, 250)

    negative = Pokemon(name="weird", hp=-5, max_hp=100)
    assert negative.hp == 0
    assert not negative.is_alive


def test_pokemon_normalizes_fields():
    pkmn = Pokemon(name="Garchomp", types=["Dragon", "Ground"], ability="Rough Skin", status="BRN")
    assert pkmn.types == ["dragon", "ground"]
    assert pkmn.ability == "roughskin"
    assert pkmn.status == "brn"


def test_pokemon_stats_default_to_100():
    pkmn = Pokemon.from_dict({"name": "Dragapult", "stats": {"spe": 142, "atk": 0}})
    assert pkmn.stat(constants.SPEED) == 142
    assert pkmn.stat(constants.ATTACK) == 100
    assert pkmn.stat(constants.SPECIAL_DEFENSE) == 100


def test_pokemon_from_dict_reads_moves():
    pkmn = Pokemon.from_dict({
        "name": "Toxapex",
        "hp": 120,
        "maxhp": 304,
        "types": ["Poison", "Water"],
        "moves": ["Toxic", {"name": "Scald", "category": "Special", "type": "Water", "basePower": 80}],
    })
    assert [m.id for m in pkmn.moves] == ["toxic", "scald"]
    assert pkmn.moves[1].base_power == 80
    assert round(pkmn.hp_fraction, 3) == 0.395


def test_side_from_dict_hazards_and_active():
    side = Side.from_dict({
        "id": "p2",
        "active": ["Corviknight"],
        "pokemon": [{"name": "Clefable"}, {"name": "Corviknight"}],
        "sideConditions": {"Spikes": ["spikes", 2, 0, 0], "Stealth Rock": 1},
    })
    assert side.active_pokemon is side.pokemon[1]
    assert side.side_conditions == {constants.SPIKES: 2, constants.STEALTH_ROCK: 1}
    assert side.awaiting_decision is False


def test_deciding_side_prefers_awaiting_side():
    first = Side(id="p1")
    second = Side(id="p2", awaiting_decision=True)
    battle = Battle(sides=[first, second])
    assert battle.deciding_side() is second
    assert battle.opponent_of(second) is first


def test_deciding_side_defaults_to_first():
    first = Side(id="p1")
    battle = Battle(sides=[first, Side(id="p2")])
    assert battle.deciding_side() is first
    assert Battle().deciding_side() is None


def test_opponent_requires_two_sides():
    lone = Side(id="p1")
    assert Battle(sides=[lone]).opponent_of(lone) is None
    assert Battle(sides=[lone, Side(id="p2")]).opponent_of(Side(id="p3")) is None


def test_action_identifiers():
    pkmn = Pokemon(name="Gholdengo")
    assert action_identifier(MoveAction(Move(name="Make It Rain"))) == "Make It Rain"
    assert action_identifier(SwitchAction(pkmn)) == "switch-Gholdengo"
    assert action_identifier(PassAction()) is None
    assert action_identifier(TeamPickAction(order=[1])) is None
    assert action_identifier(None) is None
    assert action_identifier(MoveAction(move=None)) is None


def test_action_from_dict():
    side = Side(id="p1", pokemon=[Pokemon(name="Great Tusk"), Pokemon(name="Kingambit")])

    move = action_from_dict({"type": "move", "move": "Earthquake", "target": 1})
    by_index = action_from_dict({"type": "switch", "pokemon": 1}, side)
    by_name = action_from_dict({"type": "switch", "pokemon": "great tusk"}, side)
    team = action_from_dict({"type": "team", "order": [2, 1]})

    assert isinstance(move, MoveAction) and move.move.id == "earthquake" and move.target == 1
    assert by_index.pokemon is side.pokemon[1]
    assert by_name.pokemon is side.pokemon[0]
    assert team.order == [2, 1]
    assert isinstance(action_from_dict({"type": "pass"}), PassAction)


def test_malformed_action_payloads():
    side = Side(id="p1", pokemon=[Pokemon(name="Great Tusk")])
    assert action_from_dict(None) is None
    assert action_from_dict({"type": "move"}) is None
    assert action_from_dict({"type": "switch", "pokemon": 5}, side) is None
    assert action_from_dict({"type": "switch", "pokemon": "Missing"}, side) is None
    assert action_from_dict({"type": "dance"}) is None


def test_only_non_volatile_statuses_are_kept():
    assert Pokemon(name="gone", status="fnt").status is None
    assert Pokemon(name="asleep", status="slp").status == constants.SLEEP
    assert Pokemon.from_dict({"name": "Blissey", "status": "tox"}).status == constants.TOXIC


def test_single_type_string_is_not_split():
    pkmn = Pokemon.from_dict({"name": "Vaporeon", "types": "Water"})
    assert pkmn.types == ["water"]
