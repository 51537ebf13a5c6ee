"""
Approximate damage and KO-threshold estimation.

Not a battle engine: no stat stages, items, abilities, weather or random
rolls. The numbers only need to rank candidate moves consistently.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

import constants
from hlai.battle import Move, Pokemon
from hlai.helpers import type_effectiveness_modifier

logger = logging.getLogger(__name__)

STAB_MULTIPLIER = 1.5


@dataclass
class DamageEstimate:
    damage: int = 0
    is_ohko: bool = False
    is_2hko: bool = False


def _attack_and_defense(attacker: Pokemon, defender: Pokemon, move: Move) -> tuple[int, int]:
    if move.category == constants.PHYSICAL:
        return attacker.stat(constants.ATTACK), defender.stat(constants.DEFENSE)
    return attacker.stat(constants.SPECIAL_ATTACK), defender.stat(constants.SPECIAL_DEFENSE)


def calculate_damage(attacker: Pokemon, defender: Pokemon, move: Move) -> int:
    """Estimated hp damage of `move` from `attacker` into `defender`."""
    if attacker is None or defender is None or move is None or not move.is_damaging:
        return 0

    atk, def_ = _attack_and_defense(attacker, defender, move)

    power = float(move.base_power)
    if move.type is not None and move.type in attacker.types:
        power *= STAB_MULTIPLIER

    effectiveness = type_effectiveness_modifier(move.type, defender.types)
    power *= effectiveness

    base_damage = (((2 * attacker.level / 5 + 2) * power * atk / def_) / 50) + 2

    # effectiveness is applied a second time on purpose; it sharpens the
    # gap between super-effective and resisted options
    return max(0, math.floor(base_damage * effectiveness))


def ko_flags(damage: int, defender: Pokemon) -> DamageEstimate:
    if defender is None or defender.hp <= 0:
        return DamageEstimate(damage=damage)
    return DamageEstimate(
        damage=damage,
        is_ohko=damage >= defender.hp,
        is_2hko=damage >= defender.hp / 2,
    )


def estimate(attacker: Pokemon, defender: Pokemon, move: Move) -> DamageEstimate:
    return ko_flags(calculate_damage(attacker, defender, move), defender)


def best_case_for(attacker: Pokemon, defender: Pokemon, moves: Iterable[Move] | None) -> DamageEstimate:
    """Strongest estimate among `moves`; a zero estimate when nothing can hit."""
    if attacker is None or defender is None or not moves:
        return DamageEstimate()

    max_damage = 0
    for move in moves:
        if move is None or not move.is_damaging:
            continue
        max_damage = max(max_damage, calculate_damage(attacker, defender, move))
    return ko_flags(max_damage, defender)
