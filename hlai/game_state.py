"""
Coarse game-state signals derived from the battle snapshot.

- game phase from remaining combatants (early / mid / late / endgame)
- win conditions: setup sweepers and fast attackers on our side
- team balance: our alive count minus theirs
- hazard pressure on a side
"""

import logging
from dataclasses import dataclass, field

import constants
from constants import GamePhase
from hlai.battle import Battle, Pokemon, Side

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    phase: GamePhase = GamePhase.EARLY
    win_conditions: list[Pokemon] = field(default_factory=list)
    team_balance: int = 0

    @property
    def is_late(self) -> bool:
        return self.phase in (GamePhase.LATE, GamePhase.ENDGAME)


def count_alive(side: Side | None) -> int:
    if side is None:
        return 0
    return len(side.alive)


def game_phase(our_alive: int, opp_alive: int) -> GamePhase:
    phase = GamePhase.EARLY
    # later thresholds are stricter, so the most severe matching phase wins
    for candidate, threshold in constants.PHASE_THRESHOLDS:
        if our_alive <= threshold or opp_alive <= threshold:
            phase = candidate
    return phase


def is_win_condition(pokemon: Pokemon, speed_threshold: int = constants.DEFAULT_WINCON_SPEED) -> bool:
    if pokemon is None or not pokemon.is_alive:
        return False
    if pokemon.ability in constants.SPEED_BOOSTING_ABILITIES:
        return True
    if any(move.is_setup for move in pokemon.moves):
        return True
    return pokemon.stat(constants.SPEED) > speed_threshold


def analyze_game_state(
    battle: Battle,
    side: Side | None,
    speed_threshold: int = constants.DEFAULT_WINCON_SPEED,
) -> GameState:
    if side is None:
        return GameState()

    opponent = battle.opponent_of(side) if battle is not None else None
    our_alive = count_alive(side)
    opp_alive = count_alive(opponent)

    return GameState(
        phase=game_phase(our_alive, opp_alive),
        win_conditions=[p for p in side.pokemon if is_win_condition(p, speed_threshold)],
        team_balance=our_alive - opp_alive,
    )


def evaluate_hazard_pressure(
    battle: Battle,
    side: Side | None,
    weights: dict[str, int] | None = None,
) -> float:
    """Weighted sum of the hazards already set on the opposing side of `side`."""
    if battle is None or side is None:
        return 0.0
    opponent = battle.opponent_of(side)
    if opponent is None:
        return 0.0

    weights = weights if weights is not None else constants.DEFAULT_HAZARD_WEIGHTS
    pressure = 0.0
    for hazard, weight in weights.items():
        if opponent.side_conditions.get(hazard, 0) > 0:
            pressure += weight
    return pressure
