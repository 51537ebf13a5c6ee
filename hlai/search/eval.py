"""
Action scoring for the decision engine.

Every legal action gets a positive desirability score:
- Team preview picks always win
- Damaging moves: damage share of the target's HP plus KO, coverage and
  predicted-switch bonuses, scaled by accuracy and the repetition penalty
- Status moves: hazards, setup, status infliction and recovery, each valued
  by the current situation
- Switches: health, defensive/offensive KO analysis, emergency exits, speed,
  win-condition preservation, hazard cost and late-game tempo

The situational inputs (phase, hazards, predictions) are computed once per
decision and shared through a ScoringContext.
"""

import logging
from dataclasses import dataclass, field

import constants
from config import EngineConfig
from constants import GamePhase
from hlai.battle import (
    Battle,
    Move,
    MoveAction,
    PassAction,
    Pokemon,
    Side,
    SwitchAction,
    TeamPickAction,
)
from hlai.damage import best_case_for, estimate
from hlai.game_state import GameState, analyze_game_state, evaluate_hazard_pressure
from hlai.helpers import type_effectiveness_modifier
from hlai.repetition import RepetitionTracker
from hlai.search.opponent_predict import (
    REPEAT,
    SWITCH,
    PredictedAction,
    predict_opponent_actions,
)

logger = logging.getLogger(__name__)


@dataclass
class ScoringContext:
    battle: Battle | None
    side: Side | None
    opponent_side: Side | None
    user: Pokemon | None
    opponent: Pokemon | None
    game_state: GameState = field(default_factory=GameState)
    hazard_pressure: float = 0.0  # hazards already up on the opposing side
    predictions: list[PredictedAction] = field(default_factory=list)

    @property
    def phase(self) -> GamePhase:
        return self.game_state.phase


def build_scoring_context(
    battle: Battle | None,
    side: Side | None = None,
    config: EngineConfig | None = None,
    opponent_recent_moves: list[str] | None = None,
) -> ScoringContext:
    config = config or EngineConfig()
    if side is None and battle is not None:
        side = battle.deciding_side()
    opponent_side = battle.opponent_of(side) if battle is not None else None

    user = side.active_pokemon if side is not None else None
    opponent = opponent_side.active_pokemon if opponent_side is not None else None
    if user is None:
        logger.warning("No active combatant on the deciding side, scoring with partial context")

    return ScoringContext(
        battle=battle,
        side=side,
        opponent_side=opponent_side,
        user=user,
        opponent=opponent,
        game_state=analyze_game_state(battle, side, config.wincon_speed_threshold),
        hazard_pressure=evaluate_hazard_pressure(battle, side, config.hazard_weights),
        predictions=predict_opponent_actions(opponent, opponent_recent_moves),
    )


def _coverage_bonus(user: Pokemon, target: Pokemon, move: Move) -> float:
    """Reward moves that hit a target our primary type is resisted by."""
    if not user.types:
        return 0.0
    main_effectiveness = type_effectiveness_modifier(user.types[0], target.types)
    move_effectiveness = type_effectiveness_modifier(move.type, target.types)
    if main_effectiveness < 1 and move_effectiveness > main_effectiveness:
        return constants.COVERAGE_BONUS
    return 0.0


class ActionScorer:
    """Scores single actions; candidate sets are summed by the selector."""

    def __init__(self, config: EngineConfig | None = None, tracker: RepetitionTracker | None = None):
        self.config = config or EngineConfig()
        self.tracker = tracker or RepetitionTracker(
            capacity=self.config.history_capacity,
            window=self.config.repetition_window,
            penalties=self.config.repetition_penalties,
        )

    def score(self, action, ctx: ScoringContext) -> float:
        if isinstance(action, TeamPickAction):
            return constants.TEAM_PICK_SCORE
        if isinstance(action, MoveAction):
            return self.score_move(action.move, ctx)
        if isinstance(action, SwitchAction):
            return self.score_switch(action.pokemon, ctx)
        if isinstance(action, PassAction):
            return constants.PASS_SCORE
        logger.debug(f"Malformed action scored as invalid: {action!r}")
        return constants.INVALID_ACTION_SCORE

    def score_move(self, move: Move | None, ctx: ScoringContext) -> float:
        if move is None:
            return constants.INVALID_ACTION_SCORE

        user = ctx.user
        target = ctx.opponent
        score = 0.0

        if move.is_status:
            score += self._status_value(move, user, target, ctx)
        elif user is not None and target is not None:
            score += self._damage_value(move, user, target, ctx)

        if move.priority > 0 and self._wants_priority(user, ctx):
            score += constants.PRIORITY_BONUS

        if move.accuracy is not None and move.accuracy < 100:
            score *= move.accuracy / 100

        score *= self.tracker.penalty_for(move.name)

        return max(score, constants.MIN_ACTION_SCORE)

    def _damage_value(self, move: Move, user: Pokemon, target: Pokemon, ctx: ScoringContext) -> float:
        result = estimate(user, target, move)
        value = result.damage / max(target.hp, 1) * 100

        if result.is_ohko:
            value += constants.OHKO_BONUS
        elif result.is_2hko:
            value += constants.TWO_HKO_BONUS

        value += _coverage_bonus(user, target, move)

        for prediction in ctx.predictions:
            if prediction.kind == SWITCH:
                value += constants.PREDICTED_SWITCH_ATTACK_BONUS * prediction.probability

        return value

    def _status_value(self, move: Move, user: Pokemon | None, target: Pokemon | None, ctx: ScoringContext) -> float:
        value = 0.0

        if move.is_hazard:
            # redundant hazards lose value as pressure accumulates
            value += max(constants.HAZARD_BASE_VALUE - ctx.hazard_pressure, constants.HAZARD_MIN_VALUE)

        if move.is_setup and user is not None:
            if ctx.phase == GamePhase.EARLY and user.hp_fraction > constants.SETUP_HP_RATIO:
                value += constants.SETUP_BONUS

        if move.status and target is not None and target.status is None:
            value += constants.STATUS_INFLICTION_BONUS.get(move.status, 0)

        if move.is_recovery and user is not None and user.hp_fraction < constants.RECOVERY_HP_RATIO:
            value += constants.RECOVERY_BONUS

        return value

    @staticmethod
    def _wants_priority(user: Pokemon | None, ctx: ScoringContext) -> bool:
        if ctx.game_state.is_late:
            return True
        return user is not None and user.hp_fraction < constants.PRIORITY_HP_RATIO

    def score_switch(self, switch_target: Pokemon | None, ctx: ScoringContext) -> float:
        current = ctx.user
        opponent = ctx.opponent

        if switch_target is None or not switch_target.is_alive or switch_target is current:
            return constants.INVALID_ACTION_SCORE

        score = switch_target.hp_fraction * constants.SWITCH_HP_WEIGHT

        if switch_target.status:
            score -= constants.SWITCH_STATUS_PENALTY

        if opponent is not None:
            incoming = best_case_for(opponent, switch_target, opponent.moves)
            if not incoming.is_ohko:
                score += constants.SWITCH_SURVIVES_OHKO_BONUS
            if not incoming.is_2hko:
                score += constants.SWITCH_SURVIVES_2HKO_BONUS

            outgoing = best_case_for(switch_target, opponent, switch_target.moves)
            if outgoing.is_ohko:
                score += constants.SWITCH_THREATENS_OHKO_BONUS
            if outgoing.is_2hko:
                score += constants.SWITCH_THREATENS_2HKO_BONUS

        if current is not None and current.hp_fraction < constants.EMERGENCY_SWITCH_HP_RATIO:
            score += constants.EMERGENCY_SWITCH_BONUS

        opponent_speed = opponent.stat(constants.SPEED) if opponent is not None else constants.DEFAULT_STAT
        if switch_target.stat(constants.SPEED) > opponent_speed:
            score += constants.SPEED_ADVANTAGE_BONUS

        if any(p is switch_target for p in ctx.game_state.win_conditions):
            score += constants.WINCON_SWITCH_BONUS

        score -= ctx.hazard_pressure * constants.SWITCH_HAZARD_PENALTY_RATIO

        if ctx.game_state.is_late:
            score -= constants.LATE_GAME_SWITCH_PENALTY

        for prediction in ctx.predictions:
            if prediction.kind == REPEAT and prediction.move is not None:
                if type_effectiveness_modifier(prediction.move.type, switch_target.types) < 1:
                    score += constants.PREDICTED_REPEAT_RESIST_BONUS * prediction.probability

        return max(score, constants.MIN_ACTION_SCORE)
