"""
Decision engine: picks one candidate action set per turn.

1. Score every candidate set (sum of its actions, with phase adjustments)
2. Keep the "serious" candidates close to the best score
3. Sharpen their scores into weights and draw one at random
4. Remember what was picked so the same move is not spammed

One engine per battle. The repetition history, the opponent move memory and
the turn counter belong to the instance; nothing is shared between battles.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Sequence

import constants
from config import EngineConfig
from constants import GamePhase, SelectionMode
from hlai.battle import ActionSet, Battle, MoveAction, Side, action_identifier
from hlai.decision_trace import build_trace_base, finalize_trace
from hlai.opponent_model import OpponentModel
from hlai.repetition import RepetitionTracker
from hlai.search.eval import ActionScorer, ScoringContext, build_scoring_context

logger = logging.getLogger(__name__)


@dataclass
class ScoredCandidate:
    index: int
    score: float


def apply_phase_adjustments(action, score: float, phase: GamePhase) -> float:
    if not isinstance(action, MoveAction) or action.move is None:
        return score
    if phase == GamePhase.LATE:
        score *= constants.LATE_GAME_MOVE_MULTIPLIER
    elif phase == GamePhase.ENDGAME:
        accuracy = action.move.accuracy
        if accuracy is not None and accuracy < constants.ENDGAME_RISKY_ACCURACY:
            score *= constants.ENDGAME_RISKY_MULTIPLIER
    return score


def serious_candidates(scored: list[ScoredCandidate], threshold: float) -> list[ScoredCandidate]:
    """Candidates within `threshold` of the best score, best-score ties as fallback."""
    if not scored:
        return []
    max_score = max(c.score for c in scored)
    cutoff = max_score * threshold
    serious = [c for c in scored if c.score >= cutoff]
    if not serious:
        serious = [c for c in scored if c.score == max_score]
    return serious


def selection_weights(candidates: list[ScoredCandidate], exponent: float) -> list[float]:
    max_score = max(c.score for c in candidates)
    return [(c.score / max_score) ** exponent for c in candidates]


def rank_decay_candidates(
    scored: list[ScoredCandidate], fraction: float, decay: float
) -> tuple[list[ScoredCandidate], list[float]]:
    """Top share of candidates by score, weighted by decay ** rank."""
    ranked = sorted(scored, key=lambda c: c.score, reverse=True)
    keep = max(1, math.ceil(len(ranked) * fraction))
    top = ranked[:keep]
    return top, [decay ** rank for rank in range(len(top))]


class DecisionEngine:
    def __init__(self, config: EngineConfig | None = None, rng: random.Random | None = None):
        self.config = config or EngineConfig()
        self.config.validate()
        self.rng = rng or random.Random()
        self.tracker = RepetitionTracker(
            capacity=self.config.history_capacity,
            window=self.config.repetition_window,
            penalties=self.config.repetition_penalties,
        )
        self.opponent_model = OpponentModel(self.config.opponent_history_capacity)
        self.scorer = ActionScorer(self.config, self.tracker)
        self.turn_count = 0
        self.last_trace: dict | None = None

    @property
    def history(self) -> list[str]:
        return self.tracker.history

    def observe_opponent_move(self, move_name: str):
        self.opponent_model.record_move(move_name)

    def score_candidate(self, action_set: ActionSet, ctx: ScoringContext) -> float:
        total = 0.0
        for action in action_set or []:
            score = self.scorer.score(action, ctx)
            total += apply_phase_adjustments(action, score, ctx.phase)
        return max(total, constants.CANDIDATE_SCORE_FLOOR)

    def score_candidates(self, candidates: Sequence[ActionSet], ctx: ScoringContext) -> list[ScoredCandidate]:
        scored = []
        for index, action_set in enumerate(candidates):
            score = self.score_candidate(action_set, ctx)
            scored.append(ScoredCandidate(index=index, score=score))
            logger.debug(f"Candidate {index}: {_describe(action_set)} -> {score:.2f}")
        return scored

    def decide(self, battle: Battle, candidates: Sequence[ActionSet] | None, side: Side | None = None) -> ActionSet | None:
        if not candidates:
            logger.info("No candidate decisions offered")
            self.last_trace = None
            return None

        self.turn_count += 1
        ctx = build_scoring_context(
            battle,
            side,
            self.config,
            self.opponent_model.recent_moves(constants.PREDICT_REPEAT_WINDOW),
        )
        scored = self.score_candidates(candidates, ctx)

        if self.config.selection_mode == SelectionMode.RANK_DECAY:
            pool, weights = rank_decay_candidates(scored, self.config.rank_fraction, self.config.rank_decay)
        else:
            pool = serious_candidates(scored, self.config.filter_threshold)
            weights = [1.0] if len(pool) == 1 else selection_weights(pool, self.config.weight_exponent)

        if len(pool) == 1:
            chosen = pool[0]
            reason = "single_serious_candidate"
        else:
            chosen = self.rng.choices(pool, weights=weights)[0]
            reason = "weighted_draw"

        choice = candidates[chosen.index]
        identifier = action_identifier(choice[0]) if choice else None
        self.tracker.update(identifier)

        self.last_trace = self._build_trace(battle, ctx, scored, pool, weights, chosen, reason)
        logger.info(
            f"Turn {self.turn_count} ({ctx.phase}): chose {_describe(choice)} "
            f"score={chosen.score:.2f} from {len(pool)}/{len(scored)} candidates"
        )
        return choice

    def _build_trace(self, battle, ctx, scored, pool, weights, chosen, reason) -> dict:
        trace = build_trace_base(battle, reason)
        trace.update(
            {
                "engine_turn": self.turn_count,
                "phase": ctx.phase,
                "team_balance": ctx.game_state.team_balance,
                "hazard_pressure": ctx.hazard_pressure,
                "predictions": [(p.kind, p.probability) for p in ctx.predictions],
                "scores": [(c.index, c.score) for c in scored],
                "pool": [c.index for c in pool],
                "weights": weights,
                "choice": chosen.index,
                "history": self.tracker.history,
            }
        )
        return finalize_trace(trace)


def _describe(action_set) -> str:
    parts = []
    for action in action_set or []:
        identifier = action_identifier(action)
        parts.append(identifier or getattr(action, "kind", "invalid"))
    return "[" + ", ".join(parts) + "]"
