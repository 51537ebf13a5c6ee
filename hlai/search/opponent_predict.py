"""
Opponent Action Prediction

Guesses what the opponent's active combatant is about to do. Each prediction
is an independent signal strength, not a share of a probability distribution,
so several can fire together and their sum is meaningless.

Signals:
- Low HP: likely to switch out or to recover
- Boosted or flagged as setting up: likely to keep setting up
- Same move clicked repeatedly: likely to click it again
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

import constants
from hlai.battle import Move, Pokemon
from hlai.helpers import normalize_name

logger = logging.getLogger(__name__)

SWITCH = "switch"
RECOVERY = "recovery"
SETUP = "setup"
REPEAT = "repeat"


@dataclass
class PredictedAction:
    kind: str
    probability: float
    reason: str
    move: Optional[Move] = None


def _known_move(opponent: Pokemon, move_id: str) -> Move | None:
    for move in opponent.moves:
        if move.id == move_id:
            return move
    return None


def predict_opponent_actions(
    opponent: Pokemon | None,
    recent_moves: Iterable[str] | None = None,
) -> list[PredictedAction]:
    predictions: list[PredictedAction] = []
    if opponent is None or not opponent.is_alive:
        return predictions

    if opponent.hp_fraction < constants.LOW_HP_PREDICTION_RATIO:
        predictions.append(
            PredictedAction(SWITCH, constants.PREDICT_SWITCH_PROBABILITY, "low_hp")
        )
        predictions.append(
            PredictedAction(RECOVERY, constants.PREDICT_RECOVERY_PROBABILITY, "low_hp")
        )

    if opponent.is_setting_up:
        predictions.append(
            PredictedAction(SETUP, constants.PREDICT_SETUP_PROBABILITY, "setup_sweeper")
        )

    window = [normalize_name(m) for m in list(recent_moves or [])[-constants.PREDICT_REPEAT_WINDOW:]]
    frequency = Counter(m for m in window if m)
    if frequency:
        move_id, count = frequency.most_common(1)[0]
        if count >= constants.PREDICT_REPEAT_MIN_COUNT:
            predictions.append(
                PredictedAction(
                    REPEAT,
                    constants.PREDICT_REPEAT_PROBABILITY,
                    "move_pattern",
                    move=_known_move(opponent, move_id) or Move(name=move_id),
                )
            )

    if predictions:
        logger.debug(
            f"Opponent predictions for {opponent.name}: "
            + ", ".join(f"{p.kind}={p.probability}" for p in predictions)
        )
    return predictions
