import logging
from collections import deque

import constants
from hlai.helpers import normalize_name

logger = logging.getLogger(__name__)


class OpponentModel:
    """Short rolling memory of the moves the opponent has used this battle."""

    def __init__(self, capacity: int = constants.DEFAULT_OPPONENT_HISTORY):
        self.capacity = max(1, int(capacity))
        self._moves: deque[str] = deque(maxlen=self.capacity)

    def record_move(self, move_name: str):
        move_id = normalize_name(move_name)
        if not move_id:
            return
        self._moves.append(move_id)
        logger.debug(f"Opponent move recorded: {move_id} (history={list(self._moves)})")

    def recent_moves(self, count: int = constants.PREDICT_REPEAT_WINDOW) -> list[str]:
        if count <= 0:
            return []
        return list(self._moves)[-count:]
