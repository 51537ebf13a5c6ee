import logging
from collections import deque

import constants

logger = logging.getLogger(__name__)


class RepetitionTracker:
    """
    Rolling history of the actions this engine picked, used to stop it from
    clicking the same move turn after turn.

    Usage:
        tracker = RepetitionTracker()
        tracker.update("Earthquake")
        tracker.penalty_for("Earthquake")   # 0.5
        tracker.penalty_for("Stone Edge")   # 1.0
    """

    def __init__(
        self,
        capacity: int = constants.DEFAULT_HISTORY_CAPACITY,
        window: int = constants.DEFAULT_REPETITION_WINDOW,
        penalties: tuple[float, ...] = constants.DEFAULT_REPETITION_PENALTIES,
    ):
        self.capacity = max(1, int(capacity))
        self.window = max(1, min(int(window), self.capacity))
        self.penalties = tuple(penalties) or (1.0,)
        self._history: deque[str] = deque(maxlen=self.capacity)

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def occurrences(self, identifier: str | None) -> int:
        if not identifier:
            return 0
        recent = list(self._history)[-self.window:]
        return sum(1 for entry in recent if entry == identifier)

    def penalty_for(self, identifier: str | None) -> float:
        repetitions = self.occurrences(identifier)
        if repetitions == 0:
            return 1.0
        return self.penalties[min(repetitions, len(self.penalties)) - 1]

    def update(self, identifier: str | None):
        if not identifier:
            return
        # deque(maxlen) drops the oldest entry once capacity is reached
        self._history.append(identifier)
        logger.debug(f"Repetition history: {list(self._history)}")
