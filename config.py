import logging
import os
import sys
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv

import constants
from constants import SelectionMode


class CustomFormatter(logging.Formatter):
    def format(self, record):
        lvl = "{}".format(record.levelname)
        return "{} {}".format(lvl.ljust(8), record.getMessage())


class CustomRotatingFileHandler(RotatingFileHandler):
    def __init__(self, file_name, maxBytes=10*1024*1024, backupCount=3, base_dir="logs", **kwargs):
        """
        Custom rotating file handler with size limits.

        Args:
            file_name: Base log file name
            maxBytes: Maximum size in bytes before rotation (default 10MB)
            backupCount: Number of backup files to keep (default 3)
            base_dir: Directory the log files live in (created if missing)
        """
        self.base_dir = base_dir
        os.makedirs(self.base_dir, exist_ok=True)

        super().__init__(
            "{}/{}".format(self.base_dir, file_name),
            maxBytes=maxBytes,
            backupCount=backupCount,
            **kwargs
        )


def init_logging(level, log_to_file, log_dir="logs"):
    # Gets the root logger to set handlers/formatters
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(CustomFormatter())
    logger.addHandler(stdout_handler)

    file_handler = None
    if log_to_file:
        file_handler = CustomRotatingFileHandler("hlai.log", base_dir=log_dir)
        file_handler.setLevel(logging.DEBUG)  # file logs are always debug
        file_handler.setFormatter(CustomFormatter())
        logger.addHandler(file_handler)

    return stdout_handler, file_handler


def _env_int(name: str, default: int, minimum: int, maximum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = max(minimum, int(raw.strip()))
    except ValueError:
        return default
    if maximum is not None:
        value = min(maximum, value)
    return value


def _env_float(name: str, default: float, minimum: float, maximum: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = max(minimum, float(raw.strip()))
    except ValueError:
        return default
    if maximum is not None:
        value = min(maximum, value)
    return value


def _env_penalties(name: str, default: tuple[float, ...]) -> tuple[float, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        values = tuple(float(v) for v in raw.split(",") if v.strip())
    except ValueError:
        return default
    if not values or any(v <= 0 or v > 1 for v in values):
        return default
    return values


def _env_hazard_weights(name: str, default: dict[str, int]) -> dict[str, int]:
    """Parse ``spikes=20,stealthrock=30`` into a weight table layered over the defaults."""
    raw = os.getenv(name)
    weights = dict(default)
    if not raw:
        return weights
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        try:
            weights[key.strip().lower()] = max(0, int(value.strip()))
        except ValueError:
            continue
    return weights


@dataclass
class EngineConfig:
    filter_threshold: float = constants.DEFAULT_FILTER_THRESHOLD
    weight_exponent: float = constants.DEFAULT_WEIGHT_EXPONENT
    history_capacity: int = constants.DEFAULT_HISTORY_CAPACITY
    repetition_window: int = constants.DEFAULT_REPETITION_WINDOW
    repetition_penalties: tuple[float, ...] = constants.DEFAULT_REPETITION_PENALTIES
    wincon_speed_threshold: int = constants.DEFAULT_WINCON_SPEED
    hazard_weights: dict[str, int] = field(
        default_factory=lambda: dict(constants.DEFAULT_HAZARD_WEIGHTS)
    )
    opponent_history_capacity: int = constants.DEFAULT_OPPONENT_HISTORY
    selection_mode: SelectionMode = SelectionMode.THRESHOLD
    rank_fraction: float = constants.DEFAULT_RANK_FRACTION
    rank_decay: float = constants.DEFAULT_RANK_DECAY

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "EngineConfig":
        load_dotenv(dotenv_path)

        mode_raw = os.getenv("HLAI_SELECTION_MODE", SelectionMode.THRESHOLD.value).strip().lower()
        try:
            selection_mode = SelectionMode(mode_raw)
        except ValueError:
            selection_mode = SelectionMode.THRESHOLD

        return cls(
            filter_threshold=_env_float(
                "HLAI_FILTER_THRESHOLD", constants.DEFAULT_FILTER_THRESHOLD, 0.01, 1.0
            ),
            weight_exponent=_env_float(
                "HLAI_WEIGHT_EXPONENT", constants.DEFAULT_WEIGHT_EXPONENT, 0.0
            ),
            history_capacity=_env_int(
                "HLAI_HISTORY_CAPACITY", constants.DEFAULT_HISTORY_CAPACITY, 4, 6
            ),
            repetition_window=_env_int(
                "HLAI_REPETITION_WINDOW", constants.DEFAULT_REPETITION_WINDOW, 3, 4
            ),
            repetition_penalties=_env_penalties(
                "HLAI_REPETITION_PENALTIES", constants.DEFAULT_REPETITION_PENALTIES
            ),
            wincon_speed_threshold=_env_int(
                "HLAI_WINCON_SPEED", constants.DEFAULT_WINCON_SPEED, 0
            ),
            hazard_weights=_env_hazard_weights(
                "HLAI_HAZARD_WEIGHTS", constants.DEFAULT_HAZARD_WEIGHTS
            ),
            opponent_history_capacity=_env_int(
                "HLAI_OPPONENT_HISTORY", constants.DEFAULT_OPPONENT_HISTORY, 3
            ),
            selection_mode=selection_mode,
        )

    def validate(self):
        assert 0 < self.filter_threshold <= 1, "filter_threshold must be in (0, 1]"
        assert self.weight_exponent >= 0, "weight_exponent must be non-negative"
        assert 4 <= self.history_capacity <= 6, "history_capacity must be between 4 and 6"
        assert 3 <= self.repetition_window <= 4, "repetition_window must be 3 or 4"
        assert self.repetition_window <= self.history_capacity, (
            "repetition_window cannot exceed history_capacity"
        )
        assert self.repetition_penalties, "repetition_penalties cannot be empty"
        assert all(0 < p <= 1 for p in self.repetition_penalties), (
            "repetition penalties must be in (0, 1]"
        )
        assert list(self.repetition_penalties) == sorted(self.repetition_penalties, reverse=True), (
            "repetition penalties must not increase with the repeat count"
        )
        assert 0 < self.rank_fraction <= 1, "rank_fraction must be in (0, 1]"
        assert 0 < self.rank_decay <= 1, "rank_decay must be in (0, 1]"
