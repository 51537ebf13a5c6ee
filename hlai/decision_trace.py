import logging
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)


def _make_json_safe(value):
    if isinstance(value, dict):
        return {str(k): _make_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_make_json_safe(v) for v in value]
    if isinstance(value, set):
        return [_make_json_safe(v) for v in sorted(value)]
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return round(value, 6)
    return value


def build_trace_base(battle, reason: str | None = None) -> dict:
    return {
        "battle_tag": getattr(battle, "battle_tag", None),
        "turn": getattr(battle, "turn", None),
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "reason": reason or "",
    }


def finalize_trace(trace: dict) -> dict:
    return _make_json_safe(trace)


def validate_trace_schema(trace: dict) -> bool:
    required = {"battle_tag", "turn", "timestamp", "scores", "choice"}
    return required.issubset(set(trace.keys()))
