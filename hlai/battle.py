"""
Battle snapshot types consumed by the decision engine.

Everything the scoring code reads lives here, with defaults resolved once at
construction:
- missing stats read as 100
- missing health reads as a full 100/100
- missing types mean "no type" (neutral effectiveness)
- names, ids, types, abilities and statuses are normalized

The `from_dict` builders accept Showdown-style payloads (basePower, maxhp,
atk/def/spa/spd/spe, self boosts, sideConditions, currentRequest) for protocol
clients that hand the engine plain dicts.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import constants
from hlai.helpers import normalize_name

logger = logging.getLogger(__name__)


def _normalize_optional(value) -> str | None:
    normalized = normalize_name(value)
    return normalized or None


def _safe_number(value, default):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _normalize_stats(raw: dict | None) -> dict[str, int]:
    stats: dict[str, int] = {}
    for key, value in (raw or {}).items():
        stat = constants.STAT_ABBREVIATION_LOOKUPS.get(key, key)
        value = _safe_number(value, None)
        if value is not None and value > 0:
            stats[stat] = int(value)
    return stats


def _normalize_boosts(raw: dict | None) -> dict[str, int]:
    boosts: dict[str, int] = {}
    for key, value in (raw or {}).items():
        value = _safe_number(value, None)
        if value is not None:
            boosts[constants.STAT_ABBREVIATION_LOOKUPS.get(key, key)] = int(value)
    return boosts


@dataclass
class Move:
    name: str
    id: str = ""
    category: str = constants.STATUS
    type: str | None = None
    base_power: int = 0
    accuracy: int | None = None  # None means the move always hits
    priority: int = 0
    status: str | None = None
    boosts: dict[str, int] = field(default_factory=dict)
    self_boosts: dict[str, int] = field(default_factory=dict)
    heal: float = 0.0  # fraction of max hp restored

    def __post_init__(self):
        self.id = normalize_name(self.id or self.name)
        self.category = normalize_name(self.category) or constants.STATUS
        self.type = _normalize_optional(self.type)
        self.status = _normalize_optional(self.status)
        self.base_power = int(_safe_number(self.base_power, 0) or 0)
        self.priority = int(_safe_number(self.priority, 0) or 0)
        self.heal = float(_safe_number(self.heal, 0.0) or 0.0)
        accuracy = _safe_number(self.accuracy, None)
        self.accuracy = int(accuracy) if accuracy is not None else None
        self.boosts = _normalize_boosts(self.boosts)
        self.self_boosts = _normalize_boosts(self.self_boosts)

    @property
    def is_damaging(self) -> bool:
        return self.category in constants.DAMAGING_CATEGORIES and self.base_power > 0

    @property
    def is_status(self) -> bool:
        return not self.is_damaging

    @property
    def is_hazard(self) -> bool:
        return self.id in constants.HAZARD_MOVES

    @property
    def is_setup(self) -> bool:
        """Raises one of the user's stats (Swords Dance, Dragon Dance, ...)."""
        return any(v > 0 for v in self.boosts.values()) or any(
            v > 0 for v in self.self_boosts.values()
        )

    @property
    def is_recovery(self) -> bool:
        return self.heal > 0

    @classmethod
    def from_dict(cls, data: dict | str) -> "Move":
        if isinstance(data, str):
            return cls(name=data)
        heal = data.get(constants.HEAL)
        # Showdown stores heal as [numerator, denominator]
        if isinstance(heal, (list, tuple)) and len(heal) == 2 and heal[1]:
            heal = heal[0] / heal[1]
        accuracy = data.get(constants.ACCURACY)
        if accuracy is True:
            accuracy = None
        self_effect = data.get(constants.SELF) or {}
        return cls(
            name=data.get(constants.NAME) or data.get(constants.ID) or "",
            id=data.get(constants.ID, ""),
            category=data.get(constants.CATEGORY, constants.STATUS),
            type=data.get(constants.TYPE),
            base_power=data.get(constants.BASE_POWER, data.get("base_power", 0)),
            accuracy=accuracy,
            priority=data.get(constants.PRIORITY, 0),
            status=data.get(constants.STATUS),
            boosts=data.get(constants.BOOSTS) or {},
            self_boosts=self_effect.get(constants.BOOSTS) or {},
            heal=heal or 0.0,
        )


@dataclass(eq=False)
class Pokemon:
    name: str
    hp: int | None = None
    max_hp: int | None = None
    types: list[str] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    status: str | None = None
    level: int = constants.DEFAULT_LEVEL
    fainted: bool = False
    moves: list[Move] = field(default_factory=list)
    ability: str | None = None
    boosts: dict[str, int] = field(default_factory=dict)
    setup: bool = False

    def __post_init__(self):
        max_hp = _safe_number(self.max_hp, None)
        hp = _safe_number(self.hp, None)
        if max_hp is None or max_hp <= 0:
            max_hp = hp if hp is not None and hp > 0 else constants.DEFAULT_MAX_HP
        if hp is None:
            hp = max_hp
        self.max_hp = int(max_hp)
        self.hp = max(0, int(hp))
        self.types = [t for t in (normalize_name(t) for t in self.types or []) if t]
        self.stats = _normalize_stats(self.stats)
        status = _normalize_optional(self.status)
        # Showdown condition strings can carry "fnt"; only real ailments count
        self.status = status if status in constants.NON_VOLATILE_STATUSES else None
        self.ability = _normalize_optional(self.ability)
        self.boosts = _normalize_boosts(self.boosts)
        level = _safe_number(self.level, constants.DEFAULT_LEVEL)
        self.level = int(level) if level > 0 else constants.DEFAULT_LEVEL

    def __repr__(self):
        return f"Pokemon({self.name!r}, {self.hp}/{self.max_hp})"

    @property
    def is_alive(self) -> bool:
        return not self.fainted and self.hp > 0

    @property
    def hp_fraction(self) -> float:
        return self.hp / self.max_hp

    @property
    def is_setting_up(self) -> bool:
        return self.setup or any(v > 0 for v in self.boosts.values())

    def stat(self, key: str) -> int:
        return self.stats.get(key) or constants.DEFAULT_STAT

    @classmethod
    def from_dict(cls, data: dict) -> "Pokemon":
        stats = dict(data.get("baseStats") or {})
        stats.update(data.get(constants.STATS) or {})
        types = data.get(constants.TYPES) or []
        if isinstance(types, str):
            types = [types]
        return cls(
            name=data.get(constants.NAME) or data.get("species") or "",
            hp=data.get(constants.HITPOINTS),
            max_hp=data.get(constants.MAX_HITPOINTS, data.get("max_hp")),
            types=list(types),
            stats=stats,
            status=data.get(constants.STATUS),
            level=data.get(constants.LEVEL, constants.DEFAULT_LEVEL),
            fainted=bool(data.get(constants.FAINTED, False)),
            moves=[Move.from_dict(m) for m in data.get(constants.MOVES) or []],
            ability=data.get(constants.ABILITY),
            boosts=data.get(constants.BOOSTS) or {},
            setup=bool(data.get("setup", False)),
        )


@dataclass(eq=False)
class Side:
    id: str
    pokemon: list[Pokemon] = field(default_factory=list)
    active: list[Pokemon] = field(default_factory=list)
    side_conditions: dict[str, int] = field(default_factory=dict)
    awaiting_decision: bool = False

    @property
    def active_pokemon(self) -> Pokemon | None:
        return self.active[0] if self.active else None

    @property
    def alive(self) -> list[Pokemon]:
        return [p for p in self.pokemon if p.is_alive]

    def find(self, name: str) -> Pokemon | None:
        target = normalize_name(name)
        for pkmn in self.pokemon:
            if normalize_name(pkmn.name) == target:
                return pkmn
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "Side":
        pokemon = [Pokemon.from_dict(p) for p in data.get(constants.POKEMON) or []]
        active = []
        for entry in data.get(constants.ACTIVE) or []:
            # active entries may be roster indices or names
            if isinstance(entry, int) and 0 <= entry < len(pokemon):
                active.append(pokemon[entry])
            elif isinstance(entry, str):
                match = next((p for p in pokemon if normalize_name(p.name) == normalize_name(entry)), None)
                if match is not None:
                    active.append(match)
        conditions = {}
        for name, value in (data.get(constants.SIDE_CONDITIONS) or {}).items():
            # Showdown sends [name, layers, ...] lists for side conditions
            if isinstance(value, (list, tuple)):
                value = value[1] if len(value) > 1 else 1
            conditions[normalize_name(name)] = int(_safe_number(value, 1) or 0)
        return cls(
            id=str(data.get(constants.ID, "")),
            pokemon=pokemon,
            active=active,
            side_conditions=conditions,
            awaiting_decision=bool(data.get(constants.CURRENT_REQUEST) or data.get("awaiting_decision")),
        )


@dataclass(eq=False)
class Battle:
    sides: list[Side] = field(default_factory=list)
    turn: int = 0
    battle_tag: str = ""

    def deciding_side(self) -> Side | None:
        for side in self.sides:
            if side.awaiting_decision:
                return side
        if self.sides:
            logger.debug("No side is awaiting a decision, defaulting to the first side")
            return self.sides[0]
        return None

    def opponent_of(self, side: Side | None) -> Side | None:
        if side is None or len(self.sides) != 2:
            return None
        if side is self.sides[0]:
            return self.sides[1]
        if side is self.sides[1]:
            return self.sides[0]
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "Battle":
        return cls(
            sides=[Side.from_dict(s) for s in data.get("sides") or []],
            turn=int(_safe_number(data.get("turn"), 0)),
            battle_tag=str(data.get("battle_tag", data.get("id", "")) or ""),
        )


@dataclass(eq=False)
class MoveAction:
    move: Move
    target: int | None = None
    kind = constants.MOVE_ACTION


@dataclass(eq=False)
class SwitchAction:
    pokemon: Pokemon | None
    kind = constants.SWITCH_ACTION


@dataclass(eq=False)
class TeamPickAction:
    order: list[int] = field(default_factory=list)
    kind = constants.TEAM_ACTION


@dataclass(eq=False)
class PassAction:
    kind = constants.PASS_ACTION


Action = MoveAction | SwitchAction | TeamPickAction | PassAction
ActionSet = Sequence[Action | None]


def action_identifier(action: Any) -> str | None:
    """History key for an action: the move name, or switch-<name> for switches."""
    if isinstance(action, MoveAction):
        return action.move.name if action.move is not None else None
    if isinstance(action, SwitchAction) and action.pokemon is not None:
        return f"{constants.SWITCH_IDENTIFIER_PREFIX}{action.pokemon.name}"
    return None


def action_from_dict(data: Any, side: Side | None = None) -> Action | None:
    """
    Build an action from a protocol payload such as
    {"type": "move", "move": {...}} or {"type": "switch", "pokemon": 2}.
    Returns None for malformed entries so the scorer can rank them out.
    """
    if not isinstance(data, dict):
        return None
    kind = data.get("type")
    if kind == constants.MOVE_ACTION:
        move = data.get("move")
        if not move:
            return None
        return MoveAction(move=Move.from_dict(move), target=data.get("target"))
    if kind == constants.SWITCH_ACTION:
        pokemon = data.get("pokemon")
        if isinstance(pokemon, dict):
            pokemon = Pokemon.from_dict(pokemon)
        elif side is not None and isinstance(pokemon, int) and not isinstance(pokemon, bool):
            pokemon = side.pokemon[pokemon] if 0 <= pokemon < len(side.pokemon) else None
        elif side is not None and isinstance(pokemon, str):
            pokemon = side.find(pokemon)
        if not isinstance(pokemon, Pokemon):
            return None
        return SwitchAction(pokemon=pokemon)
    if kind == constants.TEAM_ACTION:
        return TeamPickAction(order=list(data.get("order") or []))
    if kind == constants.PASS_ACTION:
        return PassAction()
    logger.debug(f"Unrecognized action payload: {data!r}")
    return None
