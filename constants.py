from enum import StrEnum


class GamePhase(StrEnum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"
    ENDGAME = "endgame"


class SelectionMode(StrEnum):
    THRESHOLD = "threshold"
    RANK_DECAY = "rank_decay"


ID = "id"
NAME = "name"
STATUS = "status"
TYPES = "types"
TYPE = "type"
BASE_POWER = "basePower"
ACCURACY = "accuracy"
PRIORITY = "priority"
BOOSTS = "boosts"
SELF = "self"
HEAL = "heal"
STATS = "stats"
LEVEL = "level"
ABILITY = "ability"
MOVES = "moves"
POKEMON = "pokemon"
ACTIVE = "active"
FAINTED = "fainted"
SIDE_CONDITIONS = "sideConditions"
CURRENT_REQUEST = "currentRequest"

HITPOINTS = "hp"
MAX_HITPOINTS = "maxhp"
ATTACK = "attack"
DEFENSE = "defense"
SPECIAL_ATTACK = "special-attack"
SPECIAL_DEFENSE = "special-defense"
SPEED = "speed"

STAT_ABBREVIATION_LOOKUPS = {
    "atk": ATTACK,
    "def": DEFENSE,
    "spa": SPECIAL_ATTACK,
    "spd": SPECIAL_DEFENSE,
    "spe": SPEED,
}

# neutral value for any stat the snapshot does not carry
DEFAULT_STAT = 100
DEFAULT_LEVEL = 100
DEFAULT_MAX_HP = 100

PHYSICAL = "physical"
SPECIAL = "special"
CATEGORY = "category"

DAMAGING_CATEGORIES = [PHYSICAL, SPECIAL]

# Hazards
STEALTH_ROCK = "stealthrock"
SPIKES = "spikes"
TOXIC_SPIKES = "toxicspikes"

HAZARD_MOVES = {STEALTH_ROCK, SPIKES, TOXIC_SPIKES}

DEFAULT_HAZARD_WEIGHTS = {
    SPIKES: 20,
    STEALTH_ROCK: 30,
    TOXIC_SPIKES: 15,
}

# non-volatile statuses
SLEEP = "slp"
BURN = "brn"
FROZEN = "frz"
PARALYZED = "par"
POISON = "psn"
TOXIC = "tox"
NON_VOLATILE_STATUSES = {SLEEP, BURN, FROZEN, PARALYZED, POISON, TOXIC}

SPEED_BOOSTING_ABILITIES = {
    "speedboost",
    "swiftswim",
    "chlorophyll",
    "sandrush",
    "slushrush",
    "unburden",
    "surgesurfer",
}

# Action kinds
MOVE_ACTION = "move"
SWITCH_ACTION = "switch"
TEAM_ACTION = "team"
PASS_ACTION = "pass"

SWITCH_IDENTIFIER_PREFIX = "switch-"

# Phase thresholds: alive count on either side at or below which the phase applies
PHASE_THRESHOLDS = (
    (GamePhase.MID, 3),
    (GamePhase.LATE, 2),
    (GamePhase.ENDGAME, 1),
)
DEFAULT_WINCON_SPEED = 110

# Opponent prediction
LOW_HP_PREDICTION_RATIO = 0.3
PREDICT_SWITCH_PROBABILITY = 0.6
PREDICT_RECOVERY_PROBABILITY = 0.3
PREDICT_SETUP_PROBABILITY = 0.4
PREDICT_REPEAT_PROBABILITY = 0.5
PREDICT_REPEAT_WINDOW = 3
PREDICT_REPEAT_MIN_COUNT = 2

# Action scoring
TEAM_PICK_SCORE = 5000
PASS_SCORE = 15
INVALID_ACTION_SCORE = 0
MIN_ACTION_SCORE = 1
CANDIDATE_SCORE_FLOOR = 0.01

OHKO_BONUS = 150
TWO_HKO_BONUS = 50
COVERAGE_BONUS = 30
PREDICTED_SWITCH_ATTACK_BONUS = 20

HAZARD_BASE_VALUE = 60
HAZARD_MIN_VALUE = 10
SETUP_BONUS = 70
SETUP_HP_RATIO = 0.8
RECOVERY_BONUS = 80
RECOVERY_HP_RATIO = 0.6
STATUS_INFLICTION_BONUS = {
    SLEEP: 60,
    PARALYZED: 45,
    TOXIC: 40,
    BURN: 35,
    POISON: 30,
}

PRIORITY_BONUS = 40
PRIORITY_HP_RATIO = 0.5

SWITCH_HP_WEIGHT = 40
SWITCH_STATUS_PENALTY = 35
SWITCH_SURVIVES_OHKO_BONUS = 50
SWITCH_SURVIVES_2HKO_BONUS = 25
SWITCH_THREATENS_OHKO_BONUS = 70
SWITCH_THREATENS_2HKO_BONUS = 35
EMERGENCY_SWITCH_BONUS = 60
EMERGENCY_SWITCH_HP_RATIO = 0.3
SPEED_ADVANTAGE_BONUS = 30
WINCON_SWITCH_BONUS = 40
SWITCH_HAZARD_PENALTY_RATIO = 0.5
LATE_GAME_SWITCH_PENALTY = 20
PREDICTED_REPEAT_RESIST_BONUS = 20

# Phase multipliers applied by the selector
LATE_GAME_MOVE_MULTIPLIER = 1.1
ENDGAME_RISKY_ACCURACY = 90
ENDGAME_RISKY_MULTIPLIER = 0.9

# Selection
DEFAULT_FILTER_THRESHOLD = 0.9
DEFAULT_WEIGHT_EXPONENT = 3
DEFAULT_RANK_FRACTION = 0.4
DEFAULT_RANK_DECAY = 0.7

# Repetition history
DEFAULT_HISTORY_CAPACITY = 5
DEFAULT_REPETITION_WINDOW = 3
DEFAULT_REPETITION_PENALTIES = (0.5, 0.2, 0.1)
DEFAULT_OPPONENT_HISTORY = 10
