from .rules import (
    NUM_PITS,
    PLAYER_ONE,
    PLAYER_TWO,
    SEEDS_PER_PIT,
    STORE,
    BoardState,
    CaptureEvent,
    MoveOutcome,
    MoveRecord,
    PendingEffect,
    PowerCard,
    PowerCardType,
    RulesConfig,
    SowStep,
    apply_move,
    default_power_cards,
    opponent_of,
)
from .engine import CongkakEngine, GameConfig, MatchResult
from .encoding import deserialize_fen, serialize_fen, state_key

__all__ = [
    "NUM_PITS",
    "PLAYER_ONE",
    "PLAYER_TWO",
    "SEEDS_PER_PIT",
    "STORE",
    "BoardState",
    "CaptureEvent",
    "MoveOutcome",
    "MoveRecord",
    "PendingEffect",
    "PowerCard",
    "PowerCardType",
    "RulesConfig",
    "SowStep",
    "apply_move",
    "default_power_cards",
    "opponent_of",
    "CongkakEngine",
    "GameConfig",
    "MatchResult",
    "deserialize_fen",
    "serialize_fen",
    "state_key",
]
