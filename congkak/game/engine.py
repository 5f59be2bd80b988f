"""
Stateful Congkak engine.

``CongkakEngine`` owns one match. It is mutated only through ``make_move``
and ``use_power_card``; both validate first and return ``False`` without
touching state when a precondition fails. Everything else is a query, and
``get_state`` hands out an independent deep copy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .rules import (
    GAME_MODES,
    BoardState,
    MoveRecord,
    PendingEffect,
    RulesConfig,
    SowStep,
    apply_move,
)


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    player_ids: Tuple[str, str] = ("player", "ai")
    mode: str = "ai"
    rules: RulesConfig = field(default_factory=RulesConfig)

    def validate(self) -> None:
        if len(self.player_ids) != 2:
            raise ValueError(f"Congkak needs exactly two players, got {len(self.player_ids)}")
        if self.mode not in GAME_MODES:
            raise ValueError(f"Unknown game mode {self.mode!r}; expected one of {GAME_MODES}")


@dataclass(frozen=True)
class MatchResult:
    winner_id: Optional[str]
    scores: Dict[str, int]
    is_draw: bool
    turns: int


class CongkakEngine:
    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.initialize(config or GameConfig())

    # ------------------------------ Lifecycle ------------------------------ #
    def initialize(self, config: GameConfig) -> None:
        config.validate()
        self.config = config
        self.rules = config.rules
        self._board = BoardState.initial(config.mode, config.rules)
        self._pending: Optional[PendingEffect] = None

    def reset(self) -> None:
        """Start a new match with the same players, mode and rules."""
        self.initialize(self.config)

    @classmethod
    def from_state(cls, board: BoardState, config: Optional[GameConfig] = None) -> "CongkakEngine":
        """Build an engine positioned at a copy of ``board``."""
        engine = cls(config)
        num_pits = engine.rules.num_pits
        if any(len(row) != num_pits for row in board.pits):
            raise ValueError(f"Board rows must have {num_pits} pits to match the rules")
        engine._board = board.copy()
        return engine

    def clone(self) -> "CongkakEngine":
        """Independent engine with identical state, pending effect included."""
        engine = CongkakEngine.from_state(self._board, self.config)
        engine._pending = self._pending
        return engine

    # ------------------------------- Commands ------------------------------ #
    def use_power_card(self, card_id: str) -> bool:
        board = self._board
        player = board.current_player
        if board.game_over:
            logger.debug("Card %s rejected: game is over", card_id)
            return False
        if self._pending is not None:
            logger.debug("Card %s rejected: %s already pending", card_id, self._pending.card_id)
            return False
        card = board.find_card(player, card_id)
        if card is None or card.used:
            logger.debug("Card %s rejected: not available to player %d", card_id, player)
            return False
        if board.energy[player] < card.cost:
            logger.debug(
                "Card %s rejected: player %d has %d energy, needs %d",
                card_id, player, board.energy[player], card.cost,
            )
            return False

        board.energy[player] -= card.cost
        card.used = True
        self._pending = PendingEffect(card.type, card.id)
        return True

    def make_move(self, pit_index: int) -> bool:
        board = self._board
        player = board.current_player
        if board.game_over:
            logger.debug("Move %s rejected: game is over", pit_index)
            return False
        if not isinstance(pit_index, int) or not 0 <= pit_index < self.rules.num_pits:
            logger.debug("Move %s rejected: out of range", pit_index)
            return False
        if board.pits[player][pit_index] == 0:
            logger.debug("Move %d rejected: pit is empty for player %d", pit_index, player)
            return False

        effect, self._pending = self._pending, None
        outcome = apply_move(board, pit_index, effect, self.rules)
        self._board = outcome.board
        if outcome.board.game_over:
            logger.debug("Match over after turn %d: stores %s", outcome.board.turn_count, outcome.board.stores)
        return True

    # -------------------------------- Queries ------------------------------ #
    def get_state(self) -> BoardState:
        return self._board.copy()

    def get_valid_moves(self) -> List[int]:
        return self._board.legal_moves()

    def get_current_player(self) -> int:
        return self._board.current_player

    def is_game_over(self) -> bool:
        return self._board.game_over

    def calculate_score(self) -> Dict[str, int]:
        return {pid: self._board.stores[i] for i, pid in enumerate(self.config.player_ids)}

    def get_move_history(self) -> List[MoveRecord]:
        return list(self._board.move_history)

    def get_energy(self, player: int) -> int:
        return self._board.energy[player]

    def get_combo(self, player: int) -> int:
        return self._board.combo[player]

    def get_combo_multiplier(self, player: int) -> float:
        return self._board.combo_multiplier[player]

    @property
    def pending_effect(self) -> Optional[PendingEffect]:
        return self._pending

    @property
    def last_trace(self) -> Tuple[SowStep, ...]:
        """Step-by-step trace of the most recent move, for presentation."""
        return self._board.sowing_animation

    def end(self) -> MatchResult:
        """Close the match and summarize it from the current stores.

        Seeds still in the pits stay there and are not counted. After this,
        ``make_move`` and ``use_power_card`` are rejected.
        """
        self._board.game_over = True
        self._pending = None
        scores = self.calculate_score()
        best = max(scores.values())
        winners = [pid for pid, score in scores.items() if score == best]
        is_draw = len(winners) > 1
        return MatchResult(
            winner_id=None if is_draw else winners[0],
            scores=scores,
            is_draw=is_draw,
            turns=self._board.turn_count,
        )
