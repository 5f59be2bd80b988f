"""
Depth-limited minimax with alpha-beta pruning for Congkak.

The search only talks to ``CongkakEngine`` through its public surface. Every
explored child is a fresh ``clone()``, so exploration never touches the
engine it was given. A ply that leaves the same player to move (extra turn)
does not consume depth, up to ``max_extensions`` such plies per line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from congkak.game.engine import CongkakEngine
from congkak.game.rules import opponent_of


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvalWeights:
    store: float = 1.0
    combo: float = 2.0
    energy: float = 0.05


def evaluate_board(engine: CongkakEngine, seat: int, weights: EvalWeights = EvalWeights()) -> float:
    """Static value of a position from ``seat``'s point of view."""
    opp = opponent_of(seat)
    state = engine.get_state()
    score = weights.store * (state.stores[seat] - state.stores[opp])
    score += weights.combo * (state.combo[seat] - state.combo[opp])
    score += weights.energy * (state.energy[seat] - state.energy[opp])
    return score


class AlphaBetaSearch:
    def __init__(
        self,
        depth: int = 4,
        max_extensions: int = 4,
        weights: EvalWeights = EvalWeights(),
    ) -> None:
        if depth < 1:
            raise ValueError("Search depth must be at least 1")
        self.depth = depth
        self.max_extensions = max_extensions
        self.weights = weights
        self.nodes = 0

    # ----------------------------- Public API ------------------------------ #
    def search(self, engine: CongkakEngine) -> Tuple[Optional[int], float]:
        """Return (best move, its value) for the player to move in ``engine``.

        The best move is None when there is nothing to play.
        """
        self.nodes = 0
        seat = engine.get_current_player()
        moves = engine.get_valid_moves()
        if not moves:
            return None, evaluate_board(engine, seat, self.weights)

        best_move: Optional[int] = None
        best_value = -math.inf
        alpha, beta = -math.inf, math.inf
        for move in moves:
            child = engine.clone()
            child.make_move(move)
            value = self._child_value(child, seat, mover=seat, depth=self.depth, extensions=0, alpha=alpha, beta=beta)
            if value > best_value:
                best_value = value
                best_move = move
            alpha = max(alpha, value)

        logger.debug(
            "Alpha-beta depth %d picked pit %s (value %.2f) after %d nodes",
            self.depth, best_move, best_value, self.nodes,
        )
        return best_move, best_value

    # ---------------------------- Core internals --------------------------- #
    def _child_value(
        self,
        child: CongkakEngine,
        seat: int,
        mover: int,
        depth: int,
        extensions: int,
        alpha: float,
        beta: float,
    ) -> float:
        # Extra turns are free until max_extensions is reached.
        if child.get_current_player() == mover and extensions < self.max_extensions:
            return self._minimax(child, seat, depth, extensions + 1, alpha, beta)
        return self._minimax(child, seat, depth - 1, extensions, alpha, beta)

    def _minimax(
        self,
        engine: CongkakEngine,
        seat: int,
        depth: int,
        extensions: int,
        alpha: float,
        beta: float,
    ) -> float:
        self.nodes += 1
        if depth <= 0 or engine.is_game_over():
            return evaluate_board(engine, seat, self.weights)

        moves = engine.get_valid_moves()
        if not moves:
            return evaluate_board(engine, seat, self.weights)

        mover = engine.get_current_player()
        if mover == seat:
            value = -math.inf
            for move in moves:
                child = engine.clone()
                child.make_move(move)
                value = max(value, self._child_value(child, seat, mover, depth, extensions, alpha, beta))
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value

        value = math.inf
        for move in moves:
            child = engine.clone()
            child.make_move(move)
            value = min(value, self._child_value(child, seat, mover, depth, extensions, alpha, beta))
            beta = min(beta, value)
            if beta <= alpha:
                break
        return value
