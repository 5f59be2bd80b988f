from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from congkak.agent import NO_MOVE, CongkakAI, Difficulty
from congkak.game.engine import CongkakEngine, GameConfig, MatchResult


logger = logging.getLogger(__name__)


class AIInvariantError(RuntimeError):
    """The AI had no playable move while the engine said the game was on."""


@dataclass
class ArenaConfig:
    games: int = 10
    difficulty_a: Difficulty = Difficulty.HARD
    difficulty_b: Difficulty = Difficulty.MEDIUM
    mode: str = "ai"
    depth: int = 4
    seed: Optional[int] = None
    max_turns: int = 1000


def play_game(ai_first: CongkakAI, ai_second: CongkakAI, cfg: ArenaConfig) -> MatchResult:
    """Drive one match between two AIs; ai_first sits in seat 0."""
    engine = CongkakEngine(GameConfig(player_ids=("seat0", "seat1"), mode=cfg.mode))
    seats = (ai_first, ai_second)

    while not engine.is_game_over():
        if engine.get_state().turn_count >= cfg.max_turns:
            logger.warning("Match stopped after %d turns without finishing", cfg.max_turns)
            break
        ai = seats[engine.get_current_player()]
        card = ai.should_use_power_card(engine)
        if card is not None:
            engine.use_power_card(card)
        move = ai.get_best_move(engine)
        if move == NO_MOVE:
            raise AIInvariantError(
                f"No move for player {engine.get_current_player()} in a running game"
            )
        if not engine.make_move(move):
            raise AIInvariantError(f"Engine rejected AI move {move}")

    return engine.end()


def arena(cfg: ArenaConfig) -> Tuple[int, int, int, float]:
    """Play matches alternating seats; return (wins, draws, losses, win_rate) for side A."""
    wins = draws = losses = 0
    for i in range(cfg.games):
        seed = None if cfg.seed is None else cfg.seed + i
        ai_a = CongkakAI(cfg.difficulty_a, seed=seed, depth=cfg.depth)
        ai_b = CongkakAI(cfg.difficulty_b, seed=None if seed is None else seed + 10_000, depth=cfg.depth)
        if i % 2 == 0:
            result = play_game(ai_a, ai_b, cfg)
            a_id = "seat0"
        else:
            result = play_game(ai_b, ai_a, cfg)
            a_id = "seat1"

        if result.is_draw:
            draws += 1
        elif result.winner_id == a_id:
            wins += 1
        else:
            losses += 1
        logger.info(
            "Game %d/%d: scores %s, A record %d-%d-%d",
            i + 1, cfg.games, result.scores, wins, draws, losses,
        )

    win_rate = (wins + 0.5 * draws) / max(1, cfg.games)
    return wins, draws, losses, win_rate
