from __future__ import annotations

import argparse
import json
import logging
import random
from enum import Enum
from typing import Optional

from congkak.game.engine import CongkakEngine
from congkak.game.encoding import deserialize_fen
from congkak.game.rules import PowerCardType, opponent_of
from congkak.minimax.search import AlphaBetaSearch


logger = logging.getLogger(__name__)

# Returned by get_best_move when there is nothing to play. A driver seeing it
# while the game is still running has hit a rules/valid-moves desync.
NO_MOVE: int = -1


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CongkakAI:
    """Opponent AI: random on easy, one-ply greedy on medium, alpha-beta on hard.

    The only state kept between calls is the configuration and a per-instance
    RNG, so a fixed ``seed`` makes every decision reproducible.
    """

    extra_turn_bonus = 15.0
    combo_bonus = 3.0
    energy_bonus = 2.0
    energy_bonus_threshold = 60
    seed_weight = 0.5
    double_drop_min_seeds = 10
    skip_turn_deficit = 10
    reverse_chance = 0.15

    def __init__(
        self,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        seed: Optional[int] = None,
        depth: int = 4,
        jitter: float = 2.0,
    ) -> None:
        self.difficulty = Difficulty(difficulty)
        self.rng = random.Random(seed)
        self.jitter = jitter
        self.search = AlphaBetaSearch(depth=depth)

    def get_best_move(self, engine: CongkakEngine) -> int:
        valid_moves = engine.get_valid_moves()
        if not valid_moves:
            return NO_MOVE
        if self.difficulty is Difficulty.EASY:
            return self.random_move(engine)
        if self.difficulty is Difficulty.MEDIUM:
            return self.greedy_move(engine)
        return self.minimax_move(engine)

    def should_use_power_card(self, engine: CongkakEngine) -> Optional[str]:
        """Pick a card id to activate before moving, or None."""
        if self.difficulty is Difficulty.EASY or engine.is_game_over():
            return None
        if engine.pending_effect is not None:
            return None

        state = engine.get_state()
        me = state.current_player
        energy = state.energy[me]
        hard = self.difficulty is Difficulty.HARD

        for card in state.power_cards[me]:
            if card.used or energy < card.cost:
                continue
            if card.type is PowerCardType.SKIP_TURN:
                if hard and state.stores[opponent_of(me)] > state.stores[me] + self.skip_turn_deficit:
                    return card.id
            elif card.type is PowerCardType.DOUBLE_DROP:
                moves = engine.get_valid_moves()
                if moves and max(state.pits[me][m] for m in moves) >= self.double_drop_min_seeds:
                    return card.id
            elif card.type is PowerCardType.REVERSE:
                if hard and self.rng.random() < self.reverse_chance:
                    return card.id
        return None

    # ------------------------------ Strategies ----------------------------- #
    def random_move(self, engine: CongkakEngine) -> int:
        valid_moves = engine.get_valid_moves()
        if not valid_moves:
            return NO_MOVE
        return self.rng.choice(valid_moves)

    def greedy_move(self, engine: CongkakEngine) -> int:
        best_move = NO_MOVE
        best_score = float("-inf")
        for move in engine.get_valid_moves():
            score = self.evaluate_move(engine, move)
            if score > best_score:
                best_score = score
                best_move = move
        return best_move

    def minimax_move(self, engine: CongkakEngine) -> int:
        move, value = self.search.search(engine)
        if move is None:
            return NO_MOVE
        logger.debug("Minimax chose pit %d with value %.2f", move, value)
        return move

    def evaluate_move(self, engine: CongkakEngine, pit_index: int) -> float:
        """One-ply heuristic score of sowing from ``pit_index``."""
        state = engine.get_state()
        me = state.current_player
        seeds = state.pits[me][pit_index]

        trial = engine.clone()
        trial.make_move(pit_index)
        after = trial.get_state()

        score = 0.0
        if after.sowing_animation:
            last = after.sowing_animation[-1]
            if last.is_store and last.side == me and after.current_player == me:
                score += self.extra_turn_bonus
        if len(after.capture_history) > len(state.capture_history):
            capture = after.capture_history[-1]
            score += capture.seeds_taken * state.combo_multiplier[me]
        if state.combo[me] > 0:
            score += state.combo[me] * self.combo_bonus
        if state.energy[me] > self.energy_bonus_threshold:
            score += self.energy_bonus
        score += seeds * self.seed_weight
        if self.jitter > 0:
            score += self.rng.random() * self.jitter
        return score


def choose_move(fen: str, difficulty: str = "medium", seed: Optional[int] = None, depth: int = 4) -> dict:
    engine = CongkakEngine.from_state(deserialize_fen(fen))
    ai = CongkakAI(difficulty, seed=seed, depth=depth)
    card = ai.should_use_power_card(engine)
    if card is not None:
        engine.use_power_card(card)
    return {"action": ai.get_best_move(engine), "card": card}


def main():
    parser = argparse.ArgumentParser(description="Congkak opponent AI")
    parser.add_argument("fen", type=str, help="FEN-like position string")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="medium")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed")
    parser.add_argument("--depth", type=int, default=4, help="Minimax depth (hard only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    print(json.dumps(choose_move(args.fen, args.difficulty, args.seed, args.depth)))


if __name__ == "__main__":
    main()
