"""
Core rules for Congkak.

This module implements:
- Board state, power cards and the per-turn trace types
- The sowing walk around the ring of pits and the mover's store
- Relay sowing ("running") when the last seed lands in a non-empty pit
- Captures ("menembak") from the mirror pit, scaled by the combo multiplier
- Energy and combo bookkeeping and the end-of-game sweep

All indices are 0-based. Each side has ``num_pits`` pits numbered in sowing
order; the mover's store sits after their last pit. ``apply_move`` is pure:
it returns a new board and never mutates its input.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)

PLAYER_ONE: int = 0
PLAYER_TWO: int = 1

NUM_PITS: int = 7
SEEDS_PER_PIT: int = 7

# Pit index used by SowStep for a store drop.
STORE: int = -1

GAME_MODES: Tuple[str, ...] = ("solo", "ai", "ranked", "casual")


def opponent_of(player: int) -> int:
    return PLAYER_TWO if player == PLAYER_ONE else PLAYER_ONE


@dataclass(frozen=True)
class RulesConfig:
    num_pits: int = NUM_PITS
    seeds_per_pit: int = SEEDS_PER_PIT
    max_energy: int = 100
    energy_per_move: int = 8
    energy_per_capture: int = 15
    energy_regen_per_turn: int = 5
    combo_decay_turns: int = 2
    combo_step: float = 0.25
    max_sow_steps: int = 500

    @property
    def total_seeds(self) -> int:
        return 2 * self.num_pits * self.seeds_per_pit


DEFAULT_RULES = RulesConfig()


# ------------------------------ Power cards ------------------------------ #
class PowerCardType(str, Enum):
    SKIP_TURN = "skip_turn"
    DOUBLE_DROP = "double_drop"
    REVERSE = "reverse"


@dataclass
class PowerCard:
    id: str
    type: PowerCardType
    name: str
    description: str
    cost: int
    used: bool = False


def default_power_cards() -> List[PowerCard]:
    return [
        PowerCard("skip_1", PowerCardType.SKIP_TURN, "Skip Turn", "Keep the turn after this move", 35),
        PowerCard("double_1", PowerCardType.DOUBLE_DROP, "Double Drop", "Drop 2 seeds per pit instead of 1", 25),
        PowerCard("reverse_1", PowerCardType.REVERSE, "Reverse", "Sow seeds in reverse direction", 20),
    ]


@dataclass(frozen=True)
class PendingEffect:
    """An activated power card waiting to modify exactly one move."""

    kind: PowerCardType
    card_id: str

    @property
    def reverse(self) -> bool:
        return self.kind is PowerCardType.REVERSE

    @property
    def double_drop(self) -> bool:
        return self.kind is PowerCardType.DOUBLE_DROP

    @property
    def keeps_turn(self) -> bool:
        return self.kind is PowerCardType.SKIP_TURN


# ------------------------------ Log records ------------------------------ #
@dataclass(frozen=True)
class CaptureEvent:
    turn: int
    player: int
    pit: int
    amount: int
    combo_level: int
    seeds_taken: int = 0


@dataclass(frozen=True)
class MoveRecord:
    player: int
    pit: int
    captured: int


@dataclass(frozen=True)
class SowStep:
    """One visible update of the sowing walk, for presentation only."""

    side: int
    pit: int
    seeds: int
    is_store: bool = False
    is_capture: bool = False
    capture_amount: int = 0
    is_pickup: bool = False


# ------------------------------- Board state ----------------------------- #
@dataclass
class BoardState:
    """Mutable board state for Congkak.

    Attributes:
        pits: 2×P seed counts. pits[p][i] is player p's i-th pit in sowing order.
        stores: [store_0, store_1].
        current_player: PLAYER_ONE or PLAYER_TWO.
        energy: per-player energy in [0, max_energy].
        combo: per-player capture streak; combo_multiplier is derived from it.
        power_cards: per-player card lists (empty in casual mode).
        capture_history: append-only log of captures.
        move_history: append-only log of moves.
        sowing_animation: trace of the last move.
        last_combo_turn: turn of each player's most recent capture.
        multiplier_bonus: seeds credited by the combo multiplier on top of the
            physical seeds captured.
    """

    pits: List[List[int]]
    stores: List[int]
    current_player: int = PLAYER_ONE
    energy: List[int] = field(default_factory=lambda: [100, 100])
    combo: List[int] = field(default_factory=lambda: [0, 0])
    power_cards: List[List[PowerCard]] = field(default_factory=lambda: [[], []])
    capture_history: Tuple[CaptureEvent, ...] = ()
    move_history: Tuple[MoveRecord, ...] = ()
    turn_count: int = 0
    last_move: Optional[int] = None
    last_capture_amount: int = 0
    sowing_animation: Tuple[SowStep, ...] = ()
    last_combo_turn: List[int] = field(default_factory=lambda: [0, 0])
    multiplier_bonus: List[int] = field(default_factory=lambda: [0, 0])
    game_over: bool = False
    combo_step: float = DEFAULT_RULES.combo_step

    # ------------------------- Construction helpers ------------------------- #
    @staticmethod
    def initial(mode: str = "ai", rules: RulesConfig = DEFAULT_RULES) -> "BoardState":
        with_cards = mode != "casual"
        return BoardState(
            pits=[[rules.seeds_per_pit] * rules.num_pits, [rules.seeds_per_pit] * rules.num_pits],
            stores=[0, 0],
            energy=[rules.max_energy, rules.max_energy],
            power_cards=[
                default_power_cards() if with_cards else [],
                default_power_cards() if with_cards else [],
            ],
            combo_step=rules.combo_step,
        )

    def copy(self) -> "BoardState":
        """Deep copy. Log tuples hold frozen records and are shared."""
        return replace(
            self,
            pits=[self.pits[0][:], self.pits[1][:]],
            stores=self.stores[:],
            energy=self.energy[:],
            combo=self.combo[:],
            power_cards=[[replace(c) for c in cards] for cards in self.power_cards],
            last_combo_turn=self.last_combo_turn[:],
            multiplier_bonus=self.multiplier_bonus[:],
        )

    # ----------------------------- Query methods ---------------------------- #
    @property
    def combo_multiplier(self) -> List[float]:
        return [1 + c * self.combo_step for c in self.combo]

    def legal_moves(self) -> List[int]:
        if self.game_over:
            return []
        return [i for i, seeds in enumerate(self.pits[self.current_player]) if seeds > 0]

    def side_empty(self, player: int) -> bool:
        return all(seeds == 0 for seeds in self.pits[player])

    def seed_count(self) -> int:
        """Physical seeds on the board, net of multiplier bonus."""
        return sum(self.pits[0]) + sum(self.pits[1]) + sum(self.stores) - sum(self.multiplier_bonus)

    def find_card(self, player: int, card_id: str) -> Optional[PowerCard]:
        for card in self.power_cards[player]:
            if card.id == card_id:
                return card
        return None


@dataclass
class MoveOutcome:
    board: BoardState
    steps: Tuple[SowStep, ...]
    captured: int = 0
    extra_turn: bool = False
    aborted: bool = False


# --------------------------- Move application --------------------------- #
def apply_move(
    board: BoardState,
    pit_index: int,
    effect: Optional[PendingEffect] = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> MoveOutcome:
    """Apply a legal move and return the outcome with the next board.

    Sowing rules:
    - Seeds go one per pit (two with double drop) around the ring: own pits,
      own store, opponent pits, then back. The opponent's store is skipped.
    - Reverse walks the ring backwards; only the mover's store is credited.
    - If the hand empties in a pit that already held seeds, those seeds are
      picked up and sowing continues (relay).
    - If the hand empties in the mover's own empty pit and the mirror pit has
      seeds, both are captured into the mover's store, scaled by the combo
      multiplier.
    - Ending in the mover's store, or a skip-turn effect, keeps the turn.
    """
    num_pits = rules.num_pits
    player = board.current_player
    opp = opponent_of(player)

    if board.game_over:
        raise ValueError("Illegal move: game is over")
    if not 0 <= pit_index < num_pits:
        raise ValueError(f"Illegal move: pit {pit_index} out of range")
    if board.pits[player][pit_index] <= 0:
        raise ValueError("Illegal move: selected pit is empty")

    nb = board.copy()
    pits = nb.pits
    reverse = effect is not None and effect.reverse
    double_drop = effect is not None and effect.double_drop
    direction = -1 if reverse else 1
    wrap_index = num_pits - 1 if reverse else 0

    nb.energy[player] = max(0, nb.energy[player] - rules.energy_per_move)

    seeds = pits[player][pit_index]
    pits[player][pit_index] = 0
    hand_origin = (player, pit_index)

    side = player
    idx = pit_index + direction
    captured = 0
    last_in_store = False
    aborted = False
    steps: List[SowStep] = []
    ring_steps = 0

    while seeds > 0:
        if ring_steps >= rules.max_sow_steps:
            logger.warning(
                "Sowing exceeded %d ring steps; ending turn %d for player %d",
                rules.max_sow_steps, nb.turn_count, player,
            )
            origin_side, origin_pit = hand_origin
            pits[origin_side][origin_pit] += seeds
            steps.append(SowStep(origin_side, origin_pit, pits[origin_side][origin_pit]))
            seeds = 0
            last_in_store = False
            aborted = True
            break
        ring_steps += 1
        last_in_store = False

        # End of a row: the mover's store, or a jump to the other row.
        if idx < 0 or idx >= num_pits:
            if side == player:
                nb.stores[player] += 1
                seeds -= 1
                steps.append(SowStep(player, STORE, nb.stores[player], is_store=True))
                last_in_store = seeds == 0
            side = opponent_of(side)
            idx = wrap_index
            continue

        drop = 2 if double_drop and seeds >= 2 else 1
        pits[side][idx] += drop
        seeds -= drop
        steps.append(SowStep(side, idx, pits[side][idx]))

        if seeds == 0:
            if pits[side][idx] > drop:
                seeds = pits[side][idx]
                pits[side][idx] = 0
                hand_origin = (side, idx)
                steps.append(SowStep(side, idx, 0, is_pickup=True))
            elif side == player:
                mirror = num_pits - 1 - idx
                taken = pits[opp][mirror]
                if taken > 0:
                    raw = taken + drop
                    amount = int(math.floor(raw * nb.combo_multiplier[player]))
                    nb.stores[player] += amount
                    nb.multiplier_bonus[player] += amount - raw
                    pits[opp][mirror] = 0
                    pits[side][idx] = 0
                    captured = amount

                    nb.energy[player] = min(rules.max_energy, nb.energy[player] + rules.energy_per_capture)
                    nb.combo[player] += 1
                    nb.last_combo_turn[player] = nb.turn_count
                    nb.capture_history = nb.capture_history + (
                        CaptureEvent(
                            turn=nb.turn_count,
                            player=player,
                            pit=idx,
                            amount=amount,
                            combo_level=nb.combo[player],
                            seeds_taken=taken,
                        ),
                    )
                    nb.last_capture_amount = amount
                    steps[-1] = replace(steps[-1], is_capture=True, capture_amount=amount)
            # An empty pit on the opponent's side ends the turn.

        if seeds > 0:
            idx += direction

    if captured == 0:
        since = nb.turn_count - nb.last_combo_turn[player]
        if since >= rules.combo_decay_turns and nb.combo[player] > 0:
            nb.combo[player] -= 1

    nb.energy[player] = min(rules.max_energy, nb.energy[player] + rules.energy_regen_per_turn)

    nb.move_history = nb.move_history + (MoveRecord(player, pit_index, captured),)
    nb.last_move = pit_index
    nb.turn_count += 1
    nb.sowing_animation = tuple(steps)

    extra_turn = False
    if nb.side_empty(PLAYER_ONE) or nb.side_empty(PLAYER_TWO):
        _collect_remaining(nb)
    elif last_in_store or (effect is not None and effect.keeps_turn):
        extra_turn = True
    else:
        nb.current_player = opp

    return MoveOutcome(
        board=nb,
        steps=nb.sowing_animation,
        captured=captured,
        extra_turn=extra_turn,
        aborted=aborted,
    )


def _collect_remaining(board: BoardState) -> None:
    """End the game: every seed left in a row goes to that row's owner."""
    for p in (PLAYER_ONE, PLAYER_TWO):
        board.stores[p] += sum(board.pits[p])
        board.pits[p] = [0] * len(board.pits[p])
    board.game_over = True
