"""
Position serialization and hashing for Congkak.

Positions round-trip through a compact FEN-like string so a driver or the
command-line agent can hand a board to the AI without sharing objects.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .rules import NUM_PITS, PLAYER_ONE, PLAYER_TWO, BoardState, PowerCard, default_power_cards


_CARD_CATALOGUE: Dict[str, PowerCard] = {c.id: c for c in default_power_cards()}


def state_key(board: BoardState) -> Tuple:
    """Hashable key of both pit rows, both stores and the side to move.

    Energy, combo and cards are left out, so positions that differ only in
    those counters share a key.
    """
    return (
        tuple(board.pits[PLAYER_ONE]),
        tuple(board.pits[PLAYER_TWO]),
        tuple(board.stores),
        board.current_player,
    )


def _cards_field(cards: List[PowerCard]) -> str:
    if not cards:
        return "-"
    return "+".join(c.id + ("*" if c.used else "") for c in cards)


def _parse_cards(text: str) -> List[PowerCard]:
    if text == "-":
        return []
    cards = []
    for token in text.split("+"):
        used = token.endswith("*")
        card_id = token.rstrip("*")
        template = _CARD_CATALOGUE.get(card_id)
        if template is None:
            raise ValueError(f"Unknown power card {card_id!r}")
        cards.append(
            PowerCard(template.id, template.type, template.name, template.description, template.cost, used)
        )
    return cards


def serialize_fen(board: BoardState) -> str:
    """One-line Congkak position: side to move, pits, stores, energy, combo, cards, turn.

    Format: P|p0_pits,p1_pits|st0,st1|en0,en1|co0,co1|cards0,cards1|turn
      pits are dash-separated counts; cards are +-joined ids, * marks used,
      - marks an empty hand
    """
    parts = [
        str(board.current_player),
        ",".join("-".join(str(x) for x in board.pits[p]) for p in (PLAYER_ONE, PLAYER_TWO)),
        f"{board.stores[PLAYER_ONE]},{board.stores[PLAYER_TWO]}",
        f"{board.energy[PLAYER_ONE]},{board.energy[PLAYER_TWO]}",
        f"{board.combo[PLAYER_ONE]},{board.combo[PLAYER_TWO]}",
        ",".join(_cards_field(board.power_cards[p]) for p in (PLAYER_ONE, PLAYER_TWO)),
        str(board.turn_count),
    ]
    return "|".join(parts)


def deserialize_fen(s: str, num_pits: int = NUM_PITS) -> BoardState:
    try:
        side, pits_s, stores_s, energy_s, combo_s, cards_s, turn_s = s.strip().split("|")
        p0_pits_s, p1_pits_s = pits_s.split(",")
        p0_pits = [int(x) for x in p0_pits_s.split("-")]
        p1_pits = [int(x) for x in p1_pits_s.split("-")]
        st0, st1 = (int(x) for x in stores_s.split(","))
        en0, en1 = (int(x) for x in energy_s.split(","))
        co0, co1 = (int(x) for x in combo_s.split(","))
        cards0_s, cards1_s = cards_s.split(",")
        player = int(side)
        turn = int(turn_s)
    except ValueError as exc:
        raise ValueError(f"Malformed position string {s!r}: {exc}") from exc

    if player not in (PLAYER_ONE, PLAYER_TWO):
        raise ValueError(f"Malformed position string {s!r}: bad player {player}")
    if len(p0_pits) != num_pits or len(p1_pits) != num_pits:
        raise ValueError(f"Malformed position string {s!r}: rows must have {num_pits} pits")
    if min(p0_pits + p1_pits + [st0, st1, en0, en1, co0, co1]) < 0:
        raise ValueError(f"Malformed position string {s!r}: negative count")

    board = BoardState(
        pits=[p0_pits, p1_pits],
        stores=[st0, st1],
        current_player=player,
        energy=[en0, en1],
        combo=[co0, co1],
        power_cards=[_parse_cards(cards0_s), _parse_cards(cards1_s)],
        turn_count=turn,
    )
    board.game_over = board.side_empty(PLAYER_ONE) or board.side_empty(PLAYER_TWO)
    return board
