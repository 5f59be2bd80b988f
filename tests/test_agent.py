import json
import sys

import pytest

from congkak.agent import NO_MOVE, CongkakAI, Difficulty, choose_move, main
from congkak.game import PLAYER_ONE, BoardState, CongkakEngine, default_power_cards
from congkak.game.encoding import serialize_fen


def engine_at(p0, p1, stores=(0, 0), player=PLAYER_ONE, cards=True, **kwargs):
    if cards:
        kwargs.setdefault("power_cards", [default_power_cards(), default_power_cards()])
    board = BoardState(pits=[list(p0), list(p1)], stores=list(stores), current_player=player, **kwargs)
    return CongkakEngine.from_state(board)


def test_easy_plays_random_valid_moves_and_no_cards():
    e = CongkakEngine()
    ai = CongkakAI("easy", seed=1)
    assert ai.difficulty is Difficulty.EASY
    for _ in range(10):
        assert ai.get_best_move(e) in e.get_valid_moves()
    assert ai.should_use_power_card(e) is None


def test_greedy_prefers_extra_turn():
    e = engine_at([0, 0, 0, 2, 0, 0, 1], [0, 0, 0, 0, 0, 0, 4])
    ai = CongkakAI(Difficulty.MEDIUM, jitter=0)
    assert ai.evaluate_move(e, 6) == 17.5
    assert ai.evaluate_move(e, 3) == 3.0
    assert ai.get_best_move(e) == 6


def test_greedy_prefers_capture():
    e = engine_at([1, 0, 0, 3, 0, 0, 0], [0, 0, 0, 0, 0, 9, 1])
    ai = CongkakAI("medium", jitter=0)
    assert ai.evaluate_move(e, 0) == 11.5
    assert ai.get_best_move(e) == 0


def test_evaluate_move_leaves_engine_alone():
    e = CongkakEngine()
    before = e.get_state()
    CongkakAI("medium", seed=2).evaluate_move(e, 3)
    assert e.get_state() == before


def test_seeded_ai_is_reproducible():
    e = CongkakEngine()
    a = [CongkakAI("medium", seed=5).get_best_move(e) for _ in range(3)]
    assert len(set(a)) == 1


def test_double_drop_chosen_for_big_pit():
    e = engine_at([12, 1, 1, 1, 1, 1, 1], [7] * 7)
    assert CongkakAI("medium").should_use_power_card(e) == "double_1"


def test_skip_turn_only_on_hard_when_behind():
    e = engine_at([1] * 7, [1] * 7, stores=(0, 20))
    assert CongkakAI("hard", seed=0).should_use_power_card(e) == "skip_1"
    assert CongkakAI("medium", seed=0).should_use_power_card(e) is None


def test_unaffordable_cards_are_ignored():
    e = engine_at([12, 1, 1, 1, 1, 1, 1], [1] * 7, stores=(0, 20), energy=[20, 100])
    ai = CongkakAI("hard", seed=0)
    ai.reverse_chance = 0.0
    assert ai.should_use_power_card(e) is None


def test_no_card_while_effect_pending():
    e = engine_at([12, 1, 1, 1, 1, 1, 1], [7] * 7)
    assert e.use_power_card("reverse_1")
    assert CongkakAI("hard", seed=0).should_use_power_card(e) is None


def test_hard_returns_valid_move():
    e = CongkakEngine()
    ai = CongkakAI("hard", depth=2)
    assert ai.get_best_move(e) in e.get_valid_moves()


def test_no_move_on_finished_game():
    e = engine_at([0, 0, 0, 0, 0, 0, 1], [0, 0, 1, 0, 0, 0, 0], cards=False)
    e.make_move(6)
    for level in Difficulty:
        assert CongkakAI(level, depth=1).get_best_move(e) == NO_MOVE


def test_choose_move_from_fen():
    fen = serialize_fen(BoardState.initial())
    result = choose_move(fen, "hard", seed=0, depth=2)
    assert 0 <= result["action"] <= 6
    assert result["card"] is None


def test_cli_prints_json(monkeypatch, capsys):
    fen = serialize_fen(BoardState.initial())
    monkeypatch.setattr(sys, "argv", ["congkak-agent", fen, "--difficulty", "easy", "--seed", "3"])
    main()
    out = json.loads(capsys.readouterr().out)
    assert 0 <= out["action"] <= 6
    assert out["card"] is None


def test_choose_move_rejects_short_rows():
    with pytest.raises(ValueError):
        choose_move("0|1-1-1-1-5,1-1-1-1-1|0,0|100,100|0,0|-,-|0", "medium", seed=0)
