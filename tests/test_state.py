import logging

import numpy as np
import pytest

from plate_push_rl.game import (
    EMPTY_BLOCK,
    LEVELS,
    Block,
    HistoryStack,
    LevelDefinition,
    get_level,
    level_from_text,
    parse_level,
)
from plate_push_rl.game.grid import PLANE_EXIT, PLANE_HEAVY, PLANE_LIGHT, PLANE_PLAYER, PLANE_WALL
from plate_push_rl.game.levels import DEFAULT_PLAYER_START, normalize_rows


def test_set_block_keeps_map_sparse(make_state):
    state = make_state("#####\n#P..#\n#####")

    state.set_block((2, 1), Block(light_count=2))
    assert state.blocks == {(2, 1): Block(light_count=2)}

    state.set_block((2, 1), Block())
    assert state.blocks == {}
    assert state.block_at((2, 1)) == EMPTY_BLOCK

    # Clearing an already empty tile is a no-op
    state.set_block((3, 1), EMPTY_BLOCK)
    assert state.blocks == {}


def test_clone_is_independent(make_state):
    state = make_state("######\n#PLp.#\n#...E#\n######")
    copy = state.clone()

    state.walls.add((2, 2))
    state.plates.discard((3, 1))
    state.set_block((2, 1), EMPTY_BLOCK)
    state.player = (2, 2)

    assert (2, 2) not in copy.walls
    assert (3, 1) in copy.plates
    assert copy.block_at((2, 1)).light_count == 1
    assert copy.player == (1, 1)


def test_to_planes_marks_entities(make_state):
    state = make_state("######\n#PLH.#\n#...E#\n######")
    state.set_block((2, 1), Block(light_count=2))
    planes = state.to_planes()

    assert planes.shape == (6, 4, 6)
    assert planes.dtype == np.int8
    assert planes[PLANE_WALL, 0, 0] == 1
    assert planes[PLANE_PLAYER, 1, 1] == 1
    assert planes[PLANE_LIGHT, 1, 2] == 2
    assert planes[PLANE_HEAVY, 1, 3] == 1
    assert planes[PLANE_EXIT, 2, 4] == 1
    assert planes[PLANE_PLAYER].sum() == 1


def test_history_push_copies_state(make_state):
    state = make_state("#####\n#PL.#\n#####")
    history = HistoryStack()
    history.push(state)

    state.player = (2, 1)
    state.set_block((2, 1), EMPTY_BLOCK)

    restored = history.pop()
    assert restored.player == (1, 1)
    assert restored.block_at((2, 1)).light_count == 1
    assert restored is not state


def test_history_evicts_oldest(make_state):
    state = make_state("#######\n#P....#\n#######")
    history = HistoryStack(max_length=3)
    for x in range(1, 6):
        state.player = (x, 1)
        history.push(state)

    assert len(history) == 3
    assert [history.pop().player for _ in range(3)] == [(5, 1), (4, 1), (3, 1)]
    assert history.pop() is None
    assert not history


def test_history_clear(make_state):
    history = HistoryStack()
    history.push(make_state("P."))
    history.clear()

    assert len(history) == 0
    assert history.pop() is None


def test_history_rejects_zero_length():
    with pytest.raises(ValueError):
        HistoryStack(max_length=0)


def test_parse_level_reads_every_symbol():
    state = parse_level(LEVELS[0])

    assert (state.width, state.height) == (13, 6)
    assert state.player == (1, 1)
    assert state.exit == (11, 1)
    assert state.plates == {(3, 3)}
    assert state.block_at((6, 3)) == Block(heavy=True)
    assert state.block_at((9, 4)) == Block(light_count=1)
    assert (0, 0) in state.walls
    assert not state.won


def test_ragged_rows_are_padded_with_walls():
    assert normalize_rows(["###", "#P", "####"]) == ["###" + "#", "#P##", "####"]

    # Level 6 has a longer border row than its inner rows
    state = parse_level(get_level(5))
    assert state.width == 16
    assert (14, 1) in state.walls
    assert (15, 3) in state.walls


def test_missing_player_falls_back_to_default(caplog):
    definition = LevelDefinition(name="nobody", rows=("#####", "#..E#", "#####"))
    with caplog.at_level(logging.WARNING):
        state = parse_level(definition)

    assert state.player == DEFAULT_PLAYER_START
    assert "no player start" in caplog.text


def test_unknown_symbols_are_floor(make_state):
    state = make_state("#####\n#P?E#\n#####")

    assert (2, 1) not in state.walls
    assert (2, 1) not in state.blocks


def test_empty_level_is_rejected():
    with pytest.raises(ValueError):
        parse_level(LevelDefinition(name="empty", rows=()))


def test_get_level_rejects_bad_index():
    with pytest.raises(IndexError):
        get_level(len(LEVELS))
    with pytest.raises(IndexError):
        get_level(-1)


@pytest.mark.parametrize("index", range(len(LEVELS)))
def test_builtin_levels_are_well_formed(index):
    state = parse_level(get_level(index))

    assert state.exit is not None
    assert state.plates
    assert state.player not in state.walls
    assert not state.walls & set(state.blocks)
    assert not state.walls & state.plates
    assert state.exit not in state.walls


def test_level_text_keeps_leading_floor_columns():
    definition = level_from_text(
        "indented",
        """
        #####
        #P.E#
          ..#
        #####
        """,
    )

    assert definition.rows == ("#####", "#P.E#", "  ..#", "#####")
    state = parse_level(definition)
    assert (0, 2) not in state.walls
    assert (2, 2) not in state.walls
    assert (4, 2) in state.walls
