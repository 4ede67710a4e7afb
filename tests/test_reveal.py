import pytest

from minefield.board import Board
from minefield.placement import FixedMinePlacer, MinePlacer
from minefield.reveal import cascade, reveal_single
from minefield.types import CellState


def revealed_set(board):
    return {(cell.row, cell.col) for cell in board.cells() if cell.state is CellState.REVEALED}


def test_reveal_single_numbered_cell(known_board):
    outcome = reveal_single(known_board, 1, 1)
    assert outcome.adjacent_mine_count == 3
    cell = known_board.cell_at(1, 1)
    assert cell.state is CellState.REVEALED
    assert cell.adjacent_mine_count == 3
    assert revealed_set(known_board) == {(1, 1)}


def test_reveal_single_rejects_mine(known_board):
    with pytest.raises(ValueError):
        reveal_single(known_board, 0, 0)
    assert known_board.cell_at(0, 0).state is CellState.HIDDEN


def test_cascade_on_empty_board_reveals_everything(empty_board):
    outcomes = cascade(empty_board, 2, 2)
    assert len(outcomes) == 25
    assert len(revealed_set(empty_board)) == 25
    assert all(outcome.adjacent_mine_count == 0 for outcome in outcomes)


def test_cascade_stops_at_numbered_border():
    board = Board(3, 5, 3)
    board.place_mines(FixedMinePlacer([(0, 2), (1, 2), (2, 2)]))
    cascade(board, 1, 0)
    assert revealed_set(board) == {(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)}
    assert board.cell_at(1, 1).adjacent_mine_count == 3
    assert all(board.cell_at(r, 4).state is CellState.HIDDEN for r in range(3))


def test_cascade_from_numbered_cell_reveals_only_it(known_board):
    outcomes = cascade(known_board, 1, 1)
    assert [(o.row, o.col) for o in outcomes] == [(1, 1)]


def test_cascade_is_idempotent(known_board):
    cascade(known_board, 8, 0)
    first = revealed_set(known_board)
    again = cascade(known_board, 8, 0)
    assert again == []
    assert revealed_set(known_board) == first
    assert known_board.revealed_count == len(first)


def test_cascade_never_reveals_mines():
    for seed in range(20):
        board = Board(16, 16, 40)
        board.place_mines(MinePlacer(seed=seed))
        for cell in board.cells():
            if not cell.has_mine and cell.state is CellState.HIDDEN:
                cascade(board, cell.row, cell.col)
        assert not any(cell.has_mine and cell.state is CellState.REVEALED for cell in board.cells())
        assert board.revealed_count == board.safe_cell_count


def test_cascade_from_mine_does_nothing(known_board):
    assert cascade(known_board, 5, 5) == []
    assert known_board.revealed_count == 0


def test_cascade_result_is_order_independent(known_board):
    other = Board(9, 9, 5)
    other.place_mines(FixedMinePlacer(known_board.mine_locations()))
    cascade(known_board, 8, 0)
    cascade(other, 3, 3)
    assert revealed_set(known_board) == revealed_set(other)


def test_cascade_reveals_flagged_cells():
    board = Board(3, 3, 1)
    board.place_mines(FixedMinePlacer([(0, 0)]))
    board.cell_at(2, 0).state = CellState.FLAGGED
    cascade(board, 2, 2)
    assert board.cell_at(2, 0).state is CellState.REVEALED
    assert board.cell_at(0, 0).state is CellState.HIDDEN


def test_cascade_handles_large_open_board():
    board = Board(200, 200, 0)
    board.place_mines()
    cascade(board, 0, 0)
    assert board.revealed_count == 200 * 200
