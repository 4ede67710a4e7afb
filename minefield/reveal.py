"""Single-cell reveal and cascading (flood-fill) reveal."""
from typing import List

from minefield.adjacency import count_around
from minefield.types import CellState, RevealOutcome


def reveal_single(board, row: int, col: int) -> RevealOutcome:
    """Reveal one safe cell and record its adjacency count.

    The caller handles mines (a loss) and decides whether to cascade when the
    returned count is zero.
    """
    cell = board.cell_at(row, col)
    if cell.has_mine:
        raise ValueError(f"Cell ({row}, {col}) holds a mine")
    count = count_around(board, row, col)
    board.mark_revealed(row, col)
    cell.adjacent_mine_count = count
    return RevealOutcome(row=row, col=col, adjacent_mine_count=count)


def cascade(board, row: int, col: int) -> List[RevealOutcome]:
    """Reveal the empty region around (row, col) and its numbered border.

    Returns the cells newly revealed, in reveal order. Flagged cells inside the
    region are revealed too and lose their flag.
    """
    revealed: List[RevealOutcome] = []
    origin = board.cell_at(row, col)
    if origin.has_mine:
        return revealed

    if origin.state is not CellState.REVEALED:
        outcome = reveal_single(board, row, col)
        revealed.append(outcome)
        count = outcome.adjacent_mine_count
    else:
        count = count_around(board, row, col)

    stack = [(row, col)] if count == 0 else []
    while stack:
        cr, cc = stack.pop()
        for nr, nc in board.neighbors(cr, cc):
            # neighbors of a zero-count cell never hold a mine
            if board.grid[nr][nc].state is CellState.REVEALED:
                continue
            outcome = reveal_single(board, nr, nc)
            revealed.append(outcome)
            if outcome.adjacent_mine_count == 0:
                stack.append((nr, nc))
    return revealed
