"""Adjacency counting."""


def count_around(board, row: int, col: int) -> int:
    """Count the number of mines in neighboring cells."""
    board.cell_at(row, col)
    count = 0
    for nr, nc in board.neighbors(row, col):
        if board.grid[nr][nc].has_mine:
            count += 1
    return count
