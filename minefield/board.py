"""Board: the grid of cells, its bounds and its mines."""
import logging
from typing import Iterator, List, Optional

from minefield.errors import InvalidDimension, InvalidMineCount, OutOfBounds
from minefield.placement import MinePlacer
from minefield.types import Cell, CellState, Coordinate

logger = logging.getLogger(__name__)


def check_dimensions(rows: int, columns: int, mine_count: int) -> None:
    """Raise if a board of this shape and mine count cannot be built."""
    if rows <= 0 or columns <= 0:
        raise InvalidDimension(f"Board must have at least one row and one column, got {rows}x{columns}")
    if mine_count < 0 or mine_count >= rows * columns:
        raise InvalidMineCount(
            f"Mine count must be between 0 and {rows * columns - 1} for a {rows}x{columns} board, got {mine_count}"
        )


class Board:
    """A rows x columns grid of cells with a fixed number of mines."""

    def __init__(self, rows: int, columns: int, mine_count: int):
        check_dimensions(rows, columns, mine_count)
        self.rows = rows
        self.columns = columns
        self.mine_count = mine_count
        self.revealed_count = 0
        self.grid: List[List[Cell]] = [
            [Cell(row=row, col=col) for col in range(columns)] for row in range(rows)
        ]
        self._mines_placed = False

    @property
    def safe_cell_count(self) -> int:
        return self.rows * self.columns - self.mine_count

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.columns

    def cell_at(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.rows, self.columns)
        return self.grid[row][col]

    def neighbors(self, row: int, col: int) -> List[Coordinate]:
        """In-bounds coordinates around (row, col), row-major over the 3x3 block."""
        coords = []
        for nr in range(row - 1, row + 2):
            for nc in range(col - 1, col + 2):
                if (nr, nc) != (row, col) and self.in_bounds(nr, nc):
                    coords.append((nr, nc))
        return coords

    def cells(self) -> Iterator[Cell]:
        for row in self.grid:
            yield from row

    def place_mines(self, placer: Optional[MinePlacer] = None) -> None:
        if self._mines_placed:
            raise RuntimeError("Mines have already been placed on this board")
        (placer or MinePlacer()).place(self, self.mine_count)
        self._mines_placed = True
        logger.debug(f"Placed {self.mine_count} mines on a {self.rows}x{self.columns} board")

    def set_mine(self, row: int, col: int) -> bool:
        """Put a mine on (row, col); returns False if one is already there."""
        cell = self.cell_at(row, col)
        if self._mines_placed:
            raise RuntimeError("Mine positions are fixed once placement is done")
        if cell.has_mine:
            return False
        cell.has_mine = True
        return True

    def mark_revealed(self, row: int, col: int) -> bool:
        """Move a safe cell to REVEALED; returns False if it already was."""
        cell = self.cell_at(row, col)
        if cell.has_mine:
            raise ValueError(f"Cell ({row}, {col}) holds a mine and cannot be revealed as safe")
        if cell.state is CellState.REVEALED:
            return False
        cell.state = CellState.REVEALED
        self.revealed_count += 1
        return True

    def mine_locations(self) -> List[Coordinate]:
        return [(cell.row, cell.col) for cell in self.cells() if cell.has_mine]

