"""Mine placement strategies."""
import random
from typing import Iterable, Optional

from minefield.errors import InvalidMineCount
from minefield.types import Coordinate


class MinePlacer:
    """Places mines on uniformly random cells, re-sampling cells that already hold one."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        if rng is None:
            rng = random.Random(seed) if seed is not None else random.Random()
        self.rng = rng

    def place(self, board, mine_count: int) -> None:
        total = board.rows * board.columns
        if mine_count < 0 or mine_count >= total:
            raise InvalidMineCount(f"Cannot place {mine_count} mines on {total} cells")
        placed = 0
        while placed < mine_count:
            index = self.rng.randrange(total)
            if board.set_mine(index // board.columns, index % board.columns):
                placed += 1


class FixedMinePlacer(MinePlacer):
    """Places mines at known coordinates."""

    def __init__(self, positions: Iterable[Coordinate]):
        super().__init__()
        self.positions = [(int(row), int(col)) for row, col in positions]

    def place(self, board, mine_count: int) -> None:
        distinct = set(self.positions)
        if len(distinct) != mine_count:
            raise InvalidMineCount(
                f"Expected {mine_count} distinct mine positions, got {len(distinct)}"
            )
        for row, col in self.positions:
            board.set_mine(row, col)
