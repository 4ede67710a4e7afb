"""Errors raised by the Minefield engine for invalid configuration or coordinates."""


class MinefieldError(ValueError):
    """Base class for caller errors detected by the engine."""


class InvalidDimension(MinefieldError):
    """Board rows or columns are not positive."""


class InvalidMineCount(MinefieldError):
    """Mine count is negative or leaves no safe cell on the board."""


class OutOfBounds(MinefieldError):
    """A coordinate lies outside the board."""

    def __init__(self, row: int, col: int, rows: int, columns: int):
        super().__init__(f"Cell ({row}, {col}) is outside a {rows}x{columns} board")
        self.row = row
        self.col = col
