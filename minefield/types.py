"""Type definitions for Minefield."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum

Coordinate = Tuple[int, int]


class CellState(str, Enum):
    """Visible state of a single cell."""
    HIDDEN = 'HIDDEN'
    FLAGGED = 'FLAGGED'
    REVEALED = 'REVEALED'
    EXPLODED = 'EXPLODED'


class GameStatus(str, Enum):
    """Possible game states."""
    IN_PROGRESS = 'IN_PROGRESS'
    WON = 'WON'
    LOST = 'LOST'


@dataclass
class Cell:
    """Represents a single cell on the board."""
    row: int
    col: int
    has_mine: bool = False
    state: CellState = CellState.HIDDEN
    adjacent_mine_count: Optional[int] = None


@dataclass
class RevealOutcome:
    """Result of revealing one safe cell."""
    row: int
    col: int
    adjacent_mine_count: int


@dataclass
class CellChange:
    """A per-cell state change for the display layer."""
    row: int
    col: int
    state: CellState
    adjacent_mine_count: Optional[int] = None


@dataclass
class GameOver:
    """Emitted when the player reveals a mine."""
    mine_locations: List[Coordinate]


@dataclass
class GameWon:
    """Emitted when every safe cell has been revealed."""
    elapsed_seconds: int


@dataclass
class MoveResult:
    """Outcome of a single player action."""
    status: GameStatus
    flags_remaining: int
    changes: List[CellChange] = field(default_factory=list)
    game_over: Optional[GameOver] = None
    game_won: Optional[GameWon] = None


@dataclass
class MoveRequest:
    """Request to make a move."""
    row: int
    col: int
    action: str  # 'reveal', 'flag', 'click'


@dataclass
class GameConfig:
    """Configuration for creating a new game."""
    rows: int
    columns: int
    mine_count: int


@dataclass
class BoardLayout:
    """Mine positions chosen for a new board."""
    rows: int
    columns: int
    mine_count: int
    mines: List[Coordinate]


@dataclass
class CellView:
    """What the display layer may know about a cell."""
    row: int
    col: int
    state: CellState
    adjacent_mine_count: Optional[int] = None
    has_mine: Optional[bool] = None


@dataclass
class GameState:
    """Current state of the game as shown to the player."""
    id: str
    rows: int
    columns: int
    mine_count: int
    cells: List[List[CellView]]
    status: GameStatus
    flags_remaining: int
    elapsed_seconds: int = 0
    started: bool = False
    flag_mode: bool = False
    revealed_count: int = 0


@dataclass
class GameResponse:
    """Response containing game state."""
    game_state: GameState
    move: Optional[MoveResult] = None


@dataclass
class SavedGame:
    """A complete session, mines included, for carrying a game across runs."""
    rows: int
    columns: int
    mine_count: int
    mines: List[Coordinate]
    states: List[List[CellState]]
    flags_remaining: int
    elapsed_seconds: int
    started: bool
    status: GameStatus
    flag_mode: bool


@dataclass
class GameCarryOver:
    """Workflow state handed to the next run on continue-as-new."""
    game: SavedGame
    last_activity_time: float
    clock_anchor: Optional[float] = None
