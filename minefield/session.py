"""GameSession: the state machine for one game."""
import logging
from typing import List, Optional

from minefield.adjacency import count_around
from minefield.board import Board
from minefield.placement import FixedMinePlacer, MinePlacer
from minefield.reveal import cascade, reveal_single
from minefield.types import (
    CellChange,
    CellState,
    CellView,
    GameOver,
    GameState,
    GameStatus,
    GameWon,
    MoveRequest,
    MoveResult,
    SavedGame,
)

logger = logging.getLogger(__name__)

MOVE_ACTIONS = ('reveal', 'flag', 'click')


class GameSession:
    """Owns one Board and the counters around it.

    Every player action returns a MoveResult describing the cells that changed
    and, when the action ended the game, a GameOver or GameWon event. Actions
    on a finished game are no-ops.
    """

    def __init__(self, rows: int, columns: int, mine_count: int, placer: Optional[MinePlacer] = None):
        self.restart(rows, columns, mine_count, placer)

    def restart(self, rows: int, columns: int, mine_count: int, placer: Optional[MinePlacer] = None) -> None:
        board = Board(rows, columns, mine_count)
        board.place_mines(placer)

        self.board = board
        self.flags_remaining = mine_count
        self.elapsed_seconds = 0
        self.started = False
        self.status = GameStatus.IN_PROGRESS
        self.flag_mode = False
        logger.debug(f"New {rows}x{columns} game with {mine_count} mines")

    @property
    def is_over(self) -> bool:
        return self.status is not GameStatus.IN_PROGRESS

    def _result(self, changes: Optional[List[CellChange]] = None) -> MoveResult:
        return MoveResult(
            status=self.status,
            flags_remaining=self.flags_remaining,
            changes=changes or [],
        )

    def reveal(self, row: int, col: int) -> MoveResult:
        if self.is_over:
            return self._result()

        cell = self.board.cell_at(row, col)
        if cell.state is not CellState.HIDDEN:
            return self._result()

        self.started = True
        if cell.has_mine:
            return self._lose(row, col)

        outcome = reveal_single(self.board, row, col)
        revealed = [outcome]
        if outcome.adjacent_mine_count == 0:
            revealed.extend(cascade(self.board, row, col))

        result = self._result([
            CellChange(r.row, r.col, CellState.REVEALED, r.adjacent_mine_count) for r in revealed
        ])
        result.game_won = self.check_win()
        result.status = self.status
        return result

    def _lose(self, row: int, col: int) -> MoveResult:
        changes = []
        for cell in self.board.cells():
            if not cell.has_mine:
                continue
            cell.state = CellState.EXPLODED if (cell.row, cell.col) == (row, col) else CellState.REVEALED
            changes.append(CellChange(cell.row, cell.col, cell.state))
        self.status = GameStatus.LOST
        logger.debug(f"Game lost at ({row}, {col}) after {self.elapsed_seconds}s")

        result = self._result(changes)
        result.game_over = GameOver(mine_locations=self.board.mine_locations())
        return result

    def toggle_flag(self, row: int, col: int) -> MoveResult:
        if self.is_over:
            return self._result()

        cell = self.board.cell_at(row, col)
        if cell.state is CellState.REVEALED:
            return self._result()

        self.started = True
        if cell.state is CellState.FLAGGED:
            cell.state = CellState.HIDDEN
            self.flags_remaining += 1
        else:
            cell.state = CellState.FLAGGED
            self.flags_remaining -= 1
        return self._result([CellChange(row, col, cell.state)])

    def set_flag_mode(self, enabled: bool) -> None:
        self.flag_mode = bool(enabled)

    def click(self, row: int, col: int) -> MoveResult:
        """Handle a plain click: flag in flag mode, reveal otherwise."""
        if self.flag_mode:
            return self.toggle_flag(row, col)
        return self.reveal(row, col)

    def apply(self, move: MoveRequest) -> MoveResult:
        if move.action == 'reveal':
            return self.reveal(move.row, move.col)
        if move.action == 'flag':
            return self.toggle_flag(move.row, move.col)
        if move.action == 'click':
            return self.click(move.row, move.col)
        raise ValueError(f"Unknown action {move.action!r}, expected one of {', '.join(MOVE_ACTIONS)}")

    def check_win(self) -> Optional[GameWon]:
        if self.is_over:
            return None
        if self.board.revealed_count != self.board.safe_cell_count:
            return None
        self.status = GameStatus.WON
        logger.debug(f"Game won in {self.elapsed_seconds}s")
        return GameWon(elapsed_seconds=self.elapsed_seconds)

    def tick(self) -> int:
        if self.started and self.status is GameStatus.IN_PROGRESS:
            self.elapsed_seconds += 1
        return self.elapsed_seconds

    def snapshot(self, game_id: str = "") -> GameState:
        """Build the player's view of the game."""
        cells = []
        for row in self.board.grid:
            views = []
            for cell in row:
                shown = cell.state in (CellState.REVEALED, CellState.EXPLODED)
                views.append(CellView(
                    row=cell.row,
                    col=cell.col,
                    state=cell.state,
                    adjacent_mine_count=cell.adjacent_mine_count if shown and not cell.has_mine else None,
                    has_mine=cell.has_mine if shown else None,
                ))
            cells.append(views)

        return GameState(
            id=game_id,
            rows=self.board.rows,
            columns=self.board.columns,
            mine_count=self.board.mine_count,
            cells=cells,
            status=self.status,
            flags_remaining=self.flags_remaining,
            elapsed_seconds=self.elapsed_seconds,
            started=self.started,
            flag_mode=self.flag_mode,
            revealed_count=self.board.revealed_count,
        )

    def save(self) -> SavedGame:
        """Capture everything needed to rebuild this session, mines included."""
        return SavedGame(
            rows=self.board.rows,
            columns=self.board.columns,
            mine_count=self.board.mine_count,
            mines=self.board.mine_locations(),
            states=[[cell.state for cell in row] for row in self.board.grid],
            flags_remaining=self.flags_remaining,
            elapsed_seconds=self.elapsed_seconds,
            started=self.started,
            status=self.status,
            flag_mode=self.flag_mode,
        )

    @classmethod
    def restore(cls, saved: SavedGame) -> "GameSession":
        session = cls(saved.rows, saved.columns, saved.mine_count, placer=FixedMinePlacer(saved.mines))
        board = session.board
        for row, states in enumerate(saved.states):
            for col, state in enumerate(states):
                cell = board.cell_at(row, col)
                if state == CellState.REVEALED and not cell.has_mine:
                    board.mark_revealed(row, col)
                    cell.adjacent_mine_count = count_around(board, row, col)
                else:
                    cell.state = CellState(state)

        session.flags_remaining = saved.flags_remaining
        session.elapsed_seconds = saved.elapsed_seconds
        session.started = saved.started
        session.status = GameStatus(saved.status)
        session.flag_mode = saved.flag_mode
        return session
