"""Temporal activities for board generation."""
import logging
from temporalio import activity

from minefield.board import Board
from minefield.types import BoardLayout, GameConfig

logger = logging.getLogger(__name__)


@activity.defn
async def create_game_board(config: GameConfig) -> BoardLayout:
    """Choose random mine positions for a new board.

    Placement lives in an activity because workflow code has to stay
    deterministic; the workflow rebuilds the board from the returned layout.
    """
    board = Board(config.rows, config.columns, config.mine_count)
    board.place_mines()
    logger.debug(f"Generated layout for a {config.rows}x{config.columns} board")
    return BoardLayout(
        rows=board.rows,
        columns=board.columns,
        mine_count=board.mine_count,
        mines=board.mine_locations(),
    )
