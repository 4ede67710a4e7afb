"""Temporal workflows for Minefield."""
import asyncio
from datetime import timedelta
from typing import Optional
from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from minefield.activities import create_game_board
    from minefield.board import check_dimensions
    from minefield.config import CHECK_INTERVAL, CLOCK_IDLE_LIMIT, INACTIVITY_TIMEOUT, TICK_INTERVAL
    from minefield.placement import FixedMinePlacer
    from minefield.session import MOVE_ACTIONS, GameSession
    from minefield.types import (
        GameCarryOver,
        GameConfig,
        GameResponse,
        GameState,
        GameStatus,
        MoveRequest,
    )

BOARD_RETRY_POLICY = RetryPolicy(
    maximum_attempts=3,
    non_retryable_error_types=["InvalidDimension", "InvalidMineCount"],
)


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that hosts a single game session and keeps its clock.

    The clock has no per-second timer. Whole seconds of workflow time since
    `clock_anchor` are turned into `GameSession.tick()` calls whenever the
    workflow handles a move, restart, or its periodic check. Time beyond
    CLOCK_IDLE_LIMIT after the player's last action is not counted.
    """

    def __init__(self):
        self.game_id: str = ""
        self.session: GameSession | None = None
        self.last_activity_time: float = 0
        self.clock_anchor: float | None = None
        self.should_close: bool = False

    @workflow.run
    async def run(self, game_id: str, initial_config: GameConfig, carry_over: Optional[GameCarryOver] = None) -> None:
        """Main workflow entry point."""
        # Store game_id immediately so queries can access it during initialization
        self.game_id = game_id

        if carry_over is not None:
            self.session = GameSession.restore(carry_over.game)
            self.last_activity_time = carry_over.last_activity_time
            self.clock_anchor = carry_over.clock_anchor
        else:
            self.last_activity_time = workflow.time()
            self.session = await self._new_session(initial_config)

        inactivity = INACTIVITY_TIMEOUT.total_seconds()

        while not self.should_close:
            idle = workflow.time() - self.last_activity_time
            if idle >= inactivity:
                workflow.logger.info(f"Game {game_id} auto-closing after {INACTIVITY_TIMEOUT} of inactivity")
                break

            seen_activity = self.last_activity_time
            try:
                await workflow.wait_condition(
                    lambda: self.should_close or self.last_activity_time != seen_activity,
                    timeout=min(CHECK_INTERVAL.total_seconds(), inactivity - idle),
                )
            except asyncio.TimeoutError:
                self._advance_clock()

            if not self.should_close and workflow.info().is_continue_as_new_suggested():
                await workflow.wait_condition(workflow.all_handlers_finished)
                self._advance_clock()
                workflow.logger.info(f"Game {game_id} continuing as new")
                workflow.continue_as_new(args=[game_id, initial_config, self._carry_over()])

        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    def _clock_running(self) -> bool:
        return (
            self.session is not None
            and self.clock_anchor is not None
            and self.session.started
            and self.session.status is GameStatus.IN_PROGRESS
        )

    def _pending_ticks(self, now: float) -> int:
        if not self._clock_running():
            return 0
        counted_until = min(now, self.last_activity_time + CLOCK_IDLE_LIMIT.total_seconds())
        return max(int((counted_until - self.clock_anchor) // TICK_INTERVAL.total_seconds()), 0)

    def _advance_clock(self) -> None:
        """Tick the session for every whole second since the anchor."""
        now = workflow.time()
        if not self._clock_running():
            return
        ticks = self._pending_ticks(now)
        for _ in range(ticks):
            self.session.tick()
        self.clock_anchor += ticks * TICK_INTERVAL.total_seconds()
        if self.last_activity_time + CLOCK_IDLE_LIMIT.total_seconds() < now:
            # idle time past the limit is dropped
            self.clock_anchor = now

    def _sync_clock(self) -> None:
        """Start the clock on the first action, stop it once the game ends."""
        if self.session.status is not GameStatus.IN_PROGRESS or not self.session.started:
            self.clock_anchor = None
        elif self.clock_anchor is None:
            self.clock_anchor = workflow.time()

    def _carry_over(self) -> GameCarryOver:
        return GameCarryOver(
            game=self.session.save(),
            last_activity_time=self.last_activity_time,
            clock_anchor=self.clock_anchor,
        )

    async def _new_session(self, config: GameConfig) -> GameSession:
        layout = await workflow.execute_activity(
            create_game_board,
            config,
            start_to_close_timeout=timedelta(seconds=60),
            retry_policy=BOARD_RETRY_POLICY,
        )
        return GameSession(
            layout.rows,
            layout.columns,
            layout.mine_count,
            placer=FixedMinePlacer(layout.mines),
        )

    def _begin_action(self) -> None:
        self._advance_clock()
        self.last_activity_time = workflow.time()

    def _state(self) -> GameState:
        state = self.session.snapshot(self.game_id)
        state.elapsed_seconds += self._pending_ticks(workflow.time())
        return state

    @workflow.signal
    async def make_move_signal(self, move_request: MoveRequest) -> None:
        """Signal to make a move (fire-and-forget)."""
        if self.session is None or self.should_close:
            return
        self._begin_action()
        try:
            self.session.apply(move_request)
        except ValueError as error:
            workflow.logger.error(f"Error processing move: {error}")
        self._sync_clock()

    @workflow.update
    async def make_move_update(self, move_request: MoveRequest) -> GameResponse:
        """Update to make a move and return the outcome with the updated state."""
        self._begin_action()
        result = self.session.apply(move_request)
        self._sync_clock()
        if result.game_over:
            workflow.logger.info(f"Game {self.game_id} lost")
        elif result.game_won:
            workflow.logger.info(f"Game {self.game_id} won in {result.game_won.elapsed_seconds}s")
        return GameResponse(game_state=self._state(), move=result)

    @make_move_update.validator
    def validate_move(self, move_request: MoveRequest) -> None:
        if self.session is None:
            raise ValueError("Game state not initialized")
        if self.should_close:
            raise ValueError("Game is closed")
        if move_request.action not in MOVE_ACTIONS:
            raise ValueError(f"Unknown action {move_request.action!r}")
        self.session.board.cell_at(move_request.row, move_request.col)

    @workflow.update
    async def set_flag_mode_update(self, enabled: bool) -> GameState:
        """Update to switch flag mode on or off."""
        self._begin_action()
        self.session.set_flag_mode(enabled)
        return self._state()

    @set_flag_mode_update.validator
    def validate_flag_mode(self, enabled: bool) -> None:
        if self.session is None:
            raise ValueError("Game state not initialized")

    @workflow.update
    async def restart_game_update(self, config: GameConfig) -> GameState:
        """Update to restart the game and return the new state."""
        self._begin_action()
        self.session = await self._new_session(config)
        self.clock_anchor = None
        workflow.logger.info(
            f"Game {self.game_id} restarted as {config.rows}x{config.columns} with {config.mine_count} mines"
        )
        return self._state()

    @restart_game_update.validator
    def validate_restart(self, config: GameConfig) -> None:
        if self.should_close:
            raise ValueError("Cannot restart a closed game")
        check_dimensions(config.rows, config.columns, config.mine_count)

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> GameState:
        """Query to get the current game state."""
        if self.session is None:
            # Return a minimal valid state while initializing
            return GameState(
                id=self.game_id,
                rows=0,
                columns=0,
                mine_count=0,
                cells=[],
                status=GameStatus.IN_PROGRESS,
                flags_remaining=0,
            )
        return self._state()
