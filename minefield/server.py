"""Flask server for Minefield."""
import asyncio
import os
import logging
from datetime import datetime
from flask import Flask, request, jsonify
from flask_cors import CORS
from temporalio.client import Client, WorkflowUpdateFailedError
from temporalio.service import RPCError, RPCStatusCode
import uuid

from minefield.board import check_dimensions
from minefield.config import DIFFICULTY_PRESETS, TASK_QUEUE, default_config, get_preset
from minefield.session import MOVE_ACTIONS
from minefield.workflows import MinesweeperWorkflow
from minefield.types import GameConfig, GameState, MoveRequest, MoveResult
from minefield.client_provider import get_temporal_client

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global client reference
temporal_client: Client | None = None


def serialize_config(config: GameConfig) -> dict:
    return {
        'rows': config.rows,
        'columns': config.columns,
        'mineCount': config.mine_count,
    }


def serialize_game_state(game_state: GameState) -> dict:
    """Convert game state to JSON-serializable format."""
    cells = [
        [
            {
                'row': cell.row,
                'col': cell.col,
                'state': cell.state.value,
                'adjacentMineCount': cell.adjacent_mine_count,
                'hasMine': cell.has_mine,
            }
            for cell in row
        ]
        for row in game_state.cells
    ]
    return {
        'id': game_state.id,
        'board': {
            'cells': cells,
            'rows': game_state.rows,
            'columns': game_state.columns,
            'mineCount': game_state.mine_count,
        },
        'status': game_state.status.value,
        'flagsRemaining': game_state.flags_remaining,
        'elapsedSeconds': game_state.elapsed_seconds,
        'started': game_state.started,
        'flagMode': game_state.flag_mode,
        'cellsRevealed': game_state.revealed_count,
    }


def serialize_move(result: MoveResult) -> dict:
    """Convert a move outcome into the events the display layer renders."""
    payload = {
        'status': result.status.value,
        'flagsRemaining': result.flags_remaining,
        'changes': [
            {
                'row': change.row,
                'col': change.col,
                'state': change.state.value,
                'adjacentMineCount': change.adjacent_mine_count,
            }
            for change in result.changes
        ],
        'gameOver': None,
        'gameWon': None,
    }
    if result.game_over:
        payload['gameOver'] = {
            'mineLocations': [[row, col] for row, col in result.game_over.mine_locations],
        }
    if result.game_won:
        payload['gameWon'] = {'elapsedSeconds': result.game_won.elapsed_seconds}
    return payload


def is_json_int(value) -> bool:
    """True for JSON integers; JSON booleans are rejected."""
    return isinstance(value, int) and not isinstance(value, bool)


def parse_config(data: dict) -> GameConfig:
    """Build a GameConfig from a difficulty name or an explicit config."""
    difficulty = data.get('difficulty')
    config_data = data.get('config')

    if difficulty is not None:
        if not isinstance(difficulty, str):
            raise ValueError('Invalid difficulty')
        return get_preset(difficulty)
    if config_data is None:
        return default_config()

    if not isinstance(config_data, dict) or \
       any(not is_json_int(config_data.get(key)) for key in ('rows', 'columns', 'mineCount')):
        raise ValueError('Invalid game configuration')

    config = GameConfig(
        rows=config_data['rows'],
        columns=config_data['columns'],
        mine_count=config_data['mineCount'],
    )
    check_dimensions(config.rows, config.columns, config.mine_count)
    return config


async def query_with_retry(handle, max_retries=5):
    """Query with retry logic for workflow initialization."""
    for i in range(max_retries):
        try:
            return await handle.query(MinesweeperWorkflow.get_game_state_query)
        except RPCError as error:
            if i < max_retries - 1:
                logger.info(f"Query not ready yet, retrying in {(i + 1) * 100}ms...")
                await asyncio.sleep((i + 1) * 0.1)
                continue
            raise error


def temporal_error_response(error: Exception, action: str):
    """Map Temporal client errors to HTTP responses."""
    if isinstance(error, WorkflowUpdateFailedError):
        message = str(error.cause) if error.cause else str(error)
        logger.warning(f"Rejected {action}: {message}")
        return jsonify({'error': message}), 400
    if isinstance(error, RPCError) and error.status == RPCStatusCode.NOT_FOUND:
        return jsonify({'error': 'Game not found'}), 404
    logger.error(f"Error during {action}: {error}")
    return jsonify({'error': f'Failed to {action}'}), 500


@app.route('/api/presets', methods=['GET'])
def list_presets():
    """List the difficulty presets."""
    return jsonify({name: serialize_config(config) for name, config in DIFFICULTY_PRESETS.items()})


@app.route('/api/games', methods=['POST'])
def create_game():
    """Create a new game."""
    data = request.get_json(silent=True) or {}
    try:
        config = parse_config(data)
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    game_id = str(uuid.uuid4())

    async def start_workflow():
        handle = await temporal_client.start_workflow(
            MinesweeperWorkflow.run,
            args=[game_id, config],
            id=game_id,
            task_queue=TASK_QUEUE,
        )
        return await query_with_retry(handle)

    try:
        game_state = asyncio.run(start_workflow())
    except Exception as error:
        return temporal_error_response(error, 'create game')

    logger.info(f"Started game {game_id} ({config.rows}x{config.columns}, {config.mine_count} mines)")
    return jsonify({'gameState': serialize_game_state(game_state)})


@app.route('/api/games/<game_id>', methods=['GET'])
def get_game_state(game_id):
    """Get game state."""
    async def query_game():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.query(MinesweeperWorkflow.get_game_state_query)

    try:
        game_state = asyncio.run(query_game())
    except Exception as error:
        return temporal_error_response(error, 'get game state')
    return jsonify({'gameState': serialize_game_state(game_state)})


@app.route('/api/games/<game_id>/moves', methods=['POST'])
def make_move(game_id):
    """Make a move."""
    data = request.get_json(silent=True) or {}

    if not is_json_int(data.get('row')) or \
       not is_json_int(data.get('col')) or \
       data.get('action') not in MOVE_ACTIONS:
        return jsonify({'error': 'Invalid move request'}), 400

    move_request = MoveRequest(
        row=data['row'],
        col=data['col'],
        action=data['action'],
    )

    async def execute_move():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(MinesweeperWorkflow.make_move_update, move_request)

    try:
        response = asyncio.run(execute_move())
    except Exception as error:
        return temporal_error_response(error, 'make move')

    return jsonify({
        'gameState': serialize_game_state(response.game_state),
        'move': serialize_move(response.move) if response.move else None,
    })


@app.route('/api/games/<game_id>/flag-mode', methods=['POST'])
def set_flag_mode(game_id):
    """Switch flag mode on or off."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data.get('enabled'), bool):
        return jsonify({'error': 'Invalid flag mode request'}), 400

    async def execute_flag_mode():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(MinesweeperWorkflow.set_flag_mode_update, data['enabled'])

    try:
        game_state = asyncio.run(execute_flag_mode())
    except Exception as error:
        return temporal_error_response(error, 'set flag mode')
    return jsonify({'gameState': serialize_game_state(game_state)})


@app.route('/api/games/<game_id>/restart', methods=['POST'])
def restart_game(game_id):
    """Restart game."""
    data = request.get_json(silent=True) or {}
    try:
        config = parse_config(data)
    except ValueError as error:
        return jsonify({'error': str(error)}), 400

    async def execute_restart():
        handle = temporal_client.get_workflow_handle(game_id)
        return await handle.execute_update(MinesweeperWorkflow.restart_game_update, config)

    try:
        game_state = asyncio.run(execute_restart())
    except Exception as error:
        return temporal_error_response(error, 'restart game')
    return jsonify({'gameState': serialize_game_state(game_state)})


@app.route('/api/games/<game_id>', methods=['DELETE'])
def close_game(game_id):
    """Close a game."""
    async def execute_close():
        handle = temporal_client.get_workflow_handle(game_id)
        await handle.signal(MinesweeperWorkflow.close_game_signal)

    try:
        asyncio.run(execute_close())
    except Exception as error:
        return temporal_error_response(error, 'close game')
    logger.info(f"Closed game {game_id}")
    return jsonify({'closed': game_id})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


async def initialize_client():
    """Initialize Temporal client."""
    global temporal_client
    temporal_client = await get_temporal_client()
    logger.info("Connected to Temporal server")


def main():
    """Start the Flask server."""
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(initialize_client())
    except Exception as error:
        logger.error(f"Failed to connect to Temporal: {error}")
        raise SystemExit(1)

    port = int(os.getenv("PORT", 3000))
    logger.info(f"Minefield server running on http://localhost:{port}")
    logger.info("Make sure to start the Temporal worker in another terminal: python -m minefield.worker")

    app.run(host='0.0.0.0', port=port, debug=False)


if __name__ == "__main__":
    main()
