"""Temporal worker for Minefield."""
import asyncio
import logging
from temporalio.worker import Worker
from minefield.workflows import MinesweeperWorkflow
from minefield import activities
from minefield.client_provider import get_temporal_client
from minefield.config import TASK_QUEUE

logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    logging.basicConfig(level=logging.INFO)

    client = await get_temporal_client()

    worker = Worker(
        client,
        task_queue=TASK_QUEUE,
        workflows=[MinesweeperWorkflow],
        activities=[activities.create_game_board],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {TASK_QUEUE}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
