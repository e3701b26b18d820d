"""
Application setup and main entry point.
"""

import asyncio
import signal

from buildqueue.core.config import Settings
from buildqueue.core.exceptions import BuildQueueError, ConfigurationError
from buildqueue.core.logging import setup_logging, get_logger
from buildqueue.services.codeship import CodeshipClient
from buildqueue.services.queue import WaitOutcome, wait_for_turn

logger = get_logger(__name__)


def create_client(settings: Settings) -> CodeshipClient:
    """Create the Codeship client from settings."""
    return CodeshipClient(
        username=settings.codeship_username,
        password=settings.codeship_password,
        organization=settings.codeship_organization,
        base_url=settings.codeship_api_url,
    )


def install_signal_handlers(cancel: asyncio.Event) -> None:
    """Set the cancel event on SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel.set)
        except (NotImplementedError, RuntimeError):
            # Windows: KeyboardInterrupt is handled in __main__
            pass


async def main(settings: Settings | None = None) -> int:
    """Main application entry point. Returns the process exit code."""
    settings = settings or Settings()
    setup_logging(settings.log_level)

    try:
        settings.require()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    cancel = asyncio.Event()
    install_signal_handlers(cancel)

    client = create_client(settings)

    try:
        await client.authenticate()
        outcome = await wait_for_turn(
            client,
            settings.ci_project_id,
            settings.ci_build_id,
            cancel,
        )
    except BuildQueueError as e:
        logger.error(str(e))
        return 1

    if outcome is WaitOutcome.CANCELLED:
        logger.info("Stopped waiting")
        return 0

    logger.info("Resuming build")
    return 0
