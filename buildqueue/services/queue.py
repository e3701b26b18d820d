"""
Branch build queue: decides which running builds go first and waits for them.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Protocol

from buildqueue.core.logging import get_logger
from buildqueue.models.build import PAGE_SIZE, Build, BuildPage

logger = get_logger(__name__)

POLL_INTERVAL = 30.0


class BuildDirectory(Protocol):
    """Read access to the builds of a CI provider."""

    async def list_builds(self, project_id: str, page: int = 1, per_page: int = PAGE_SIZE) -> BuildPage:
        ...

    async def get_build(self, project_id: str, build_id: str) -> Build:
        ...


class WaitOutcome(str, Enum):
    """How a wait for our turn ended."""

    READY = "ready"
    CANCELLED = "cancelled"


async def build_watch_set(directory: BuildDirectory, project_id: str, branch: str) -> list[Build]:
    """
    Collect every running build of a project on the given branch.

    The provider must list builds newest first: scanning stops at the first
    page without any running build, since older pages cannot hold one either.

    Args:
        directory: Build provider to query
        project_id: Project to list builds for
        branch: Only builds on this branch are kept

    Returns:
        Running builds on the branch, in listing order

    Raises:
        APIError: If any page fails to load
    """
    watch: list[Build] = []
    page_number = 1

    while True:
        page = await directory.list_builds(project_id, page=page_number, per_page=PAGE_SIZE)

        page_has_running = False
        for build in page.builds:
            if not build.is_running:
                continue
            page_has_running = True
            if build.branch == branch:
                watch.append(build)

        if page.is_last_page or not page.has_next:
            break

        if not page_has_running:
            break

        page_number = page.next_page if page.next_page is not None else page_number + 1

    logger.debug("Found %d running build(s) on %s", len(watch), branch)
    return watch


def order_by_allocation(builds: list[Build]) -> list[Build]:
    """Oldest allocation first. Ties keep their listing order."""
    return sorted(builds, key=lambda build: build.sort_key)


class WaitSequencer:
    """Waits, one at a time, for every build queued ahead of ours."""

    def __init__(self, directory: BuildDirectory, poll_interval: float = POLL_INTERVAL):
        self._directory = directory
        self._poll_interval = poll_interval

    async def _wait_for(self, build: Build, cancel: asyncio.Event) -> bool:
        """Poll a build until it stops running. Returns False when cancelled."""
        while not cancel.is_set():
            current = await self._directory.get_build(build.project_id, build.id)
            if not current.is_running:
                return True

            logger.info("Waiting on build %s", build.id)
            try:
                await asyncio.wait_for(cancel.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                continue
        return False

    async def run(self, builds: list[Build], self_id: str, cancel: asyncio.Event) -> WaitOutcome:
        """
        Block until every build ordered before ``self_id`` has finished.

        Args:
            builds: Watch set, already ordered
            self_id: ID of the build that is waiting
            cancel: Set to stop waiting early

        Returns:
            READY when it is our turn, CANCELLED if ``cancel`` was set

        Raises:
            APIError: If a status query fails
        """
        for build in builds:
            if build.id == self_id:
                return WaitOutcome.READY

            if not await self._wait_for(build, cancel):
                logger.info("Wait cancelled")
                return WaitOutcome.CANCELLED

        logger.warning("Build %s is not among the running builds", self_id)
        return WaitOutcome.READY


async def wait_for_turn(
    directory: BuildDirectory,
    project_id: str,
    build_id: str,
    cancel: asyncio.Event,
    poll_interval: float = POLL_INTERVAL,
) -> WaitOutcome:
    """Wait until all older running builds on our branch have finished."""
    current = await directory.get_build(project_id, build_id)
    logger.info("Build %s is on branch %s", build_id, current.branch)

    watch = await build_watch_set(directory, project_id, current.branch)
    ordered = order_by_allocation(watch)

    sequencer = WaitSequencer(directory, poll_interval=poll_interval)
    return await sequencer.run(ordered, build_id, cancel)
