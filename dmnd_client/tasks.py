"""Ownership of background asyncio tasks that are cancelled together."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AbortHandle:
    """Holds a group of tasks and cancels all of them on ``abort``."""

    def __init__(self, *tasks: "asyncio.Future[Any]") -> None:
        self._tasks: list[asyncio.Future[Any]] = list(tasks)

    def add_task(self, task: "asyncio.Future[Any]") -> None:
        self._tasks.append(task)

    def is_finished(self) -> bool:
        """True when every held task is done."""
        return all(task.done() for task in self._tasks)

    def abort(self) -> None:
        for task in self._tasks:
            task.cancel()

    def __enter__(self) -> "AbortHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.abort()


class TaskKind(Enum):
    RELAY_UP = "RelayUp"
    RELAY_DOWN = "RelayDown"


class TaskManager:
    """Keeps registered tasks alive until its aborter is aborted.

    Must be created inside a running event loop.
    """

    def __init__(self) -> None:
        self._tasks: list[tuple[TaskKind, AbortHandle]] = []
        self._stopped = False
        self._keeper = asyncio.create_task(self._keep_alive())
        self._aborter: Optional[AbortHandle] = AbortHandle(self._keeper)
        logger.debug("Task manager initialized")

    async def _keep_alive(self) -> None:
        try:
            await asyncio.Event().wait()
        finally:
            self._stopped = True
            for _, handle in self._tasks:
                handle.abort()
            self._tasks.clear()

    def get_aborter(self) -> Optional[AbortHandle]:
        """Hand out the aborter once; later calls return None."""
        aborter, self._aborter = self._aborter, None
        return aborter

    def add_task(self, kind: TaskKind, handle: AbortHandle) -> None:
        """Register a handle so that it is aborted along with the manager."""
        if self._stopped or self._keeper.done():
            raise RuntimeError("task manager stopped")
        self._tasks.append((kind, handle))