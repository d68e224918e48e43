"""Tasks of the translator's downstream side, grouped by miner connection."""

from __future__ import annotations

import asyncio
import json
import logging
from enum import Enum
from typing import Optional

from dmnd_client.errors import TranslatorError, TranslatorErrorKind
from dmnd_client.tasks import AbortHandle

logger = logging.getLogger(__name__)


class DownstreamTaskKind(Enum):
    ACCEPT_CONNECTION = "AcceptConnection"
    RECEIVE_DOWNSTREAM = "ReceiveDownstream"
    SEND_DOWNSTREAM = "SendDownstream"
    NOTIFY = "Notify"
    UPDATE = "Update"
    SHARES_MONITOR = "SharesMonitor"


class DownstreamTaskManager:
    """Keeps downstream tasks alive and aborts them per connection or all at once.

    Tasks registered without a connection id live as long as the manager.
    Must be created inside a running event loop.
    """

    def __init__(self) -> None:
        self._tasks: dict[
            Optional[int], list[tuple[DownstreamTaskKind, AbortHandle]]
        ] = {}
        self._stopped = False
        self._keeper = asyncio.create_task(self._keep_alive())
        self._aborter: Optional[AbortHandle] = AbortHandle(self._keeper)

    async def _keep_alive(self) -> None:
        try:
            await asyncio.Event().wait()
        finally:
            self._stopped = True
            for entries in self._tasks.values():
                for _, handle in entries:
                    handle.abort()
            self._tasks.clear()

    def get_aborter(self) -> Optional[AbortHandle]:
        """Hand out the aborter once; later calls return None."""
        aborter, self._aborter = self._aborter, None
        return aborter

    def add_task(
        self,
        kind: DownstreamTaskKind,
        handle: AbortHandle,
        connection_id: Optional[int] = None,
    ) -> None:
        if self._stopped or self._keeper.done():
            raise RuntimeError("downstream task manager stopped")
        self._tasks.setdefault(connection_id, []).append((kind, handle))

    def kill(self, connection_id: int) -> int:
        """Abort every task of one connection; return how many were aborted."""
        entries = self._tasks.pop(connection_id, [])
        for _, handle in entries:
            handle.abort()
        logger.info("Aborted all tasks for downstream connection ID %s", connection_id)
        return len(entries)

    def tasks_for(self, connection_id: Optional[int] = None) -> list[DownstreamTaskKind]:
        """Kinds of the tasks held for a connection, in registration order."""
        return [kind for kind, _ in self._tasks.get(connection_id, [])]


async def _send_to_downstream(
    outgoing: asyncio.Queue,
    send_to_down: asyncio.Queue,
    connection_id: int,
    host: str,
) -> None:
    while True:
        message = await outgoing.get()
        if message is None:
            break
        try:
            line = json.dumps(message, separators=(",", ":")) + "\n"
        except (TypeError, ValueError) as exc:
            logger.error("Failed to serialize msg %r", exc)
            break
        await send_to_down.put(line)
    logger.warning(
        "Downstream: Shutting down sv1 downstream writer: %s (%s)", connection_id, host
    )
    await send_to_down.put(None)


async def start_send_to_downstream(
    task_manager: DownstreamTaskManager,
    outgoing: asyncio.Queue,
    send_to_down: asyncio.Queue,
    connection_id: int,
    host: str,
) -> AbortHandle:
    """Write each outgoing message to the miner as one line of JSON.

    ``None`` on ``outgoing`` ends the writer, which then puts ``None`` on
    ``send_to_down``.
    """
    handle = AbortHandle(
        asyncio.create_task(
            _send_to_downstream(outgoing, send_to_down, connection_id, host)
        )
    )
    try:
        task_manager.add_task(DownstreamTaskKind.SEND_DOWNSTREAM, handle, connection_id)
    except RuntimeError as exc:
        handle.abort()
        raise TranslatorError(TranslatorErrorKind.TRANSLATOR_TASK_MANAGER_FAILED) from exc
    return handle