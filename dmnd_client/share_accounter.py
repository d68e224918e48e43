"""Relay between the mining side and the pool that turns pool share
acknowledgements into mining ``SubmitSharesSuccess`` messages.

Messages travel on asyncio queues; ``None`` on a queue marks the end of the stream.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dmnd_client.errors import ShareAccounterError, ShareAccounterErrorKind
from dmnd_client.proxy_state import PoolState, ProxyState, ShareAccounterState
from dmnd_client.tasks import AbortHandle, TaskKind, TaskManager

logger = logging.getLogger(__name__)


class PoolMessageKind(Enum):
    MINING = "Mining"
    SHARE_ACCOUNTING = "ShareAccountingMessages"
    OTHER = "Other"


@dataclass(frozen=True)
class PoolMessage:
    kind: PoolMessageKind
    payload: Any


@dataclass(frozen=True)
class SubmitSharesExtended:
    channel_id: int
    sequence_number: int
    job_id: int


@dataclass(frozen=True)
class SubmitSharesSuccess:
    channel_id: int
    last_sequence_number: int
    new_submits_accepted_count: int
    new_shares_sum: int


@dataclass(frozen=True)
class ShareOk:
    ref_job_id: int


@dataclass(frozen=True)
class _ShareSentUp:
    channel_id: int
    sequence_number: int


def job_id_from_ref(ref_job_id: int) -> int:
    """Extract the job id from the upper 32 bits of a 64-bit reference job id."""
    return (ref_job_id >> 32) & 0xFFFF_FFFF


async def _relay_up(
    receiver: asyncio.Queue,
    up_sender: asyncio.Queue,
    shares_sent_up: dict[int, _ShareSentUp],
) -> None:
    while True:
        msg = await receiver.get()
        if msg is None:
            await up_sender.put(None)
            return
        if isinstance(msg, SubmitSharesExtended):
            shares_sent_up[msg.job_id] = _ShareSentUp(msg.channel_id, msg.sequence_number)
        try:
            await up_sender.put(PoolMessage(PoolMessageKind.MINING, msg))
        except Exception as exc:  # the pool side is gone
            logger.debug("Pool side closed: %s", exc)
            return


async def _send_down(
    sender: asyncio.Queue, msg: Any, proxy_state: ProxyState
) -> bool:
    try:
        await sender.put(msg)
    except Exception as exc:  # the mining side is gone
        logger.error("%s", exc)
        proxy_state.update_share_accounter_state(ShareAccounterState.DOWN)
        return False
    return True


async def _relay_down(
    up_receiver: asyncio.Queue,
    sender: asyncio.Queue,
    shares_sent_up: dict[int, _ShareSentUp],
    proxy_state: ProxyState,
) -> None:
    while True:
        msg = await up_receiver.get()
        if msg is None:
            await sender.put(None)
            return
        if msg.kind is PoolMessageKind.SHARE_ACCOUNTING:
            if not isinstance(msg.payload, ShareOk):
                continue
            share = shares_sent_up.pop(job_id_from_ref(msg.payload.ref_job_id), None)
            if share is None:
                logger.error("Pool sent invalid share success")
                proxy_state.update_pool_state(PoolState.DOWN)
                return
            success = SubmitSharesSuccess(
                channel_id=share.channel_id,
                last_sequence_number=share.sequence_number,
                new_submits_accepted_count=1,
                new_shares_sum=1,
            )
            if not await _send_down(sender, success, proxy_state):
                return
        elif msg.kind is PoolMessageKind.MINING:
            if not await _send_down(sender, msg.payload, proxy_state):
                return
        else:
            logger.error("Pool send unexpected message on mining connection")
            proxy_state.update_pool_state(PoolState.DOWN)
            return


async def start(
    receiver: asyncio.Queue,
    sender: asyncio.Queue,
    up_receiver: asyncio.Queue,
    up_sender: asyncio.Queue,
    proxy_state: ProxyState,
) -> AbortHandle:
    """Start both relays and return the handle that stops them."""
    manager = TaskManager()
    aborter = manager.get_aborter()
    if aborter is None:
        raise ShareAccounterError(ShareAccounterErrorKind.TASK_MANAGER_ERROR)
    shares_sent_up: dict[int, _ShareSentUp] = {}
    relays = [
        (TaskKind.RELAY_UP, _relay_up(receiver, up_sender, shares_sent_up)),
        (
            TaskKind.RELAY_DOWN,
            _relay_down(up_receiver, sender, shares_sent_up, proxy_state),
        ),
    ]
    for kind, coroutine in relays:
        handle = AbortHandle(asyncio.create_task(coroutine))
        try:
            manager.add_task(kind, handle)
        except RuntimeError as exc:
            handle.abort()
            raise ShareAccounterError(
                ShareAccounterErrorKind.TASK_MANAGER_ERROR
            ) from exc
    return aborter