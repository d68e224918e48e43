"""Reporting of shares, worker activity and error logs to the monitoring server."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import httpx

from dmnd_client.errors import MonitorError

logger = logging.getLogger(__name__)

DEFAULT_SHARES_INTERVAL = 60.0


class Endpoint(Enum):
    PROXY_LOGS = "/api/proxy/logs"
    SHARES = "/api/share/save"
    WORKER_ACTIVITY = "/api/worker/activity"


def endpoint_url(base_url: str, endpoint: Endpoint) -> str:
    """Join the server's base URL with the path of an endpoint."""
    return base_url.rstrip("/") + endpoint.value


class RejectionReason(Enum):
    JOB_ID_NOT_FOUND = "JobIdNotFound"
    INVALID_SHARE = "InvalidShare"
    INVALID_JOB_ID_FORMAT = "InvalidJobIdFormat"
    DIFFICULTY_MISMATCH = "DifficultyMismatch"

    def __str__(self) -> str:
        return _REJECTION_TEXT[self]


_REJECTION_TEXT = {
    RejectionReason.JOB_ID_NOT_FOUND: "Job ID not found",
    RejectionReason.INVALID_SHARE: "Invalid share",
    RejectionReason.INVALID_JOB_ID_FORMAT: "Invalid job ID format",
    RejectionReason.DIFFICULTY_MISMATCH: "Difficulty mismatch",
}


def _now_seconds() -> int:
    return int(time.time())


@dataclass(frozen=True)
class ShareInfo:
    """A share submitted by a worker; no rejection reason means it was accepted."""

    worker_name: str
    difficulty: Optional[float]
    job_id: int
    rejection_reason: Optional[RejectionReason] = None
    timestamp: int = field(default_factory=_now_seconds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "worker_name": self.worker_name,
            "difficulty": self.difficulty,
            "job_id": self.job_id,
            "rejection_reason": (
                None if self.rejection_reason is None else self.rejection_reason.value
            ),
            "timestamp": self.timestamp,
        }


class WorkerActivityType(Enum):
    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"


@dataclass(frozen=True)
class WorkerActivity:
    user_agent: str
    worker_name: str
    activity: WorkerActivityType

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_agent": self.user_agent,
            "worker_name": self.worker_name,
            "activity": self.activity.value,
        }


class Severity(Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class ProxyLog:
    severity: Severity
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"severity": self.severity.value, "content": self.content}


class MonitorAPI:
    """Client of the monitoring server; every request carries the user's token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.token = token
        self._client = client

    async def _post(self, endpoint: Endpoint, body: dict[str, Any], what: str) -> None:
        url = endpoint_url(self.base_url, endpoint)
        try:
            if self._client is None:
                async with httpx.AsyncClient() as client:
                    response = await client.post(url, json=body)
            else:
                response = await self._client.post(url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to send %s: %s", what, exc)
            raise MonitorError(exc) from exc

    async def send_shares(self, shares: list[ShareInfo]) -> None:
        """Send a batch of shares."""
        logger.debug("Sending batch of %d shares to API", len(shares))
        body = {"shares": [share.to_dict() for share in shares], "token": self.token}
        await self._post(Endpoint.SHARES, body, "shares")

    async def send_log(self, log: ProxyLog) -> None:
        """Send one log entry."""
        logger.debug("Sending log to API: %s", log)
        await self._post(
            Endpoint.PROXY_LOGS, {"log": log.to_dict(), "token": self.token}, "log"
        )

    async def send_worker_activity(self, activity: WorkerActivity) -> None:
        """Report that a worker connected or disconnected."""
        logger.debug("Sending worker activity to API: %s", activity)
        await self._post(
            Endpoint.WORKER_ACTIVITY,
            {"data": activity.to_dict(), "token": self.token},
            "worker activity",
        )


class SharesMonitor:
    """Collects shares and forwards them to the monitoring server in batches."""

    def __init__(self) -> None:
        self._shares: list[ShareInfo] = []
        self._lock = threading.Lock()

    def insert_share(self, share: ShareInfo) -> None:
        with self._lock:
            self._shares.append(share)

    def pending_shares(self) -> list[ShareInfo]:
        with self._lock:
            return list(self._shares)

    def clear(self) -> None:
        with self._lock:
            self._shares.clear()

    async def flush(self, api: MonitorAPI) -> int:
        """Send the pending shares; return how many were delivered."""
        to_send = self.pending_shares()
        if not to_send:
            logger.warning(
                "No pending shares to send. If this happens frequently, check your miner."
            )
            return 0
        try:
            await api.send_shares(to_send)
        except MonitorError as exc:
            logger.warning(
                "Failed to send shares, this does not affect mining but may cause "
                "issues with monitoring: %s",
                exc,
            )
            return 0
        with self._lock:
            del self._shares[: len(to_send)]
        logger.info("Saved %d shares to the monitoring server", len(to_send))
        return len(to_send)

    async def monitor(
        self, api: MonitorAPI, interval: float = DEFAULT_SHARES_INTERVAL
    ) -> None:
        """Flush the pending shares every ``interval`` seconds, forever."""
        while True:
            await asyncio.sleep(interval)
            await self.flush(api)


class SendLogHandler(logging.Handler):
    """Logging handler that forwards error records to the monitoring server."""

    def __init__(self, api: MonitorAPI) -> None:
        super().__init__(level=logging.ERROR)
        self.api = api
        self._pending: set[asyncio.Task[None]] = set()

    async def _send(self, log: ProxyLog) -> None:
        try:
            await self.api.send_log(log)
        except MonitorError as exc:
            logger.error("Failed to send log to API: %s", exc)

    def emit(self, record: logging.LogRecord) -> None:
        # Records from this module are skipped so a failed send cannot feed itself.
        if record.levelno < logging.ERROR or record.name == __name__:
            return
        try:
            content = f"{record.name}: {record.getMessage()}"
        except Exception:
            self.handleError(record)
            return
        log = ProxyLog(Severity.ERROR, content)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._send(log))
            return
        task = loop.create_task(self._send(log))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)