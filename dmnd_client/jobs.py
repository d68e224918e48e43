"""Recent mining jobs sent to a miner and the mapping between miner-facing and pool job ids."""

from __future__ import annotations

import dataclasses
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

_U32_MASK = 0xFFFF_FFFF
_TRACKED_JOBS = 3
_TRACKED_V2_IDS = 3


def _parse_u32(text: str) -> int:
    """Parse a decimal job id that must fit in 32 bits."""
    digits = text[1:] if text.startswith("+") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        raise ValueError(f"invalid job id: {text!r}")
    value = int(digits)
    if value > _U32_MASK:
        raise ValueError(f"job id out of range: {text!r}")
    return value


@dataclass(frozen=True)
class Notify:
    """A ``mining.notify`` job as sent to a miner."""

    job_id: str
    prev_hash: str
    coin_base1: str
    coin_base2: str
    merkle_branch: tuple[str, ...]
    version: int
    bits: int
    time: int
    clean_jobs: bool


class CircularBuffer(Generic[T]):
    """Fixed-capacity buffer; pushing onto a full buffer evicts the oldest value."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._items: Deque[T] = deque(maxlen=capacity)

    def push_back(self, value: T) -> Optional[T]:
        """Append ``value``; return the evicted value, or None if nothing was evicted."""
        evicted = self._items[0] if len(self._items) == self._items.maxlen else None
        self._items.append(value)
        return evicted

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)


def apply_mask(mask: Optional[int], notify: Notify) -> Notify:
    """Clear the version bits that the miner is allowed to roll."""
    if mask is None:
        return notify
    return dataclasses.replace(notify, version=notify.version & ~mask & _U32_MASK)


class RecentJobs:
    """The last few jobs, stored under their pool (v2) ids.

    Each time a job goes to the miner it gets a fresh random 32-bit (v1) id;
    v1 ids are forgotten once their v2 id falls out of the last three seen.
    """

    def __init__(
        self, tracked_jobs: int = _TRACKED_JOBS, rng: Optional[random.Random] = None
    ) -> None:
        self._v1_to_v2: dict[int, int] = {}
        self._v2_to_v1: dict[int, list[int]] = {}
        self._jobs: Deque[Notify] = deque()
        self._last_v2s: CircularBuffer[int] = CircularBuffer(_TRACKED_V2_IDS)
        self._tracked_jobs = tracked_jobs
        self._rng = rng if rng is not None else random.Random()

    def add_job(self, notify: Notify, mask: Optional[int] = None) -> Notify:
        """Store a job and return it as it should be sent, under a new v1 id."""
        masked = apply_mask(mask, notify)
        v2_id = _parse_u32(masked.job_id)
        self._jobs.append(masked)
        new_id = self._new_v1(v2_id)
        if len(self._jobs) > self._tracked_jobs:
            self._jobs.popleft()
        return dataclasses.replace(masked, job_id=str(new_id))

    def clone_last(self) -> Optional[Notify]:
        """The most recent job under a fresh v1 id, or None if there is none."""
        if not self._jobs:
            return None
        job = self._jobs[-1]
        new_id = self._new_v1(_parse_u32(job.job_id))
        return dataclasses.replace(job, job_id=str(new_id))

    def current_jobs(self) -> list[Notify]:
        return list(self._jobs)

    def get_matching_job(self, v1_id: int) -> Optional[Notify]:
        """The stored job a miner-facing id refers to, if it is still tracked."""
        v2_id = self._v1_to_v2.get(v1_id)
        if v2_id is None:
            return None
        wanted = str(v2_id)
        return next((job for job in self._jobs if job.job_id == wanted), None)

    def _new_v1(self, v2_id: int) -> int:
        v1_id = self._rng.getrandbits(32)
        while v1_id in self._v1_to_v2:
            v1_id = self._rng.getrandbits(32)
        if v2_id in self._v2_to_v1:
            self._v2_to_v1[v2_id].append(v1_id)
        else:
            self._v2_to_v1[v2_id] = [v1_id]
            evicted = self._last_v2s.push_back(v2_id)
            if evicted is not None:
                self._remove_v2(evicted)
        self._v1_to_v2[v1_id] = v2_id
        return v1_id

    def _remove_v2(self, v2_id: int) -> None:
        for v1_id in self._v2_to_v1.pop(v2_id, []):
            self._v1_to_v2.pop(v1_id, None)