"""Small helpers shared by the proxy components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_VERSION_ROLLING_MASK = 0x1FFFE000


def sv1_rolling(
    version_rolling_mask: Optional[int], min_bit_count: Optional[int]
) -> tuple[int, int]:
    """Select the version rolling mask and minimum bit count for a miner's request.

    The requested mask is restricted to the 16 general-purpose version bits;
    missing values become 0.
    """
    mask = 0 if version_rolling_mask is None else version_rolling_mask & _VERSION_ROLLING_MASK
    min_bits = 0 if min_bit_count is None else min_bit_count
    return mask, min_bits


@dataclass(frozen=True)
class UserId:
    value: int

    def __str__(self) -> str:
        return str(self.value)