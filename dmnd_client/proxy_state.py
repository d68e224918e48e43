"""Global health state of the proxy and its components."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)


class PoolState(Enum):
    UP = "Up"
    DOWN = "Down"


class TpState(Enum):
    UP = "Up"
    DOWN = "Down"


class JdState(Enum):
    UP = "Up"
    DOWN = "Down"


class ShareAccounterState(Enum):
    UP = "Up"
    DOWN = "Down"


class TranslatorState(Enum):
    UP = "Up"
    DOWN = "Down"


class DownstreamType(Enum):
    JD_CLIENT_MINING_DOWNSTREAM = "JdClientMiningDownstream"
    TRANSLATOR_DOWNSTREAM = "TranslatorDownstream"


class UpstreamType(Enum):
    JDC_MINING_UPSTREAM = "JDCMiningUpstream"
    TRANSLATOR_UPSTREAM = "TranslatorUpstream"


Detail = Union[Enum, int, Tuple[Enum, ...]]


def _describe(detail: Detail) -> str:
    if isinstance(detail, Enum):
        return str(detail.value)
    if isinstance(detail, tuple):
        return "Down([" + ", ".join(str(item.value) for item in detail) + "])"
    return str(detail)


@dataclass(frozen=True)
class ComponentError:
    """A component reported as failing, with the detail of its state."""

    component: str
    detail: Detail

    def __str__(self) -> str:
        return f"{self.component}({_describe(self.detail)})"


@dataclass
class ProxyState:
    """Thread-safe record of which proxy components are up or down.

    An empty ``downstream`` or ``upstream`` tuple means that side is up.
    """

    pool: PoolState = PoolState.UP
    tp: TpState = TpState.UP
    jd: JdState = JdState.UP
    share_accounter: ShareAccounterState = ShareAccounterState.UP
    translator: TranslatorState = TranslatorState.UP
    inconsistency: Optional[int] = None
    downstream: Tuple[DownstreamType, ...] = ()
    upstream: Tuple[UpstreamType, ...] = ()
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def update_pool_state(self, state: PoolState) -> None:
        logger.info("Updating PoolState state to %s", state.value)
        with self._lock:
            self.pool = state

    def update_tp_state(self, state: TpState) -> None:
        logger.info("Updating TpState state to %s", state.value)
        with self._lock:
            self.tp = state

    def update_jd_state(self, state: JdState) -> None:
        logger.info("Updating JdState state to %s", state.value)
        with self._lock:
            self.jd = state

    def update_translator_state(self, state: TranslatorState) -> None:
        logger.info("Updating Translator state to %s", state.value)
        with self._lock:
            self.translator = state

    def update_share_accounter_state(self, state: ShareAccounterState) -> None:
        logger.info("Updating ShareAccounterState state to %s", state.value)
        with self._lock:
            self.share_accounter = state

    def update_inconsistency(self, code: Optional[int]) -> None:
        logger.info("Updating Internal Inconsistency state to %s", code)
        with self._lock:
            self.inconsistency = code

    def update_downstream_state(self, downstream_type: DownstreamType) -> None:
        logger.info("Updating Downstream state to %s", downstream_type.value)
        with self._lock:
            self.downstream = (downstream_type,)

    def update_upstream_state(self, upstream_type: UpstreamType) -> None:
        logger.info("Updating Upstream state to %s", upstream_type.value)
        with self._lock:
            self.upstream = (upstream_type,)

    def update_proxy_state_up(self) -> None:
        """Mark every component as up and clear any inconsistency."""
        with self._lock:
            self.pool = PoolState.UP
            self.jd = JdState.UP
            self.translator = TranslatorState.UP
            self.tp = TpState.UP
            self.share_accounter = ShareAccounterState.UP
            self.upstream = ()
            self.downstream = ()
            self.inconsistency = None

    def get_errors(self) -> list[ComponentError]:
        """Return the failing components in a fixed order."""
        errors: list[ComponentError] = []
        with self._lock:
            if self.pool is PoolState.DOWN:
                errors.append(ComponentError("Pool", self.pool))
            if self.tp is TpState.DOWN:
                errors.append(ComponentError("Tp", self.tp))
            if self.jd is JdState.DOWN:
                errors.append(ComponentError("Jd", self.jd))
            if self.share_accounter is ShareAccounterState.DOWN:
                errors.append(ComponentError("ShareAccounter", self.share_accounter))
            if self.translator is TranslatorState.DOWN:
                errors.append(ComponentError("Translator", self.translator))
            if self.inconsistency is not None:
                errors.append(
                    ComponentError("InternalInconsistency", self.inconsistency)
                )
            if self.downstream:
                errors.append(ComponentError("Downstream", self.downstream))
            if self.upstream:
                errors.append(ComponentError("Upstream", self.upstream))
        return errors

    def is_proxy_down(self) -> tuple[bool, Optional[str]]:
        """Return whether any component is down and a description of the failures."""
        errors = self.get_errors()
        if not errors:
            return False, None
        return True, "[" + ", ".join(str(error) for error in errors) + "]"