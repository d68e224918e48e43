"""Exceptions raised by the proxy's components."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Sv1IngressError(Enum):
    TRANSLATOR_DROPPED = "TranslatorDropped"
    DOWNSTREAM_DROPPED = "DownstreamDropped"
    TASK_FAILED = "TaskFailed"


class PoolErrorKind(Enum):
    BINARY_SV2 = "BinarySv2"
    SV2_CONNECTION = "SV2Connection"
    FRAMING_SV2 = "FramingSv2"
    IO = "Io"
    ROLES_SV2_LOGIC = "RolesSv2Logic"
    UPSTREAM_INCOMING = "UpstreamIncoming"
    TIMEOUT = "Timeout"
    UNRECOVERABLE = "Unrecoverable"
    UNEXPECTED_MESSAGE = "UnexpectedMessage"
    MINING_POOL_MUTEX_CORRUPTED = "MiningPoolMutexCorrupted"
    MINING_POOL_TASK_MANAGER_FAILED = "MiningPoolTaskManagerFailed"


_POOL_MESSAGES = {
    PoolErrorKind.BINARY_SV2: "Binary SV2 error: `{cause!r}`",
    PoolErrorKind.SV2_CONNECTION: "Demand SV2 connectiom  error: `{cause!r}",
    PoolErrorKind.FRAMING_SV2: "Framing SV2 error: `{cause!r}`",
    PoolErrorKind.IO: "I/O error: `{cause!r}",
    PoolErrorKind.ROLES_SV2_LOGIC: "Roles SV2 Logic Error: `{cause!r}`",
    PoolErrorKind.UPSTREAM_INCOMING: "Upstream parse incoming error: `{cause!r}`",
    PoolErrorKind.UNRECOVERABLE: "Unrecoverable error",
    PoolErrorKind.UNEXPECTED_MESSAGE: "Unexpected Message Type",
    PoolErrorKind.TIMEOUT: "Timeout Elapsed",
    PoolErrorKind.MINING_POOL_MUTEX_CORRUPTED: "Mining Pool Mutex Corrupted",
    PoolErrorKind.MINING_POOL_TASK_MANAGER_FAILED: "Mining Pool TaskManager Error",
}


class PoolConnectionError(Exception):
    """Failure while connecting to or talking with the mining pool."""

    def __init__(self, kind: PoolErrorKind, cause: Optional[object] = None) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(_POOL_MESSAGES[kind].format(cause=cause))


class ShareAccounterErrorKind(Enum):
    TASK_MANAGER_MUTEX_CORRUPTED = "Share Accounter Task Manager Mutex Corrupted"
    TASK_MANAGER_ERROR = "Share Accounter TaskManager Failed to add Task"


class ShareAccounterError(Exception):
    """Failure while starting the share accounter."""

    def __init__(self, kind: ShareAccounterErrorKind) -> None:
        self.kind = kind
        super().__init__(kind.value)


class MonitorError(Exception):
    """Failure while reporting to the monitoring server."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Request error: {cause}")


class TranslatorErrorKind(Enum):
    INVALID_EXTRANONCE = "InvalidExtranonce"
    ROLES_SV2_LOGIC = "RolesSv2Logic"
    V1_PROTOCOL = "V1Protocol"
    POISON_LOCK = "PoisonLock"
    TRANSLATOR_UPSTREAM_MUTEX_POISONED = "TranslatorUpstreamMutexPoisoned"
    TRANSLATOR_DIFF_CONFIG_MUTEX_POISONED = "TranslatorDiffConfigMutexPoisoned"
    TRANSLATOR_TASK_MANAGER_MUTEX_POISONED = "TranslatorTaskManagerMutexPoisoned"
    BRIDGE_MUTEX_POISONED = "BridgeMutexPoisoned"
    BRIDGE_TASK_MANAGER_MUTEX_POISONED = "BridgeTaskManagerMutexPoisoned"
    TRANSLATOR_TASK_MANAGER_FAILED = "TranslatorTaskManagerFailed"
    BRIDGE_TASK_MANAGER_FAILED = "BridgeTaskManagerFailed"
    UNRECOVERABLE = "Unrecoverable"
    TARGET_ERROR = "TargetError"
    IMPOSSIBLE_TO_OPEN_CHANNEL = "ImpossibleToOpenChannnel"
    ASYNC_CHANNEL_ERROR = "AsyncChannelError"


class TranslatorError(Exception):
    """Failure inside the SV1 to SV2 translator."""

    def __init__(
        self, kind: TranslatorErrorKind, detail: Optional[object] = None
    ) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value} {detail}"
        super().__init__(message)