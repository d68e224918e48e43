import pytest

from dmnd_client.errors import (
    MonitorError,
    PoolConnectionError,
    PoolErrorKind,
    ShareAccounterError,
    ShareAccounterErrorKind,
    Sv1IngressError,
    TranslatorError,
    TranslatorErrorKind,
)


@pytest.mark.parametrize(
    "kind, message",
    [
        (PoolErrorKind.TIMEOUT, "Timeout Elapsed"),
        (PoolErrorKind.UNRECOVERABLE, "Unrecoverable error"),
        (PoolErrorKind.UNEXPECTED_MESSAGE, "Unexpected Message Type"),
        (PoolErrorKind.MINING_POOL_MUTEX_CORRUPTED, "Mining Pool Mutex Corrupted"),
        (PoolErrorKind.MINING_POOL_TASK_MANAGER_FAILED, "Mining Pool TaskManager Error"),
    ],
)
def test_pool_error_messages(kind, message):
    error = PoolConnectionError(kind)
    assert str(error) == message
    assert error.kind is kind


def test_pool_error_includes_cause_repr():
    cause = OSError("refused")
    error = PoolConnectionError(PoolErrorKind.IO, cause)
    assert str(error).startswith("I/O error: `")
    assert repr(cause) in str(error)
    assert error.cause is cause


def test_pool_error_is_raisable():
    error = PoolConnectionError(PoolErrorKind.TIMEOUT)
    with pytest.raises(PoolConnectionError) as info:
        raise error
    assert info.value is error
    assert error.kind is PoolErrorKind.TIMEOUT
    assert str(error) == "Timeout Elapsed"


@pytest.mark.parametrize(
    "kind, message",
    [
        (
            ShareAccounterErrorKind.TASK_MANAGER_MUTEX_CORRUPTED,
            "Share Accounter Task Manager Mutex Corrupted",
        ),
        (
            ShareAccounterErrorKind.TASK_MANAGER_ERROR,
            "Share Accounter TaskManager Failed to add Task",
        ),
    ],
)
def test_share_accounter_messages(kind, message):
    assert str(ShareAccounterError(kind)) == message


def test_monitor_error_wraps_cause():
    cause = ValueError("boom")
    error = MonitorError(cause)
    assert error.cause is cause
    assert str(error).endswith("boom")


def test_translator_error_without_detail():
    error = TranslatorError(TranslatorErrorKind.POISON_LOCK)
    assert str(error) == "PoisonLock"


def test_translator_error_with_detail():
    error = TranslatorError(TranslatorErrorKind.INVALID_EXTRANONCE, "bad")
    assert str(error) == "InvalidExtranonce bad"
    assert error.detail == "bad"


def test_translator_error_channel_name_kept():
    assert (
        str(TranslatorError(TranslatorErrorKind.IMPOSSIBLE_TO_OPEN_CHANNEL))
        == "ImpossibleToOpenChannnel"
    )


def test_sv1_ingress_error_members():
    values = ["TranslatorDropped", "DownstreamDropped", "TaskFailed"]
    members = [Sv1IngressError(value) for value in values]
    assert members == list(Sv1IngressError)
    assert [member.value for member in members] == values