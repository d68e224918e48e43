import asyncio

import pytest

from dmnd_client.tasks import AbortHandle, TaskKind, TaskManager


async def _settle():
    for _ in range(5):
        await asyncio.sleep(0)


def _forever():
    return asyncio.create_task(asyncio.sleep(3600))


def test_empty_handle_is_finished():
    assert AbortHandle().is_finished() is True


@pytest.mark.asyncio
async def test_abort_cancels_tasks():
    first, second = _forever(), _forever()
    handle = AbortHandle(first)
    handle.add_task(second)
    assert handle.is_finished() is False
    handle.abort()
    await _settle()
    assert handle.is_finished() is True
    assert first.cancelled() and second.cancelled()


@pytest.mark.asyncio
async def test_is_finished_requires_all_tasks():
    done = asyncio.create_task(asyncio.sleep(0))
    pending = _forever()
    handle = AbortHandle(done, pending)
    await _settle()
    assert done.done()
    assert handle.is_finished() is False
    handle.abort()
    await _settle()
    assert handle.is_finished() is True


@pytest.mark.asyncio
async def test_context_manager_aborts_on_exit():
    task = _forever()
    with AbortHandle(task) as handle:
        assert handle.is_finished() is False
    await _settle()
    assert task.cancelled()


@pytest.mark.asyncio
async def test_aborter_is_handed_out_once():
    manager = TaskManager()
    aborter = manager.get_aborter()
    assert isinstance(aborter, AbortHandle)
    assert manager.get_aborter() is None
    aborter.abort()
    await _settle()
    assert aborter.is_finished() is True


@pytest.mark.asyncio
async def test_aborting_manager_aborts_registered_tasks():
    manager = TaskManager()
    aborter = manager.get_aborter()
    up, down = _forever(), _forever()
    manager.add_task(TaskKind.RELAY_UP, AbortHandle(up))
    manager.add_task(TaskKind.RELAY_DOWN, AbortHandle(down))
    await _settle()
    assert not up.done() and not down.done()
    aborter.abort()
    await _settle()
    assert up.cancelled() and down.cancelled()


@pytest.mark.asyncio
async def test_add_task_after_abort_raises():
    manager = TaskManager()
    aborter = manager.get_aborter()
    aborter.abort()
    await _settle()
    task = _forever()
    with pytest.raises(RuntimeError):
        manager.add_task(TaskKind.RELAY_UP, AbortHandle(task))
    task.cancel()
    await _settle()
    assert task.cancelled()


def test_manager_needs_running_loop():
    with pytest.raises(RuntimeError):
        TaskManager()