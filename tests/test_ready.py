"""Tests for the readiness signal."""

import asyncio
from threading import Thread

import pytest

from dexit_module.core import ReadySignal


def test_requires_running_loop() -> None:
    """Test that a signal can only be created inside an event loop."""
    with pytest.raises(RuntimeError):
        ReadySignal()


@pytest.mark.asyncio
async def test_signal_once() -> None:
    """Test that the signal fires once and ignores repeated calls."""
    signal = ReadySignal()

    assert signal.is_set() is False

    signal()
    signal()

    assert signal.is_set() is True

    await asyncio.wait_for(signal.wait(), timeout=1)


@pytest.mark.asyncio
async def test_wait_suspends() -> None:
    """Test that waiting suspends until the signal fires."""
    signal = ReadySignal()
    waiter = asyncio.ensure_future(signal.wait())

    await asyncio.sleep(0)
    assert waiter.done() is False

    signal()

    await asyncio.wait_for(waiter, timeout=1)
    assert signal.is_set() is True


@pytest.mark.asyncio
async def test_signal_from_thread() -> None:
    """Test that the signal may be fired from a foreign thread."""
    signal = ReadySignal()

    thread = Thread(target=signal)
    thread.start()
    thread.join()

    await asyncio.wait_for(signal.wait(), timeout=1)
    assert signal.is_set() is True
