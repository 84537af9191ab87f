import asyncio

import pytest

from care_navigator.agents.progress import ProgressReporter


@pytest.mark.asyncio
async def test_async_sink_receives_messages_in_order():
    received = []

    async def sink(message):
        received.append(message)

    reporter = ProgressReporter(sink)
    await reporter.status("Starting provider search...")
    await reporter.action("INTERACT: Click 'Find a Doctor'")
    await reporter.action("INTERACT: Type 'Orthopedist'")

    assert received == [
        "Starting provider search...",
        "INTERACT: Click 'Find a Doctor'",
        "INTERACT: Type 'Orthopedist'",
    ]


@pytest.mark.asyncio
async def test_sync_sink_is_supported():
    received = []
    reporter = ProgressReporter(received.append)

    await reporter.action("WAIT: 2 seconds")

    assert received == ["WAIT: 2 seconds"]


@pytest.mark.asyncio
async def test_failing_sink_never_raises():
    async def broken_sink(message):
        raise ConnectionResetError("client went away")

    reporter = ProgressReporter(broken_sink)

    await reporter.status("still running")
    await reporter.action("INTERACT: Click 'Search'")


@pytest.mark.asyncio
async def test_missing_sink_is_a_no_op():
    await ProgressReporter().status("nobody listening")


@pytest.mark.asyncio
async def test_stalled_sink_is_dropped_after_timeout():
    received = []

    async def stalled_sink(message):
        received.append(message)
        await asyncio.Event().wait()

    reporter = ProgressReporter(stalled_sink, timeout=0.05)

    await asyncio.wait_for(reporter.status("Starting provider search..."), timeout=2)
    await asyncio.wait_for(reporter.action("INTERACT: Click 'Search'"), timeout=2)

    assert received == ["Starting provider search...", "INTERACT: Click 'Search'"]
