"""
Progress reporting to an external observer.

The sink is a one-way channel (a streaming response, a socket, stdout).
Delivery is best-effort: a failing or stalled sink is logged and never stops
the search.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional

from care_navigator.utils.constants import PROGRESS_SEND_TIMEOUT
from care_navigator.utils.helpers import StructuredLogger

ProgressSink = Callable[[str], Any]


class ProgressReporter:
    """Fire-and-forget progress messages for one search."""

    def __init__(self, sink: Optional[ProgressSink] = None, timeout: float = PROGRESS_SEND_TIMEOUT):
        self.sink = sink
        self.timeout = timeout
        self.log = StructuredLogger("Progress")

    async def status(self, message: str) -> None:
        """Send a top-level status message."""
        await self._send(message)

    async def action(self, action: str) -> None:
        """Send a planned action ("TOOL: instruction")."""
        await self._send(action)

    async def _send(self, message: str) -> None:
        if self.sink is None:
            return
        try:
            result = self.sink(message)
            if inspect.isawaitable(result):
                await asyncio.wait_for(result, timeout=self.timeout)
        except asyncio.TimeoutError:
            self.log.warning(f"Progress sink timed out after {self.timeout}s, dropped '{message}'")
        except Exception as e:
            self.log.warning(f"Progress sink failed for '{message}': {e}")
