"""Action executor - runs one planned action against the browser session."""

import asyncio

from care_navigator.core.errors import ActionFailedError, ActionTimeoutError
from care_navigator.core.retry import retry_operation
from care_navigator.core.session import BrowserSession
from care_navigator.utils.constants import ACTION_TIMEOUT_SECONDS, MAX_RETRIES, RETRY_BASE_DELAY
from care_navigator.utils.helpers import StructuredLogger


class ActionExecutor:
    """Sends "TOOL: instruction" strings to ``session.act`` under a hard timeout."""

    def __init__(
        self,
        session: BrowserSession,
        timeout: float = ACTION_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_BASE_DELAY,
    ):
        self.session = session
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.log = StructuredLogger("Executor")

    async def attempt(self, action: str) -> None:
        """
        One attempt: race the session call against the timeout.

        Errors raised by the session itself (including its own timeouts)
        propagate unchanged.

        Raises:
            ActionTimeoutError: the session did not answer in time (the call is cancelled)
            ActionFailedError: the session reported it could not perform the action
        """
        task = asyncio.ensure_future(self.session.act(action))
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if not done:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise ActionTimeoutError(action, self.timeout)

        performed = task.result()
        if performed is False:
            raise ActionFailedError(action)

    async def execute(self, action: str) -> None:
        """Run ``action``, retrying the same instruction on failure or timeout."""
        self.log.info(f"Executing {action}")
        await retry_operation(
            lambda: self.attempt(action),
            f"Failed to execute action: {action}",
            max_retries=self.max_retries,
            base_delay=self.retry_delay,
            log=self.log,
        )
        self.log.success(f"Executed {action}")
