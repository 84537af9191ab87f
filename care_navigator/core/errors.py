"""Exception types raised by the agent loop and its collaborators."""

from typing import Optional


class CareNavigatorError(Exception):
    """Base class for every error raised by Care Navigator."""


class RetryExhaustedError(CareNavigatorError):
    """All attempts of a retried operation failed."""

    def __init__(self, label: str, last_error: Optional[BaseException], attempts: int):
        self.label = label
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"{label}: {last_error}")


class ActionTimeoutError(CareNavigatorError):
    """A browser action did not finish before the action timeout."""

    def __init__(self, action: str, timeout: float):
        self.action = action
        self.timeout = timeout
        super().__init__(f"Action timeout after {timeout}s: {action}")


class ActionFailedError(CareNavigatorError):
    """The browser session reported that it could not perform an action."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Browser session could not perform action: {action}")


class SessionInitError(CareNavigatorError):
    """The browser session could not be started or could not load the directory."""


class ConsecutiveErrorLimitError(CareNavigatorError):
    """The loop failed too many iterations in a row."""

    def __init__(self, count: int, last_error: Optional[str] = None):
        self.count = count
        self.last_error = last_error
        message = f"Too many consecutive errors ({count})"
        if last_error:
            message += f": {last_error}"
        super().__init__(message)


class IterationLimitError(CareNavigatorError):
    """The configured ceiling on graph steps was reached."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Agent loop exceeded {limit} steps without completing")


class ExtractionError(CareNavigatorError):
    """Provider results could not be extracted or did not match the schema."""


class MCPToolError(CareNavigatorError):
    """An MCP tool call failed."""

    def __init__(self, tool: str, reason: str):
        self.tool = tool
        self.reason = reason
        super().__init__(f"MCP tool '{tool}' failed: {reason}")
