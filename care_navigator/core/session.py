"""
Browser session interface used by the agent loop.

A session is a stateful remote browser. The agent loop owns exactly one
session per search and calls ``close`` on it exactly once.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel


class BrowserSession(ABC):
    """Remote browser exposing navigate/observe/act/extract primitives."""

    @abstractmethod
    async def start(self) -> None:
        """Acquire the remote browser."""

    @abstractmethod
    async def navigate(self, url: str) -> None:
        """Load ``url`` in the current tab."""

    @abstractmethod
    async def observe(self, instruction: str) -> Any:
        """Describe the current page, guided by ``instruction``."""

    @abstractmethod
    async def act(self, instruction: str) -> bool:
        """Perform one natural-language action. Returns False if it could not be done."""

    @abstractmethod
    async def extract(self, instruction: str, schema: Type[BaseModel]) -> Dict[str, Any]:
        """Pull data matching ``schema`` out of the current page."""

    @abstractmethod
    async def screenshot(self, path: str) -> Optional[str]:
        """Save a full-page screenshot. Returns where it was written, if known."""

    @abstractmethod
    async def close(self) -> None:
        """Release the remote browser."""
