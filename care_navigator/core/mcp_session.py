"""
MCP Browser Session - natural-language browser primitives over Playwright MCP.

The ExecuteAutomation server only understands concrete tool calls (click a
selector, fill a field). This session adds the observe/act/extract layer the
agent loop needs: it reads the cleaned page HTML and lets the LLM turn an
instruction into a description, a concrete command, or structured data.
"""

import asyncio
import os
from typing import Any, Dict, Optional, Type

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel

from care_navigator.config import AgentSettings
from care_navigator.core.errors import SessionInitError
from care_navigator.core.mcp_client import PlaywrightMCPClient
from care_navigator.core.schemas import BrowserCommand, PageObservation
from care_navigator.core.session import BrowserSession
from care_navigator.utils.constants import MCP_CONNECT_TIMEOUT_SECONDS
from care_navigator.utils.helpers import StructuredLogger, clean_html_for_llm
from care_navigator.utils.prompts import (
    ACT_SYSTEM_PROMPT,
    EXTRACT_SYSTEM_PROMPT,
    OBSERVE_SYSTEM_PROMPT,
)


class MCPBrowserSession(BrowserSession):
    """
    Browser session backed by a Playwright MCP server and an LLM.

    Core functionality:
    - Navigate to URLs
    - Describe the page (observe)
    - Resolve and run one natural-language action (act)
    - Extract structured data with a pydantic schema (extract)
    """

    def __init__(
        self,
        llm,
        client: Optional[PlaywrightMCPClient] = None,
        settings: Optional[AgentSettings] = None,
    ):
        """
        Args:
            llm: LangChain chat model supporting with_structured_output
            client: MCP client; a fresh one per session when omitted
            settings: Agent settings (server URL, HTML budget, settle delay)
        """
        self.llm = llm
        self.settings = settings or AgentSettings()
        self.mcp = client or PlaywrightMCPClient(self.settings.mcp_server_url)
        self._started = False
        self._closed = False
        self.log = StructuredLogger("MCPSession")

    async def start(self) -> None:
        """Connect to the MCP server. Raises SessionInitError if it is unreachable."""
        if not await self.mcp.is_server_running():
            raise SessionInitError(
                f"MCP server not running at {self.mcp.server_url}. Start it with: "
                f"npx @executeautomation/playwright-mcp-server --port {self.mcp.port}"
            )
        try:
            connected = await asyncio.wait_for(self.mcp.connect(), timeout=MCP_CONNECT_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            raise SessionInitError(
                f"Timeout ({MCP_CONNECT_TIMEOUT_SECONDS:.0f}s) while connecting to MCP server"
            ) from None
        if not connected:
            raise SessionInitError("Failed to connect to MCP server")
        self._started = True
        self.log.success("MCP browser session started")

    async def navigate(self, url: str) -> None:
        await self.mcp.navigate(url)
        # Wait for page to settle
        await asyncio.sleep(self.settings.navigation_settle)

    async def page_html(self) -> str:
        """Cleaned HTML of the current page, trimmed to the configured budget."""
        snapshot = await self.mcp.get_cleaned_html()
        raw_html = snapshot.get("result") or ""
        return clean_html_for_llm(raw_html, max_length=self.settings.html_limit)

    async def _ask(self, schema: Type[BaseModel], system_prompt: str, instruction: str) -> Any:
        html = await self.page_html()
        structured_llm = self.llm.with_structured_output(schema)
        return await structured_llm.ainvoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=f"{instruction}\n\nHTML:\n{html}"),
        ])

    async def observe(self, instruction: str) -> Dict[str, Any]:
        """Describe the current page and the actions available on it."""
        result = await self._ask(PageObservation, OBSERVE_SYSTEM_PROMPT, instruction)
        observation = PageObservation.model_validate(result)
        return observation.model_dump()

    async def act(self, instruction: str) -> bool:
        """Resolve ``instruction`` into one browser command and run it."""
        result = await self._ask(BrowserCommand, ACT_SYSTEM_PROMPT, f"Instruction: {instruction}")
        command = BrowserCommand.model_validate(result)
        self.log.info(f"Resolved '{instruction}' -> {command.command} {command.selector or ''} {command.value or ''}".rstrip())
        return await self.run_command(command)

    async def run_command(self, command: BrowserCommand) -> bool:
        """
        Dispatch a concrete command to the matching MCP tool.

        Returns False when the command is missing the selector or value it needs.
        MCP tool failures propagate as MCPToolError.
        """
        name = command.command

        if name in ("click", "fill", "select") and not command.selector:
            self.log.warning(f"'{name}' command without a selector")
            return False
        if name in ("fill", "select", "press_key", "navigate") and command.value is None:
            self.log.warning(f"'{name}' command without a value")
            return False

        if name == "click":
            await self.mcp.click(command.selector)
        elif name == "fill":
            await self.mcp.fill(command.selector, command.value)
        elif name == "select":
            await self.mcp.select(command.selector, command.value)
        elif name == "press_key":
            await self.mcp.press_key(command.value)
        elif name == "navigate":
            await self.navigate(command.value)
        elif name == "go_back":
            await self.mcp.go_back()
        elif name == "wait":
            try:
                seconds = float(command.value) if command.value else 1.0
            except ValueError:
                seconds = 1.0
            await asyncio.sleep(seconds)
        return True

    async def extract(self, instruction: str, schema: Type[BaseModel]) -> Dict[str, Any]:
        """Extract data matching ``schema``. Validation is left to the caller."""
        result = await self._ask(schema, EXTRACT_SYSTEM_PROMPT, instruction)
        if isinstance(result, BaseModel):
            return result.model_dump()
        return result

    async def screenshot(self, path: str) -> Optional[str]:
        directory, filename = os.path.split(os.path.abspath(path))
        name = os.path.splitext(filename)[0]
        await self.mcp.screenshot(name, directory, full_page=True)
        return os.path.join(directory, f"{name}.png")

    async def close(self) -> None:
        """Close the browser and disconnect. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        if self._started and self.mcp.connected:
            try:
                await self.mcp.close()
                print("🔒 Browser closed via MCP")
            except Exception as e:
                print(f"⚠️ Browser close warning: {e}")
        await self.mcp.disconnect()
