"""
Playwright MCP Client - Using ExecuteAutomation MCP Server.

Talks to the ExecuteAutomation Playwright MCP server over SSE. Each client
owns its own connection so concurrent searches never share a browser.

MCP Server: @executeautomation/playwright-mcp-server
"""

import asyncio
from contextlib import AsyncExitStack
from typing import Any, Dict, Optional
from urllib.parse import urlparse

# Official MCP SDK imports
from mcp import ClientSession
from mcp.client.sse import sse_client

from care_navigator.core.errors import MCPToolError
from care_navigator.utils.constants import DEFAULT_MCP_SERVER_URL


class PlaywrightMCPClient:
    """Client for the ExecuteAutomation Playwright MCP server."""

    def __init__(self, server_url: str = DEFAULT_MCP_SERVER_URL):
        """
        Initialize MCP client.

        Args:
            server_url: SSE endpoint of the MCP server (default port 8931)
        """
        self.server_url = server_url
        parsed = urlparse(server_url)
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or 8931
        self._session: Optional[ClientSession] = None
        self._exit_stack: Optional[AsyncExitStack] = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def is_server_running(self) -> bool:
        """Check if the MCP server is running by testing the port."""
        hosts = [self.host]
        if self.host == "localhost":
            # Some servers bind only to ::1
            hosts = ["::1", "127.0.0.1"]

        for host in hosts:
            try:
                _, writer = await asyncio.wait_for(
                    asyncio.open_connection(host, self.port),
                    timeout=2.0
                )
                writer.close()
                await writer.wait_closed()
                return True
            except (OSError, asyncio.TimeoutError):
                continue
        return False

    async def connect(self) -> bool:
        """
        Connect to the MCP server using the SSE transport.

        Returns:
            True if connection successful
        """
        if self._session is not None:
            return True

        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(sse_client(self.server_url))
            session = await stack.enter_async_context(ClientSession(read_stream, write_stream))
            await session.initialize()
        except Exception as e:
            print(f"⚠️ Failed to connect to MCP server: {e}")
            await stack.aclose()
            return False

        self._exit_stack = stack
        self._session = session
        print("✅ Connected to ExecuteAutomation MCP server")
        return True

    async def disconnect(self):
        """Disconnect from the MCP server."""
        stack = self._exit_stack
        self._session = None
        self._exit_stack = None
        if stack is not None:
            print("🔌 Disconnecting from MCP server...")
            await stack.aclose()

    async def call_tool(self, tool_name: str, params: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Call an MCP tool.

        Args:
            tool_name: Name of the MCP tool
            params: Parameters for the tool

        Returns:
            {"result": <joined text content>}

        Raises:
            MCPToolError: not connected, transport failure, or the tool reported an error
        """
        if self._session is None:
            raise MCPToolError(tool_name, "not connected to MCP server")

        try:
            result = await self._session.call_tool(tool_name, arguments=params or {})
        except Exception as e:
            raise MCPToolError(tool_name, str(e)) from e

        text_parts = [content.text for content in (result.content or []) if hasattr(content, "text")]

        if getattr(result, "isError", False):
            raise MCPToolError(tool_name, "\n".join(text_parts) or "tool returned an error")

        if not text_parts:
            return {"result": None}

        # playwright_evaluate returns ["Executed JavaScript:", "script", "Result:", "actual_result"]
        if tool_name == "playwright_evaluate" and len(text_parts) >= 4 and text_parts[2] == "Result:":
            val = text_parts[3].strip()
            if val.startswith('"') and val.endswith('"'):
                val = val[1:-1].replace('\\n', '\n').replace('\\"', '"')
            return {"result": val}

        return {"result": "\n".join(text_parts)}

    # ============ Browser Automation Tools ============
    # Note: ExecuteAutomation uses playwright_* naming convention

    async def navigate(self, url: str) -> Dict[str, Any]:
        """Navigate to a URL."""
        print(f"🌐 Navigating to: {url}")
        return await self.call_tool("playwright_navigate", {"url": url})

    async def go_back(self) -> Dict[str, Any]:
        """Navigate back in history."""
        return await self.call_tool("playwright_go_back", {})

    async def click(self, selector: str) -> Dict[str, Any]:
        """Click an element by selector."""
        print(f"🖱️ Clicking: {selector}")
        return await self.call_tool("playwright_click", {"selector": selector})

    async def fill(self, selector: str, value: str) -> Dict[str, Any]:
        """Fill a text field."""
        print(f"⌨️ Filling: {selector}")
        return await self.call_tool("playwright_fill", {"selector": selector, "value": value})

    async def select(self, selector: str, value: str) -> Dict[str, Any]:
        """Select an option in a <select> element."""
        return await self.call_tool("playwright_select", {"selector": selector, "value": value})

    async def press_key(self, key: str) -> Dict[str, Any]:
        """Press a keyboard key."""
        return await self.call_tool("playwright_press_key", {"key": key})

    async def get_cleaned_html(self) -> Dict[str, Any]:
        """
        Get the cleaned HTML of the page (removing scripts, styles, etc) using JS evaluation.

        Cleaning runs in the browser so only the useful markup crosses the wire.
        """
        script = """
        (function() {
            const clone = document.documentElement.cloneNode(true);
            const remove = (sel) => {
                for (const el of clone.querySelectorAll(sel)) {
                    el.remove();
                }
            };
            remove('script, style, link, svg, noscript, iframe, object, embed, template');
            const walker = document.createTreeWalker(clone, NodeFilter.SHOW_COMMENT);
            const comments = [];
            while (walker.nextNode()) comments.push(walker.currentNode);
            for (const c of comments) {
                if (c.parentNode) c.parentNode.removeChild(c);
            }
            for (const el of clone.querySelectorAll('*')) {
                if (el.style.display === 'none' || el.style.visibility === 'hidden') {
                    el.remove();
                }
            }
            return clone.outerHTML;
        })()
        """
        script = " ".join(line.strip() for line in script.splitlines() if line.strip())
        return await self.call_tool("playwright_evaluate", {"script": script})

    async def screenshot(self, name: str, downloads_dir: str, full_page: bool = True) -> Dict[str, Any]:
        """Take a screenshot and save it as <downloads_dir>/<name>.png."""
        return await self.call_tool("playwright_screenshot", {
            "name": name,
            "fullPage": full_page,
            "savePng": True,
            "downloadsDir": downloads_dir,
        })

    async def close(self) -> Dict[str, Any]:
        """Close the browser."""
        return await self.call_tool("playwright_close", {})
