"""Core components: state, schemas, errors, retry and the browser session."""

from care_navigator.core.state import AgentState, Location, SearchCriteria
from care_navigator.core.schemas import ActionTool, PlannedAction, ProviderRecord, SearchResult
from care_navigator.core.retry import retry_operation
from care_navigator.core.session import BrowserSession
from care_navigator.core.mcp_client import PlaywrightMCPClient
from care_navigator.core.mcp_session import MCPBrowserSession

__all__ = [
    "AgentState",
    "Location",
    "SearchCriteria",
    "ActionTool",
    "PlannedAction",
    "ProviderRecord",
    "SearchResult",
    "retry_operation",
    "BrowserSession",
    "PlaywrightMCPClient",
    "MCPBrowserSession",
]
