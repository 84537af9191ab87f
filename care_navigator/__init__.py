"""
Care Navigator - LLM-directed provider search powered by LangGraph + Gemini + MCP

Core workflow: open an insurance provider directory -> observe/plan/act
until the planner signals completion -> extract in-network providers
"""

from care_navigator.core.state import Location, SearchCriteria
from care_navigator.core.schemas import PlannedAction, ProviderRecord, SearchResult
from care_navigator.graph.engine import ProviderSearchAgent, run_provider_search


__version__ = "1.0.0"
__all__ = [
    "Location",
    "SearchCriteria",
    "PlannedAction",
    "ProviderRecord",
    "SearchResult",
    "ProviderSearchAgent",
    "run_provider_search",
]
