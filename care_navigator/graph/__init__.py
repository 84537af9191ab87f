"""LangGraph search loop and entry point."""

from care_navigator.graph.engine import (
    ProviderSearchAgent,
    resolve_provider_url,
    run_provider_search,
)

__all__ = ["ProviderSearchAgent", "resolve_provider_url", "run_provider_search"]
