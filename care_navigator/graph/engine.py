"""
Search engine - Runs the observe/plan/act loop as a LangGraph workflow.

Flow: initialize session -> observe -> plan -> act -> observe ... until the
planner signals completion, then extract -> END. Any failed iteration goes
through recover, which aborts after too many failures in a row. The browser
session is closed exactly once whatever happens.
"""

import asyncio
import os
import sys
import time
from typing import Any, Callable, Dict, Iterable, Optional, Union

from langgraph.errors import GraphRecursionError
from langgraph.graph import END, StateGraph

from care_navigator.agents.executor import ActionExecutor
from care_navigator.agents.extractor import ResultExtractor
from care_navigator.agents.planner import ActionPlanner
from care_navigator.agents.progress import ProgressReporter
from care_navigator.config import AgentSettings, get_llm
from care_navigator.core.errors import (
    ConsecutiveErrorLimitError,
    IterationLimitError,
    SessionInitError,
)
from care_navigator.core.mcp_session import MCPBrowserSession
from care_navigator.core.schemas import SearchResult
from care_navigator.core.session import BrowserSession
from care_navigator.core.state import AgentState, Location, SearchCriteria
from care_navigator.utils.constants import OBSERVE_INSTRUCTION, PROVIDER_URLS
from care_navigator.utils.helpers import (
    StructuredLogger,
    is_completion_signal,
    merge_logs,
    serialize_page_state,
)


# ============================================================================
# ROUTING
# ============================================================================

def route_after_observe(state: AgentState) -> str:
    return "plan" if state.get("status") == "OBSERVED" else "recover"


def route_after_plan(state: AgentState) -> str:
    """Completion skips execution of the final action and goes straight to extraction."""
    status = state.get("status")
    if status == "COMPLETE":
        return "extract"
    if status == "PLANNED":
        return "act"
    return "recover"


def route_after_act(state: AgentState) -> str:
    return "observe" if state.get("status") == "ACTED" else "recover"


# ============================================================================
# AGENT
# ============================================================================

class ProviderSearchAgent:
    """
    Drives one provider search from session start to teardown.

    Each instance owns its browser session and action history; run it once.
    """

    def __init__(
        self,
        criteria: SearchCriteria,
        session: BrowserSession,
        planner: ActionPlanner,
        reporter: Optional[ProgressReporter] = None,
        executor: Optional[ActionExecutor] = None,
        extractor: Optional[ResultExtractor] = None,
        settings: Optional[AgentSettings] = None,
    ):
        self.criteria = criteria
        self.session = session
        self.planner = planner
        self.settings = settings or AgentSettings()
        self.reporter = reporter or ProgressReporter()
        self.executor = executor or ActionExecutor(
            session,
            timeout=self.settings.action_timeout,
            max_retries=self.settings.max_retries,
            retry_delay=self.settings.retry_base_delay,
        )
        self.extractor = extractor or ResultExtractor(session)
        self.state: Optional[AgentState] = None
        self._ran = False
        self._closed = False
        self.graph = self._build_graph()

    def _build_graph(self):
        workflow = StateGraph(AgentState)

        workflow.add_node("observe", self.node_observe)
        workflow.add_node("plan", self.node_plan)
        workflow.add_node("act", self.node_act)
        workflow.add_node("recover", self.node_recover)
        workflow.add_node("extract", self.node_extract)

        workflow.set_entry_point("observe")
        workflow.add_conditional_edges(
            "observe",
            route_after_observe,
            {"plan": "plan", "recover": "recover"}
        )
        workflow.add_conditional_edges(
            "plan",
            route_after_plan,
            {"act": "act", "extract": "extract", "recover": "recover"}
        )
        workflow.add_conditional_edges(
            "act",
            route_after_act,
            {"observe": "observe", "recover": "recover"}
        )
        # No visibility delay after a failed iteration
        workflow.add_edge("recover", "observe")
        workflow.add_edge("extract", END)

        return workflow.compile()

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    async def node_observe(self, state: AgentState) -> Dict[str, Any]:
        """Ask the session to describe the current page."""
        log = StructuredLogger("Observe")
        try:
            observation = await self.session.observe(OBSERVE_INSTRUCTION)
        except Exception as e:
            log.error(f"Observation failed: {e}")
            return {
                "status": "ERROR",
                "last_error": f"Observation failed: {e}",
                "logs": merge_logs(state.get("logs", []), log.get_logs())
            }

        page_state = serialize_page_state(observation)
        log.info(f"Page observed ({len(page_state)} chars)")
        return {
            "status": "OBSERVED",
            "page_state": page_state,
            "logs": merge_logs(state.get("logs", []), log.get_logs())
        }

    async def node_plan(self, state: AgentState) -> Dict[str, Any]:
        """
        Get the next action, record it and report it before anything runs.

        Records: "TOOL: instruction" in action_history
        """
        log = StructuredLogger("Plan")
        history = state.get("action_history", [])
        try:
            action = await self.planner.next_action(state.get("page_state", ""), self.criteria, history)
        except Exception as e:
            log.error(f"Planning failed: {e}")
            return {
                "status": "ERROR",
                "last_error": f"Planning failed: {e}",
                "logs": merge_logs(state.get("logs", []), log.get_logs())
            }

        action_string = action.as_action_string()
        history = history + [action_string]
        await self.reporter.action(action_string)

        if is_completion_signal(action.instruction):
            log.success(f"Planner signalled completion: {action_string}")
            status = "COMPLETE"
        else:
            log.info(f"Planned step {len(history)}: {action_string}")
            status = "PLANNED"

        return {
            "status": status,
            "planned_action": action_string,
            "action_history": history,
            "logs": merge_logs(state.get("logs", []), log.get_logs())
        }

    async def node_act(self, state: AgentState) -> Dict[str, Any]:
        """Execute the planned action; success clears the consecutive error count."""
        log = StructuredLogger("Act")
        action = state["planned_action"]
        try:
            await self.executor.execute(action)
        except Exception as e:
            log.error(f"Action failed: {e}")
            return {
                "status": "ERROR",
                "last_error": f"Action failed: {e}",
                "logs": merge_logs(state.get("logs", []), log.get_logs())
            }

        # Add delay for visibility
        await asyncio.sleep(self.settings.visibility_delay)

        return {
            "status": "ACTED",
            "consecutive_errors": 0,
            "actions_executed": state.get("actions_executed", 0) + 1,
            "logs": merge_logs(state.get("logs", []), log.get_logs())
        }

    async def node_recover(self, state: AgentState) -> Dict[str, Any]:
        """
        Count the failed iteration and abort once the limit is reached.

        Below the limit, capture a diagnostic screenshot (best-effort) and
        go back to observing.
        """
        log = StructuredLogger("Recover")
        errors = state.get("consecutive_errors", 0) + 1
        last_error = state.get("last_error")
        log.warning(f"Error during search (attempt {errors}/{self.settings.max_consecutive_errors}): {last_error}")

        if errors >= self.settings.max_consecutive_errors:
            log.error("Too many consecutive errors - aborting search")
            raise ConsecutiveErrorLimitError(errors, last_error)

        await self._capture_diagnostic(log)

        return {
            "status": "RECOVERING",
            "consecutive_errors": errors,
            "logs": merge_logs(state.get("logs", []), log.get_logs())
        }

    async def node_extract(self, state: AgentState) -> Dict[str, Any]:
        """Extract providers. Failures here are fatal and propagate."""
        log = StructuredLogger("Extract")
        await self.reporter.status("Extracting provider results...")
        result = await self.extractor.extract()
        log.success(f"Search finished with {len(result.providers)} providers")
        return {
            "status": "EXTRACTED",
            "result": result,
            "logs": merge_logs(state.get("logs", []), log.get_logs())
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _capture_diagnostic(self, log: StructuredLogger) -> None:
        path = os.path.join(self.settings.screenshot_dir, f"error-{int(time.time() * 1000)}.png")
        try:
            saved = await self.session.screenshot(path)
            log.info(f"Diagnostic screenshot saved: {saved or path}")
        except Exception as e:
            log.debug(f"Diagnostic screenshot failed (ignored): {e}")

    async def _initialize(self) -> None:
        """Start the session and open the directory. Failures are fatal and not retried."""
        log = StructuredLogger("Initialize")
        url = self.criteria.provider_url
        try:
            await self.session.start()
            log.info(f"Navigating to: {url}")
            await self.reporter.status(f"Opening provider directory: {url}")
            await self.session.navigate(url)
        except SessionInitError:
            raise
        except Exception as e:
            log.error(f"Failed to initialize browser session: {e}")
            raise SessionInitError(f"Failed to initialize web agent: {e}") from e
        log.success("Provider directory loaded")

    async def _teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        log = StructuredLogger("Teardown")
        try:
            await self.session.close()
        except Exception as e:
            log.warning(f"Browser session close failed: {e}")
            return
        log.info("Browser session closed")

    def _recursion_limit(self) -> int:
        # LangGraph needs a finite limit; 0 keeps the loop effectively unbounded
        if self.settings.max_agent_steps > 0:
            return self.settings.max_agent_steps
        return sys.maxsize

    def _initial_state(self) -> AgentState:
        return AgentState(
            page_state="",
            action_history=[],
            planned_action=None,
            consecutive_errors=0,
            actions_executed=0,
            status="STARTED",
            last_error=None,
            result=None,
            logs=[],
        )

    async def run(self) -> SearchResult:
        """
        Run the search to completion.

        Raises:
            SessionInitError: the session could not be started or the directory not loaded
            ConsecutiveErrorLimitError: too many iterations failed in a row
            ExtractionError: the final page did not yield valid providers
            IterationLimitError: a configured step ceiling was reached
        """
        if self._ran:
            raise RuntimeError("ProviderSearchAgent runs a single search; create a new agent")
        self._ran = True

        try:
            await self._initialize()
            async for state in self.graph.astream(
                self._initial_state(),
                config={"recursion_limit": self._recursion_limit()},
                stream_mode="values",
            ):
                self.state = state
        except GraphRecursionError:
            raise IterationLimitError(self.settings.max_agent_steps) from None
        finally:
            await self._teardown()

        return self.state["result"]


# ============================================================================
# ENTRY POINT
# ============================================================================

def resolve_provider_url(provider: str) -> str:
    """Map an insurance provider key (or a direct http(s) URL) to its directory URL."""
    key = provider.strip().lower()
    if key in PROVIDER_URLS:
        return PROVIDER_URLS[key]
    if key.startswith(("http://", "https://")):
        return provider.strip()
    raise ValueError(
        f"Invalid insurance provider '{provider}'. Choose one of: {', '.join(sorted(PROVIDER_URLS))}"
    )


async def run_provider_search(
    provider: str,
    specialists: Iterable[str],
    location: Union[Location, Dict[str, Any]],
    on_progress: Optional[Callable[[str], Any]] = None,
    llm=None,
    session: Optional[BrowserSession] = None,
    settings: Optional[AgentSettings] = None,
) -> SearchResult:
    """
    Run a full provider search.

    Args:
        provider: Key of PROVIDER_URLS or a directory URL
        specialists: Specialist types, most general first
        location: Location or dict with lat, lng, address
        on_progress: Optional sink for progress messages (sync or async)
        llm: Chat model; built from the environment when omitted
        session: Browser session; an MCPBrowserSession when omitted
        settings: Agent settings; read from the environment when omitted

    Returns:
        Extracted providers
    """
    settings = settings or AgentSettings.from_env()
    criteria = SearchCriteria(
        specialists=tuple(specialists),
        location=Location.model_validate(location),
        provider_url=resolve_provider_url(provider),
    )

    reporter = ProgressReporter(on_progress)
    llm = llm or get_llm(settings)
    session = session or MCPBrowserSession(llm, settings=settings)
    planner = ActionPlanner(llm, max_retries=settings.max_retries, retry_delay=settings.retry_base_delay)
    agent = ProviderSearchAgent(criteria, session, planner, reporter=reporter, settings=settings)

    await reporter.status("Starting provider search...")
    try:
        result = await agent.run()
    except Exception as e:
        await reporter.status(f"Search failed: {e}")
        raise

    await reporter.status(f"Search complete: {len(result.providers)} providers found")
    return result
