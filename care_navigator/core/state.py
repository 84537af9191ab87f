from typing import List, Optional, Tuple, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from care_navigator.core.schemas import SearchResult


class Location(BaseModel):
    """Where the patient wants to be seen."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    address: str = Field(min_length=1)


class SearchCriteria(BaseModel):
    """
    Immutable input for one provider search.

    Attributes:
        specialists: Specialist types ordered from most general to most specific.
        location: Target location for the search.
        provider_url: Entry URL of the insurance provider's directory.
    """
    model_config = ConfigDict(frozen=True)

    specialists: Tuple[str, ...] = Field(min_length=1)
    location: Location
    provider_url: str = Field(min_length=1)


class AgentState(TypedDict):
    """
    Represents the state of the provider search loop.

    Attributes:
        page_state: Serialized description of the current page from the last observation.
        action_history: Every planned action as "TOOL: instruction", in planning order.
        planned_action: The action most recently returned by the planner.
        consecutive_errors: Iterations failed in a row since the last successful action.
        actions_executed: Number of actions the browser session completed.
        status: Outcome of the last node.
        last_error: Message of the most recent iteration failure.
        result: Extracted providers, set once by the extract node.
        logs: History of log lines from every node.
    """
    page_state: str
    action_history: List[str]
    planned_action: Optional[str]
    consecutive_errors: int
    actions_executed: int
    status: str  # Enum: "STARTED", "OBSERVED", "PLANNED", "COMPLETE", "ACTED", "ERROR", "RECOVERING", "EXTRACTED"
    last_error: Optional[str]
    result: Optional[SearchResult]
    logs: List[str]
