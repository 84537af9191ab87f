from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ActionTool(str, Enum):
    """Fixed vocabulary of browser actions the planner may choose."""
    NAVIGATE = "NAVIGATE"
    INTERACT = "INTERACT"
    EXTRACT = "EXTRACT"
    OBSERVE = "OBSERVE"
    CLOSE = "CLOSE"
    WAIT = "WAIT"
    NAVIGATE_BACK = "NAVIGATE_BACK"


class PlannedAction(BaseModel):
    """The single next step chosen by the planner LLM."""
    reasoning: str = Field(description="Reasoning explaining your thought process for this step.")
    tool: ActionTool = Field(description="The tool to use: NAVIGATE, INTERACT, EXTRACT, OBSERVE, CLOSE, WAIT or NAVIGATE_BACK.")
    instruction: str = Field(
        min_length=1,
        description="A specific, atomic instruction for the tool (one click, one field, one selection, or a URL)."
    )

    def as_action_string(self) -> str:
        """Human-readable form recorded in the action history, e.g. 'INTERACT: click Search'."""
        return f"{self.tool.value}: {self.instruction}"


class ProviderRecord(BaseModel):
    """A single in-network provider listed by the directory."""
    name: str = Field(description="Full name of the provider or practice")
    specialty: str = Field(description="The provider's specialty as listed")
    address: str = Field(description="Office address")
    phone: Optional[str] = Field(default=None, description="Office phone number, if shown")


class SearchResult(BaseModel):
    """Providers extracted from the directory, in page order."""
    providers: List[ProviderRecord] = Field(description="The list of providers found on the page")


class PageObservation(BaseModel):
    """Natural-language description of the current page."""
    summary: str = Field(description="What page this is and what it currently shows")
    available_actions: List[str] = Field(
        default_factory=list,
        description="Interactive elements a user could use next, each with a CSS selector"
    )


class BrowserCommand(BaseModel):
    """One concrete browser command resolved from a natural-language instruction."""
    command: Literal["click", "fill", "select", "press_key", "navigate", "go_back", "wait", "noop"] = Field(
        description="The command to run. MUST be one of: click, fill, select, press_key, navigate, go_back, wait, noop"
    )
    selector: Optional[str] = Field(default=None, description="CSS selector of the target element (click/fill/select)")
    value: Optional[str] = Field(default=None, description="Text to type, option to select, key to press, URL, or seconds to wait")
    reasoning: str = Field(default="", description="Brief explanation of why this command matches the instruction")
