"""
Action planner - asks the LLM for the single next browser action.

The planner is stateless: the page description, search criteria and the
full action history are passed in on every call.
"""

from typing import List, Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from care_navigator.core.retry import retry_operation
from care_navigator.core.schemas import PlannedAction
from care_navigator.core.state import SearchCriteria
from care_navigator.utils.constants import MAX_RETRIES, RETRY_BASE_DELAY
from care_navigator.utils.helpers import StructuredLogger, format_action_history
from care_navigator.utils.prompts import PLANNER_SYSTEM_PROMPT, PLANNER_USER_PROMPT


def build_planner_messages(
    page_state: str,
    criteria: SearchCriteria,
    history: Sequence[str],
) -> List[BaseMessage]:
    """Directive prompt: goal and tools in the system message, history and page in the user message."""
    system_prompt = PLANNER_SYSTEM_PROMPT.format(
        specialists=", ".join(criteria.specialists),
        address=criteria.location.address,
    )
    user_prompt = PLANNER_USER_PROMPT.format(
        history=format_action_history(list(history)),
        page_state=page_state,
    )
    return [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]


class ActionPlanner:
    """Chooses the next PlannedAction with a structured-output LLM call."""

    def __init__(self, llm, max_retries: int = MAX_RETRIES, retry_delay: float = RETRY_BASE_DELAY):
        self.llm = llm
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.log = StructuredLogger("Planner")

    async def next_action(
        self,
        page_state: str,
        criteria: SearchCriteria,
        history: Sequence[str],
    ) -> PlannedAction:
        """
        Plan one atomic action.

        Output that does not match the PlannedAction schema fails the attempt
        and is retried like any other LLM error.

        Raises:
            RetryExhaustedError: every attempt failed
        """
        messages = build_planner_messages(page_state, criteria, history)

        async def plan_once() -> PlannedAction:
            self.log.info(f"Requesting next action ({len(history)} taken so far)")
            structured_llm = self.llm.with_structured_output(PlannedAction)
            result = await structured_llm.ainvoke(messages)
            action = PlannedAction.model_validate(result)
            self.log.info(f"LLM chose {action.as_action_string()} ({action.reasoning})")
            return action

        return await retry_operation(
            plan_once,
            "Failed to get next action from LLM",
            max_retries=self.max_retries,
            base_delay=self.retry_delay,
            log=self.log,
        )
