"""Agent components used by the search loop."""

from care_navigator.agents.executor import ActionExecutor
from care_navigator.agents.extractor import ResultExtractor
from care_navigator.agents.planner import ActionPlanner, build_planner_messages
from care_navigator.agents.progress import ProgressReporter

__all__ = [
    "ActionExecutor",
    "ResultExtractor",
    "ActionPlanner",
    "build_planner_messages",
    "ProgressReporter",
]
