import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set dummy env vars so nothing reaches for real credentials
os.environ.setdefault("GOOGLE_API_KEY", "dummy_key")
os.environ.setdefault("GEMINI_MODEL", "dummy_model")

from care_navigator.config import AgentSettings
from care_navigator.core.schemas import ActionTool, PlannedAction
from care_navigator.core.session import BrowserSession
from care_navigator.core.state import Location, SearchCriteria


PROVIDERS_PAYLOAD = {
    "providers": [
        {
            "name": "Dr. Jane Smith",
            "specialty": "Orthopedist",
            "address": "1 Main St, Springfield",
            "phone": "555-0100",
        },
        {
            "name": "Spine Center of Springfield",
            "specialty": "Orthopedic Spine Specialist",
            "address": "20 Elm St, Springfield",
        },
    ]
}


def action(tool: str, instruction: str) -> PlannedAction:
    return PlannedAction(reasoning="test step", tool=ActionTool(tool), instruction=instruction)


@pytest.fixture
def make_action():
    return action


@pytest.fixture
def criteria():
    return SearchCriteria(
        specialists=("Primary Care Physician", "Orthopedist", "Orthopedic Spine Specialist"),
        location=Location(lat=39.78, lng=-89.65, address="Springfield, IL"),
        provider_url="https://example.com/find-a-doctor",
    )


@pytest.fixture
def settings(tmp_path):
    # No real waiting in tests
    return AgentSettings(
        action_timeout=1.0,
        retry_base_delay=0,
        visibility_delay=0,
        navigation_settle=0,
        screenshot_dir=str(tmp_path),
    )


@pytest.fixture
def session():
    mock_session = AsyncMock(spec=BrowserSession)
    mock_session.observe.return_value = {"summary": "Provider search page", "available_actions": []}
    mock_session.act.return_value = True
    mock_session.extract.return_value = PROVIDERS_PAYLOAD
    mock_session.screenshot.return_value = None
    return mock_session


@pytest.fixture
def make_llm():
    """Build a mock chat model whose structured-output chain returns ``outputs`` in order."""
    def _make(outputs):
        chain = AsyncMock()
        if isinstance(outputs, list):
            chain.ainvoke.side_effect = outputs
        else:
            chain.ainvoke.return_value = outputs
        llm = MagicMock()
        llm.with_structured_output.return_value = chain
        return llm
    return _make
