"""
Shared configuration for the agent.

Contains:
- Environment loading (.env)
- AgentSettings with every tunable the loop and browser session read
- LLM client initialization
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from langchain_google_genai import ChatGoogleGenerativeAI

from care_navigator.utils.constants import (
    ACTION_TIMEOUT_SECONDS,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_HTML_LIMIT,
    DEFAULT_MCP_SERVER_URL,
    MAX_AGENT_STEPS,
    MAX_CONSECUTIVE_ERRORS,
    MAX_RETRIES,
    NAVIGATION_SETTLE_SECONDS,
    RETRY_BASE_DELAY,
    VISIBILITY_DELAY_SECONDS,
)

load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class AgentSettings:
    """Tunables for one provider search."""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    mcp_server_url: str = DEFAULT_MCP_SERVER_URL
    action_timeout: float = ACTION_TIMEOUT_SECONDS
    max_retries: int = MAX_RETRIES
    retry_base_delay: float = RETRY_BASE_DELAY
    max_consecutive_errors: int = MAX_CONSECUTIVE_ERRORS
    visibility_delay: float = VISIBILITY_DELAY_SECONDS
    navigation_settle: float = NAVIGATION_SETTLE_SECONDS
    max_agent_steps: int = MAX_AGENT_STEPS
    screenshot_dir: str = "."
    html_limit: int = DEFAULT_HTML_LIMIT

    @classmethod
    def from_env(cls) -> "AgentSettings":
        """Build settings from environment variables, falling back to the defaults."""
        return cls(
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            mcp_server_url=os.getenv("MCP_SERVER_URL") or DEFAULT_MCP_SERVER_URL,
            action_timeout=_env_float("ACTION_TIMEOUT_SECONDS", ACTION_TIMEOUT_SECONDS),
            max_retries=_env_int("MAX_RETRIES", MAX_RETRIES),
            retry_base_delay=_env_float("RETRY_BASE_DELAY", RETRY_BASE_DELAY),
            max_consecutive_errors=_env_int("MAX_CONSECUTIVE_ERRORS", MAX_CONSECUTIVE_ERRORS),
            visibility_delay=_env_float("VISIBILITY_DELAY_SECONDS", VISIBILITY_DELAY_SECONDS),
            navigation_settle=_env_float("NAVIGATION_SETTLE_SECONDS", NAVIGATION_SETTLE_SECONDS),
            max_agent_steps=_env_int("MAX_AGENT_STEPS", MAX_AGENT_STEPS),
            screenshot_dir=os.getenv("SCREENSHOT_DIR") or ".",
            html_limit=_env_int("HTML_LIMIT", DEFAULT_HTML_LIMIT),
        )


def get_llm(settings: Optional[AgentSettings] = None) -> ChatGoogleGenerativeAI:
    """
    Build the Gemini chat model used for planning and page analysis.

    Raises:
        ValueError: GOOGLE_API_KEY is not set
    """
    settings = settings or AgentSettings.from_env()
    google_api_key = os.getenv("GOOGLE_API_KEY")
    if not google_api_key or not google_api_key.strip():
        raise ValueError("GOOGLE_API_KEY environment variable is required")
    google_api_key = google_api_key.strip()

    print(f"🤖 LLM Init: Model={settings.gemini_model}, Key={google_api_key[:4]}...", flush=True)

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        temperature=0,
        google_api_key=google_api_key,
    )
