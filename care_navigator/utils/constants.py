"""
Constants module - All configuration constants for the Care Navigator agent.

Centralizes:
- Insurance provider directory URLs
- Retry and loop limits
- Default timeouts
- Fixed instructions sent to the browser session
"""

from typing import Dict, Tuple

# ============================================================================
# PROVIDER DIRECTORIES
# ============================================================================

PROVIDER_URLS: Dict[str, str] = {
    "unitedhealthcare": "https://www.uhc.com/find-a-doctor",
    "aetna": "https://www.aetna.com/dsepublic/#/contentPage?page=providerSearchLanding",
    "cigna": "https://hcpdirectory.cigna.com/web/public/consumer/directory",
}

# ============================================================================
# RETRY / LOOP LIMITS
# ============================================================================

MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds, multiplied by the attempt number
MAX_CONSECUTIVE_ERRORS = 3
MAX_AGENT_STEPS = 0  # 0 = no ceiling on loop iterations

# ============================================================================
# TIMEOUTS (in seconds)
# ============================================================================

ACTION_TIMEOUT_SECONDS = 10.0
VISIBILITY_DELAY_SECONDS = 1.0
NAVIGATION_SETTLE_SECONDS = 1.0
MCP_CONNECT_TIMEOUT_SECONDS = 30.0
PROGRESS_SEND_TIMEOUT = 5.0  # a progress message still undelivered after this is dropped

# ============================================================================
# BROWSER SESSION INSTRUCTIONS
# ============================================================================

OBSERVE_INSTRUCTION = "Describe the current state of the provider search page"
EXTRACT_INSTRUCTION = "Extract the list of providers found"

# Substrings (case-insensitive) in a planned instruction that end the loop
COMPLETION_MARKERS: Tuple[str, ...] = ("complete", "finished")

# Most recent log lines kept in the graph state
MAX_STATE_LOG_LINES = 500

# ============================================================================
# LLM SETTINGS
# ============================================================================

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_MCP_SERVER_URL = "http://localhost:8931/sse"
DEFAULT_HTML_LIMIT = 50000
