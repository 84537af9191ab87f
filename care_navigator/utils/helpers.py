"""
Helpers module - Reusable utilities for the Care Navigator agent.

Contains:
- Structured logging
- HTML cleaning for LLM analysis
- Page state serialization and completion detection
"""

import datetime
import json
import re
from typing import Any, Iterable, List

from care_navigator.utils.constants import COMPLETION_MARKERS, MAX_STATE_LOG_LINES


# ============================================================================
# STRUCTURED LOGGING
# ============================================================================

class StructuredLogger:
    """
    Structured logger that captures logs with timestamps and context.

    Stores logs in a list for inclusion in agent state while also
    printing to console for real-time visibility.
    """

    def __init__(self, node_name: str):
        self.node_name = node_name
        self.logs: List[str] = []

    def _format(self, level: str, message: str) -> str:
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        return f"[{timestamp}] [{self.node_name}] {level}: {message}"

    def info(self, message: str) -> None:
        formatted = self._format("INFO", message)
        print(formatted)
        self.logs.append(formatted)

    def warning(self, message: str) -> None:
        formatted = self._format("WARN", message)
        print(f"⚠️ {formatted}")
        self.logs.append(formatted)

    def error(self, message: str) -> None:
        formatted = self._format("ERROR", message)
        print(f"❌ {formatted}")
        self.logs.append(formatted)

    def success(self, message: str) -> None:
        formatted = self._format("OK", message)
        print(f"✅ {formatted}")
        self.logs.append(formatted)

    def debug(self, message: str) -> None:
        formatted = self._format("DEBUG", message)
        # Debug only to console, not stored
        print(f"🔍 {formatted}")

    def get_logs(self) -> List[str]:
        """Get all captured logs."""
        return self.logs


# ============================================================================
# HTML CLEANING FOR LLM
# ============================================================================

_SCRIPT_PATTERN = re.compile(r'<script[^>]*>.*?</script>', re.DOTALL | re.IGNORECASE)
_STYLE_PATTERN = re.compile(r'<style[^>]*>.*?</style>', re.DOTALL | re.IGNORECASE)
_COMMENT_PATTERN = re.compile(r'<!--.*?-->', re.DOTALL)
_SVG_PATTERN = re.compile(r'<svg[^>]*>.*?</svg>', re.DOTALL | re.IGNORECASE)
_WHITESPACE_PATTERN = re.compile(r'\s+')


def clean_html_for_llm(html: str, max_length: int = 30000) -> str:
    """
    Clean HTML for better LLM analysis.

    Removes scripts, styles, comments and SVG bodies so the LLM sees
    visible, interactive content, then truncates to ``max_length``.

    Args:
        html: Raw HTML string
        max_length: Maximum length to return

    Returns:
        Cleaned HTML string
    """
    html = _SCRIPT_PATTERN.sub('', html)
    html = _STYLE_PATTERN.sub('', html)
    html = _COMMENT_PATTERN.sub('', html)
    html = _SVG_PATTERN.sub('[SVG]', html)
    html = _WHITESPACE_PATTERN.sub(' ', html)

    if len(html) > max_length:
        html = html[:max_length] + "\n... [TRUNCATED]"

    return html.strip()


# ============================================================================
# AGENT LOOP HELPERS
# ============================================================================

def serialize_page_state(observation: Any) -> str:
    """Render a session observation as the text handed to the planner."""
    if isinstance(observation, str):
        return observation
    return json.dumps(observation, default=str)


def is_completion_signal(text: str, markers: Iterable[str] = COMPLETION_MARKERS) -> bool:
    """True if the planned instruction says the search is done."""
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def format_action_history(history: List[str]) -> str:
    """Numbered list of previous actions, one per line."""
    if not history:
        return "(none yet)"
    return "\n".join(f"{index}. {action}" for index, action in enumerate(history, start=1))


def merge_logs(existing: List[str], new: List[str], limit: int = MAX_STATE_LOG_LINES) -> List[str]:
    """Append a node's log lines to the state logs, keeping the latest ``limit``."""
    merged = existing + new
    if len(merged) > limit:
        return merged[-limit:]
    return merged
