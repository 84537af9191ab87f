"""Utility functions, constants and prompts."""

from care_navigator.utils.constants import PROVIDER_URLS
from care_navigator.utils.helpers import (
    StructuredLogger,
    clean_html_for_llm,
    is_completion_signal,
    serialize_page_state,
)

__all__ = [
    "PROVIDER_URLS",
    "StructuredLogger",
    "clean_html_for_llm",
    "is_completion_signal",
    "serialize_page_state",
]
