"""Result extractor - pulls the provider list out of the final page."""

from pydantic import ValidationError

from care_navigator.core.errors import ExtractionError
from care_navigator.core.schemas import SearchResult
from care_navigator.core.session import BrowserSession
from care_navigator.utils.constants import EXTRACT_INSTRUCTION
from care_navigator.utils.helpers import StructuredLogger


class ResultExtractor:
    """
    Structured extraction of providers with strict schema validation.

    NO PARTIAL RESULTS - a response that does not match the provider schema
    fails the whole search. No retries at this layer.
    """

    def __init__(self, session: BrowserSession):
        self.session = session
        self.log = StructuredLogger("Extract")

    async def extract(self) -> SearchResult:
        self.log.info("Extracting providers from the current page")
        try:
            raw = await self.session.extract(EXTRACT_INSTRUCTION, SearchResult)
        except Exception as e:
            self.log.error(f"Extraction call failed: {e}")
            raise ExtractionError(f"Failed to extract providers: {e}") from e

        try:
            result = SearchResult.model_validate(raw)
        except ValidationError as e:
            self.log.error(f"Extracted data does not match the provider schema: {e.error_count()} error(s)")
            raise ExtractionError(f"Extracted providers do not match the schema: {e}") from e

        self.log.success(f"Extracted {len(result.providers)} providers")
        return result
