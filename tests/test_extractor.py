import pytest

from care_navigator.agents.extractor import ResultExtractor
from care_navigator.core.errors import ExtractionError
from care_navigator.core.schemas import SearchResult
from care_navigator.utils.constants import EXTRACT_INSTRUCTION


@pytest.mark.asyncio
async def test_valid_payload_becomes_search_result(session):
    result = await ResultExtractor(session).extract()

    session.extract.assert_awaited_once_with(EXTRACT_INSTRUCTION, SearchResult)
    assert [p.name for p in result.providers] == ["Dr. Jane Smith", "Spine Center of Springfield"]
    assert result.providers[0].phone == "555-0100"
    assert result.providers[1].phone is None


@pytest.mark.asyncio
async def test_model_instance_payload_is_accepted(session):
    session.extract.return_value = SearchResult(providers=[])

    result = await ResultExtractor(session).extract()

    assert result.providers == []


@pytest.mark.asyncio
async def test_missing_name_fails_instead_of_partial_result(session):
    session.extract.return_value = {
        "providers": [
            {"name": "Dr. Jane Smith", "specialty": "Orthopedist", "address": "1 Main St"},
            {"specialty": "Cardiologist", "address": "2 Oak St"},
        ]
    }

    with pytest.raises(ExtractionError):
        await ResultExtractor(session).extract()


@pytest.mark.asyncio
async def test_non_dict_payload_fails(session):
    session.extract.return_value = None

    with pytest.raises(ExtractionError):
        await ResultExtractor(session).extract()


@pytest.mark.asyncio
async def test_session_failure_is_wrapped_and_not_retried(session):
    session.extract.side_effect = RuntimeError("page crashed")

    with pytest.raises(ExtractionError) as exc_info:
        await ResultExtractor(session).extract()

    assert session.extract.await_count == 1
    assert "page crashed" in str(exc_info.value)
