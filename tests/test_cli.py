import json
from unittest.mock import AsyncMock, patch

from care_navigator.__main__ import build_parser, main
from care_navigator.core.errors import ConsecutiveErrorLimitError
from care_navigator.core.schemas import SearchResult

PROVIDERS_PAYLOAD = {
    "providers": [
        {"name": "Dr. Jane Smith", "specialty": "Orthopedist", "address": "1 Main St", "phone": "555-0100"},
        {"name": "Spine Center", "specialty": "Orthopedic Spine Specialist", "address": "20 Elm St"},
    ]
}

ARGS = [
    "--provider", "aetna",
    "--specialist", "Primary Care Physician",
    "--specialist", "Orthopedist",
    "--address", "Springfield, IL",
    "--lat", "39.78",
    "--lng", "-89.65",
]


def test_parser_collects_specialists_in_order():
    args = build_parser().parse_args(ARGS)
    assert args.specialists == ["Primary Care Physician", "Orthopedist"]
    assert args.lat == 39.78
    assert args.mcp_url is None


def test_main_prints_providers(capsys):
    search = AsyncMock(return_value=SearchResult.model_validate(PROVIDERS_PAYLOAD))

    with patch("care_navigator.__main__.run_provider_search", new=search):
        code = main(ARGS + ["--mcp-url", "http://browser:9000/sse"])

    assert code == 0
    provider, specialists, location = search.await_args.args
    assert provider == "aetna"
    assert specialists == ["Primary Care Physician", "Orthopedist"]
    assert location == {"lat": 39.78, "lng": -89.65, "address": "Springfield, IL"}
    assert search.await_args.kwargs["settings"].mcp_server_url == "http://browser:9000/sse"

    out = capsys.readouterr().out
    assert json.loads(out) == {
        "providers": [dict(PROVIDERS_PAYLOAD["providers"][0]), dict(PROVIDERS_PAYLOAD["providers"][1], phone=None)]
    }


def test_main_reports_failure(capsys):
    search = AsyncMock(side_effect=ConsecutiveErrorLimitError(3, "Action failed: element not found"))

    with patch("care_navigator.__main__.run_provider_search", new=search):
        code = main(ARGS)

    assert code == 1
    assert "Too many consecutive errors" in capsys.readouterr().err
