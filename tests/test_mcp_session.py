import asyncio
import os
from unittest.mock import AsyncMock, patch

import pytest

from care_navigator.core.errors import MCPToolError, SessionInitError
from care_navigator.core.mcp_session import MCPBrowserSession
from care_navigator.core.schemas import BrowserCommand, PageObservation, SearchResult


@pytest.fixture
def mcp():
    client = AsyncMock()
    client.server_url = "http://localhost:8931/sse"
    client.port = 8931
    client.connected = True
    client.is_server_running.return_value = True
    client.connect.return_value = True
    client.get_cleaned_html.return_value = {"result": "<main><button id='find'>Find a Doctor</button></main>"}
    return client


@pytest.fixture
def make_session(mcp, settings, make_llm):
    def _make(outputs=None):
        return MCPBrowserSession(make_llm(outputs), client=mcp, settings=settings)
    return _make


@pytest.mark.asyncio
async def test_start_connects(make_session, mcp):
    session = make_session()

    await session.start()

    mcp.connect.assert_awaited_once()


@pytest.mark.asyncio
async def test_start_fails_when_server_is_down(make_session, mcp):
    mcp.is_server_running.return_value = False

    with pytest.raises(SessionInitError) as exc_info:
        await make_session().start()

    assert "8931" in str(exc_info.value)
    mcp.connect.assert_not_awaited()


@pytest.mark.asyncio
async def test_start_fails_when_connect_fails(make_session, mcp):
    mcp.connect.return_value = False

    with pytest.raises(SessionInitError):
        await make_session().start()


@pytest.mark.asyncio
async def test_start_times_out(make_session, mcp):
    async def hang():
        await asyncio.Event().wait()

    mcp.connect.side_effect = hang

    with patch("care_navigator.core.mcp_session.MCP_CONNECT_TIMEOUT_SECONDS", 0.01):
        with pytest.raises(SessionInitError) as exc_info:
            await make_session().start()

    assert "Timeout" in str(exc_info.value)


@pytest.mark.asyncio
async def test_act_resolves_and_runs_click(make_session, mcp):
    session = make_session(BrowserCommand(command="click", selector="#find", reasoning="the button"))

    ok = await session.act("INTERACT: Click 'Find a Doctor'")

    assert ok is True
    mcp.click.assert_awaited_once_with("#find")
    chain = session.llm.with_structured_output.return_value
    session.llm.with_structured_output.assert_called_once_with(BrowserCommand)
    human = chain.ainvoke.await_args.args[0][1]
    assert "INTERACT: Click 'Find a Doctor'" in human.content
    assert "Find a Doctor</button>" in human.content


@pytest.mark.asyncio
async def test_act_propagates_tool_failures(make_session, mcp):
    mcp.fill.side_effect = MCPToolError("playwright_fill", "Element not found")
    session = make_session({"command": "fill", "selector": "#zip", "value": "62701"})

    with pytest.raises(MCPToolError):
        await session.act("INTERACT: Type '62701' into the ZIP field")


@pytest.mark.asyncio
@pytest.mark.parametrize("command", [
    BrowserCommand(command="click"),
    BrowserCommand(command="fill", selector="#zip"),
    BrowserCommand(command="select", value="Orthopedist"),
    BrowserCommand(command="press_key"),
    BrowserCommand(command="navigate"),
])
async def test_incomplete_commands_are_refused(make_session, mcp, command):
    assert await make_session().run_command(command) is False
    mcp.click.assert_not_awaited()
    mcp.fill.assert_not_awaited()
    mcp.select.assert_not_awaited()
    mcp.press_key.assert_not_awaited()
    mcp.navigate.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_command_dispatch(make_session, mcp):
    session = make_session()

    assert await session.run_command(BrowserCommand(command="fill", selector="#zip", value="62701"))
    assert await session.run_command(BrowserCommand(command="select", selector="#specialty", value="Orthopedist"))
    assert await session.run_command(BrowserCommand(command="press_key", value="Enter"))
    assert await session.run_command(BrowserCommand(command="navigate", value="https://example.com/results"))
    assert await session.run_command(BrowserCommand(command="go_back"))
    assert await session.run_command(BrowserCommand(command="noop"))

    mcp.fill.assert_awaited_once_with("#zip", "62701")
    mcp.select.assert_awaited_once_with("#specialty", "Orthopedist")
    mcp.press_key.assert_awaited_once_with("Enter")
    mcp.navigate.assert_awaited_once_with("https://example.com/results")
    mcp.go_back.assert_awaited_once()


@pytest.mark.asyncio
async def test_wait_command_sleeps(make_session):
    session = make_session()

    with patch("care_navigator.core.mcp_session.asyncio.sleep", new=AsyncMock()) as sleep:
        await session.run_command(BrowserCommand(command="wait", value="2.5"))
        await session.run_command(BrowserCommand(command="wait", value="a moment"))

    assert [call.args[0] for call in sleep.await_args_list] == [2.5, 1.0]


@pytest.mark.asyncio
async def test_observe_returns_plain_dict(make_session):
    session = make_session(PageObservation(summary="Guest search form", available_actions=["Search (#go)"]))

    observation = await session.observe("Describe the page")

    assert observation == {"summary": "Guest search form", "available_actions": ["Search (#go)"]}


@pytest.mark.asyncio
async def test_extract_returns_plain_dict(make_session):
    session = make_session(SearchResult(providers=[]))

    data = await session.extract("Extract the list of providers found", SearchResult)

    assert data == {"providers": []}
    session.llm.with_structured_output.assert_called_once_with(SearchResult)


@pytest.mark.asyncio
async def test_screenshot_writes_png(make_session, mcp, tmp_path):
    path = await make_session().screenshot(str(tmp_path / "error-42.png"))

    assert path == os.path.join(str(tmp_path), "error-42.png")
    mcp.screenshot.assert_awaited_once_with("error-42", str(tmp_path), full_page=True)


@pytest.mark.asyncio
async def test_close_is_idempotent(make_session, mcp):
    session = make_session()
    await session.start()

    await session.close()
    await session.close()

    mcp.close.assert_awaited_once()
    mcp.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_before_start_only_disconnects(make_session, mcp):
    await make_session().close()

    mcp.close.assert_not_awaited()
    mcp.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_tolerates_browser_errors(make_session, mcp):
    mcp.close.side_effect = MCPToolError("playwright_close", "browser already closed")
    session = make_session()
    await session.start()

    await session.close()

    mcp.disconnect.assert_awaited_once()
