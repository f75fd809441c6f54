"""
Tests for the MCP stdio server tool functions.

Tests the MCP layer in isolation by mocking FactsTools: verifies parameter
mapping and JSON rendering for all three tools.
"""

import json
from unittest.mock import MagicMock

import pytest

from projfacts.tools import FactsTools


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _envelope(data=None, success=True, message="ok"):
    return {
        "success": success,
        "message": message,
        "data": data,
        "timestamp": "2026-01-15T10:30:00.000Z",
    }


@pytest.fixture
def mock_tools():
    """Mock FactsTools with default envelopes."""
    tools = MagicMock()
    tools.how_to_solve.return_value = _envelope({"context_data": {"relevant_facts": []}})
    tools.record_insight.return_value = _envelope({"filename": "a_b.md"})
    tools.init_facts_system.return_value = _envelope({"created_files": []})
    return tools


@pytest.fixture(autouse=True)
def patch_tools(mock_tools):
    """Install the mock as the server's tool layer for all tests."""
    import projfacts.mcp as mcp_mod
    mcp_mod._tools = mock_tools
    yield
    mcp_mod._tools = None


# ---------------------------------------------------------------------------
# how_to_solve
# ---------------------------------------------------------------------------

class TestHowToSolve:

    @pytest.mark.asyncio
    async def test_defaults(self, mock_tools):
        from projfacts.mcp import how_to_solve
        result = await how_to_solve("implement login")
        assert json.loads(result)["success"] is True
        mock_tools.how_to_solve.assert_called_once_with(
            "implement login", context=None, constraints=None, priority="medium",
        )

    @pytest.mark.asyncio
    async def test_all_params(self, mock_tools):
        from projfacts.mcp import how_to_solve
        await how_to_solve("p", context="c", constraints=["x"], priority="high")
        mock_tools.how_to_solve.assert_called_once_with(
            "p", context="c", constraints=["x"], priority="high",
        )

    @pytest.mark.asyncio
    async def test_failure_passes_through(self, mock_tools):
        from projfacts.mcp import how_to_solve
        mock_tools.how_to_solve.return_value = _envelope(
            success=False, message="Failed to analyze problem: boom",
        )
        result = json.loads(await how_to_solve("p"))
        assert result == {
            "success": False,
            "message": "Failed to analyze problem: boom",
            "data": None,
            "timestamp": "2026-01-15T10:30:00.000Z",
        }


# ---------------------------------------------------------------------------
# record_insight
# ---------------------------------------------------------------------------

class TestRecordInsight:

    @pytest.mark.asyncio
    async def test_param_mapping(self, mock_tools):
        from projfacts.mcp import record_insight
        result = await record_insight(
            "task", "solution", "reasoning", "pattern",
            evidence=["e"], confidence="low", tags=["t"], related_files=["f.py"],
        )
        assert json.loads(result)["data"] == {"filename": "a_b.md"}
        mock_tools.record_insight.assert_called_once_with(
            "task", "solution", "reasoning", "pattern",
            evidence=["e"], confidence="low", tags=["t"], related_files=["f.py"],
        )

    @pytest.mark.asyncio
    async def test_non_ascii_rendered_verbatim(self, mock_tools):
        from projfacts.mcp import record_insight
        mock_tools.record_insight.return_value = _envelope({"filename": "实现登录_JWT.md"})
        result = await record_insight("实现登录", "JWT", "r", "technical")
        assert "实现登录_JWT.md" in result


# ---------------------------------------------------------------------------
# init_facts_system
# ---------------------------------------------------------------------------

class TestInitFactsSystem:

    @pytest.mark.asyncio
    async def test_param_mapping(self, mock_tools):
        from projfacts.mcp import init_facts_system
        await init_facts_system(project_path="/tmp/p", enable_auto_capture=False)
        mock_tools.init_facts_system.assert_called_once_with(
            project_path="/tmp/p", enable_auto_capture=False,
        )

    @pytest.mark.asyncio
    async def test_defaults(self, mock_tools):
        from projfacts.mcp import init_facts_system
        await init_facts_system()
        mock_tools.init_facts_system.assert_called_once_with(
            project_path=None, enable_auto_capture=True,
        )


# ---------------------------------------------------------------------------
# End to end against a real store
# ---------------------------------------------------------------------------

class TestRealStore:

    @pytest.mark.asyncio
    async def test_record_then_solve(self, store, tmp_path, monkeypatch):
        import projfacts.mcp as mcp_mod
        from projfacts.mcp import how_to_solve, init_facts_system, record_insight
        monkeypatch.setenv("FACTS_HOME", str(tmp_path / "home"))
        mcp_mod._tools = FactsTools(store)

        init = json.loads(await init_facts_system())
        assert init["success"] is True
        recorded = json.loads(await record_insight(
            "implement login", "use JWT", "stateless", "technical", confidence="high",
        ))
        assert recorded["message"] == "Successfully recorded technical insight"

        solved = json.loads(await how_to_solve("implement login"))
        facts = solved["data"]["context_data"]["relevant_facts"]
        assert [f["title"] for f in facts] == ["implement login"]
