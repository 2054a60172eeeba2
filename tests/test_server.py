"""Tests for the MCP server tool surface."""

import json
from typing import get_args

import pytest
from mcp.types import CallToolRequest, CallToolRequestParams

from ccgagent.config import CODEX_ROLES, GEMINI_ROLES
from ccgagent.imaging import ICON_STYLES, IMAGE_STYLES, MOCKUP_STYLES
from mcp_ccgagent import server
from mcp_ccgagent.server import ToolFailure

EXPECTED_TOOLS = {
    "ask_codex",
    "ask_gemini",
    "ask_both",
    "smart_route",
    "generate_image",
    "edit_image",
    "generate_icon",
    "generate_diagram",
    "generate_ui_mockup",
}


@pytest.fixture
def env(monkeypatch, settings):
    monkeypatch.setenv("CCG_WRAPPER_PATH", str(settings.wrapper_path))
    monkeypatch.setenv("CCG_PROMPTS_DIR", str(settings.prompts_dir))
    monkeypatch.setenv("CCG_NANOBANANA_PATH", str(settings.nanobanana_path))
    return settings


class TestToolRegistration:
    """Test tool declarations."""

    @pytest.mark.asyncio
    async def test_all_tools_listed(self):
        tools = await server.mcp.list_tools()
        assert {tool.name for tool in tools} == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_role_enum_in_schema(self):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}

        codex_schema = json.dumps(tools["ask_codex"].inputSchema)
        gemini_schema = json.dumps(tools["ask_gemini"].inputSchema)

        assert "architect" in codex_schema
        assert "architect" not in gemini_schema
        assert "frontend" in gemini_schema
        assert tools["ask_codex"].inputSchema["required"] == ["task"]

    def test_option_types_follow_shared_sets(self):
        assert get_args(server.CodexRole) == CODEX_ROLES
        assert get_args(server.GeminiRole) == GEMINI_ROLES
        assert get_args(server.ImageStyle) == IMAGE_STYLES
        assert get_args(server.MockupStyle) == MOCKUP_STYLES

    @pytest.mark.asyncio
    async def test_icon_style_enum_in_schema(self):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}
        style_schema = json.dumps(tools["generate_icon"].inputSchema["properties"]["style"])

        for style in ICON_STYLES:
            assert f'"{style}"' in style_schema

    @pytest.mark.asyncio
    async def test_edit_image_requires_path_and_prompt(self):
        tools = {tool.name: tool for tool in await server.mcp.list_tools()}
        assert set(tools["edit_image"].inputSchema["required"]) == {"imagePath", "prompt"}


class TestToolCalls:
    """Test tool functions end to end."""

    @pytest.mark.asyncio
    async def test_ask_codex(self, env, make_wrapper):
        make_wrapper("cat")
        text = await server.ask_codex(task="hello")
        assert text == "## Codex Response\n\nhello"

    @pytest.mark.asyncio
    async def test_error_raises_tool_failure(self, env):
        with pytest.raises(ToolFailure, match="codeagent-wrapper not found"):
            await server.smart_route(task="hello")

    @pytest.mark.asyncio
    async def test_image_failure_raises_tool_failure(self, env, make_nanobanana):
        make_nanobanana("echo denied >&2\nexit 1")
        with pytest.raises(ToolFailure, match="Image Generation Failed"):
            await server.generate_image(prompt="x")


class TestCallToolRequest:
    """Test tool calls through the SDK request handler."""

    async def _call_tool(self, name, arguments):
        handler = server.mcp._mcp_server.request_handlers[CallToolRequest]
        request = CallToolRequest(
            method="tools/call",
            params=CallToolRequestParams(name=name, arguments=arguments),
        )
        result = await handler(request)
        return result.root

    @pytest.mark.asyncio
    async def test_success_text(self, env, make_wrapper):
        make_wrapper("cat")
        result = await self._call_tool("ask_codex", {"task": "hello"})

        assert not result.isError
        assert result.content[0].text == "## Codex Response\n\nhello"

    @pytest.mark.asyncio
    async def test_error_text_unchanged(self, env):
        result = await self._call_tool("ask_codex", {"task": "hello"})

        assert result.isError is True
        assert result.content[0].text == (
            f"Error: codeagent-wrapper not found at {env.wrapper_path}. Please install CCG first."
        )

    @pytest.mark.asyncio
    async def test_image_failure_text_unchanged(self, env, make_nanobanana):
        make_nanobanana("echo denied >&2\nexit 1")
        result = await self._call_tool("generate_icon", {"prompt": "gear"})

        assert result.isError is True
        assert result.content[0].text == "## Icon Generation Failed\n\n**Error:** denied\n"
