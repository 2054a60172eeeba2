"""MCP server exposing Codex, Gemini and Nano Banana tools to Claude."""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from ccgagent.config import CODEX_ROLES, GEMINI_ROLES, get_settings
from ccgagent.dispatcher import dispatch
from ccgagent.imaging import (
    DIAGRAM_TYPES,
    ICON_STYLES,
    IMAGE_STYLES,
    IMAGE_TYPES,
    MOCKUP_PLATFORMS,
    MOCKUP_STYLES,
)

logger = logging.getLogger(__name__)

CodexRole = Literal[CODEX_ROLES]
GeminiRole = Literal[GEMINI_ROLES]
ImageStyle = Literal[IMAGE_STYLES]
ImageType = Literal[IMAGE_TYPES]
IconStyle = Literal[ICON_STYLES]
DiagramType = Literal[DIAGRAM_TYPES]
Platform = Literal[MOCKUP_PLATFORMS]
MockupStyle = Literal[MOCKUP_STYLES]


class ToolFailure(ToolError):
    """Error response whose text must reach the caller unchanged."""

    pass


class CCGServer(FastMCP):
    """FastMCP server that returns dispatcher error text without a prefix."""

    async def call_tool(self, name: str, arguments: dict[str, Any]):
        try:
            return await super().call_tool(name, arguments)
        except ToolError as e:
            # FastMCP prepends "Error executing tool <name>: "; the low-level
            # server turns the bare failure into an isError result
            if isinstance(e.__cause__, ToolFailure):
                raise e.__cause__ from None
            raise


mcp = CCGServer("ccg-mcp-server")


async def _call(name: str, arguments: dict[str, Any]) -> str:
    """Dispatch a call and raise ToolFailure so the SDK flags failures."""
    args = {key: value for key, value in arguments.items() if value is not None}
    response = await dispatch(name, args, settings=get_settings())
    if response.is_error:
        raise ToolFailure(response.text)
    return response.text


@mcp.tool()
async def ask_codex(task: str, workdir: str | None = None, role: CodexRole | None = None) -> str:
    """Ask Codex (OpenAI) for backend, logic, algorithm, and debugging tasks.

    Best for server-side code, APIs, databases, and performance optimization.

    Args:
        task: The task or question to send to Codex
        workdir: Working directory (default: current directory)
        role: Expert role: architect, analyzer, debugger, optimizer, reviewer, tester
    """
    return await _call("ask_codex", {"task": task, "workdir": workdir, "role": role})


@mcp.tool()
async def ask_gemini(task: str, workdir: str | None = None, role: GeminiRole | None = None) -> str:
    """Ask Gemini (Google) for frontend, UI, CSS, and component design tasks.

    Best for React, Vue, styling, responsive design, and user experience.

    Args:
        task: The task or question to send to Gemini
        workdir: Working directory (default: current directory)
        role: Expert role: frontend, analyzer, debugger, optimizer, reviewer, tester
    """
    return await _call("ask_gemini", {"task": task, "workdir": workdir, "role": role})


@mcp.tool()
async def ask_both(task: str, workdir: str | None = None) -> str:
    """Ask both Codex and Gemini the same question in parallel and compare their responses.

    Useful for getting diverse perspectives or cross-validating solutions.
    """
    return await _call("ask_both", {"task": task, "workdir": workdir})


@mcp.tool()
async def smart_route(task: str, workdir: str | None = None) -> str:
    """Automatically analyze the task and route to the best model.

    Codex for backend, Gemini for frontend. Uses keyword analysis to
    determine the optimal choice.
    """
    return await _call("smart_route", {"task": task, "workdir": workdir})


@mcp.tool()
async def generate_image(
    prompt: str,
    style: ImageStyle | None = None,
    type: ImageType | None = None,
    outputDir: str | None = None,
) -> str:
    """Generate an image using Nano Banana Pro (Gemini) via Vertex AI.

    Best for icons, diagrams, UI mockups, patterns, logos, and illustrations.
    Requires GCP_PROJECT_ID environment variable.

    Args:
        prompt: Detailed description of the image to generate
        style: Visual style for the image (default: modern)
        type: Type of image to generate (optional, helps optimize the prompt)
        outputDir: Output directory for generated images (default: ~/.claude/nanobanana-output)
    """
    return await _call(
        "generate_image",
        {"prompt": prompt, "style": style, "type": type, "outputDir": outputDir},
    )


@mcp.tool()
async def edit_image(
    imagePath: str,
    prompt: str,
    style: ImageStyle | None = None,
    outputDir: str | None = None,
) -> str:
    """Edit an existing image using Nano Banana Pro (Gemini) via Vertex AI.

    Requires GCP_PROJECT_ID environment variable.

    Args:
        imagePath: Absolute path to the image file to edit
        prompt: Instructions for how to edit the image
        style: Visual style for the edited image (default: modern)
        outputDir: Output directory for edited images (default: ~/.claude/nanobanana-output)
    """
    return await _call(
        "edit_image",
        {"imagePath": imagePath, "prompt": prompt, "style": style, "outputDir": outputDir},
    )


@mcp.tool()
async def generate_icon(prompt: str, style: IconStyle | None = None, outputDir: str | None = None) -> str:
    """Generate an app icon or UI element using Nano Banana Pro.

    Optimized for icon generation with proper sizing and recognizable design.
    Requires GCP_PROJECT_ID environment variable.
    """
    return await _call("generate_icon", {"prompt": prompt, "style": style, "outputDir": outputDir})


@mcp.tool()
async def generate_diagram(prompt: str, type: DiagramType | None = None, outputDir: str | None = None) -> str:
    """Generate a technical diagram or flowchart using Nano Banana Pro.

    Best for architecture diagrams, flowcharts, sequence diagrams, and
    technical illustrations. Requires GCP_PROJECT_ID environment variable.
    """
    return await _call("generate_diagram", {"prompt": prompt, "type": type, "outputDir": outputDir})


@mcp.tool()
async def generate_ui_mockup(
    prompt: str,
    platform: Platform | None = None,
    style: MockupStyle | None = None,
    outputDir: str | None = None,
) -> str:
    """Generate a UI mockup or wireframe using Nano Banana Pro.

    Creates visual mockups for web pages, mobile apps, and user interfaces.
    Requires GCP_PROJECT_ID environment variable.
    """
    return await _call(
        "generate_ui_mockup",
        {"prompt": prompt, "platform": platform, "style": style, "outputDir": outputDir},
    )


def main() -> None:
    """Run the server on stdio."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("CCG MCP Server running on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
