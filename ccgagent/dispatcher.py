"""Tool-call dispatcher: maps a tool name and arguments to a formatted response."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from ccgagent import imaging
from ccgagent.config import Settings, get_settings
from ccgagent.fanout import ask_both
from ccgagent.router import smart_route
from ccgagent.runner import WrapperError, run_wrapper
from ccgagent.schemas import Backend, ImageOptions, ImageResult, ToolName, ToolResponse

logger = logging.getLogger(__name__)

Arguments = dict[str, Any]
Handler = Callable[[Arguments, Settings], Awaitable[ToolResponse]]


def _require(arguments: Arguments, key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"Missing required argument: {key}")
    return value


def _output_dir(arguments: Arguments) -> Path | None:
    value = arguments.get("outputDir")
    return Path(value).expanduser() if value else None


# --- Code backends ---


def format_backend_response(backend: Backend, text: str) -> str:
    return f"## {backend.display_name} Response\n\n{text}"


async def _ask_backend(backend: Backend, arguments: Arguments, settings: Settings) -> ToolResponse:
    result = await run_wrapper(
        backend,
        _require(arguments, "task"),
        arguments.get("workdir"),
        arguments.get("role"),
        settings=settings,
    )
    return ToolResponse(text=format_backend_response(backend, result.text))


async def _dispatch_ask_codex(arguments: Arguments, settings: Settings) -> ToolResponse:
    return await _ask_backend(Backend.CODEX, arguments, settings)


async def _dispatch_ask_gemini(arguments: Arguments, settings: Settings) -> ToolResponse:
    return await _ask_backend(Backend.GEMINI, arguments, settings)


async def _dispatch_ask_both(arguments: Arguments, settings: Settings) -> ToolResponse:
    result = await ask_both(_require(arguments, "task"), arguments.get("workdir"), settings=settings)
    text = (
        format_backend_response(result.first.backend, result.first.text)
        + "\n\n---\n\n"
        + format_backend_response(result.second.backend, result.second.text)
    )
    return ToolResponse(text=text)


async def _dispatch_smart_route(arguments: Arguments, settings: Settings) -> ToolResponse:
    decision = await smart_route(_require(arguments, "task"), arguments.get("workdir"), settings=settings)
    name = decision.backend.display_name
    text = (
        f"## Smart Routing Result\n\n"
        f"**Selected Model:** {name}\n"
        f"**Reason:** Frontend score: {decision.score.frontend_score}, "
        f"Backend score: {decision.score.backend_score}\n\n"
        f"---\n\n"
        f"{format_backend_response(decision.backend, decision.result.text)}"
    )
    return ToolResponse(text=text)


# --- Image generation ---


def _image_response(result: ImageResult, details: list[str], *, done: str, failed: str) -> ToolResponse:
    if not result.success:
        return ToolResponse(
            text=f"## {failed} Failed\n\n**Error:** {result.error}",
            is_error=True,
        )

    text = f"## {done} Successfully\n\n" + "\n".join(details)
    if result.notes:
        text += f"\n\n**Notes:** {result.notes}"
    return ToolResponse(text=text)


async def _dispatch_generate_image(arguments: Arguments, settings: Settings) -> ToolResponse:
    style = arguments.get("style") or imaging.DEFAULT_STYLE
    image_type = arguments.get("type")
    prompt = imaging.build_image_prompt(_require(arguments, "prompt"), image_type)

    result = await imaging.run_nanobanana(
        "generate",
        prompt,
        ImageOptions(style=style, output_dir=_output_dir(arguments)),
        settings=settings,
    )

    details = [f"**File:** `{result.output_path}`", f"**Style:** {style}"]
    if image_type:
        details.append(f"**Type:** {image_type}")
    return _image_response(result, details, done="Image Generated", failed="Image Generation")


async def _dispatch_edit_image(arguments: Arguments, settings: Settings) -> ToolResponse:
    style = arguments.get("style") or imaging.DEFAULT_STYLE
    image_path = _require(arguments, "imagePath")

    result = await imaging.run_nanobanana(
        "edit",
        _require(arguments, "prompt"),
        ImageOptions(style=style, image_path=image_path, output_dir=_output_dir(arguments)),
        settings=settings,
    )

    details = [f"**Original:** `{image_path}`", f"**Edited:** `{result.output_path}`"]
    return _image_response(result, details, done="Image Edited", failed="Image Editing")


async def _dispatch_generate_icon(arguments: Arguments, settings: Settings) -> ToolResponse:
    style = arguments.get("style") or imaging.DEFAULT_STYLE
    prompt = imaging.build_icon_prompt(_require(arguments, "prompt"), style)

    result = await imaging.run_nanobanana(
        "generate",
        prompt,
        ImageOptions(style=style, output_dir=_output_dir(arguments)),
        settings=settings,
    )

    details = [f"**File:** `{result.output_path}`", f"**Style:** {style}"]
    return _image_response(result, details, done="Icon Generated", failed="Icon Generation")


async def _dispatch_generate_diagram(arguments: Arguments, settings: Settings) -> ToolResponse:
    diagram_type = arguments.get("type") or imaging.DEFAULT_DIAGRAM_TYPE
    prompt = imaging.build_diagram_prompt(_require(arguments, "prompt"), diagram_type)

    result = await imaging.run_nanobanana(
        "generate",
        prompt,
        ImageOptions(style=imaging.DEFAULT_STYLE, output_dir=_output_dir(arguments)),
        settings=settings,
    )

    details = [f"**Type:** {diagram_type}", f"**File:** `{result.output_path}`"]
    return _image_response(result, details, done="Diagram Generated", failed="Diagram Generation")


async def _dispatch_generate_ui_mockup(arguments: Arguments, settings: Settings) -> ToolResponse:
    platform = arguments.get("platform") or imaging.DEFAULT_PLATFORM
    style = arguments.get("style") or imaging.DEFAULT_MOCKUP_STYLE
    prompt = imaging.build_mockup_prompt(_require(arguments, "prompt"), platform, style)

    result = await imaging.run_nanobanana(
        "generate",
        prompt,
        ImageOptions(style=imaging.DEFAULT_STYLE, output_dir=_output_dir(arguments)),
        settings=settings,
    )

    details = [
        f"**Platform:** {platform}",
        f"**Fidelity:** {style}",
        f"**File:** `{result.output_path}`",
    ]
    return _image_response(result, details, done="UI Mockup Generated", failed="UI Mockup Generation")


_HANDLERS: dict[ToolName, Handler] = {
    ToolName.ASK_CODEX: _dispatch_ask_codex,
    ToolName.ASK_GEMINI: _dispatch_ask_gemini,
    ToolName.ASK_BOTH: _dispatch_ask_both,
    ToolName.SMART_ROUTE: _dispatch_smart_route,
    ToolName.GENERATE_IMAGE: _dispatch_generate_image,
    ToolName.EDIT_IMAGE: _dispatch_edit_image,
    ToolName.GENERATE_ICON: _dispatch_generate_icon,
    ToolName.GENERATE_DIAGRAM: _dispatch_generate_diagram,
    ToolName.GENERATE_UI_MOCKUP: _dispatch_generate_ui_mockup,
}


async def dispatch(
    name: str,
    arguments: Arguments | None = None,
    settings: Settings | None = None,
) -> ToolResponse:
    """Handle one tool call.

    Args:
        name: Tool name
        arguments: Tool arguments as received from the caller
        settings: Configuration (process-wide settings when None)

    Returns:
        ToolResponse; failures come back with is_error set, never raised
    """
    settings = settings or get_settings()
    arguments = arguments or {}

    try:
        tool = ToolName(name)
    except ValueError:
        logger.warning(f"Unknown tool requested: {name}")
        return ToolResponse(text=f"Unknown tool: {name}", is_error=True)

    logger.info(f"Received tool call: {tool.value}")

    try:
        response = await _HANDLERS[tool](arguments, settings)
    except WrapperError as e:
        logger.warning(f"{tool.value} failed: {e}")
        return ToolResponse(text=f"Error: {e}", is_error=True)
    except Exception as e:
        logger.error(f"Unhandled exception in {tool.value}: {e}", exc_info=True)
        return ToolResponse(text=f"Error: {e}", is_error=True)

    logger.info(f"Completed tool call: {tool.value}, is_error={response.is_error}")
    return response
