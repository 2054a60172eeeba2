"""Image generation through nanobanana-wrapper (Nano Banana Pro on Vertex AI)."""

from __future__ import annotations

import logging
import os

from ccgagent.config import Settings, get_settings
from ccgagent.runner import DependencyMissingError, format_seconds, run_process
from ccgagent.schemas import ImageOptions, ImageResult

logger = logging.getLogger(__name__)

# Option sets advertised in the tool schemas
IMAGE_STYLES = ("photorealistic", "flat", "modern", "pixel-art", "minimal", "sketch", "watercolor", "3d-render")
IMAGE_TYPES = ("icon", "diagram", "flowchart", "pattern", "ui-mockup", "illustration", "logo", "banner")
ICON_STYLES = ("flat", "modern", "minimal", "skeuomorphic", "outline", "3d")
DIAGRAM_TYPES = ("flowchart", "architecture", "sequence", "er-diagram", "network", "mindmap", "uml")
MOCKUP_PLATFORMS = ("web", "mobile", "desktop", "tablet")
MOCKUP_STYLES = ("wireframe", "low-fidelity", "high-fidelity", "minimal")

DEFAULT_STYLE = "modern"
DEFAULT_DIAGRAM_TYPE = "flowchart"
DEFAULT_PLATFORM = "web"
DEFAULT_MOCKUP_STYLE = "high-fidelity"


def build_image_prompt(prompt: str, image_type: str | None = None) -> str:
    if image_type:
        return f"Create a {image_type}: {prompt}"
    return prompt


def build_icon_prompt(prompt: str, style: str) -> str:
    return (
        f"Create an app icon: {prompt}. The icon should be simple, recognizable, "
        f"and work well at small sizes (16x16 to 512x512). Style: {style}. "
        f"Use appropriate background (transparent or solid color)."
    )


def build_diagram_prompt(prompt: str, diagram_type: str) -> str:
    return (
        f"Create a professional {diagram_type} diagram: {prompt}. The diagram should be "
        f"clear, well-organized, and easy to understand. Use appropriate shapes, arrows, "
        f"and labels. Style: clean and modern with good contrast."
    )


def build_mockup_prompt(prompt: str, platform: str, style: str) -> str:
    return (
        f"Create a {style} UI mockup for {platform}: {prompt}. The mockup should show "
        f"realistic UI elements, proper spacing, and modern design patterns. Include "
        f"appropriate navigation, buttons, forms, and content areas."
    )


async def run_nanobanana(
    command: str,
    prompt: str,
    options: ImageOptions | None = None,
    settings: Settings | None = None,
) -> ImageResult:
    """Run nanobanana-wrapper once.

    Args:
        command: Wrapper subcommand ("generate" or "edit")
        prompt: Final prompt text
        options: Style, source image and output directory
        settings: Configuration (process-wide settings when None)

    Returns:
        ImageResult; a non-zero exit is reported as success=False, not raised

    Raises:
        DependencyMissingError: If nanobanana-wrapper is not installed
        SpawnError: If the wrapper could not be started
        ProcessTimeoutError: If generation did not finish in time
    """
    settings = settings or get_settings()
    options = options or ImageOptions()

    if not settings.nanobanana_path.exists():
        raise DependencyMissingError(
            f"nanobanana-wrapper not found at {settings.nanobanana_path}. Please install it first."
        )

    args = [str(settings.nanobanana_path), command, prompt]
    if options.style:
        args.append(options.style)
    if options.image_path:
        args.append(options.image_path)

    output_dir = options.output_dir or settings.nanobanana_output_dir
    env = {**os.environ, "NANOBANANA_OUTPUT_DIR": str(output_dir)}

    logger.info(f"Running nanobanana {command} (style: {options.style or 'default'}, output: {output_dir})")

    exit_code, stdout, stderr = await run_process(
        args,
        input_text="",
        timeout_seconds=settings.timeout_seconds,
        kill_grace_seconds=settings.kill_grace_seconds,
        timeout_message=f"Image generation timed out after {format_seconds(settings.timeout_seconds)} seconds",
        env=env,
    )

    if exit_code == 0:
        return ImageResult(
            success=True,
            output_path=stdout.strip(),
            notes=stderr.strip() or None,
            stdout=stdout,
        )

    logger.warning(f"nanobanana {command} exited with code {exit_code}")
    return ImageResult(
        success=False,
        error=stderr or f"Process exited with code {exit_code}",
        stdout=stdout,
    )
