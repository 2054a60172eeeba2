"""Tests for nanobanana-wrapper integration."""

import pytest

from ccgagent.imaging import (
    build_diagram_prompt,
    build_icon_prompt,
    build_image_prompt,
    build_mockup_prompt,
    run_nanobanana,
)
from ccgagent.runner import ProcessTimeoutError
from ccgagent.schemas import ImageOptions


class TestPromptBuilders:
    """Test prompt enhancement."""

    def test_image_prompt_without_type(self):
        assert build_image_prompt("a fox") == "a fox"

    def test_image_prompt_with_type(self):
        assert build_image_prompt("a fox", "logo") == "Create a logo: a fox"

    def test_icon_prompt(self):
        prompt = build_icon_prompt("gear", "flat")
        assert prompt.startswith("Create an app icon: gear.")
        assert "Style: flat." in prompt
        assert "16x16 to 512x512" in prompt

    def test_diagram_prompt(self):
        assert build_diagram_prompt("etl", "sequence").startswith(
            "Create a professional sequence diagram: etl."
        )

    def test_mockup_prompt(self):
        assert build_mockup_prompt("login", "mobile", "wireframe").startswith(
            "Create a wireframe UI mockup for mobile: login."
        )


class TestRunNanobanana:
    """Test the image process runner."""

    @pytest.mark.asyncio
    async def test_args_and_env(self, settings, make_nanobanana):
        make_nanobanana('echo "$NANOBANANA_OUTPUT_DIR"\necho "$*" >&2')

        result = await run_nanobanana(
            "edit",
            "make it blue",
            ImageOptions(style="sketch", image_path="/a.png"),
            settings=settings,
        )

        assert result.success is True
        assert result.output_path == str(settings.nanobanana_output_dir)
        assert result.notes == "edit make it blue sketch /a.png"
        assert result.message == f"Image generated successfully: {settings.nanobanana_output_dir}"

    @pytest.mark.asyncio
    async def test_no_notes_when_stderr_empty(self, settings, make_nanobanana):
        make_nanobanana("echo /tmp/x.png")
        result = await run_nanobanana("generate", "p", settings=settings)

        assert result.output_path == "/tmp/x.png"
        assert result.notes is None

    @pytest.mark.asyncio
    async def test_failure_without_stderr(self, settings, make_nanobanana):
        make_nanobanana("echo partial\nexit 4")
        result = await run_nanobanana("generate", "p", settings=settings)

        assert result.success is False
        assert result.error == "Process exited with code 4"
        assert result.stdout == "partial\n"

    @pytest.mark.asyncio
    async def test_timeout(self, settings, make_nanobanana):
        make_nanobanana("exec sleep 30")

        with pytest.raises(ProcessTimeoutError, match="Image generation timed out after 1 seconds"):
            await run_nanobanana("generate", "p", settings=settings)
