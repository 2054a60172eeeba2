"""Pydantic schemas for CCG request/result contracts."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class Backend(str, Enum):
    """Code backends reachable through codeagent-wrapper."""

    CODEX = "codex"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ResultStatus(str, Enum):
    """Outcome of a process that ran to completion."""

    SUCCESS = "success"
    DEGRADED = "degraded"


class ToolName(str, Enum):
    """Tools exposed over MCP."""

    ASK_CODEX = "ask_codex"
    ASK_GEMINI = "ask_gemini"
    ASK_BOTH = "ask_both"
    SMART_ROUTE = "smart_route"
    GENERATE_IMAGE = "generate_image"
    EDIT_IMAGE = "edit_image"
    GENERATE_ICON = "generate_icon"
    GENERATE_DIAGRAM = "generate_diagram"
    GENERATE_UI_MOCKUP = "generate_ui_mockup"


# --- Requests ---


class ExecutionRequest(BaseModel):
    """One codeagent-wrapper invocation."""

    backend: Backend
    task: str
    workdir: str = "."
    role: str | None = None


class ImageOptions(BaseModel):
    """Options passed through to nanobanana-wrapper."""

    style: str | None = None
    image_path: str | None = None
    output_dir: Path | None = None


# --- Results ---


class ExecutionResult(BaseModel):
    """Result of a codeagent-wrapper process that exited.

    A zero exit carries stdout in ``output``. A non-zero exit is a degraded
    result: it keeps the exit code and both streams so the caller can inspect
    partial output.
    """

    status: ResultStatus
    output: str = ""
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def success(cls, stdout: str) -> ExecutionResult:
        return cls(status=ResultStatus.SUCCESS, output=stdout, stdout=stdout)

    @classmethod
    def degraded(cls, exit_code: int, stdout: str, stderr: str) -> ExecutionResult:
        return cls(
            status=ResultStatus.DEGRADED,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
        )

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def text(self) -> str:
        """Text shown to the caller."""
        if self.ok:
            return self.output
        return f"Exit code: {self.exit_code}\n\nOutput:\n{self.stdout}\n\nErrors:\n{self.stderr}"


class RouteScore(BaseModel):
    """Keyword-match counts for each backend axis."""

    frontend_score: int = Field(default=0, ge=0)
    backend_score: int = Field(default=0, ge=0)


class RouteDecision(BaseModel):
    """Backend picked by smart routing, why, and what it returned."""

    backend: Backend
    score: RouteScore
    result: ExecutionResult


class BranchOutcome(BaseModel):
    """One side of a fan-out: either a result or the error that replaced it."""

    backend: Backend
    result: ExecutionResult | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> BranchOutcome:
        if (self.result is None) == (self.error is None):
            raise ValueError("BranchOutcome needs exactly one of result or error")
        return self

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def text(self) -> str:
        if self.result is not None:
            return self.result.text
        return f"Error: {self.error}"


class FanOutResult(BaseModel):
    """Both branches of ask_both, in fixed order."""

    first: BranchOutcome
    second: BranchOutcome


class ImageResult(BaseModel):
    """Result from nanobanana-wrapper."""

    success: bool
    output_path: str | None = None
    notes: str | None = None
    error: str | None = None
    stdout: str = ""

    @property
    def message(self) -> str:
        if self.success:
            return f"Image generated successfully: {self.output_path}"
        return self.error or ""


class ToolResponse(BaseModel):
    """Content returned over the tool-call boundary."""

    text: str
    is_error: bool = False
