"""Process runner for codeagent-wrapper with a hard deadline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path

from ccgagent.config import Settings, get_settings
from ccgagent.schemas import Backend, ExecutionRequest, ExecutionResult

logger = logging.getLogger(__name__)


class WrapperError(Exception):
    """Raised when a wrapper process could not produce a result."""

    pass


class DependencyMissingError(WrapperError):
    """Raised when the wrapper executable is not installed."""

    pass


class ProcessTimeoutError(WrapperError):
    """Raised when a wrapper process outlives its deadline."""

    def __init__(self, message: str, timeout_seconds: float):
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


class SpawnError(WrapperError):
    """Raised when the operating system refuses to start the process."""

    pass


def format_seconds(seconds: float) -> str:
    """Render a duration without a trailing '.0'."""
    return f"{seconds:g}"


def resolve_role_file(backend: Backend, role: str | None, prompts_dir: Path) -> Path | None:
    """Locate the prompt file for a role, or None if there isn't one.

    A missing file is not an error: the role is dropped and the backend
    runs without it.
    """
    if not role:
        return None

    role_file = prompts_dir / backend.value / f"{role}.md"
    if role_file.exists():
        return role_file

    logger.debug(f"Role file not found, running without role: {role_file}")
    return None


def build_wrapper_args(request: ExecutionRequest, settings: Settings) -> list[str]:
    """Build argv for codeagent-wrapper. The task itself goes to stdin."""
    args = [str(settings.wrapper_path), "--backend", request.backend.value]

    role_file = resolve_role_file(request.backend, request.role, settings.prompts_dir)
    if role_file is not None:
        args += ["--role-file", str(role_file)]

    # "-" tells the wrapper to read the task from stdin
    args += ["-", request.workdir or "."]
    return args


async def _terminate(proc: asyncio.subprocess.Process, grace_seconds: float) -> None:
    """SIGTERM the process, escalating to SIGKILL if it ignores it."""
    try:
        proc.terminate()
    except ProcessLookupError:
        return

    try:
        await asyncio.wait_for(proc.wait(), timeout=grace_seconds)
    except asyncio.TimeoutError:
        logger.warning(f"Process {proc.pid} ignored SIGTERM, killing")
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()


async def run_process(
    args: list[str],
    *,
    input_text: str,
    timeout_seconds: float,
    kill_grace_seconds: float,
    timeout_message: str,
    env: Mapping[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run one process to completion and capture its output.

    The input is written to stdin in full, then stdin is closed. stdout and
    stderr are buffered until the process exits.

    Args:
        args: argv, executable first
        input_text: Text written to stdin
        timeout_seconds: Deadline armed at launch
        kill_grace_seconds: Wait between SIGTERM and SIGKILL on timeout
        timeout_message: Message of the ProcessTimeoutError
        env: Process environment (inherits the current one when None)

    Returns:
        Tuple of (exit_code, stdout, stderr)

    Raises:
        SpawnError: If the process could not be started
        ProcessTimeoutError: If the deadline expired; buffered output is dropped
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
    except OSError as e:
        logger.error(f"Failed to start {args[0]}: {e}")
        raise SpawnError(f"Failed to start {args[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(input_text.encode("utf-8")),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Process {proc.pid} timed out after {format_seconds(timeout_seconds)}s: {args[0]}")
        await _terminate(proc, kill_grace_seconds)
        raise ProcessTimeoutError(timeout_message, timeout_seconds) from None

    return (
        proc.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


async def run_wrapper(
    backend: Backend,
    task: str,
    workdir: str | None = None,
    role: str | None = None,
    settings: Settings | None = None,
) -> ExecutionResult:
    """Send a task to one backend through codeagent-wrapper.

    Args:
        backend: Backend to run
        task: Task text, delivered on stdin
        workdir: Working directory handed to the wrapper (defaults to ".")
        role: Optional role; used only if its prompt file exists
        settings: Configuration (process-wide settings when None)

    Returns:
        ExecutionResult: success on exit 0, degraded on any other exit code

    Raises:
        DependencyMissingError: If codeagent-wrapper is not installed
        SpawnError: If the wrapper could not be started
        ProcessTimeoutError: If the wrapper did not finish in time
    """
    settings = settings or get_settings()

    if not settings.wrapper_path.exists():
        raise DependencyMissingError(
            f"codeagent-wrapper not found at {settings.wrapper_path}. Please install CCG first."
        )

    request = ExecutionRequest(backend=backend, task=task, workdir=workdir or ".", role=role)
    args = build_wrapper_args(request, settings)

    logger.info(f"Running {backend.value} (role: {role or 'none'}, workdir: {request.workdir})")

    exit_code, stdout, stderr = await run_process(
        args,
        input_text=request.task,
        timeout_seconds=settings.timeout_seconds,
        kill_grace_seconds=settings.kill_grace_seconds,
        timeout_message=f"Process timed out after {format_seconds(settings.timeout_seconds)} seconds",
    )

    if exit_code == 0:
        return ExecutionResult.success(stdout)

    logger.warning(f"{backend.value} exited with code {exit_code}")
    return ExecutionResult.degraded(exit_code, stdout, stderr)
