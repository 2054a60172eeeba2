"""Run both backends on the same task in parallel."""

from __future__ import annotations

import asyncio
import logging

from ccgagent.config import Settings, get_settings
from ccgagent.runner import run_wrapper
from ccgagent.schemas import Backend, BranchOutcome, ExecutionResult, FanOutResult

logger = logging.getLogger(__name__)

FANOUT_ORDER = (Backend.CODEX, Backend.GEMINI)


def _to_outcome(backend: Backend, settled: ExecutionResult | BaseException) -> BranchOutcome:
    if isinstance(settled, ExecutionResult):
        return BranchOutcome(backend=backend, result=settled)
    if not isinstance(settled, Exception):
        # KeyboardInterrupt, CancelledError and friends are not branch failures
        raise settled
    logger.warning(f"{backend.value} branch failed: {settled}")
    return BranchOutcome(backend=backend, error=str(settled) or type(settled).__name__)


async def ask_both(
    task: str,
    workdir: str | None = None,
    settings: Settings | None = None,
) -> FanOutResult:
    """Send the same task to Codex and Gemini concurrently.

    Waits for both to settle. A failure on one side never cancels or hides
    the other; it is captured in that side's BranchOutcome.
    """
    settings = settings or get_settings()

    settled = await asyncio.gather(
        *(run_wrapper(backend, task, workdir, settings=settings) for backend in FANOUT_ORDER),
        return_exceptions=True,
    )

    first, second = (_to_outcome(b, s) for b, s in zip(FANOUT_ORDER, settled))
    return FanOutResult(first=first, second=second)
