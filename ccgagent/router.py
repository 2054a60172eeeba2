"""Smart routing: classify a task, then run it on the chosen backend."""

from __future__ import annotations

import logging

from ccgagent.classifier import score_task, select_backend
from ccgagent.config import Settings, get_settings
from ccgagent.runner import run_wrapper
from ccgagent.schemas import RouteDecision

logger = logging.getLogger(__name__)


async def smart_route(
    task: str,
    workdir: str | None = None,
    settings: Settings | None = None,
) -> RouteDecision:
    """Route a task to Codex or Gemini by keyword score and run it.

    No role is passed on this path. Errors from the runner propagate
    unchanged.

    Returns:
        RouteDecision with the selected backend, the score behind the
        choice, and the execution result
    """
    settings = settings or get_settings()

    score = score_task(task, settings)
    backend = select_backend(score)
    logger.info(
        f"Routing to {backend.value} "
        f"(frontend: {score.frontend_score}, backend: {score.backend_score})"
    )

    result = await run_wrapper(backend, task, workdir, settings=settings)
    return RouteDecision(backend=backend, score=score, result=result)
