"""Keyword classifier used by smart routing."""

from __future__ import annotations

from collections.abc import Iterable

from ccgagent.config import Settings, get_settings
from ccgagent.schemas import Backend, RouteScore


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Count keywords that occur in text as case-insensitive substrings.

    Each keyword counts at most once, however often it appears.
    """
    lowered = text.lower()
    return sum(1 for keyword in keywords if keyword.lower() in lowered)


def score_task(task: str, settings: Settings | None = None) -> RouteScore:
    """Score a task against the frontend and backend keyword lists."""
    settings = settings or get_settings()
    return RouteScore(
        frontend_score=count_keywords(task, settings.frontend_keywords),
        backend_score=count_keywords(task, settings.backend_keywords),
    )


def select_backend(score: RouteScore) -> Backend:
    """Gemini only on a strictly higher frontend score; Codex otherwise, ties included."""
    if score.frontend_score > score.backend_score:
        return Backend.GEMINI
    return Backend.CODEX
