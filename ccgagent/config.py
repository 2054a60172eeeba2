"""Process-wide configuration for the CCG dispatcher."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from ccgagent.schemas import Backend

logger = logging.getLogger(__name__)

CLAUDE_HOME = Path.home() / ".claude"

# Executables
DEFAULT_WRAPPER_PATH = CLAUDE_HOME / "bin" / "codeagent-wrapper"
DEFAULT_NANOBANANA_PATH = CLAUDE_HOME / "bin" / "nanobanana-wrapper"

# Role prompt files live at <prompts_dir>/<backend>/<role>.md
DEFAULT_PROMPTS_DIR = CLAUDE_HOME / "prompts"
DEFAULT_NANOBANANA_OUTPUT_DIR = CLAUDE_HOME / "nanobanana-output"

DEFAULT_TIMEOUT_SECONDS = 300.0  # 5 minutes
DEFAULT_KILL_GRACE_SECONDS = 5.0

# Routing keywords (matched as lowercase substrings)
FRONTEND_KEYWORDS = (
    "react", "vue", "angular", "css", "scss", "sass", "tailwind", "html", "ui", "ux",
    "component", "frontend", "フロントエンド", "コンポーネント", "スタイル",
    "レイアウト", "responsive", "レスポンシブ", "animation", "アニメーション",
    "design", "デザイン", "button", "ボタン", "form", "フォーム", "modal", "モーダル",
    "navigation", "ナビ", "next.js", "nuxt", "svelte",
)

BACKEND_KEYWORDS = (
    "api", "database", "db", "sql", "postgresql", "mysql", "mongodb", "server",
    "backend", "バックエンド", "node", "express", "fastapi", "django",
    "authentication", "認証", "authorization", "認可", "algorithm", "アルゴリズム",
    "logic", "ロジック", "debug", "デバッグ", "error", "エラー", "performance",
    "パフォーマンス", "cache", "キャッシュ", "queue", "キュー", "worker", "cron",
    "batch", "バッチ", "graphql", "rest", "microservice",
)

CODEX_ROLES = ("architect", "analyzer", "debugger", "optimizer", "reviewer", "tester")
GEMINI_ROLES = ("frontend", "analyzer", "debugger", "optimizer", "reviewer", "tester")


@dataclass(frozen=True)
class Settings:
    """Read-only configuration shared by every tool call."""

    wrapper_path: Path = DEFAULT_WRAPPER_PATH
    prompts_dir: Path = DEFAULT_PROMPTS_DIR
    nanobanana_path: Path = DEFAULT_NANOBANANA_PATH
    nanobanana_output_dir: Path = DEFAULT_NANOBANANA_OUTPUT_DIR
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS
    frontend_keywords: tuple[str, ...] = FRONTEND_KEYWORDS
    backend_keywords: tuple[str, ...] = BACKEND_KEYWORDS
    codex_roles: tuple[str, ...] = CODEX_ROLES
    gemini_roles: tuple[str, ...] = GEMINI_ROLES

    def roles_for(self, backend: Backend) -> tuple[str, ...]:
        """Known role tokens for a backend."""
        if backend == Backend.CODEX:
            return self.codex_roles
        return self.gemini_roles


def _env_path(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else default


def _env_seconds(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")
    return seconds


def load_settings() -> Settings:
    """Build settings from defaults and environment overrides.

    Environment variables:
        CCG_WRAPPER_PATH: codeagent-wrapper executable
        CCG_PROMPTS_DIR: root of the per-backend role prompt files
        CCG_NANOBANANA_PATH: nanobanana-wrapper executable
        NANOBANANA_OUTPUT_DIR: default output directory for generated images
        CCG_TIMEOUT_SECONDS: per-process deadline
        CCG_KILL_GRACE_SECONDS: wait between SIGTERM and SIGKILL on timeout

    Raises:
        ValueError: If a numeric override is not a positive finite number
    """
    settings = Settings(
        wrapper_path=_env_path("CCG_WRAPPER_PATH", DEFAULT_WRAPPER_PATH),
        prompts_dir=_env_path("CCG_PROMPTS_DIR", DEFAULT_PROMPTS_DIR),
        nanobanana_path=_env_path("CCG_NANOBANANA_PATH", DEFAULT_NANOBANANA_PATH),
        nanobanana_output_dir=_env_path("NANOBANANA_OUTPUT_DIR", DEFAULT_NANOBANANA_OUTPUT_DIR),
        timeout_seconds=_env_seconds("CCG_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        kill_grace_seconds=_env_seconds("CCG_KILL_GRACE_SECONDS", DEFAULT_KILL_GRACE_SECONDS),
    )
    logger.debug(f"Loaded settings: wrapper={settings.wrapper_path}, timeout={settings.timeout_seconds}s")
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    return load_settings()
