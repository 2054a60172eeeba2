"""Pytest configuration and fixtures for CCG tests."""

import stat
from pathlib import Path
from typing import Callable

import pytest

from ccgagent.config import Settings, get_settings


def _write_script(path: Path, body: str, executable: bool = True) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n")
    if executable:
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def claude_home(tmp_path: Path) -> Path:
    """Temporary stand-in for ~/.claude."""
    home = tmp_path / ".claude"
    (home / "bin").mkdir(parents=True)
    (home / "prompts").mkdir()
    return home


@pytest.fixture
def settings(claude_home: Path) -> Settings:
    """Settings pointing at the temporary home with a short deadline."""
    return Settings(
        wrapper_path=claude_home / "bin" / "codeagent-wrapper",
        prompts_dir=claude_home / "prompts",
        nanobanana_path=claude_home / "bin" / "nanobanana-wrapper",
        nanobanana_output_dir=claude_home / "nanobanana-output",
        timeout_seconds=1.0,
        kill_grace_seconds=1.0,
    )


@pytest.fixture
def make_wrapper(settings: Settings) -> Callable[..., Path]:
    """Write a shell script at the configured codeagent-wrapper path."""

    def _make(body: str, executable: bool = True) -> Path:
        return _write_script(settings.wrapper_path, body, executable)

    return _make


@pytest.fixture
def make_nanobanana(settings: Settings) -> Callable[..., Path]:
    """Write a shell script at the configured nanobanana-wrapper path."""

    def _make(body: str, executable: bool = True) -> Path:
        return _write_script(settings.nanobanana_path, body, executable)

    return _make


@pytest.fixture
def echo_wrapper(make_wrapper) -> Path:
    """Wrapper that prints its arguments and then echoes stdin."""
    return make_wrapper('echo "ARGS: $*"\ncat')


@pytest.fixture
def role_file(settings: Settings) -> Path:
    """An installed 'debugger' role for codex."""
    path = settings.prompts_dir / "codex" / "debugger.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("You are a debugger.\n")
    return path
