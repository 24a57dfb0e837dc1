"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP) and services (runners) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.selection import SelectionPolicy


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "fetch-chain"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "fetch-chain"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "fetch-chain"
    return Path.home() / ".config" / "fetch-chain"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# fetch-chain user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without polluting the Core.
    - A single configuration contract for CLI, adapters and runners.
    """

    model_config = SettingsConfigDict(
        env_prefix="FETCH_CHAIN_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="https://jsonplaceholder.typicode.com",
        min_length=8,
        description="Base URL of the users/posts/comments API.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="fetch-chain/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent with every request.",
    )

    reactive_policy: SelectionPolicy = Field(
        default=SelectionPolicy.LAST,
        description="Which element the reactive runner carries to the next stage.",
    )
    suspending_policy: SelectionPolicy = Field(
        default=SelectionPolicy.FIRST,
        description="Which element the suspending runner carries to the next stage.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the structlog/stdlib pipeline.",
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console output.",
    )
