"""
Configuration loader for toolloop.
Loads settings from settings.toml, environment overrides, and defaults.
"""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "anthropic/claude-haiku-4.5"
DEFAULT_MAX_ITERATIONS = 10
DEFAULT_MAX_MESSAGES = 30


class ConfigError(ValueError):
    """Raised when the runtime configuration cannot be used."""


@dataclass
class Settings:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    max_messages: int = DEFAULT_MAX_MESSAGES
    workspace: Path = field(default_factory=Path.cwd)
    data_dir: Path = Path("data")
    log_level: str = "ERROR"


def _positive_int(name: str, value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def load_settings(config_path: Path | None = None) -> Settings:
    config_file = config_path or Path("config/settings.toml")
    data = {}
    if config_file.exists():
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid config file {config_file}: {exc}") from exc
    elif config_path is not None:
        raise ConfigError(f"Config file not found: {config_file}")

    api_key = os.getenv("OPENROUTER_API_KEY", data.get("api_key", ""))
    if not api_key:
        raise ConfigError("OPENROUTER_API_KEY is not set")

    base_url = os.getenv("OPENROUTER_BASE_URL") or data.get("base_url", DEFAULT_BASE_URL)
    model = os.getenv("TOOLLOOP_MODEL", data.get("model", DEFAULT_MODEL))
    max_iterations = _positive_int(
        "max_iterations", os.getenv("TOOLLOOP_MAX_ITERATIONS", data.get("max_iterations", DEFAULT_MAX_ITERATIONS))
    )
    max_messages = _positive_int(
        "max_messages", os.getenv("TOOLLOOP_MAX_MESSAGES", data.get("max_messages", DEFAULT_MAX_MESSAGES))
    )
    workspace = Path(os.getenv("TOOLLOOP_WORKSPACE", data.get("workspace", Path.cwd())))
    data_dir = Path(os.getenv("TOOLLOOP_DATA_DIR", data.get("data_dir", "data")))
    log_level = os.getenv("TOOLLOOP_LOG_LEVEL", data.get("log_level", "ERROR"))

    return Settings(
        api_key=api_key,
        base_url=base_url.rstrip("/"),
        model=model,
        max_iterations=max_iterations,
        max_messages=max_messages,
        workspace=workspace,
        data_dir=data_dir,
        log_level=log_level,
    )
