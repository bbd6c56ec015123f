import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from copilot_assistant.constants.assistant import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_POLL_WAIT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_PROTOCOL_VERSION,
    DEFAULT_READ_RETRIES,
    DEFAULT_READ_RETRY_WAIT,
    DEFAULT_REQUEST_TIMEOUT,
)
from copilot_assistant.exceptions import ConfigError

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def _optional_float_env(name: str, default: Optional[float]) -> Optional[float]:
    """`0`, `none` and negative values all mean "no limit"."""
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in ("none", "off", "unbounded"):
        return None
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass
class AssistantConfig:
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY") or None)
    assistant_id: Optional[str] = field(
        default_factory=lambda: os.getenv("OPENAI_ASSISTANT_ID") or None
    )
    base_url: str = field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)
    )
    protocol_version: str = field(
        default_factory=lambda: os.getenv("OPENAI_ASSISTANTS_VERSION", DEFAULT_PROTOCOL_VERSION)
    )
    request_timeout: float = field(
        default_factory=lambda: _float_env("COPILOT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
    )
    poll_interval: float = field(
        default_factory=lambda: _float_env("COPILOT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)
    )
    max_poll_wait: Optional[float] = field(
        default_factory=lambda: _optional_float_env("COPILOT_MAX_POLL_WAIT", DEFAULT_MAX_POLL_WAIT)
    )
    read_retries: int = field(
        default_factory=lambda: _int_env("COPILOT_READ_RETRIES", DEFAULT_READ_RETRIES)
    )
    read_retry_wait: float = field(
        default_factory=lambda: _float_env("COPILOT_READ_RETRY_WAIT", DEFAULT_READ_RETRY_WAIT)
    )
    max_workers: int = field(
        default_factory=lambda: _int_env("COPILOT_MAX_WORKERS", DEFAULT_MAX_WORKERS)
    )
    cancel_remote_runs: bool = field(
        default_factory=lambda: _bool_env("COPILOT_CANCEL_REMOTE_RUNS", True)
    )
    raise_on_failed_run: bool = field(
        default_factory=lambda: _bool_env("COPILOT_RAISE_ON_FAILED_RUN", False)
    )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "AssistantConfig":
        """
        Build a config from the process environment.

        When env_file is given it is loaded first, overriding variables that are
        already set. Keyword overrides win over both.
        """
        if env_file is not None:
            load_dotenv(dotenv_path=env_file, override=True)
        return cls(**overrides)

    def missing(self) -> List[str]:
        missing = []
        if not self.api_key:
            missing.append("api_key")
        if not self.assistant_id:
            missing.append("assistant_id")
        return missing

    def require(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    def __repr__(self) -> str:
        masked = "***" if self.api_key else None
        return (
            f"AssistantConfig(api_key={masked!r}, assistant_id={self.assistant_id!r}, "
            f"base_url={self.base_url!r}, poll_interval={self.poll_interval!r}, "
            f"max_poll_wait={self.max_poll_wait!r})"
        )
