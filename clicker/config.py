"""
Configuration

One dataclass for every tunable of the engine, with environment
overrides (CLICKER_*) for deployment.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
import os

from .contracts.base import JUDGE_NAME_LIMIT
from .temporal.replay import (
    MAX_CONSECUTIVE_TRANSPORT_ERRORS,
    PREROLL_SECONDS,
    TICK_INTERVAL_SECONDS,
    ReplaySettings,
)


ENV_PREFIX = "CLICKER_"


def _default_preferences_path() -> Path:
    return Path.home() / ".config" / "clicker" / "preferences.json"


def _default_store_dir() -> Path:
    return Path(os.getcwd()) / "data" / "scores"


@dataclass
class ClickerConfig:
    """Unified configuration for a judging session and its collaborators."""
    tick_interval_seconds: float = TICK_INTERVAL_SECONDS
    preroll_seconds: float = PREROLL_SECONDS
    max_transport_errors: int = MAX_CONSECUTIVE_TRANSPORT_ERRORS
    judge_name_limit: int = JUDGE_NAME_LIMIT

    preferences_path: Path = field(default_factory=_default_preferences_path)
    share_store_dir: Optional[Path] = None
    share_base_url: str = "http://localhost:5173"
    remote_url: Optional[str] = None
    remote_timeout_seconds: float = 15.0

    def __post_init__(self):
        if self.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be positive")
        if self.preroll_seconds < 0:
            raise ValueError("preroll_seconds must be non-negative")
        if self.max_transport_errors < 1:
            raise ValueError("max_transport_errors must be at least 1")
        if self.judge_name_limit < 1:
            raise ValueError("judge_name_limit must be at least 1")
        self.preferences_path = Path(self.preferences_path)
        if self.share_store_dir is not None:
            self.share_store_dir = Path(self.share_store_dir)

    @property
    def replay(self) -> ReplaySettings:
        return ReplaySettings(
            tick_interval=self.tick_interval_seconds,
            preroll=self.preroll_seconds,
            max_transport_errors=self.max_transport_errors
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ClickerConfig':
        """Build a config, overriding defaults from CLICKER_* variables."""
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value else None

        kwargs = {}
        if get("TICK_INTERVAL"):
            kwargs["tick_interval_seconds"] = float(get("TICK_INTERVAL"))
        if get("PREROLL"):
            kwargs["preroll_seconds"] = float(get("PREROLL"))
        if get("MAX_TRANSPORT_ERRORS"):
            kwargs["max_transport_errors"] = int(get("MAX_TRANSPORT_ERRORS"))
        if get("JUDGE_NAME_LIMIT"):
            kwargs["judge_name_limit"] = int(get("JUDGE_NAME_LIMIT"))
        if get("PREFERENCES_PATH"):
            kwargs["preferences_path"] = Path(get("PREFERENCES_PATH"))
        if get("STORE_DIR"):
            kwargs["share_store_dir"] = Path(get("STORE_DIR"))
        if get("SHARE_BASE_URL"):
            kwargs["share_base_url"] = get("SHARE_BASE_URL")
        if get("REMOTE_URL"):
            kwargs["remote_url"] = get("REMOTE_URL")
        if get("REMOTE_TIMEOUT"):
            kwargs["remote_timeout_seconds"] = float(get("REMOTE_TIMEOUT"))

        return cls(**kwargs)
