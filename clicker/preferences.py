"""
Judge Preferences

Key bindings and judge name persisted between sessions as a small
JSON file. A missing or unreadable file falls back to defaults.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import json
import logging

from .config import ClickerConfig
from .contracts.base import DEFAULT_KEY_NEGATIVE, DEFAULT_KEY_POSITIVE, KeyBindings


logger = logging.getLogger("clicker.preferences")

KEY_POSITIVE = "keyPositive"
KEY_NEGATIVE = "keyNegative"
KEY_JUDGE_NAME = "judgeName"


@dataclass(frozen=True)
class Preferences:
    key_positive: str = DEFAULT_KEY_POSITIVE
    key_negative: str = DEFAULT_KEY_NEGATIVE
    judge_name: str = ""

    @property
    def bindings(self) -> KeyBindings:
        return KeyBindings(positive=self.key_positive, negative=self.key_negative)

    def to_dict(self) -> dict:
        return {
            KEY_POSITIVE: self.key_positive,
            KEY_NEGATIVE: self.key_negative,
            KEY_JUDGE_NAME: self.judge_name,
        }


class PreferenceStore:
    """Reads and writes Preferences at a fixed path."""

    def __init__(self, path: Path):
        self._path = Path(path)

    @classmethod
    def from_config(cls, config: ClickerConfig) -> 'PreferenceStore':
        return cls(config.preferences_path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences at %s: %s", self._path, e)
            return Preferences()
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences at %s: not an object", self._path)
            return Preferences()

        defaults = Preferences()

        def pick(key: str, default: str, allow_empty: bool = False) -> str:
            value = data.get(key)
            if not isinstance(value, str) or (not value and not allow_empty):
                return default
            return value

        key_positive = pick(KEY_POSITIVE, defaults.key_positive)
        key_negative = pick(KEY_NEGATIVE, defaults.key_negative)
        if key_positive == key_negative:
            logger.warning("Ignoring stored key bindings at %s: both are %r", self._path, key_positive)
            key_positive, key_negative = defaults.key_positive, defaults.key_negative

        return Preferences(
            key_positive=key_positive,
            key_negative=key_negative,
            judge_name=pick(KEY_JUDGE_NAME, defaults.judge_name, allow_empty=True),
        )

    def save(self, preferences: Preferences) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, 'w', encoding='utf-8') as f:
            json.dump(preferences.to_dict(), f, indent=2)
