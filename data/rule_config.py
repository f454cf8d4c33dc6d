"""Process-wide admission rules shared by every session."""

import threading
from typing import Optional

from loguru import logger
from config.defaults import DEFAULT_RULE_CONFIG


class RuleConfigStore:
    """Holds the one rule configuration every booking is admitted under.

    Readers get a copy, so a session cannot change the rules by mutating
    the dict it was handed.
    """

    def __init__(self, initial: Optional[dict] = None):
        self._lock = threading.Lock()
        self._config = dict(DEFAULT_RULE_CONFIG)
        self._config.update(self._clean(initial or {}))

    @staticmethod
    def _clean(config: dict) -> dict:
        unknown = set(config) - set(DEFAULT_RULE_CONFIG)
        if unknown:
            raise ValueError(f"Unknown rules: {', '.join(sorted(unknown))}")
        return {key: int(value) for key, value in config.items()}

    def get(self) -> dict:
        with self._lock:
            return dict(self._config)

    def update(self, config: dict) -> dict:
        """Replace the given rules, keep the rest. Returns the new configuration."""
        changes = self._clean(config)
        with self._lock:
            merged = dict(self._config)
            merged.update(changes)
            logger.info(f"Rule configuration changed: {self._config} -> {merged}")
            self._config = merged
            return dict(merged)

    def reset(self) -> dict:
        with self._lock:
            self._config = dict(DEFAULT_RULE_CONFIG)
            logger.info("Rule configuration reset to defaults")
            return dict(self._config)
