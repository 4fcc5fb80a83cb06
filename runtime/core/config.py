"""
Runtime configuration and logging setup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class RuntimeConfig:
    """Configuration for the narrative runtime."""

    def __init__(
        self,
        dialogue_path: str = "assets/dialogues",
        save_path: str = "saves/save.json",
        save_version: str = "1.0.0",
        intro_conversation_id: str = "introduction",
        auto_commit: bool = True,
        log_level: str = "INFO",
    ):
        self.dialogue_path = dialogue_path
        self.save_path = save_path
        self.save_version = save_version
        self.intro_conversation_id = intro_conversation_id
        self.auto_commit = auto_commit
        self.log_level = log_level

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {
            'dialogue_path',
            'save_path',
            'save_version',
            'intro_conversation_id',
            'auto_commit',
            'log_level',
        }
        unknown = set(data) - known
        if unknown:
            logging.getLogger(__name__).warning(
                f"Ignoring unknown config keys: {', '.join(sorted(unknown))}"
            )
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_file(cls, path: str | Path) -> RuntimeConfig:
        """
        Load a config from a YAML or JSON file.

        Args:
            path: Path to a .yaml, .yml or .json file

        Returns:
            The loaded config
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix == '.json':
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        return dict(vars(self))


def configure_logging(level: str | int = "INFO", fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure root logging for tools and embedding games."""
    logging.basicConfig(level=level, format=fmt)
