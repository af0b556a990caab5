"""YAML settings for MovieHub, with ``.env`` loading and ``${VAR}`` expansion."""

import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import Config

CONFIG_ENV_VAR = "MOVIEHUB_CONFIG"

STARTER_CONFIG: Dict[str, Any] = {
    "llm": {
        "enabled": True,
        "provider": "openai",
        "model": "gpt-4o-mini",
        "api_key": "${OPENAI_API_KEY}",
    },
    "tmdb": {"api_key": "${TMDB_API_KEY}"},
    "omdb": {"api_key": "${OMDB_API_KEY}"},
    "tvmaze": {"base_url": "https://api.tvmaze.com"},
    "cache": {"enabled": True, "backend": "memory", "url": "redis://localhost:6379/0"},
    "server": {"host": "0.0.0.0", "port": 3000},
    "logging": {"level": "INFO"},
}

EXAMPLE_CONFIG = Path(__file__).resolve().parents[3] / "config" / "config.example.yaml"


def candidate_paths() -> List[Path]:
    """Places a MovieHub config file is looked for, in priority order."""
    paths = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".config" / "moviehub" / "config.yaml",
        Path.home() / ".moviehub" / "config.yaml",
    ]
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        paths.insert(0, Path(override))
    return paths


class ConfigManager:
    """Loads MovieHub settings once and hands out the validated ``Config``."""

    def __init__(self, config_path: Optional[Path] = None, env_file: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Explicit settings file. When None, ``candidate_paths()`` is searched.
            env_file: ``.env`` file read before variables are expanded. Defaults to the one
                python-dotenv finds from the working directory.
        """
        self._config_path = config_path
        self._env_file = env_file
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Read, expand and validate the settings file, once.

        Raises:
            FileNotFoundError: No settings file exists.
            ValueError: The file does not describe a valid ``Config``.
            yaml.YAMLError: The file is not a YAML mapping.
        """
        if self._config is not None:
            return self._config

        # existing environment variables win over .env entries
        if self._env_file is not None:
            load_dotenv(self._env_file)
        else:
            load_dotenv()

        data = self._read(self._locate())
        try:
            self._config = Config(**data)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e
        return self._config

    def reload_config(self) -> Config:
        """Drop the loaded settings and read the file again."""
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Loaded settings, reading them on first use."""
        return self._config if self._config is not None else self.load_config()

    def _locate(self) -> Path:
        if self._config_path is not None:
            if not self._config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self._config_path}")
            return self._config_path

        paths = candidate_paths()
        for path in paths:
            if path.exists():
                return path
        raise FileNotFoundError(
            f"No MovieHub configuration in any of: {', '.join(str(p) for p in paths)}"
        )

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        """Parse a settings file after expanding ``${VAR}`` references."""
        text = os.path.expandvars(path.read_text(encoding="utf-8"))
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
        if not isinstance(data, dict):
            raise yaml.YAMLError(f"{path} must hold a mapping of settings sections")
        return data

    @classmethod
    def create_default_config(cls, output_path: Path) -> None:
        """Write a starter settings file.

        The bundled ``config/config.example.yaml`` is copied when present, otherwise
        ``STARTER_CONFIG`` is dumped.

        Args:
            output_path: Where the file is written. Parent directories are created.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if EXAMPLE_CONFIG.exists():
            shutil.copy2(EXAMPLE_CONFIG, output_path)
            return
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(STARTER_CONFIG, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Whether ``config_path`` parses into a valid ``Config``. Loaded state is untouched."""
        try:
            Config(**self._read(config_path))
        except (ValidationError, yaml.YAMLError, FileNotFoundError):
            return False
        return True
