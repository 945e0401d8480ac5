"""Configuration management for Dart Janitor.

Loads environment variables and provides centralized config access.
"""
import os
from pathlib import Path
from typing import Optional, Set
from dotenv import load_dotenv

__version__ = "1.0.0"

ENV_PREFIX = "DART_JANITOR_"

DEFAULT_CODE_DIR = "lib"
DEFAULT_MANIFEST = "pubspec.yaml"
SOURCE_EXTENSION = ".dart"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_file: Optional[Path] = None):
        """Initialize config by loading a .env file.

        Args:
            env_file: Explicit .env path (defaults to ./.env in the working directory)
        """
        load_dotenv(env_file or Path.cwd() / ".env")

        self._validate()

    def _validate(self):
        """Validate environment values that have a constrained format.

        Raises:
            ValueError: If DART_JANITOR_WORKERS is not a positive integer
        """
        # Touch the property so a bad value fails at startup, not mid-run
        self.max_workers

    @property
    def code_dir(self) -> str:
        """Directory (relative to the project root) holding Dart sources."""
        return os.getenv(f"{ENV_PREFIX}CODE_DIR", DEFAULT_CODE_DIR)

    @property
    def manifest_name(self) -> str:
        """Name of the dependency/asset manifest at the project root."""
        return os.getenv(f"{ENV_PREFIX}MANIFEST", DEFAULT_MANIFEST)

    @property
    def max_workers(self) -> Optional[int]:
        """Worker threads for per-file analysis.

        Returns:
            Positive integer, or None to let the executor decide

        Raises:
            ValueError: If the variable is set but not a positive integer
        """
        raw = os.getenv(f"{ENV_PREFIX}WORKERS")
        if raw is None or not raw.strip():
            return None
        try:
            workers = int(raw)
        except ValueError:
            workers = 0
        if workers < 1:
            raise ValueError(
                f"{ENV_PREFIX}WORKERS must be a positive integer, got {raw!r}"
            )
        return workers

    @property
    def extra_callbacks(self) -> Set[str]:
        """Additional framework-invoked method names to never report.

        Returns:
            Set of names parsed from a comma-separated variable
        """
        raw = os.getenv(f"{ENV_PREFIX}EXTRA_CALLBACKS", "")
        return {name.strip() for name in raw.split(",") if name.strip()}


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config
    _config = None
