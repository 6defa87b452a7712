"""Configuration storage for headerscope."""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError, InvalidSchemaVersionError

SCHEMA_VERSION = 1

CONFIG_FILE = ".headerscope.json"
# Overrides the config file location when set
CONFIG_ENV_VAR = "HEADERSCOPE_CONFIG"

DEFAULT_HEADER_EXTENSIONS = [".h", ".H", ".hpp", ".hxx", ".hh"]
DEFAULT_EXCLUDED_TOP_LEVEL = ["Tests", "Examples", "docs", ".github", "scripts", "Testing"]
DEFAULT_EXCLUDED_PREFIXES = ["build", "cmake-build-"]


@dataclass
class ScanConfig:
    """Settings shared by the coverage matrix and the documentation gate."""

    min_coverage: float = 80.0
    header_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_HEADER_EXTENSIONS))
    excluded_top_level: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_TOP_LEVEL))
    excluded_prefixes: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES))
    max_listed: int = 200  # undocumented/unreferenced entries shown in reports
    max_scopes_shown: int = 5  # scope labels shown per coverage row

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "min_coverage": self.min_coverage,
            "header_extensions": self.header_extensions,
            "excluded_top_level": self.excluded_top_level,
            "excluded_prefixes": self.excluded_prefixes,
            "max_listed": self.max_listed,
            "max_scopes_shown": self.max_scopes_shown,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanConfig":
        defaults = cls()
        return cls(
            min_coverage=float(data.get("min_coverage", defaults.min_coverage)),
            header_extensions=list(data.get("header_extensions", defaults.header_extensions)),
            excluded_top_level=list(data.get("excluded_top_level", defaults.excluded_top_level)),
            excluded_prefixes=list(data.get("excluded_prefixes", defaults.excluded_prefixes)),
            max_listed=int(data.get("max_listed", defaults.max_listed)),
            max_scopes_shown=int(data.get("max_scopes_shown", defaults.max_scopes_shown)),
        )


class ConfigStore:
    """Reads and writes the scan configuration for one repository."""

    def __init__(self, root: str | Path = ".", config_path: Path | None = None):
        """
        Initialize ConfigStore.

        Args:
            root: Repository root where the config file lives.
            config_path: Explicit config file (takes precedence over the
                environment variable and the root).
        """
        self.root = Path(root)
        if config_path is None and os.environ.get(CONFIG_ENV_VAR):
            config_path = Path(os.environ[CONFIG_ENV_VAR])
        self.config_path = config_path or self.root / CONFIG_FILE

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> ScanConfig:
        """
        Load configuration from disk; defaults when the file is absent.

        Raises:
            ConfigError: If the file is not a JSON object.
            InvalidSchemaVersionError: If schema version is unsupported.
        """
        if not self.exists():
            return ScanConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", str(self.config_path)) from e

        if not isinstance(data, dict):
            raise ConfigError("Config must contain a JSON object", str(self.config_path))

        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise InvalidSchemaVersionError(version, SCHEMA_VERSION)

        try:
            return ScanConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value: {e}", str(self.config_path)) from e

    def save(self, config: ScanConfig) -> None:
        """
        Save configuration to disk atomically.

        Uses write-to-temp-then-rename for atomicity.
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        data = config.to_dict()
        fd, temp_path = tempfile.mkstemp(
            dir=self.config_path.parent, prefix=".headerscope_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self.config_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise
