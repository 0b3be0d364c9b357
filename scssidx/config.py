"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (SCSSIDX_*)
  2. Project config (.scssidx/config.yaml)
  3. User config (~/.scssidx/config.yaml)
  4. Defaults
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any, List


logger = logging.getLogger(__name__)


DEFAULT_IMPLICITLY_LABEL = "(implicitly)"
DEFAULT_FUNCTION_TRIGGERS = " (+-*%"
DEFAULT_SCANNER_EXCLUDE = [
    "**/.git",
    "**/node_modules",
    "**/bower_components",
]

# Environment variable -> setting name
ENV_OVERRIDES = {
    "SCSSIDX_SCAN_IMPORTED_FILES": "scan_imported_files",
    "SCSSIDX_IMPLICITLY_LABEL": "implicitly_label",
    "SCSSIDX_SCANNER_DEPTH": "scanner_depth",
    "SCSSIDX_SCANNER_LIMIT": "scanner_limit",
}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _to_list(value: Any) -> List[str]:
    """A lone pattern string is a one-item list, not its characters."""
    if isinstance(value, str):
        return [value]
    return list(value)


@dataclass
class Settings:
    """Completion and scanner settings."""
    # Suggestions
    suggest_variables: bool = True
    suggest_mixins: bool = True
    suggest_functions: bool = True
    suggest_functions_in_string_context_after_symbols: str = DEFAULT_FUNCTION_TRIGGERS
    implicitly_label: Optional[str] = DEFAULT_IMPLICITLY_LABEL  # None/"" = no label

    # Scanner
    scan_imported_files: bool = True
    scanner_depth: int = 30
    scanner_exclude: List[str] = field(default_factory=lambda: list(DEFAULT_SCANNER_EXCLUDE))
    scanner_limit: int = 1000

    def validate(self) -> Optional[str]:
        """Validate settings. Returns error message or None if valid."""
        if self.scanner_depth < 0:
            return f"scanner_depth must be >= 0, got {self.scanner_depth}"
        if self.scanner_limit < 1:
            return f"scanner_limit must be >= 1, got {self.scanner_limit}"
        if not isinstance(self.scanner_exclude, list):
            return "scanner_exclude must be a list of glob patterns"
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Settings':
        """Create from dictionary; unknown keys are ignored."""
        defaults = cls()
        return cls(
            suggest_variables=_to_bool(data.get("suggest_variables", defaults.suggest_variables)),
            suggest_mixins=_to_bool(data.get("suggest_mixins", defaults.suggest_mixins)),
            suggest_functions=_to_bool(data.get("suggest_functions", defaults.suggest_functions)),
            suggest_functions_in_string_context_after_symbols=str(data.get(
                "suggest_functions_in_string_context_after_symbols",
                defaults.suggest_functions_in_string_context_after_symbols,
            )),
            implicitly_label=data.get("implicitly_label", defaults.implicitly_label),
            scan_imported_files=_to_bool(data.get("scan_imported_files", defaults.scan_imported_files)),
            scanner_depth=int(data.get("scanner_depth", defaults.scanner_depth)),
            scanner_exclude=_to_list(data.get("scanner_exclude", defaults.scanner_exclude)),
            scanner_limit=int(data.get("scanner_limit", defaults.scanner_limit)),
        )


class ConfigManager:
    """
    Manages settings loading and persistence.

    Hierarchy:
      1. Environment overrides
      2. Project config (.scssidx/config.yaml)
      3. User config (~/.scssidx/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".scssidx"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".scssidx"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._settings: Optional[Settings] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Settings:
        """Load settings from all sources."""
        if self._settings is not None:
            return self._settings

        data: Dict[str, Any] = {}

        # Layer 1: User config
        data.update(self._usable(self._read_yaml(self.user_config_path)))

        # Layer 2: Project config (higher priority)
        data.update(self._usable(self._read_yaml(self.project_config_path)))

        # Layer 3: Environment overrides
        env = {
            setting: os.environ[env_key]
            for env_key, setting in ENV_OVERRIDES.items()
            if env_key in os.environ
        }
        data.update(self._usable(env))

        self._settings = Settings.from_dict(data)
        return self._settings

    @staticmethod
    def _usable(data: Dict[str, Any]) -> Dict[str, Any]:
        """Drop values that cannot be converted; a lower layer or the default applies."""
        usable = {}
        for key, value in data.items():
            try:
                Settings.from_dict({key: value})
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid value for %s: %r", key, value)
                continue
            usable[key] = value
        return usable

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore malformed config
        return loaded if isinstance(loaded, dict) else {}

    def save_project(self, settings: Settings):
        """Save settings to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(settings.to_dict(), f, default_flow_style=False)

        self._settings = settings

    def set(self, key: str, value: str) -> Optional[str]:
        """
        Set a project setting.

        Args:
            key: Setting name (e.g., "suggest_mixins")
            value: Value as typed on the command line

        Returns:
            Error message or None if successful
        """
        settings = self.load()
        data = settings.to_dict()

        if key not in data:
            return f"Unknown setting: {key}. Valid: {', '.join(data)}"

        if key == "scanner_exclude":
            data[key] = [p.strip() for p in value.split(',') if p.strip()]
        elif key == "implicitly_label" and value.lower() in ('', 'none', 'null'):
            data[key] = None
        else:
            data[key] = value

        try:
            updated = Settings.from_dict(data)
        except (TypeError, ValueError) as e:
            return f"Invalid value for {key}: {e}"

        error = updated.validate()
        if error:
            return error

        self.save_project(updated)
        return None

    def display(self) -> str:
        """Format settings for display."""
        settings = self.load()
        lines = ["Settings:", ""]
        for key, value in settings.to_dict().items():
            lines.append(f"  {key}: {value!r}")
        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])
        return "\n".join(lines)


def get_settings(project_dir: Optional[Path] = None) -> Settings:
    """Load settings for a project."""
    return ConfigManager(project_dir).load()
