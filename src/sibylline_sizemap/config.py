"""Configuration loader for size report settings.

Loads ``sizemap.yaml`` files with priority resolution:
1. User config: ~/.config/{app_name}/sizemap.yaml (highest priority)
2. Project config: .{app_name}/sizemap.yaml in current directory
3. Package defaults: shipped with sizemap (fallback)

Keys missing from a higher-priority file fall through to the next one.
"""

import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "sizemap.yaml"

# Lazy import yaml to avoid startup cost
_yaml = None


def _get_yaml():
    """Lazy-load PyYAML."""
    global _yaml
    if _yaml is None:
        import yaml

        _yaml = yaml
    return _yaml


def _get_package_defaults_path():
    """Get path to the package default settings using importlib.resources."""
    try:
        from importlib.resources import files

        return files("sibylline_sizemap") / "_defaults"
    except (ImportError, TypeError):
        # Editable installs without package metadata
        return Path(__file__).parent / "_defaults"


class SizemapConfig:
    """Report settings resolved from config files and explicit overrides.

    Config locations are checked in priority order:
    1. ~/.config/{app_name}/sizemap.yaml - User overrides
    2. .{app_name}/sizemap.yaml - Project-specific settings
    3. Package defaults - Shipped with sizemap

    Keyword overrides passed to the constructor take precedence over every
    file.
    """

    KNOWN_KEYS = (
        "unmapped_label",
        "byte_decimals",
        "percent_digits",
        "path_separator",
        "module_boundary_marker",
    )

    def __init__(self, app_name: str = "sizemap", **overrides: Any):
        """Initialize and load settings.

        Args:
            app_name: Application name for config directory resolution.
                     Controls where user overrides are loaded from
                     (e.g., ~/.config/{app_name}/sizemap.yaml).
            **overrides: Setting values that win over all config files.
        """
        unknown = set(overrides) - set(self.KNOWN_KEYS)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        self._app_name = app_name
        self._config_locations = [
            Path.home() / ".config" / app_name / CONFIG_FILENAME,  # User overrides
            Path.cwd() / f".{app_name}" / CONFIG_FILENAME,  # Project config
        ]

        self._settings: dict[str, Any] = {}
        self._load_all()
        self._settings.update(overrides)

    def _load_all(self) -> None:
        """Load files from lowest to highest priority so later ones win."""
        defaults_file = _get_package_defaults_path() / CONFIG_FILENAME
        self._load_file(defaults_file)

        for config_file in reversed(self._config_locations):
            if config_file.exists():
                self._load_file(config_file)

    def _load_file(self, config_file) -> None:
        yaml = _get_yaml()

        try:
            content = config_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            logger.warning("Skipping invalid config file %s: %s", config_file, exc)
            return

        if not data:
            return

        if not isinstance(data, dict):
            logger.warning("Skipping config file %s: expected a mapping at top level", config_file)
            return

        for key, value in data.items():
            if key in self.KNOWN_KEYS:
                self._settings[key] = value
            else:
                logger.warning("Ignoring unknown setting %r in %s", key, config_file)

    @property
    def unmapped_label(self) -> str:
        return self._settings.get("unmapped_label", "[unmapped]")

    @property
    def byte_decimals(self) -> int:
        return int(self._settings.get("byte_decimals", 2))

    @property
    def percent_digits(self) -> int:
        return int(self._settings.get("percent_digits", 2))

    @property
    def path_separator(self) -> str:
        return self._settings.get("path_separator", "/")

    @property
    def module_boundary_marker(self) -> str | None:
        """Substring marking one bundled module, counted per artifact. ``None`` disables."""
        return self._settings.get("module_boundary_marker")

    @property
    def settings(self) -> dict[str, Any]:
        return self._settings.copy()
