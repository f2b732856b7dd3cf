"""
Settings loading and saving utilities.

This module loads the ambient client settings (logging and timeouts)
from YAML or JSON files. Connection targets and credentials are never
read from disk; callers build a ConnectionConfig themselves.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ...core.exceptions import InvalidConfig
from .models import ClientSettings


class ConfigLoader:
    """Settings loader supporting YAML and JSON files."""

    def load_settings(self, config_file: Optional[str] = None) -> ClientSettings:
        """
        Load settings from a file.

        Args:
            config_file: Path to settings file (optional)

        Returns:
            Loaded and validated settings; defaults when no file is given
        """
        data: Dict[str, Any] = {}

        if config_file:
            data = self._load_from_file(config_file)

        if not isinstance(data, dict):
            raise InvalidConfig(f"Settings file must contain a mapping: {config_file}")

        return ClientSettings.from_dict(data)

    def save_settings(self, settings: ClientSettings, file_path: str, format: str = "yaml") -> None:
        """
        Save settings to file.

        Args:
            settings: Settings to save
            file_path: Output file path
            format: File format (yaml or json)
        """
        data = settings.to_dict()

        if format.lower() == "yaml":
            self._save_yaml(data, file_path)
        elif format.lower() == "json":
            self._save_json(data, file_path)
        else:
            raise InvalidConfig(f"Unsupported format: {format}")

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load settings from file."""
        path = Path(file_path)

        if not path.exists():
            raise InvalidConfig(f"Settings file not found: {file_path}")

        if path.suffix.lower() in ['.yaml', '.yml']:
            return self._load_yaml(file_path)
        elif path.suffix.lower() == '.json':
            return self._load_json(file_path)
        else:
            raise InvalidConfig(f"Unsupported settings file format: {path.suffix}")

    def _load_yaml(self, file_path: str) -> Dict[str, Any]:
        """Load YAML settings file."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfig(f"Invalid YAML in {file_path}: {e}") from e
        except OSError as e:
            raise InvalidConfig(f"Error reading {file_path}: {e}") from e

    def _load_json(self, file_path: str) -> Dict[str, Any]:
        """Load JSON settings file."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)  # type: ignore[no-any-return]
        except json.JSONDecodeError as e:
            raise InvalidConfig(f"Invalid JSON in {file_path}: {e}") from e
        except OSError as e:
            raise InvalidConfig(f"Error reading {file_path}: {e}") from e

    def _save_yaml(self, data: Dict[str, Any], file_path: str) -> None:
        """Save settings as YAML."""
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, indent=2)
        except OSError as e:
            raise InvalidConfig(f"Error writing YAML to {file_path}: {e}") from e

    def _save_json(self, data: Dict[str, Any], file_path: str) -> None:
        """Save settings as JSON."""
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise InvalidConfig(f"Error writing JSON to {file_path}: {e}") from e
