from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from launcher_core.models import ToolConfiguration
from launcher_core.platform_profile import PlatformProfile


logger = logging.getLogger(__name__)

HOME_ENV_VAR = "REPOLAUNCHER_HOME"
THEMES = ("light", "dark", "system")
DEFAULT_THEME = "system"


def default_base_dir() -> Path:
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".repolauncher"


class ConfigStore:
    """Persist tool choices, theme and the remembered directories in YAML.

    Everything lives in a single `settings.yml` under the profile directory.
    `base_dir` lets tests point the store at a temporary location.
    """

    def __init__(self, profile: PlatformProfile, base_dir: Optional[Path] = None) -> None:
        self._profile = profile
        self._base = Path(base_dir) if base_dir is not None else default_base_dir()
        self._base.mkdir(parents=True, exist_ok=True)
        self._settings_path = self._base / "settings.yml"
        self._settings: Dict[str, Any] = self._load_settings()

    @property
    def path(self) -> Path:
        return self._settings_path

    @property
    def base_dir(self) -> Path:
        return self._base

    def _load_settings(self) -> Dict[str, Any]:
        if not self._settings_path.exists():
            return {}
        try:
            data = yaml.safe_load(self._settings_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to read %s, starting from defaults: %s", self._settings_path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_settings(self) -> None:
        self._settings_path.write_text(
            yaml.safe_dump(self._settings, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )

    def reload(self) -> None:
        self._settings = self._load_settings()

    # Tool configuration

    def load_tool_configuration(self) -> ToolConfiguration:
        raw = self._settings.get("editors")
        if raw is None:
            return self._profile.default_tool_configuration()
        return ToolConfiguration.from_dict(raw)

    def save_tool_configuration(self, config: ToolConfiguration) -> None:
        self._settings["editors"] = config.to_dict()
        self._save_settings()
        logger.info("Tool configuration saved")

    # Theme

    def get_theme(self) -> str:
        theme = self._settings.get("theme")
        return theme if theme in THEMES else DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._settings["theme"] = theme
        self._save_settings()

    # Remembered directories

    def get_repos(self) -> List[Dict[str, str]]:
        repos = self._settings.get("repos")
        if not isinstance(repos, list):
            return []
        return [dict(r) for r in repos if isinstance(r, dict)]

    def set_repos(self, repos: List[Dict[str, Any]]) -> None:
        valid = [
            {"label": str(r["label"]), "path": str(r["path"]), "lastOpened": str(r.get("lastOpened") or "")}
            for r in repos
            if isinstance(r, dict) and r.get("label") and r.get("path")
        ]
        if len(valid) != len(repos):
            logger.warning("Filtered out %d invalid repositories", len(repos) - len(valid))
        self._settings["repos"] = valid
        self._save_settings()

    def add_repo(self, path: str, label: Optional[str] = None) -> Dict[str, str]:
        entry = {
            "label": label or Path(path).name or path,
            "path": path,
            "lastOpened": datetime.now(timezone.utc).isoformat(),
        }
        repos = [r for r in self.get_repos() if r.get("path") != path]
        repos.insert(0, entry)
        self.set_repos(repos)
        return entry

    def remove_repo(self, path: str) -> bool:
        repos = self.get_repos()
        remaining = [r for r in repos if r.get("path") != path]
        if len(remaining) == len(repos):
            logger.warning("Repository not found for removal: %s", path)
            return False
        self.set_repos(remaining)
        return True

    def clear(self) -> None:
        self._settings = {}
        self._save_settings()
        logger.info("Settings cleared")
