"""User settings: a JSON file merged over defaults, then CLI overrides."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from devinstaller_lib.jsonstore import load_json, save_json

from . import logger

SETTINGS_FILE = Path.home() / ".devinstaller.json"


def _matches_default(value: Any, default: Any) -> bool:
    """Settings keep the type of their default; None defaults take strings."""
    if default is None:
        return value is None or isinstance(value, str)
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type(default))


@dataclass
class Settings:
    assume_yes: bool = False
    dry_run: bool = False
    exit_delay: float = 0.0
    git_default_branch: str = "main"
    php_version: Optional[str] = None
    toolbox_url: str = "https://download.jetbrains.com/toolbox/jetbrains-toolbox-2.5.4.38621.tar.gz"
    nvm_install_url: str = "https://raw.githubusercontent.com/nvm-sh/nvm/v0.40.1/install.sh"
    pnpm_install_url: str = "https://get.pnpm.io/install.sh"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        defaults = {f.name: f.default for f in fields(cls)}
        unknown = sorted(set(data) - set(defaults))
        if unknown:
            logger.warning("Ignoring unknown settings: %s", ", ".join(unknown))
        accepted = {}
        for key, value in data.items():
            if key not in defaults:
                continue
            if not _matches_default(value, defaults[key]):
                logger.warning("Ignoring setting %s: %r has the wrong type", key, value)
                continue
            accepted[key] = value
        return cls(**accepted)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load user settings"""
    settings_file = Path(path) if path else SETTINGS_FILE
    data = load_json(settings_file)
    if data is None:
        if settings_file.exists():
            logger.warning("Could not read %s; using defaults", settings_file)
        return Settings()
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Optional[Path] = None) -> bool:
    """Save user settings"""
    return save_json(Path(path) if path else SETTINGS_FILE, settings.to_dict())


def apply_overrides(settings: Settings, args) -> Settings:
    """Layer command-line flags over file settings."""
    if getattr(args, 'yes', False):
        settings.assume_yes = True
    if getattr(args, 'dry_run', False):
        settings.dry_run = True
    if getattr(args, 'exit_delay', None) is not None:
        settings.exit_delay = max(0.0, args.exit_delay)
    return settings
