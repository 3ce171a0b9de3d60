"""Operating system and distribution detection."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path
from typing import Callable, Dict

import psutil

from . import console, logger

OS_RELEASE = Path("/etc/os-release")
SUPPORTED_DISTROS = ('ubuntu', 'debian', 'linuxmint', 'elementary', 'zorin')
LOW_DISK_MB = 2000


def is_linux() -> bool:
    return sys.platform.startswith('linux')


def read_os_release(path: Path = OS_RELEASE) -> Dict[str, str]:
    """Parse an os-release file into a dict (empty when unreadable)."""
    info: Dict[str, str] = {}
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return info
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, value = line.partition('=')
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value.strip('"\'')]
        info[key.strip()] = parts[0] if parts else ''
    return info


def distro_id(path: Path = OS_RELEASE) -> str:
    return read_os_release(path).get('ID', '').lower()


def version_codename(path: Path = OS_RELEASE) -> str:
    info = read_os_release(path)
    return info.get('VERSION_CODENAME') or info.get('UBUNTU_CODENAME', '')


def check_operating_system(confirm: Callable[[str], bool], path: Path = OS_RELEASE) -> bool:
    """Return True when installation may proceed on this system."""
    if not is_linux():
        console.print(f"[red]This installer is designed for Linux/Ubuntu systems only. Current OS: {sys.platform}[/red]")
        return False

    if not path.exists():
        return True

    distro = distro_id(path)
    if distro not in SUPPORTED_DISTROS:
        console.print("[yellow]Warning: This installer is optimized for Ubuntu/Debian-based distributions.[/yellow]")
        console.print(f"[yellow]Your distribution ({distro or 'unknown'}) may not be fully compatible.[/yellow]")
        return confirm("Do you want to continue anyway?")
    return True


def check_disk_space(required_mb: int = LOW_DISK_MB) -> bool:
    """Warn when the root filesystem is low on space; never blocks."""
    try:
        disk = psutil.disk_usage('/')
    except OSError as exc:
        console.print(f"[yellow]⚠️  Could not check disk space: {exc}[/yellow]")
        return True
    available_mb = disk.free / 1024 / 1024
    if available_mb < required_mb:
        console.print(f"[yellow]⚠️  Low disk space: {available_mb:.0f} MB available[/yellow]")
        return False
    return True
