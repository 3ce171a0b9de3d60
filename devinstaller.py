#!/usr/bin/env python3
"""Convenience launcher so users can run `python devinstaller.py`."""

from __future__ import annotations

from devinstaller.cli import main


if __name__ == "__main__":  # pragma: no cover
    main()
