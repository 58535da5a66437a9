"""
Version information for zkapp-cli.
We keep a static __version__ (PEP 440); the CLI prints it with `zk version`.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Optional

# Bump this when publishing
__version__ = "0.1.0"


@dataclass(frozen=True)
class VersionInfo:
    base: str
    python: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.base if not self.python else f"{self.base} (python {self.python})"


def version_info() -> VersionInfo:
    """Structured version info (package version plus interpreter version)."""
    return VersionInfo(base=__version__, python=platform.python_version())


def version() -> str:
    """Human-friendly string, e.g. '0.1.0 (python 3.12.1)'."""
    return str(version_info())


__all__ = ["__version__", "VersionInfo", "version_info", "version"]
