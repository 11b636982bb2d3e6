#!/usr/bin/env python3
"""
PATTERNCHART SETTINGS
---------------------
Working-area locations used while building charts. Defaults live under
the user's home directory; tests and the CLI point them elsewhere.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ConverterSettings:
    """
    package_dir: where the packager drops the .tgz before it is read back.
    temp_dir:    parent of the per-call build directories.
    """
    package_dir: Path
    temp_dir: Path

    @classmethod
    def from_root(cls, root: Path) -> "ConverterSettings":
        """Lays out both directories under a '.meshery'-style root."""
        root = Path(root)
        return cls(
            package_dir=root / "helm-packages",
            temp_dir=root / "tmp" / "helm",
        )

    @classmethod
    def from_home(cls, home: Optional[Path] = None) -> "ConverterSettings":
        """
        Default layout: ~/.meshery/helm-packages and ~/.meshery/tmp/helm.
        Path.home() raises RuntimeError when the home directory is unknown.
        """
        home = Path(home) if home is not None else Path.home()
        return cls.from_root(home / ".meshery")
