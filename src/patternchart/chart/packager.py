#!/usr/bin/env python3
"""
PATTERNCHART PACKAGER - Chart Archiving
---------------------------------------
Produces '<name>-<version>.tgz' from a chart source directory, the same
artifact 'helm package' emits. Two implementations are provided:

  TarballPackager  - in-process, validates Chart.yaml the way Helm does
                     and writes the gzip tarball itself.
  HelmCliPackager  - delegates to a 'helm' binary on PATH.
"""

import logging
import re
import subprocess
import tarfile
from pathlib import Path
from typing import Any, Dict, Protocol

from ruamel.yaml.error import YAMLError

from patternchart.core.yamlio import safe_loader

logger = logging.getLogger("patternchart.packager")

# Masterminds/semver as used by Helm: optional 'v', minor/patch may be omitted.
SEMVER_PATTERN = re.compile(
    r"^v?(0|[1-9]\d*)(\.(0|[1-9]\d*))?(\.(0|[1-9]\d*))?"
    r"(-[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?"
    r"(\+[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?$"
)
VALID_CHART_TYPES = ("", "application", "library")


class ChartValidationError(ValueError):
    """Raised when Chart.yaml would be rejected by Helm."""


class ChartPackager(Protocol):
    def package(self, chart_dir: Path, destination: Path) -> Path:
        ...


class TarballPackager:
    """
    Writes a Helm-compatible chart archive without needing the helm binary.
    Every regular file under chart_dir is stored as '<name>/<relative path>'.
    """

    def load_metadata(self, chart_dir: Path) -> Dict[str, Any]:
        chart_file = Path(chart_dir) / "Chart.yaml"
        if not chart_file.is_file():
            raise ChartValidationError(f"Chart.yaml file is missing in {chart_dir}")
        try:
            meta = safe_loader().load(chart_file.read_text(encoding='utf-8'))
        except YAMLError as e:
            raise ChartValidationError(f"cannot load Chart.yaml: {e}") from e
        if not isinstance(meta, dict):
            raise ChartValidationError("Chart.yaml must contain a mapping")
        return meta

    def validate(self, meta: Dict[str, Any]) -> None:
        api_version = str(meta.get("apiVersion") or "")
        name = str(meta.get("name") or "")
        version = str(meta.get("version") or "")
        chart_type = str(meta.get("type") or "")

        if not api_version:
            raise ChartValidationError("chart.metadata.apiVersion is required")
        if not name:
            raise ChartValidationError("chart.metadata.name is required")
        if name in (".", "..") or "/" in name or "\\" in name:
            raise ChartValidationError(f"chart.metadata.name {name!r} is invalid")
        if not version:
            raise ChartValidationError("chart.metadata.version is required")
        if not SEMVER_PATTERN.match(version):
            raise ChartValidationError(f"chart.metadata.version {version!r} is invalid")
        if chart_type not in VALID_CHART_TYPES:
            raise ChartValidationError(f"chart type {chart_type!r} is not valid")

    def package(self, chart_dir: Path, destination: Path) -> Path:
        chart_dir = Path(chart_dir)
        meta = self.load_metadata(chart_dir)
        self.validate(meta)

        name, version = str(meta["name"]), str(meta["version"])
        archive_path = Path(destination) / f"{name}-{version}.tgz"

        files = sorted(p for p in chart_dir.rglob("*") if p.is_file() and not p.is_symlink())
        try:
            with tarfile.open(archive_path, "w:gz") as tar:
                for path in files:
                    arcname = f"{name}/{path.relative_to(chart_dir).as_posix()}"
                    tar.add(str(path), arcname=arcname, recursive=False, filter=_normalize)
        except (OSError, tarfile.TarError):
            archive_path.unlink(missing_ok=True)
            raise

        logger.debug(f"Packaged {len(files)} files into {archive_path}")
        return archive_path


class HelmCliPackager:
    """Runs 'helm package' and returns the archive path it reports."""

    SAVED_TO = re.compile(r"saved it to:\s*(.+)$", re.MULTILINE)

    def __init__(self, binary: str = "helm", timeout: int = 60):
        self.binary = binary
        self.timeout = timeout

    def package(self, chart_dir: Path, destination: Path) -> Path:
        cmd = [self.binary, "package", str(chart_dir), "--destination", str(destination)]
        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=True, timeout=self.timeout
        )
        match = self.SAVED_TO.search(result.stdout)
        if not match:
            raise RuntimeError(f"unexpected output from helm package: {result.stdout.strip()!r}")
        return Path(match.group(1).strip())


def _normalize(info: tarfile.TarInfo) -> tarfile.TarInfo:
    info.uid = info.gid = 0
    info.uname = info.gname = ""
    return info
