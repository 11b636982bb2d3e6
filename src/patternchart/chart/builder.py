#!/usr/bin/env python3
"""
PATTERNCHART BUILDER - Scaffold, Package, Read Back
---------------------------------------------------
Lays out a throwaway chart directory for one manifest, hands it to the
packager and returns the archive bytes. Each call works inside its own
'<temp_dir>/<uuid>' build directory and packages into its own
'<package_dir>/<uuid>'; both are removed on every exit path. The
packaged file is deleted once its bytes are in memory.

Cleanup problems are reported as warnings on the injected logger and
never replace the primary result or error.
"""

import io
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from patternchart.chart.packager import ChartPackager, TarballPackager
from patternchart.core.errors import ChartCreationError, PackagingError
from patternchart.core.models import ChartMetadata
from patternchart.core.settings import ConverterSettings
from patternchart.core.yamlio import block_dumper

CHART_FILE = "Chart.yaml"
TEMPLATES_DIR = "templates"
MANIFEST_FILE = "manifest.yaml"


class ChartBuilder:
    """
    Turns (manifest, name, version) into packaged chart bytes.
    """

    def __init__(self, settings: Optional[ConverterSettings] = None,
                 packager: Optional[ChartPackager] = None,
                 logger: Optional[logging.Logger] = None):
        self.settings = settings
        self.packager = packager or TarballPackager()
        self.log = logger or logging.getLogger("patternchart.builder")

    def build(self, manifest: str, chart_name: str, chart_version: str) -> bytes:
        settings = self._resolve_settings()

        self._make_dir(settings.package_dir, "creating package directory")
        self._make_dir(settings.temp_dir, "creating temp directory")

        # Archives are named <chart>-<version>.tgz, so each call packages
        # into its own subdirectory as well.
        build_id = str(uuid.uuid4())
        build_dir = settings.temp_dir / build_id
        package_dir = settings.package_dir / build_id
        try:
            chart_dir = self.scaffold(build_dir, manifest, chart_name, chart_version)
            self._make_dir(package_dir, "creating package directory")
            archive = self._package(chart_dir, package_dir)
            return self._read_back(archive)
        finally:
            self._remove_build_dir(build_dir)
            self._remove_build_dir(package_dir)

    def scaffold(self, build_dir: Path, manifest: str,
                 chart_name: str, chart_version: str) -> Path:
        """
        Creates '<build_dir>/<chart_name>' with Chart.yaml and the manifest template.

        Names that cannot be a single directory ('', '.', '..', or anything
        holding '/' or '\\') raise ChartCreationError here; every other name
        Helm would reject reaches the packager and surfaces as PackagingError.
        """
        if not chart_name or chart_name in (".", "..") or "/" in chart_name or "\\" in chart_name:
            raise ChartCreationError(
                "creating chart source directory",
                ValueError(f"chart name {chart_name!r} cannot be used as a directory name"),
            )

        chart_dir = Path(build_dir) / chart_name
        templates_dir = chart_dir / TEMPLATES_DIR
        self._make_dir(chart_dir, "creating chart source directory")
        self._make_dir(templates_dir, "creating templates directory")

        metadata = ChartMetadata.for_chart(chart_name, chart_version)
        try:
            chart_yaml = self._marshal(metadata)
        except YAMLError as e:
            raise ChartCreationError("marshaling Chart.yaml metadata", e) from e

        try:
            (chart_dir / CHART_FILE).write_text(chart_yaml, encoding='utf-8')
        except OSError as e:
            raise ChartCreationError("writing Chart.yaml", e) from e

        try:
            # newline='' keeps the manifest byte-for-byte on every platform
            with open(templates_dir / MANIFEST_FILE, 'w', encoding='utf-8', newline='') as f:
                f.write(manifest)
        except OSError as e:
            raise ChartCreationError("writing manifest.yaml", e) from e

        return chart_dir

    def _marshal(self, metadata: ChartMetadata) -> str:
        stream = io.StringIO()
        block_dumper().dump(CommentedMap(metadata.to_dict()), stream)
        return stream.getvalue()

    def _package(self, chart_dir: Path, destination: Path) -> Path:
        try:
            return Path(self.packager.package(chart_dir, destination))
        except Exception as e:
            raise PackagingError(e) from e

    def _read_back(self, archive: Path) -> bytes:
        try:
            data = archive.read_bytes()
        except OSError as e:
            raise ChartCreationError("reading packaged chart", e) from e

        try:
            os.remove(archive)
        except OSError as e:
            self.log.warning(f"Failed to clean up packaged chart {archive}: {e}")
        return data

    def _resolve_settings(self) -> ConverterSettings:
        if self.settings is not None:
            return self.settings
        try:
            return ConverterSettings.from_home()
        except (RuntimeError, KeyError, OSError) as e:
            raise ChartCreationError("getting user home directory", e) from e

    def _make_dir(self, path: Path, step: str) -> None:
        try:
            Path(path).mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise ChartCreationError(step, e) from e

    def _remove_build_dir(self, build_dir: Path) -> None:
        try:
            shutil.rmtree(build_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.log.warning(f"Failed to clean up build directory {build_dir}: {e}")
