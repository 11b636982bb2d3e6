#!/usr/bin/env python3
"""
PATTERNCHART CONVERTER - The Orchestrator
-----------------------------------------
HelmConverter is the public entry point. It walks a pattern through the
conversion phases in a fixed order:

  1. Load       - parse the pattern, reject empty or malformed input
  2. Validate   - name and version are required for Chart.yaml
  3. Render     - pattern text to Kubernetes manifests
  4. Name       - sanitize the pattern name into a chart name
  5. Build      - scaffold, package, read back and clean up

Every collaborator is injectable; the defaults need nothing but the
filesystem.
"""

import logging
from typing import Optional, Union

from patternchart.chart.builder import ChartBuilder
from patternchart.chart.packager import ChartPackager
from patternchart.chart.sanitizer import sanitize_chart_name
from patternchart.core.errors import (
    ChartMetadataError,
    LoadPatternError,
    ManifestConversionError,
)
from patternchart.core.models import Pattern
from patternchart.core.settings import ConverterSettings
from patternchart.pattern.loader import PatternLoader
from patternchart.rendering.renderer import ManifestRenderer


class HelmConverter:
    """
    Converts pattern documents into packaged Helm chart archives.

    Instances hold no per-call state, so one converter can serve
    concurrent calls; each call gets its own build directory.
    """

    def __init__(self, settings: Optional[ConverterSettings] = None,
                 loader: Optional[PatternLoader] = None,
                 renderer: Optional[ManifestRenderer] = None,
                 packager: Optional[ChartPackager] = None,
                 builder: Optional[ChartBuilder] = None,
                 logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger("patternchart.converter")
        self.loader = loader or PatternLoader()
        self.renderer = renderer or ManifestRenderer(self.loader)
        self.builder = builder or ChartBuilder(
            settings=settings, packager=packager, logger=self.log
        )

    def convert(self, pattern_input: Union[str, bytes]) -> bytes:
        """
        Returns the bytes of a packaged chart for the given pattern text.

        Raises:
            LoadPatternError:        empty or unparsable input
            ChartMetadataError:      pattern lacks name or version
            ManifestConversionError: rendering failed
            ChartCreationError:      a scaffolding step failed
            PackagingError:          the packager failed
        """
        if not pattern_input:
            raise LoadPatternError("input", ValueError("empty input"))

        pattern = self.load(pattern_input)
        self.validate(pattern)

        # The renderer consumes the original text, not the parsed pattern.
        try:
            manifest = self.renderer.render(pattern_input)
        except Exception as e:
            raise ManifestConversionError(e) from e

        chart_name = self.chart_name_for(pattern)
        self.log.info(f"Building chart '{chart_name}' version {pattern.version}")
        return self.builder.build(manifest, chart_name, pattern.version)

    def load(self, pattern_input: Union[str, bytes]) -> Pattern:
        try:
            return self.loader.load(pattern_input)
        except Exception as e:
            source = pattern_input.decode('utf-8', 'replace') if isinstance(pattern_input, bytes) else pattern_input
            raise LoadPatternError(source, e) from e

    @staticmethod
    def validate(pattern: Pattern) -> None:
        if not pattern.name:
            raise ChartMetadataError("missing name")
        if not pattern.version:
            raise ChartMetadataError("missing version")

    def chart_name_for(self, pattern: Pattern) -> str:
        chart_name = sanitize_chart_name(pattern.name)
        if not chart_name:
            self.log.warning(
                f"Pattern name '{pattern.name}' sanitizes to nothing; using it unchanged"
            )
            chart_name = pattern.name
        return chart_name
