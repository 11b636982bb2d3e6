#!/usr/bin/env python3
"""
PATTERNCHART CLI
----------------
Command-line front end for the converter:

  patternchart convert design.yaml -o chart.tgz
  patternchart render design.yaml
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.logging import RichHandler

from patternchart.chart.packager import HelmCliPackager
from patternchart.cli.formatter import ChartFormatter
from patternchart.core.converter import HelmConverter
from patternchart.core.errors import ConversionError
from patternchart.core.settings import ConverterSettings
from patternchart.rendering.renderer import ManifestRenderer

VERSION = "0.1.0"


class PatternChartCLI:
    """
    CLI wrapper that translates user commands into converter actions.
    """

    def __init__(self, formatter: Optional[ChartFormatter] = None):
        self.formatter = formatter or ChartFormatter()
        self.parser = argparse.ArgumentParser(
            prog="patternchart",
            description="patternchart - Convert Meshery patterns into Helm chart archives",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-V", "--version", action="version", version=f"patternchart v{VERSION}")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        convert_parser = subparsers.add_parser("convert", help="📦 Package a pattern as a Helm chart")
        convert_parser.add_argument("pattern", help="Path to a pattern/design file ('-' for stdin)")
        convert_parser.add_argument("-o", "--output", help="Archive path (default: <chart>-<version>.tgz)")
        convert_parser.add_argument("--work-dir", help="Working area root (default: ~/.meshery)")
        convert_parser.add_argument("--helm", action="store_true", help="Package with the 'helm' binary")

        render_parser = subparsers.add_parser("render", help="🔍 Print the Kubernetes manifests of a pattern")
        render_parser.add_argument("pattern", help="Path to a pattern/design file ('-' for stdin)")

    def _read_pattern(self, location: str) -> str:
        if location == "-":
            return sys.stdin.read()
        return Path(location).read_text(encoding='utf-8-sig')

    def _build_converter(self, args: argparse.Namespace) -> HelmConverter:
        settings = ConverterSettings.from_root(Path(args.work_dir)) if args.work_dir else None
        packager = HelmCliPackager() if args.helm else None
        return HelmConverter(settings=settings, packager=packager)

    def _run_convert(self, args: argparse.Namespace) -> int:
        text = self._read_pattern(args.pattern)
        converter = self._build_converter(args)

        data = converter.convert(text)

        pattern = converter.load(text)
        chart_name = converter.chart_name_for(pattern)
        output = Path(args.output) if args.output else Path(f"{chart_name}-{pattern.version}.tgz")
        output.write_bytes(data)

        self.formatter.show_summary(chart_name, pattern.version, output, len(data))
        return 0

    def _run_render(self, args: argparse.Namespace) -> int:
        text = self._read_pattern(args.pattern)
        manifest = ManifestRenderer().render(text)
        self.formatter.show_manifest(manifest, args.pattern)
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit code."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(message)s",
            handlers=[RichHandler(console=self.formatter.console, show_path=False)],
        )

        if args.command == "convert":
            handler = self._run_convert
        elif args.command == "render":
            handler = self._run_render
        else:
            self.formatter.print_header("Pattern → Helm Chart", VERSION)
            self.parser.print_help()
            return 0

        try:
            return handler(args)
        except (ConversionError, OSError, ValueError) as e:
            self.formatter.show_error(e)
            return 1


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(PatternChartCLI().run())
    except KeyboardInterrupt:
        ChartFormatter().console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
