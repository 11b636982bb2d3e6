#!/usr/bin/env python3
"""
PATTERNCHART ERRORS - Failure Taxonomy
--------------------------------------
Every failure surfaced by HelmConverter.convert() is one of the classes
below. Each carries a stable code, a short description and a remedy hint
so callers can branch on the kind of failure without parsing messages.

Cleanup failures are never raised; they are logged as warnings.
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for every pattern-to-chart conversion failure."""

    code = "PC-1000"
    short_description = "Pattern to Helm chart conversion failed"
    remedy = "Inspect the chained cause for details."

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is not None:
            return f"{base}: {self.cause}"
        return base


class LoadPatternError(ConversionError):
    """The pattern input was empty or could not be parsed."""

    code = "PC-1001"
    short_description = "Unable to load pattern"
    remedy = "Make sure the input is a non-empty, well-formed pattern document."

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        super().__init__(f"failed to load pattern from {_preview(source)}", cause)


class ChartCreationError(ConversionError):
    """A filesystem or serialization step of chart scaffolding failed."""

    code = "PC-1002"
    short_description = "Unable to create Helm chart"
    remedy = "Check permissions and free space under the working directories."

    def __init__(self, step: str, cause: Optional[BaseException] = None):
        self.step = step
        super().__init__(f"error while {step}", cause)


class ChartMetadataError(ChartCreationError):
    """The parsed pattern lacks a field required by Chart.yaml."""

    code = "PC-1003"
    short_description = "Pattern is missing chart metadata"
    remedy = "Set both 'name' and 'version' at the top level of the pattern."

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("chart metadata", ValueError(reason))


class ManifestConversionError(ConversionError):
    """Rendering the pattern into Kubernetes manifests failed."""

    code = "PC-1004"
    short_description = "Unable to convert pattern to Kubernetes manifests"
    remedy = "Verify every component declares a kind and an apiVersion."

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("failed to render Kubernetes manifests", cause)


class PackagingError(ConversionError):
    """The archive packager rejected the chart or failed to write it."""

    code = "PC-1005"
    short_description = "Unable to package Helm chart"
    remedy = "Chart name and version must satisfy Helm's naming and SemVer rules."

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("failed to package Helm chart", cause)


def _preview(source: str, limit: int = 60) -> str:
    # Pattern text is used as its own identifier; keep messages one line.
    flat = " ".join(str(source).split())
    if len(flat) > limit:
        flat = flat[:limit] + "..."
    return f"'{flat}'"
