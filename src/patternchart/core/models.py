#!/usr/bin/env python3
"""
PATTERNCHART CORE MODELS
------------------------
Defines the fundamental data structures shared by the loader, the
renderer and the chart builder.
"""

from dataclasses import dataclass, field
from typing import Optional, Any, Dict, List

CHART_API_VERSION = "v3"
CHART_TYPE = "application"


@dataclass
class Component:
    """
    A single deployable unit of a pattern.

    Rendered into exactly one Kubernetes resource unless it is an
    annotation-only component (diagram shapes, comments, etc).
    """
    name: str                   # displayName of the component
    kind: str = ""              # Kubernetes kind (e.g. 'Deployment')
    api_version: str = ""       # Kubernetes apiVersion (e.g. 'apps/v1')
    namespace: Optional[str] = None
    model: str = ""             # Owning model, usually 'kubernetes'
    configuration: Dict[str, Any] = field(default_factory=dict)
    is_annotation: bool = False


@dataclass
class Pattern:
    """
    Structured, read-only view of a pattern document.
    """
    name: str
    version: str
    components: List[Component] = field(default_factory=list)
    schema_version: str = ""
    pattern_id: Optional[str] = None


@dataclass(frozen=True)
class ChartMetadata:
    """The record serialized as Chart.yaml."""
    name: str
    version: str
    description: str
    api_version: str = CHART_API_VERSION
    type: str = CHART_TYPE

    @classmethod
    def for_chart(cls, name: str, version: str) -> "ChartMetadata":
        return cls(
            name=name,
            version=version,
            description=f"Helm chart for '{name}' generated by Meshery",
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "apiVersion": self.api_version,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "type": self.type,
        }
