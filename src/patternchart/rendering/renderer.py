#!/usr/bin/env python3
"""
PATTERNCHART RENDERER - Pattern to Kubernetes YAML
--------------------------------------------------
Expands every deployable component of a pattern into a Kubernetes
resource and serializes the lot as one multi-document YAML string.
"""

import io
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ruamel.yaml.comments import CommentedMap

from patternchart.core.yamlio import block_dumper
from patternchart.core.models import Component
from patternchart.pattern.loader import PatternLoader

logger = logging.getLogger("patternchart.renderer")


class ManifestRenderError(ValueError):
    """Raised when a component cannot be expressed as a Kubernetes resource."""


class ManifestRenderer:
    """
    Renders pattern text into Kubernetes manifests.

    The renderer works from the raw pattern text and owns its own loader,
    so it can be used on its own (e.g. by 'patternchart render').
    """

    def __init__(self, loader: Optional[PatternLoader] = None):
        self.loader = loader or PatternLoader()
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data", "status"]

    def render(self, source: Union[str, bytes]) -> str:
        pattern = self.loader.load(source)
        resources = [
            self.build_resource(c) for c in pattern.components if not c.is_annotation
        ]
        skipped = len(pattern.components) - len(resources)
        if skipped:
            logger.debug(f"Skipped {skipped} annotation components of '{pattern.name}'")
        return self.dump(resources)

    def build_resource(self, component: Component) -> Dict[str, Any]:
        if not component.kind:
            raise ManifestRenderError(f"component '{component.name}' has no kind")
        if not component.api_version:
            raise ManifestRenderError(f"component '{component.name}' has no apiVersion")

        metadata: Dict[str, Any] = {}
        if component.name:
            metadata["name"] = component.name
        if component.namespace:
            metadata["namespace"] = component.namespace

        resource: Dict[str, Any] = {
            "apiVersion": component.api_version,
            "kind": component.kind,
        }
        for key, value in component.configuration.items():
            if key in ("apiVersion", "kind"):
                continue
            resource[key] = value

        extra_meta = component.configuration.get("metadata")
        if isinstance(extra_meta, Mapping):
            metadata.update(extra_meta)
        resource["metadata"] = metadata
        return resource

    def _ordered(self, data: Any) -> Any:
        """
        Recursively orders keys: well-known K8s keys first, everything
        else in original order. List order is never touched.
        """
        if isinstance(data, list):
            return [self._ordered(item) for item in data]
        if not isinstance(data, Mapping):
            return data

        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        ordered = CommentedMap()
        for key in sorted(keys, key=sort_logic):
            ordered[key] = self._ordered(data[key])
        return ordered

    def dump(self, resources: List[Dict[str, Any]]) -> str:
        stream = io.StringIO()
        for i, resource in enumerate(resources):
            if i > 0:
                stream.write("---\n")
            block_dumper().dump(self._ordered(resource), stream)
        return stream.getvalue()
