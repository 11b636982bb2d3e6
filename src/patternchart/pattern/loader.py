#!/usr/bin/env python3
"""
PATTERNCHART LOADER - Pattern Intake
------------------------------------
Turns raw pattern text into a structured Pattern. Two dialects are
understood:

  * designs   - a 'components' list, each entry carrying 'component.kind',
                'component.version', 'model.name' and 'configuration'.
  * patterns  - the legacy 'services' mapping, each entry carrying 'type',
                'apiVersion', 'namespace' and 'settings'.

JSON input is accepted since it is a subset of YAML.
"""

import logging
from typing import Any, Dict, List, Mapping, Union

from ruamel.yaml.error import YAMLError

from patternchart.core.yamlio import safe_loader
from patternchart.core.models import Component, Pattern

logger = logging.getLogger("patternchart.loader")


class PatternFormatError(ValueError):
    """Raised when the input is not a well-formed pattern document."""


class PatternLoader:
    """
    Parses pattern documents. Holds no state, so a single instance may be
    reused across calls and threads.
    """

    def load(self, source: Union[str, bytes]) -> Pattern:
        if isinstance(source, bytes):
            try:
                source = source.decode('utf-8-sig')
            except UnicodeDecodeError as e:
                raise PatternFormatError("pattern is not valid UTF-8") from e

        try:
            doc = safe_loader().load(source)
        except YAMLError as e:
            raise PatternFormatError(f"pattern is not valid YAML: {e}") from e

        if not isinstance(doc, Mapping):
            raise PatternFormatError(
                f"pattern must be a mapping, got {type(doc).__name__}"
            )

        if "components" in doc:
            components = self._parse_design_components(doc.get("components"))
        else:
            components = self._parse_legacy_services(doc.get("services"))

        pattern = Pattern(
            name=_as_text(doc.get("name")),
            version=_as_text(doc.get("version")),
            components=components,
            schema_version=_as_text(doc.get("schemaVersion")),
            pattern_id=doc.get("id"),
        )
        logger.debug(f"Loaded pattern '{pattern.name}' with {len(components)} components")
        return pattern

    def _parse_design_components(self, raw: Any) -> List[Component]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise PatternFormatError("'components' must be a list")

        components = []
        for index, entry in enumerate(raw):
            if not isinstance(entry, Mapping):
                raise PatternFormatError(f"component #{index} must be a mapping")

            definition = _mapping(entry.get("component"), f"component #{index}.component")
            model = _mapping(entry.get("model"), f"component #{index}.model")
            metadata = _mapping(entry.get("metadata"), f"component #{index}.metadata")
            configuration = _mapping(entry.get("configuration"), f"component #{index}.configuration")
            config_meta = configuration.get("metadata")

            namespace = None
            if isinstance(config_meta, Mapping):
                namespace = config_meta.get("namespace")

            components.append(Component(
                name=_as_text(entry.get("displayName")) or _as_text(entry.get("id")),
                kind=_as_text(definition.get("kind")),
                api_version=_as_text(definition.get("version")),
                namespace=namespace,
                model=_as_text(model.get("name")),
                configuration=dict(configuration),
                is_annotation=bool(metadata.get("isAnnotation", False)),
            ))
        return components

    def _parse_legacy_services(self, raw: Any) -> List[Component]:
        if raw is None:
            return []
        if not isinstance(raw, Mapping):
            raise PatternFormatError("'services' must be a mapping")

        components = []
        for key, svc in raw.items():
            if not isinstance(svc, Mapping):
                raise PatternFormatError(f"service '{key}' must be a mapping")

            components.append(Component(
                name=_as_text(svc.get("name")) or _as_text(key),
                kind=_as_text(svc.get("type")),
                api_version=_as_text(svc.get("apiVersion")),
                namespace=svc.get("namespace"),
                model=_as_text(svc.get("model")),
                configuration=dict(_mapping(svc.get("settings"), f"service '{key}'.settings")),
            ))
        return components


def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise PatternFormatError(f"{where} must be a mapping")
    return dict(value)


def _as_text(value: Any) -> str:
    # YAML types 'version: 1.0' as a float; the chart wants the text back.
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value).strip()
