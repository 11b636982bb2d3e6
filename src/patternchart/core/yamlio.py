#!/usr/bin/env python3
"""
PATTERNCHART YAML FACTORIES
---------------------------
ruamel's YAML objects keep parser/emitter state between calls, so every
load or dump gets a fresh instance. Converters may run concurrently.
"""

from ruamel.yaml import YAML


def safe_loader() -> YAML:
    return YAML(typ='safe', pure=True)


def block_dumper() -> YAML:
    """Standard K8s layout: 2 spaces, sequences indented 4 (offset 2)."""
    yaml = YAML(typ='rt')
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = 4096
    return yaml
