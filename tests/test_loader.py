import json

import pytest

from patternchart.pattern.loader import PatternFormatError, PatternLoader


def test_design_dialect(design_yaml):
    pattern = PatternLoader().load(design_yaml)

    assert pattern.name == "My App!"
    assert pattern.version == "1.0.0"
    assert pattern.schema_version == "designs.meshery.io/v1beta1"
    assert [c.name for c in pattern.components] == ["web", "web-svc", "note"]

    web = pattern.components[0]
    assert web.kind == "Deployment"
    assert web.api_version == "apps/v1"
    assert web.namespace == "default"
    assert web.model == "kubernetes"
    assert web.configuration["spec"]["replicas"] == 2
    assert not web.is_annotation
    assert pattern.components[2].is_annotation


def test_legacy_dialect(legacy_yaml):
    pattern = PatternLoader().load(legacy_yaml)

    assert (pattern.name, pattern.version) == ("legacy-app", "0.2.1")
    (cache,) = pattern.components
    assert cache.name == "cache"
    assert cache.kind == "ConfigMap"
    assert cache.api_version == "v1"
    assert cache.namespace == "apps"
    assert cache.configuration == {"data": {"mode": "lru"}}


def test_json_and_bytes_input():
    doc = {"name": "j", "version": "2.0.0", "components": []}
    loader = PatternLoader()

    assert loader.load(json.dumps(doc)).name == "j"
    assert loader.load(json.dumps(doc).encode()).version == "2.0.0"


def test_missing_fields_become_empty():
    pattern = PatternLoader().load("schemaVersion: x\n")
    assert pattern.name == ""
    assert pattern.version == ""
    assert pattern.components == []


def test_numeric_version_becomes_text():
    assert PatternLoader().load("name: a\nversion: 2\n").version == "2"


@pytest.mark.parametrize("source", [
    "name: [oops",
    "- a\n- b\n",
    "just a string",
    "name: a\ncomponents: {not: a list}\n",
    "name: a\ncomponents:\n  - 42\n",
    "name: a\nservices:\n  - not a mapping\n",
    "name: a\ncomponents:\n  - component: [1, 2]\n",
    b"\xff\xfe\x00garbage",
])
def test_malformed_documents(source):
    with pytest.raises(PatternFormatError):
        PatternLoader().load(source)
