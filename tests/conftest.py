import io
import tarfile

import pytest

from patternchart.core.settings import ConverterSettings

DESIGN_YAML = """\
name: My App!
version: 1.0.0
schemaVersion: designs.meshery.io/v1beta1
components:
  - id: 7c1f
    displayName: web
    component:
      kind: Deployment
      version: apps/v1
    model:
      name: kubernetes
    configuration:
      metadata:
        namespace: default
        labels:
          app: web
      spec:
        replicas: 2
        selector:
          matchLabels:
            app: web
  - displayName: web-svc
    component:
      kind: Service
      version: v1
    model:
      name: kubernetes
    configuration:
      spec:
        ports:
          - port: 80
            targetPort: 8080
  - displayName: note
    component:
      kind: Comment
      version: core.meshery.io/v1alpha1
    model:
      name: meshery-core
    metadata:
      isAnnotation: true
"""

LEGACY_PATTERN_YAML = """\
name: legacy-app
version: 0.2.1
services:
  cache:
    type: ConfigMap
    apiVersion: v1
    namespace: apps
    model: kubernetes
    settings:
      data:
        mode: lru
"""


@pytest.fixture
def design_yaml():
    return DESIGN_YAML


@pytest.fixture
def legacy_yaml():
    return LEGACY_PATTERN_YAML


@pytest.fixture
def settings(tmp_path):
    """Working area redirected away from the real home directory."""
    return ConverterSettings.from_root(tmp_path / ".meshery")


def read_archive(data: bytes) -> dict:
    """Unpacks archive bytes into {member name: file bytes}."""
    files = {}
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
        for member in tar.getmembers():
            if member.isfile():
                files[member.name] = tar.extractfile(member).read()
    return files


@pytest.fixture
def unpack():
    return read_archive
