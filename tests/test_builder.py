import logging

import pytest
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from patternchart.chart.builder import ChartBuilder
from patternchart.chart.packager import TarballPackager
from patternchart.core.errors import ChartCreationError, PackagingError
from patternchart.core.settings import ConverterSettings

MANIFEST = "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: cfg\r\ndata:\n  k: v\n"


class RecordingPackager:
    """Captures what the builder hands over, then returns a path that does not exist."""

    def __init__(self):
        self.seen = {}

    def package(self, chart_dir, destination):
        self.seen = {p.relative_to(chart_dir).as_posix(): p.read_bytes()
                     for p in chart_dir.rglob("*") if p.is_file()}
        self.seen["__dir__"] = chart_dir
        return destination / "ghost.tgz"


def test_scaffold_layout(tmp_path):
    chart_dir = ChartBuilder().scaffold(tmp_path / "build", MANIFEST, "demo", "1.2.3")

    assert chart_dir == tmp_path / "build" / "demo"
    assert (chart_dir / "templates").is_dir()
    meta = YAML(typ='safe').load((chart_dir / "Chart.yaml").read_text())
    assert meta["apiVersion"] == "v3"
    assert meta["name"] == "demo"
    assert meta["version"] == "1.2.3"
    assert meta["type"] == "application"
    assert "demo" in meta["description"]


def test_manifest_is_written_verbatim(tmp_path):
    chart_dir = ChartBuilder().scaffold(tmp_path / "build", MANIFEST, "demo", "1.2.3")
    assert (chart_dir / "templates" / "manifest.yaml").read_bytes() == MANIFEST.encode()


def test_packager_sees_full_scaffold(settings):
    packager = RecordingPackager()

    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder(settings=settings, packager=packager).build(MANIFEST, "demo", "1.2.3")

    # Scaffold was complete at packaging time; read-back of the bogus path failed.
    assert set(packager.seen) == {"Chart.yaml", "templates/manifest.yaml", "__dir__"}
    assert packager.seen["__dir__"].parent.parent == settings.temp_dir
    assert exc.value.step == "reading packaged chart"
    assert not packager.seen["__dir__"].exists()


@pytest.mark.parametrize("name", ["..", ".", "a/b", "/etc", "back\\slash"])
def test_unsafe_chart_names_are_rejected(settings, name):
    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder(settings=settings).build(MANIFEST, name, "1.0.0")
    assert exc.value.step == "creating chart source directory"
    assert list(settings.temp_dir.iterdir()) == []


def test_package_directory_creation_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = ConverterSettings(package_dir=blocker / "pkgs", temp_dir=tmp_path / "tmp")

    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder(settings=settings).build(MANIFEST, "demo", "1.0.0")
    assert exc.value.step == "creating package directory"


def test_temp_directory_creation_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = ConverterSettings(package_dir=tmp_path / "pkgs", temp_dir=blocker / "tmp")

    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder(settings=settings).build(MANIFEST, "demo", "1.0.0")
    assert exc.value.step == "creating temp directory"


def test_home_directory_failure(monkeypatch):
    def no_home(cls, home=None):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(ConverterSettings, "from_home", classmethod(no_home))

    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder().build(MANIFEST, "demo", "1.0.0")
    assert exc.value.step == "getting user home directory"


def test_packager_errors_become_packaging_errors(settings):
    class Broken:
        def package(self, chart_dir, destination):
            raise OSError("disk full")

    with pytest.raises(PackagingError) as exc:
        ChartBuilder(settings=settings, packager=Broken()).build(MANIFEST, "demo", "1.0.0")
    assert isinstance(exc.value.__cause__, OSError)


def test_archive_removal_failure_only_warns(settings, monkeypatch, caplog):
    def stuck(path):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr("patternchart.chart.builder.os.remove", stuck)
    log = logging.getLogger("patternchart.tests.builder")

    with caplog.at_level(logging.WARNING, logger=log.name):
        data = ChartBuilder(settings=settings, logger=log).build(MANIFEST, "demo", "1.0.0")

    assert data
    assert any("Failed to clean up packaged chart" in r.message for r in caplog.records)
    assert list(settings.temp_dir.iterdir()) == []


def _fail_marshal(monkeypatch):
    def boom(self, metadata):
        raise YAMLError("cannot represent metadata")
    monkeypatch.setattr(ChartBuilder, "_marshal", boom)


def _fail_chart_write(monkeypatch):
    def boom(self, *args, **kwargs):
        raise OSError("disk full")
    monkeypatch.setattr("patternchart.chart.builder.Path.write_text", boom)


def _fail_manifest_write(monkeypatch):
    def boom(*args, **kwargs):
        raise OSError("quota exceeded")
    monkeypatch.setattr("patternchart.chart.builder.open", boom, raising=False)


@pytest.mark.parametrize("sabotage, step", [
    (_fail_marshal, "marshaling Chart.yaml metadata"),
    (_fail_chart_write, "writing Chart.yaml"),
    (_fail_manifest_write, "writing manifest.yaml"),
])
def test_scaffold_step_failures(settings, monkeypatch, sabotage, step):
    sabotage(monkeypatch)

    with pytest.raises(ChartCreationError) as exc:
        ChartBuilder(settings=settings).build(MANIFEST, "demo", "1.0.0")

    assert exc.value.step == step
    assert exc.value.cause is not None
    monkeypatch.undo()
    assert list(settings.temp_dir.iterdir()) == []
    assert list(settings.package_dir.iterdir()) == []


def test_each_build_packages_into_its_own_directory(settings, unpack):
    destinations = []

    class Tracking:
        def __init__(self):
            self.inner = TarballPackager()

        def package(self, chart_dir, destination):
            destinations.append(destination)
            return self.inner.package(chart_dir, destination)

    builder = ChartBuilder(settings=settings, packager=Tracking())
    first = builder.build(MANIFEST, "demo", "1.0.0")
    second = builder.build(MANIFEST, "demo", "1.0.0")

    assert len(set(destinations)) == 2
    assert all(d.parent == settings.package_dir for d in destinations)
    assert unpack(first) == unpack(second)
    assert list(settings.package_dir.iterdir()) == []
