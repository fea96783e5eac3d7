import importlib.metadata
import sys
from pathlib import Path

import packaging
import packaging.version
import pytest

from versionprobe.detector import UNKNOWN_VERSION, detect_version, probe
from versionprobe.exceptions import StrategyUnavailable
from versionprobe.host import LoadedUnit, PythonHost, import_root, resolve_unit

MANIFEST = "Manifest-Version: 1.0\r\nBundle-Version: 13.1.0\r\nCreated-By: 21 (Oracle)\r\n\r\n"


def test_installed_distribution_answers_from_metadata():
    expected = importlib.metadata.version("packaging")

    result = probe(packaging.version.Version, "packaging")

    assert result.version == expected
    assert result.strategy == "metadata"


def test_metadata_for_module_name_marker():
    metadata = PythonHost().read_metadata("packaging.version")
    assert metadata.implementation_version == importlib.metadata.version("packaging")
    assert metadata.specification_version == packaging.__version__


def test_version_attribute_is_specification_version(site_dir):
    site, forget = site_dir
    (site / "vp_declared").mkdir()
    (site / "vp_declared" / "__init__.py").write_text('__version__ = "0.9.1"\n')
    forget("vp_declared")
    module = importlib.import_module("vp_declared")

    assert probe(module, "vp-declared").strategy == "metadata"
    assert detect_version(module, "vp-declared") == "0.9.1"


def test_archive_name_from_real_jar(jar_factory):
    module = jar_factory("eclipse-collections-13.0.0.jar", "vp_ecol")

    result = probe(module, "eclipse-collections")

    assert result.version == "13.0.0"
    assert result.strategy == "archive-path"


def test_class_marker_resolves_to_defining_module(jar_factory):
    jar_factory(
        "eclipse-collections-13.0.0.jar", "vp_ecol_cls",
        files={"factory.py": "class Lists:\n    pass\n"},
    )
    from vp_ecol_cls.factory import Lists

    assert resolve_unit(Lists).name == "vp_ecol_cls.factory"
    assert detect_version(Lists, "eclipse-collections") == "13.0.0"


def test_manifest_inside_jar(jar_factory):
    module = jar_factory("eclipse-collections-13.jar", "vp_ecol_mf", manifest=MANIFEST)

    result = probe(module, "eclipse-collections")

    assert result.version == "13.1.0"
    assert result.strategy == "manifest"


def test_manifest_found_from_submodule(jar_factory):
    jar_factory(
        "collections.jar", "vp_mf_sub",
        files={"impl/__init__.py": "", "impl/core.py": "VALUE = 1\n"},
        manifest=MANIFEST,
    )
    import vp_mf_sub.impl.core as core

    assert detect_version(core, "eclipse-collections") == "13.1.0"


def test_environment_after_structural_strategies(jar_factory, monkeypatch):
    module = jar_factory("eclipse-collections-13.jar", "vp_ecol_env")
    monkeypatch.setenv("VP_ECOL_VERSION", "2.1.0-SNAPSHOT")

    assert detect_version(module, "eclipse-collections") == UNKNOWN_VERSION
    assert detect_version(module, "eclipse-collections", "VP_ECOL_VERSION") == "2.1.0-SNAPSHOT"


def test_manifest_next_to_directory_package(site_dir):
    site, forget = site_dir
    (site / "vp_dirlib").mkdir()
    (site / "vp_dirlib" / "__init__.py").write_text("")
    (site / "META-INF").mkdir()
    (site / "META-INF" / "MANIFEST.MF").write_text("Manifest-Version: 1.0\nImplementation-Version: 4.5.6\n")
    forget("vp_dirlib")
    module = importlib.import_module("vp_dirlib")

    assert probe(module, "vp-dirlib").strategy == "manifest"
    assert detect_version(module, "vp-dirlib") == "4.5.6"


def test_unreadable_manifest_is_reported_by_host_and_absorbed_by_detector(jar_factory):
    module = jar_factory("brokenlib.jar", "vp_broken", manifest=b"Bundle-Version: \xff\xfe1.0\n")

    with pytest.raises(StrategyUnavailable):
        PythonHost().open_manifest(module)
    assert detect_version(module, "brokenlib") == UNKNOWN_VERSION


def test_module_name_marker_is_not_imported(site_dir):
    site, forget = site_dir
    (site / "vp_lazy.py").write_text("raise RuntimeError('must not be executed')\n")
    forget("vp_lazy")

    origin = PythonHost().resolve_origin("vp_lazy")

    assert Path(origin) == site / "vp_lazy.py"
    assert "vp_lazy" not in sys.modules


def test_missing_module_name():
    with pytest.raises(StrategyUnavailable):
        resolve_unit("vp_definitely_missing_module")
    assert detect_version("vp_definitely_missing_module", "missing", environ={}) == UNKNOWN_VERSION


def test_unresolvable_marker_skips_environment_fallback():
    env = {"KEY": "1.0.0"}

    assert detect_version("vp_definitely_missing_module", "missing", "KEY", environ=env) == UNKNOWN_VERSION
    assert detect_version(object(), "missing", "KEY", environ=env) == UNKNOWN_VERSION
    assert not PythonHost().resolves("vp_definitely_missing_module")


def test_distribution_index_is_built_once(monkeypatch):
    built = []

    def index():
        built.append(1)
        return {"packaging": ["packaging"]}

    monkeypatch.setattr(importlib.metadata, "packages_distributions", index)
    host = PythonHost()

    assert host.read_metadata(packaging).implementation_version == importlib.metadata.version("packaging")
    host.read_metadata("packaging.version")
    assert built == [1]


def test_blank_module_name():
    with pytest.raises(StrategyUnavailable):
        resolve_unit("  ")


@pytest.mark.parametrize("name, origin, is_package, expected", [
    ("a.b.c", "/site/a/b/c.py", False, Path("/site")),
    ("a.b", "/site/a/b/__init__.py", True, Path("/site")),
    ("a", "/site/a.py", False, Path("/site")),
    ("pkg", "/libs/pkg-1.0.0.jar/pkg/__init__.py", True, Path("/libs/pkg-1.0.0.jar")),
    ("a.b.c", "/c.py", False, None),
    ("a", None, False, None),
])
def test_import_root(name, origin, is_package, expected):
    assert import_root(LoadedUnit(name, origin, is_package)) == expected


def test_builtin_module_has_no_origin():
    unit = resolve_unit(sys)
    assert unit.origin is None
    assert PythonHost().open_manifest(sys) is None
