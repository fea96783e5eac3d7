import io
import importlib
import pathlib
import sys
import zipfile

import pytest

# Ensure project root is on sys.path so 'import versionprobe' and 'import main'
# work when pytest runs from different working directories.
_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from versionprobe.exceptions import StrategyUnavailable
from versionprobe.host import PackageMetadata


class FakeHost:
    """Scripted HostIntrospector that records which capabilities were used."""

    def __init__(self, origin=None, implementation_version=None, specification_version=None,
                 manifest=None, fail=(), resolvable=True):
        self.resolvable = resolvable
        self.origin = origin
        self.metadata = PackageMetadata(implementation_version, specification_version)
        self.manifest = manifest
        self.fail = set(fail)
        self.calls = []
        self.streams = []

    def _enter(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise StrategyUnavailable(f"{name} scripted to fail")
        if f"{name}!" in self.fail:
            raise RuntimeError(f"{name} blew up")

    def resolves(self, marker):
        return self.resolvable

    def resolve_origin(self, marker):
        self._enter("resolve_origin")
        return self.origin

    def read_metadata(self, marker):
        self._enter("read_metadata")
        return self.metadata

    def open_manifest(self, marker):
        self._enter("open_manifest")
        if self.manifest is None:
            return None
        stream = io.StringIO(self.manifest)
        self.streams.append(stream)
        return stream


@pytest.fixture
def fake_host():
    return FakeHost


@pytest.fixture
def jar_factory(tmp_path, monkeypatch, request):
    """Build a zip archive holding a package, put it on sys.path and import it.

    Returns a function `(jar_name, module, files=None, manifest=None) -> module`.
    `files` maps extra archive members (relative to the package) to source text;
    `manifest` is written to META-INF/MANIFEST.MF (str or raw bytes).
    """
    def build(jar_name, module, files=None, manifest=None, init_source=""):
        jar_path = tmp_path / jar_name
        with zipfile.ZipFile(jar_path, "w") as zf:
            zf.writestr(f"{module}/__init__.py", init_source)
            for name, source in (files or {}).items():
                zf.writestr(f"{module}/{name}", source)
            if manifest is not None:
                zf.writestr("META-INF/MANIFEST.MF", manifest)

        monkeypatch.syspath_prepend(str(jar_path))
        request.addfinalizer(lambda: _forget_modules(module))
        return importlib.import_module(module)

    return build


@pytest.fixture
def site_dir(tmp_path, monkeypatch, request):
    """A plain directory on sys.path. Returns (path, forget) where forget(name) drops
    the module from sys.modules at teardown."""
    site = tmp_path / "site"
    site.mkdir()
    monkeypatch.syspath_prepend(str(site))

    def forget(module):
        request.addfinalizer(lambda: _forget_modules(module))

    return site, forget


def _forget_modules(prefix):
    for name in [m for m in sys.modules if m == prefix or m.startswith(prefix + ".")]:
        del sys.modules[name]
