"""
VersionProbe Host — Introspect where a library was loaded from.

The detector never touches the interpreter directly; it asks a host object
three questions about a reference marker:

  1. Where was its code loaded from?          (resolve_origin)
  2. What version metadata does it declare?   (read_metadata)
  3. Is there a manifest next to its code?    (open_manifest)

`PythonHost` answers them for CPython using importlib. Tests and other
runtimes can pass any object implementing `HostIntrospector` instead.
"""

import importlib.metadata
import importlib.util
import io
import sys
import zipfile
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping, Optional, Protocol, TextIO

from packaging.utils import canonicalize_name

from versionprobe.exceptions import StrategyUnavailable

# Manifest location, relative to the import root of the loaded unit
MANIFEST_RESOURCE = "META-INF/MANIFEST.MF"


@dataclass
class PackageMetadata:
    """Version fields a host can report for a loaded unit."""
    implementation_version: Optional[str] = None
    specification_version: Optional[str] = None


@dataclass
class LoadedUnit:
    """A reference marker resolved to the module it points at."""
    name: str                        # dotted module name, e.g. "packaging.version"
    origin: Optional[str]            # file or archive path the code came from
    is_package: bool


class HostIntrospector(Protocol):
    """Capabilities the detector needs from the host runtime."""

    def resolves(self, marker: Any) -> bool:
        ...

    def resolve_origin(self, marker: Any) -> Optional[str]:
        ...

    def read_metadata(self, marker: Any) -> PackageMetadata:
        ...

    def open_manifest(self, marker: Any) -> Optional[TextIO]:
        ...


def _unit_from_module(module: ModuleType) -> LoadedUnit:
    spec = getattr(module, "__spec__", None)
    if spec is not None and spec.has_location:
        origin = spec.origin
    else:
        origin = getattr(module, "__file__", None)
    return LoadedUnit(
        name=module.__name__,
        origin=origin,
        is_package=hasattr(module, "__path__"),
    )


def resolve_unit(marker: Any) -> LoadedUnit:
    """Resolve a reference marker to a LoadedUnit.

    Args:
        marker: A module object, a class or function (its defining module is
            used), or a dotted module name. A name that is not imported yet is
            located with find_spec; the module itself is not executed.

    Raises:
        StrategyUnavailable: If the marker does not lead to a module.
    """
    if isinstance(marker, ModuleType):
        return _unit_from_module(marker)

    if isinstance(marker, str):
        name = marker.strip()
        if not name:
            raise StrategyUnavailable("Blank module name")
        module = sys.modules.get(name)
        if module is not None:
            return _unit_from_module(module)
        try:
            spec = importlib.util.find_spec(name)
        except (ImportError, ValueError) as e:
            raise StrategyUnavailable(f"Cannot locate module {name}: {e}", {"module": name}) from e
        if spec is None:
            raise StrategyUnavailable(f"Module not found: {name}", {"module": name})
        return LoadedUnit(
            name=spec.name,
            origin=spec.origin if spec.has_location else None,
            is_package=spec.submodule_search_locations is not None,
        )

    module_name = getattr(marker, "__module__", None)
    if not isinstance(module_name, str):
        raise StrategyUnavailable(f"Unsupported reference marker: {marker!r}")
    return resolve_unit(module_name)


def import_root(unit: LoadedUnit) -> Optional[Path]:
    """Return the sys.path entry the unit was imported from.

    For `/site/a/b/c.py` loaded as `a.b.c` that is `/site`; for a package
    `a.b` loaded from `/site/a/b/__init__.py` it is `/site` as well. Inside a
    zip archive the root may be the archive itself or a directory in it.
    """
    if not unit.origin:
        return None
    depth = unit.name.count(".") + (1 if unit.is_package else 0)
    parents = Path(unit.origin).parents
    if depth >= len(parents):
        return None
    return parents[depth]


def _find_archive(path: Path) -> Optional[tuple[Path, str]]:
    """Split a zipimport-style path into (archive file, inner directory)."""
    for candidate in (path, *path.parents):
        if candidate.is_file():
            return candidate, path.relative_to(candidate).as_posix()
    return None


def _read_archive_member(archive: Path, inner: str) -> Optional[TextIO]:
    if not zipfile.is_zipfile(archive):
        return None
    member = MANIFEST_RESOURCE if inner in ("", ".") else f"{inner}/{MANIFEST_RESOURCE}"
    with zipfile.ZipFile(archive) as zf:
        try:
            data = zf.read(member)
        except KeyError:
            return None
    return io.StringIO(data.decode("utf-8"))


class PythonHost:
    """HostIntrospector backed by importlib and the filesystem."""

    def __init__(self):
        # top-level package name -> distribution names, built on first use
        self._distributions: Optional[Mapping[str, list[str]]] = None

    def resolves(self, marker: Any) -> bool:
        try:
            resolve_unit(marker)
        except StrategyUnavailable:
            return False
        return True

    def distributions_for(self, top_level: str) -> list[str]:
        if self._distributions is None:
            self._distributions = importlib.metadata.packages_distributions()
        return self._distributions.get(top_level, [])

    def resolve_origin(self, marker: Any) -> Optional[str]:
        return resolve_unit(marker).origin

    def read_metadata(self, marker: Any) -> PackageMetadata:
        """Read versions for the top-level package of the marker.

        The implementation version comes from the installed distribution that
        provides the package; the specification version from the package's
        `__version__` attribute, when it is imported and declares one.
        """
        unit = resolve_unit(marker)
        top_level = unit.name.split(".")[0]

        implementation_version = None
        distributions = self.distributions_for(top_level)
        for dist_name in dict.fromkeys(canonicalize_name(d) for d in distributions):
            try:
                implementation_version = importlib.metadata.version(dist_name)
            except importlib.metadata.PackageNotFoundError:
                continue
            break

        specification_version = None
        top_module = sys.modules.get(top_level)
        declared = getattr(top_module, "__version__", None)
        if isinstance(declared, str):
            specification_version = declared

        return PackageMetadata(implementation_version, specification_version)

    def open_manifest(self, marker: Any) -> Optional[TextIO]:
        """Open META-INF/MANIFEST.MF next to the unit's import root.

        Returns None when there is no manifest. The returned stream must be
        closed by the caller.

        Raises:
            StrategyUnavailable: If the manifest exists but cannot be read.
        """
        root = import_root(resolve_unit(marker))
        if root is None:
            return None

        try:
            if root.is_dir():
                candidate = root / MANIFEST_RESOURCE
                if not candidate.is_file():
                    return None
                return candidate.open(encoding="utf-8")

            located = _find_archive(root)
            if located is None:
                return None
            return _read_archive_member(*located)
        except (OSError, zipfile.BadZipFile, UnicodeDecodeError) as e:
            raise StrategyUnavailable(f"Cannot read manifest under {root}: {e}", {"root": str(root)}) from e
