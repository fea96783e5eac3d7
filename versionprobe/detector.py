"""
VersionProbe Detector — Report a loaded library's version at runtime.

Given a reference marker (a module, a class from the library, or a module
name) and the prefix of the library's archive file name, this module tries
four strategies in order and returns the first usable answer:

  1. Package metadata (implementation version, then specification version)
  2. Archive file name on the load path (e.g. eclipse-collections-13.0.0.jar)
  3. Manifest attributes (Bundle-Version, then Implementation-Version)
  4. An environment key, if the caller names one

Anything that goes wrong inside a strategy just means "no answer here";
callers get either a version string or "unknown", never an exception.

Usage:
    from versionprobe.detector import detect_version

    detect_version(packaging, "packaging")            # "24.1"
    detect_version("ecol", "eclipse-collections", "ECOL_VERSION")
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from versionprobe.host import HostIntrospector, PythonHost
from versionprobe.manifest import read_manifest

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"

# File name suffixes of packaged distribution units
ARCHIVE_SUFFIXES = (".jar", ".whl", ".egg", ".zip", ".pyz")

# Manifest attributes, in order of preference
MANIFEST_VERSION_KEYS = ("Bundle-Version", "Implementation-Version")

# At least major.minor.patch, anything may follow
_ARCHIVE_VERSION = re.compile(r"\d+\.\d+\.\d+.*", re.ASCII)
_PATH_SEPARATORS = re.compile(r"[\\/]")

_DEFAULT_HOST = PythonHost()


@dataclass(frozen=True)
class ProbeResult:
    """A detected version and the strategy that produced it."""
    version: str
    strategy: Optional[str] = None   # None when version is UNKNOWN_VERSION

    @property
    def found(self) -> bool:
        return self.strategy is not None


def is_valid_version(version: Optional[str]) -> bool:
    """True if version is a non-None string that is not blank."""
    return isinstance(version, str) and bool(version.strip())


def version_from_metadata(marker: Any, host: HostIntrospector) -> Optional[str]:
    """Implementation version from package metadata, else specification version."""
    try:
        metadata = host.read_metadata(marker)
    except Exception:
        logger.debug("metadata lookup failed for %r", marker, exc_info=True)
        return None
    if is_valid_version(metadata.implementation_version):
        return metadata.implementation_version
    return metadata.specification_version


def extract_version_from_archive_name(location: str, name_fragment: str) -> Optional[str]:
    """Pull the version out of a path segment like `<fragment>-13.0.0.jar`.

    Segments are scanned left to right; the first one that starts with
    `name_fragment + "-"`, ends with an archive suffix and carries a token of
    at least three dotted numbers wins.

    >>> extract_version_from_archive_name("/libs/eclipse-collections-13.0.0.jar", "eclipse-collections")
    '13.0.0'
    >>> extract_version_from_archive_name("/libs/eclipse-collections-13.jar", "eclipse-collections") is None
    True
    """
    prefix = name_fragment + "-"
    for part in _PATH_SEPARATORS.split(location):
        if not part.startswith(prefix):
            continue
        for suffix in ARCHIVE_SUFFIXES:
            if part.endswith(suffix):
                token = part[len(prefix):len(part) - len(suffix)]
                if _ARCHIVE_VERSION.fullmatch(token):
                    return token
                break
    return None


def version_from_archive_path(marker: Any, name_fragment: str, host: HostIntrospector) -> Optional[str]:
    """Version token from the archive the marker's code was loaded from."""
    try:
        location = host.resolve_origin(marker)
    except Exception:
        logger.debug("origin lookup failed for %r", marker, exc_info=True)
        return None
    if not location or name_fragment not in location:
        return None
    return extract_version_from_archive_name(location, name_fragment)


def version_from_manifest(marker: Any, host: HostIntrospector) -> Optional[str]:
    """Bundle-Version or Implementation-Version from the unit's manifest."""
    try:
        stream = host.open_manifest(marker)
        if stream is None:
            return None
        with stream:
            manifest = read_manifest(stream)
    except Exception:
        logger.debug("manifest lookup failed for %r", marker, exc_info=True)
        return None

    for key in MANIFEST_VERSION_KEYS:
        version = manifest.get(key)
        if is_valid_version(version):
            return version
    return None


def version_from_environment(fallback_key: Optional[str], environ: Mapping[str, str]) -> Optional[str]:
    if not is_valid_version(fallback_key):
        return None
    try:
        return environ.get(fallback_key)
    except Exception:
        logger.debug("environment lookup failed for %r", fallback_key, exc_info=True)
        return None


def probe(
    reference_marker: Any,
    name_fragment: Optional[str],
    fallback_key: Optional[str] = None,
    *,
    host: Optional[HostIntrospector] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProbeResult:
    """Detect a library version and report which strategy found it.

    Args:
        reference_marker: Module, class/function or module name from the library.
            A marker the host cannot resolve yields UNKNOWN_VERSION without
            consulting any strategy.
        name_fragment: Expected prefix of the library's archive file name
            (e.g., "eclipse-collections").
        fallback_key: Optional environment key consulted last.
        host: Introspection backend; defaults to PythonHost.
        environ: Key/value source for the fallback key; defaults to os.environ.

    Returns:
        ProbeResult; its version is UNKNOWN_VERSION when nothing answered.
    """
    if reference_marker is None or not is_valid_version(name_fragment):
        return ProbeResult(UNKNOWN_VERSION)

    host = host or _DEFAULT_HOST
    environ = os.environ if environ is None else environ

    try:
        resolvable = host.resolves(reference_marker)
    except Exception:
        logger.debug("marker resolution failed for %r", reference_marker, exc_info=True)
        resolvable = False
    if not resolvable:
        logger.debug("reference marker %r does not resolve", reference_marker)
        return ProbeResult(UNKNOWN_VERSION)

    # In order of reliability
    strategies = (
        ("metadata", lambda: version_from_metadata(reference_marker, host)),
        ("archive-path", lambda: version_from_archive_path(reference_marker, name_fragment, host)),
        ("manifest", lambda: version_from_manifest(reference_marker, host)),
        ("environment", lambda: version_from_environment(fallback_key, environ)),
    )
    for name, strategy in strategies:
        version = strategy()
        if is_valid_version(version):
            logger.debug("%s version %s found via %s", name_fragment, version, name)
            return ProbeResult(version, name)

    logger.debug("no version found for %s", name_fragment)
    return ProbeResult(UNKNOWN_VERSION)


def detect_version(
    reference_marker: Any,
    name_fragment: Optional[str],
    fallback_key: Optional[str] = None,
    *,
    host: Optional[HostIntrospector] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Detect a library version, returning the version string or "unknown"."""
    return probe(reference_marker, name_fragment, fallback_key, host=host, environ=environ).version
