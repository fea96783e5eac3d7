"""
VersionProbe Version Helpers — Compare and classify detected version strings.

Detected versions come from many places (wheel metadata, jar names, manifests,
environment variables), so they are not guaranteed to be PEP 440. Everything
here degrades gracefully for strings `packaging` cannot parse.
"""

from packaging.version import InvalidVersion, Version

from versionprobe.detector import UNKNOWN_VERSION


def compare_versions(installed: str, boundary: str) -> int:
    """Compare two version strings.

    Returns:
        -1 if installed < boundary
         0 if installed == boundary
         1 if installed > boundary
    """
    try:
        v_installed = Version(installed)
        v_boundary = Version(boundary)
    except InvalidVersion:
        # Fallback to basic string comparison
        return (installed > boundary) - (installed < boundary)

    if v_installed < v_boundary:
        return -1
    elif v_installed > v_boundary:
        return 1
    return 0


def describe_version(version: str) -> str:
    """Classify a detected version for display.

    Returns one of "unknown", "unparsed", "dev", "pre-release" or "release".
    """
    if version == UNKNOWN_VERSION:
        return "unknown"
    try:
        parsed = Version(version)
    except InvalidVersion:
        return "unparsed"
    if parsed.is_devrelease:
        return "dev"
    if parsed.is_prerelease:
        return "pre-release"
    return "release"


def meets_minimum(version: str, minimum: str) -> bool:
    """True if a detected version is at least `minimum`. "unknown" never is."""
    if version == UNKNOWN_VERSION:
        return False
    return compare_versions(version, minimum) >= 0
