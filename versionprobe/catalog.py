"""
VersionProbe Demo Catalog — Libraries the demo runner probes.

Structure per case:
    - id: Unique identifier (used on the command line)
    - name: Display name
    - module: Module to import and use as the reference marker
    - name_fragment: Expected prefix of the library's archive file name
    - fallback_key: Optional environment key consulted last
    - minimum: Oldest version the demo considers supported
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LibraryCase:
    """One library to probe in the demo."""
    id: str
    name: str
    module: str
    name_fragment: str
    fallback_key: Optional[str] = None
    minimum: Optional[str] = None


CASE_PACKAGING = LibraryCase(
    id="packaging",
    name="packaging",
    module="packaging.version",
    name_fragment="packaging",
    minimum="22.0",
)

CASE_PIP = LibraryCase(
    id="pip",
    name="pip",
    module="pip",
    name_fragment="pip",
)

CASE_SETUPTOOLS = LibraryCase(
    id="setuptools",
    name="setuptools",
    module="setuptools",
    name_fragment="setuptools",
)

CASE_PYTEST = LibraryCase(
    id="pytest",
    name="pytest",
    module="pytest",
    name_fragment="pytest",
    minimum="7.0",
)

CASE_VERSIONPROBE = LibraryCase(
    id="versionprobe",
    name="VersionProbe",
    module="versionprobe",
    name_fragment="versionprobe",
    fallback_key="VERSIONPROBE_VERSION",
)

ALL_CASES: list[LibraryCase] = [
    CASE_PACKAGING,
    CASE_PIP,
    CASE_SETUPTOOLS,
    CASE_PYTEST,
    CASE_VERSIONPROBE,
]


def find_case(case_id: str) -> Optional[LibraryCase]:
    return next((c for c in ALL_CASES if c.id == case_id), None)


def print_case_summary():
    """Print a summary of all catalog entries."""
    print(f"\n{'=' * 70}")
    print(f"  VersionProbe Demo Catalog — {len(ALL_CASES)} libraries")
    print(f"{'=' * 70}")
    for case in ALL_CASES:
        extra = f", env {case.fallback_key}" if case.fallback_key else ""
        minimum = f", min {case.minimum}" if case.minimum else ""
        print(f"  {case.id:<14} {case.module:<20} archive '{case.name_fragment}-*'{extra}{minimum}")
    print()
