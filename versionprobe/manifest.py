"""
VersionProbe Manifest Parser — Read JAR-style manifest attribute bags.

The format is a list of sections separated by blank lines. Each section is a
sequence of ``Name: value`` headers; a line starting with a single space
continues the previous header's value. The first section holds the main
attributes, later sections start with a ``Name:`` header naming an entry.

Example:
    Manifest-Version: 1.0
    Bundle-Version: 13.0.0
    Implementation-Title: Eclipse Collections Main Librar
     y

This module is purely a parser — it does NOT decide which attribute is the
version. That's the detector's job.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, TextIO

from versionprobe.exceptions import ManifestError

# Header names: alphanumerics, '-' and '_' (as in the JAR file specification)
_HEADER_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


@dataclass
class Manifest:
    """Parsed manifest: main attributes plus named per-entry sections."""
    main_attributes: dict[str, str] = field(default_factory=dict)
    entries: dict[str, dict[str, str]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        """Look up a main attribute, ignoring case like JAR attribute names do."""
        return _lookup(self.main_attributes, name)


def _lookup(attributes: dict[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in attributes.items():
        if key.lower() == wanted:
            return value
    return None


def _parse_section(lines: list[tuple[int, str]]) -> dict[str, str]:
    """Turn the (lineno, text) lines of one section into an ordered attribute dict."""
    attributes: dict[str, str] = {}
    current: Optional[str] = None

    for lineno, line in lines:
        if line.startswith(" "):
            if current is None:
                raise ManifestError(lineno, "continuation line without a header")
            attributes[current] += line[1:]
            continue

        name, sep, value = line.partition(":")
        if not sep:
            raise ManifestError(lineno, f"missing ':' in {line!r}")
        if not _HEADER_NAME.match(name):
            raise ManifestError(lineno, f"invalid header name {name!r}")
        if value and not value.startswith(" "):
            raise ManifestError(lineno, f"missing space after ':' in {line!r}")

        current = name
        attributes[name] = value[1:]

    return attributes


def parse_manifest(text: str) -> Manifest:
    """Parse manifest text.

    Args:
        text: Full manifest contents. CRLF, CR and LF line endings are accepted.

    Returns:
        Manifest with the main section and any named entry sections.

    Raises:
        ManifestError: If a header line is malformed.
    """
    sections: list[list[tuple[int, str]]] = [[]]
    for lineno, line in enumerate(text.splitlines(), 1):
        if line == "":
            if sections[-1]:
                sections.append([])
            continue
        sections[-1].append((lineno, line))

    manifest = Manifest()
    for index, section in enumerate(s for s in sections if s):
        attributes = _parse_section(section)
        if index == 0:
            manifest.main_attributes = attributes
            continue
        entry_name = _lookup(attributes, "Name")
        if entry_name is None:
            raise ManifestError(section[0][0], "entry section without a Name header")
        manifest.entries[entry_name] = attributes

    return manifest


def read_manifest(stream: TextIO) -> Manifest:
    """Parse a manifest from an open text stream. The caller owns the stream."""
    return parse_manifest(stream.read())
