"""
VersionProbe — Best-effort runtime version detection for loaded libraries.

Reports the version of a library by walking a fixed fallback chain:
package metadata, archive file name, bundled manifest, and finally an
environment key. Never raises for well-formed input; returns "unknown"
when nothing answers.
"""

from versionprobe.detector import UNKNOWN_VERSION, ProbeResult, detect_version, probe

__version__ = "0.1.0"

__all__ = ["UNKNOWN_VERSION", "ProbeResult", "detect_version", "probe"]
