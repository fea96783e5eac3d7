#!/usr/bin/env python3
"""
VersionProbe Fallback Chain Demo — One library per strategy

Builds throwaway libraries in a temporary directory, each shaped so that a
different strategy of the chain is the first to answer:

  Step 1: installed distribution      → metadata
  Step 2: gadgets-3.1.0.jar           → archive path
  Step 3: gizmos.jar + MANIFEST.MF    → manifest
  Step 4: doohickey.jar + env key     → environment
  Step 5: widgets-7.jar, nothing else → "unknown"

Usage:
    python demo.py              # Interactive demo (press Enter to advance)
    python demo.py --auto       # Auto-advance with delays (for recording)
    python demo.py --no-color   # Plain output
"""

import argparse
import importlib
import sys
import tempfile
import time
import zipfile
from pathlib import Path

from versionprobe.console import C, banner, colorize, say, set_color_enabled
from versionprobe.detector import probe

# ─── Globals ────────────────────────────────────────────────────────
AUTO_MODE = False
AUTO_DELAY = 1.5  # seconds between steps in auto mode

MANIFEST_TEMPLATE = "Manifest-Version: 1.0\nCreated-By: versionprobe demo\nBundle-Version: {version}\n\n"


def pause(label: str = ""):
    """Wait for user input or auto-delay."""
    if AUTO_MODE:
        time.sleep(AUTO_DELAY)
    else:
        hint = f" ({label})" if label else ""
        input(colorize(f"    ⏎ Press Enter to continue{hint}...", C.DIM))


def build_jar(directory: Path, jar_name: str, module: str, manifest_version: str | None = None) -> Path:
    """Write a zip archive holding a one-file package, optionally with a manifest."""
    jar_path = directory / jar_name
    with zipfile.ZipFile(jar_path, "w") as zf:
        zf.writestr(f"{module}/__init__.py", f'"""Demo package {module}."""\n')
        if manifest_version:
            zf.writestr("META-INF/MANIFEST.MF", MANIFEST_TEMPLATE.format(version=manifest_version))
    return jar_path


def load_from(jar_path: Path, module: str):
    """Import `module` from the archive via zipimport."""
    sys.path.insert(0, str(jar_path))
    return importlib.import_module(module)


def show_step(num: int, title: str, marker, fragment: str, fallback_key: str | None = None,
              environ: dict[str, str] | None = None):
    say(f"\n  [{num}] {title}", C.WHITE, C.BOLD)
    say(f"  {'·' * 60}", C.DIM)
    origin = getattr(marker, "__file__", None) or "<unknown>"
    print(f"    origin:   {colorize(origin, C.DIM)}")
    print(f"    fragment: {fragment!r}" + (f"   env key: {fallback_key!r}" if fallback_key else ""))

    result = probe(marker, fragment, fallback_key, environ=environ or {})
    if result.found:
        print(f"    result:   {colorize(result.version, C.GREEN, C.BOLD)} "
              f"{colorize(f'(via {result.strategy})', C.CYAN)}")
    else:
        print(f"    result:   {colorize(result.version, C.RED, C.BOLD)}")
    return result


def run_demo(workdir: Path):
    import packaging

    show_step(1, "Installed distribution — metadata answers", packaging, "packaging")
    pause("archive path")

    jar = build_jar(workdir, "gadgets-3.1.0.jar", "vp_demo_gadgets")
    show_step(2, "Versioned archive name — archive path answers",
              load_from(jar, "vp_demo_gadgets"), "gadgets")
    pause("manifest")

    jar = build_jar(workdir, "gizmos.jar", "vp_demo_gizmos", manifest_version="1.5.0")
    show_step(3, "Unversioned archive with a manifest — manifest answers",
              load_from(jar, "vp_demo_gizmos"), "gizmos")
    pause("environment")

    jar = build_jar(workdir, "doohickey.jar", "vp_demo_doohickey")
    show_step(4, "Nothing on disk, but an environment key — environment answers",
              load_from(jar, "vp_demo_doohickey"), "doohickey",
              fallback_key="DOOHICKEY_VERSION", environ={"DOOHICKEY_VERSION": "2.1.0-SNAPSHOT"})
    pause("no answer")

    jar = build_jar(workdir, "widgets-7.jar", "vp_demo_widgets")
    show_step(5, "Two-part version in the name, no manifest, no key — unknown",
              load_from(jar, "vp_demo_widgets"), "widgets")


def main():
    global AUTO_MODE

    parser = argparse.ArgumentParser(description="VersionProbe fallback chain demo")
    parser.add_argument("--auto", action="store_true", help="Auto-advance with delays")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    args = parser.parse_args()

    AUTO_MODE = args.auto
    if args.no_color:
        set_color_enabled(False)

    banner("VersionProbe — Fallback Chain Walkthrough", "▓")
    saved_path = list(sys.path)
    with tempfile.TemporaryDirectory(prefix="versionprobe-demo-") as tmp:
        try:
            run_demo(Path(tmp))
        finally:
            sys.path[:] = saved_path
            for name in [m for m in sys.modules if m.startswith("vp_demo_")]:
                del sys.modules[name]
    banner("✅ Runtime version detection completed")


if __name__ == "__main__":
    main()
