"""
VersionProbe Demo Runner

Probes the libraries in the demo catalog (or ones named on the command line)
and prints the detected version plus the strategy that found it.

Usage:
    python main.py                          # Probe every catalog entry
    python main.py packaging pytest         # Probe specific catalog entries
    python main.py --probe yaml:PyYAML      # Ad-hoc MODULE:FRAGMENT[:ENV_KEY]
    python main.py --list                   # List catalog entries
    python main.py --json                   # Machine-readable output
    python main.py -v                       # Show strategy-level debug logs
"""

import argparse
import importlib
import json
import logging
import sys

from versionprobe.catalog import ALL_CASES, LibraryCase, find_case, print_case_summary
from versionprobe.console import C, banner, blank, multi_color, say, separator, set_color_enabled
from versionprobe.detector import UNKNOWN_VERSION, probe
from versionprobe.versions import describe_version, meets_minimum

logger = logging.getLogger("versionprobe.demo")


def parse_probe_arg(text: str) -> LibraryCase:
    """Turn `MODULE:FRAGMENT[:ENV_KEY]` into an ad-hoc LibraryCase."""
    parts = text.split(":")
    if len(parts) not in (2, 3) or not all(p.strip() for p in parts):
        raise argparse.ArgumentTypeError(f"expected MODULE:FRAGMENT[:ENV_KEY], got {text!r}")
    module, fragment = parts[0].strip(), parts[1].strip()
    return LibraryCase(
        id=module,
        name=module,
        module=module,
        name_fragment=fragment,
        fallback_key=parts[2].strip() if len(parts) == 3 else None,
    )


def run_case(case: LibraryCase) -> dict:
    """Import the case's reference module and probe it."""
    row = {
        "id": case.id,
        "name": case.name,
        "available": False,
        "version": None,
        "strategy": None,
        "kind": None,
        "supported": None,
    }
    try:
        marker = importlib.import_module(case.module)
    except ImportError as e:
        logger.debug("cannot import %s: %s", case.module, e)
        return row

    result = probe(marker, case.name_fragment, case.fallback_key)
    row.update(
        available=True,
        version=result.version,
        strategy=result.strategy,
        kind=describe_version(result.version),
    )
    if case.minimum:
        row["supported"] = meets_minimum(result.version, case.minimum)
    return row


def display_library_info(row: dict, minimum: str | None = None):
    if not row["available"]:
        multi_color(
            (f"📦 {row['name']}: ", C.WHITE),
            ("not available", C.YELLOW),
            (" (module not found)", C.DIM),
        )
        return

    if row["version"] == UNKNOWN_VERSION:
        multi_color((f"📦 {row['name']}: ", C.WHITE), (UNKNOWN_VERSION, C.RED))
        return

    parts = [
        (f"📦 {row['name']}: ", C.WHITE),
        (f"v{row['version']}", C.GREEN),
        (f" (detected via {row['strategy']}, {row['kind']})", C.CYAN),
    ]
    if row["supported"] is False:
        parts.append((f" older than {minimum}", C.RED))
    multi_color(*parts)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="VersionProbe Demo Runner")
    parser.add_argument("case_ids", nargs="*", help="Catalog entries to probe (default: all)")
    parser.add_argument("--probe", dest="adhoc", action="append", type=parse_probe_arg, default=[],
                        metavar="MODULE:FRAGMENT[:ENV_KEY]", help="Probe a library not in the catalog")
    parser.add_argument("--list", action="store_true", help="List all catalog entries")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.no_color:
        set_color_enabled(False)

    if args.list:
        print_case_summary()
        return 0

    cases = []
    for case_id in args.case_ids:
        case = find_case(case_id)
        if case is None:
            print(f"Unknown case: {case_id}", file=sys.stderr)
            print(f"Available: {', '.join(c.id for c in ALL_CASES)}", file=sys.stderr)
            return 1
        cases.append(case)
    cases.extend(args.adhoc)
    if not cases:
        cases = list(ALL_CASES)

    rows = []
    for case in cases:
        try:
            rows.append(run_case(case))
        except Exception as e:
            # Importing a library can run arbitrary code
            logger.warning("error probing %s: %s", case.id, e)

    if args.json:
        print(json.dumps(rows, indent=2))
        return 0

    separator()
    say("🔍 VersionProbe - Runtime Library Version Detection", C.YELLOW, C.BOLD)
    say("✨ Metadata → archive path → manifest → environment", C.GREEN)
    separator()
    blank()
    say("📚 Library Version Detection Results", C.MAGENTA, C.BOLD)
    say("─" * 37, C.BLUE)

    minimums = {case.id: case.minimum for case in cases}
    for row in rows:
        display_library_info(row, minimums.get(row["id"]))

    found = sum(1 for r in rows if r["available"] and r["version"] != UNKNOWN_VERSION)
    banner("Summary", "─")
    print(f"  Libraries probed: {len(rows)}")
    print(f"  Versions found:   {found}")
    print(f"  Not available:    {sum(1 for r in rows if not r['available'])}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
