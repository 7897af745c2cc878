"""Keep the spacevault version in pyproject.toml and the package in step.

Usage:
    python scripts/bump_version.py patch            # 0.1.0 -> 0.1.1
    python scripts/bump_version.py minor            # 0.1.1 -> 0.2.0
    python scripts/bump_version.py major --dry-run  # show, don't write
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
TARGETS = {
    ROOT / "pyproject.toml": re.compile(r'^(version\s*=\s*")(\d+)\.(\d+)\.(\d+)(")', re.MULTILINE),
    ROOT / "src" / "spacevault" / "__init__.py": re.compile(
        r'^(__version__\s*=\s*")(\d+)\.(\d+)\.(\d+)(")', re.MULTILINE
    ),
}


def current_versions() -> dict[Path, tuple[int, int, int]]:
    found: dict[Path, tuple[int, int, int]] = {}
    for path, pattern in TARGETS.items():
        match = pattern.search(path.read_text())
        if match is None:
            sys.exit(f"error: no version string in {path.relative_to(ROOT)}")
        found[path] = (int(match.group(2)), int(match.group(3)), int(match.group(4)))
    return found


def next_version(version: tuple[int, int, int], part: str) -> tuple[int, int, int]:
    major, minor, patch = version
    if part == "major":
        return major + 1, 0, 0
    if part == "minor":
        return major, minor + 1, 0
    return major, minor, patch + 1


def main() -> None:
    parser = argparse.ArgumentParser(description="Bump the spacevault version")
    parser.add_argument("part", choices=["major", "minor", "patch"])
    parser.add_argument("--dry-run", action="store_true", help="print the new version only")
    args = parser.parse_args()

    versions = current_versions()
    distinct = set(versions.values())
    if len(distinct) != 1:
        listing = ", ".join(
            f"{p.relative_to(ROOT)}={'.'.join(map(str, v))}" for p, v in versions.items()
        )
        sys.exit(f"error: versions disagree ({listing}); fix by hand first")

    old = distinct.pop()
    new = next_version(old, args.part)
    old_str, new_str = ".".join(map(str, old)), ".".join(map(str, new))

    if not args.dry_run:
        for path, pattern in TARGETS.items():
            text = pattern.sub(rf"\g<1>{new_str}\g<5>", path.read_text(), count=1)
            path.write_text(text)

    print(f"{old_str} -> {new_str}{' (dry run)' if args.dry_run else ''}")


if __name__ == "__main__":
    main()
