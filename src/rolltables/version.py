"""Version detection with support for development builds."""

from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path

# Fallback version if nothing else works
_FALLBACK_VERSION = "unknown"

# Pattern to match version lines like: ## [1.4.0] - 2025-12-04
_VERSION_PATTERN = re.compile(r"^## \[(\d+\.\d+\.\d+)\]")

# Pattern to match unreleased section: ## [Unreleased] or ## Unreleased
_UNRELEASED_PATTERN = re.compile(r"^## \[?Unreleased\]?", re.IGNORECASE)


def _find_changelog() -> Path | None:
    """Find CHANGELOG.md at the repo root (source checkouts only)."""
    candidate = Path(__file__).parent.parent.parent / "CHANGELOG.md"
    return candidate if candidate.exists() else None


def _get_version_from_changelog() -> str | None:
    changelog_path = _find_changelog()
    if not changelog_path:
        return None

    try:
        with open(changelog_path, encoding="utf-8") as f:
            for line in f:
                # An unreleased section on top means the newest entry is not a release
                if _UNRELEASED_PATTERN.match(line):
                    continue
                match = _VERSION_PATTERN.match(line)
                if match:
                    return match.group(1)
    except OSError:
        pass

    return None


def _get_installed_version() -> str | None:
    try:
        return metadata.version("mdbook-rolltables")
    except metadata.PackageNotFoundError:
        return None


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. Installed distribution metadata
    3. CHANGELOG.md version for source checkouts
    4. Fallback to "unknown"
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version:
        return build_version.strip()

    return _get_installed_version() or _get_version_from_changelog() or _FALLBACK_VERSION


# Cache the version on module load
__version__ = get_version()
