"""Dependency preflight checks.

The core runs on the standard library alone; cairo-backed measurement needs
pycairo and a working cairo install. Set MINDTREE_SKIP_PREFLIGHT=1 to bypass.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Optional


SKIP_ENV_VAR = "MINDTREE_SKIP_PREFLIGHT"


@dataclass(frozen=True)
class PreflightResult:
    ok: bool
    message: str


def _check_cairo() -> Optional[str]:
    """Return an error message if pycairo can't measure text."""
    try:
        import cairo  # type: ignore[import-not-found]

        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, 1, 1)
        cairo.Context(surface).text_extents("x")
    except Exception as exc:  # pylint: disable=broad-except
        return (
            "Missing Python dependency 'pycairo'. "
            "Install it with `pip install mindtree[cairo]` and ensure cairo is available. "
            f"Underlying error: {exc}"
        )
    return None


def run_preflight(*, require_cairo: bool = False) -> PreflightResult:
    """Run checks and return a structured result."""
    if os.environ.get(SKIP_ENV_VAR) == "1":
        return PreflightResult(True, f"Preflight skipped via {SKIP_ENV_VAR}=1")

    if require_cairo:
        dep_error = _check_cairo()
        if dep_error:
            return PreflightResult(False, dep_error)

    return PreflightResult(True, "Preflight OK")


def run_preflight_or_die(*, require_cairo: bool = False) -> None:
    result = run_preflight(require_cairo=require_cairo)
    if result.ok:
        return

    sys.stderr.write("\nmindtree preflight check failed:\n")
    sys.stderr.write(result.message)
    sys.stderr.write("\n\n")
    raise SystemExit(1)
