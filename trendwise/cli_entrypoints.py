#!/usr/bin/env python3
"""Console-script wrappers for the TrendWise trend pipeline.

After an editable install (``pip install -e .``) the following commands become
available system-wide:

* ``trendwise-trends``          – aggregate live trends and save CSV + report
* ``trendwise-trends-offline``  – same output from synthesized trends only

Extra command-line arguments are forwarded to ``scripts/fetch_trends.py`` so
there is no business-logic duplication.
"""
from __future__ import annotations

import sys
from pathlib import Path
from subprocess import run

PYTHON = sys.executable
ROOT = Path(__file__).resolve().parents[1]  # Repository root
FETCH_SCRIPT = ROOT / "scripts/fetch_trends.py"


def _exec(cmd: list[str]) -> None:  # noqa: WPS421 (subprocess wrapper)
    """Execute *cmd* and propagate its exit status."""
    run(cmd, check=True)


def _build_command(*flags: str) -> list[str]:
    """Return the ``fetch_trends.py`` invocation with *flags* and any user args."""
    return [PYTHON, str(FETCH_SCRIPT), *flags, *sys.argv[1:]]


# ---------------------------------------------------------------------------
# Entry-points
# ---------------------------------------------------------------------------

def trends() -> None:
    """Run the *live* pipeline – every configured source plus fallback."""
    _exec(_build_command())


def trends_offline() -> None:
    """Run the *offline* pipeline – synthesized trends, no network."""
    _exec(_build_command("--offline"))
