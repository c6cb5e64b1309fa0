#!/usr/bin/env python3
"""Capture reconciliation charts for one site from a source checkout.

Usage:
    python scripts/capture_site_charts.py --site <site-id> [--output-dir charts/]

Requires:
    SUPABASE_URL and SUPABASE_SERVICE_KEY in the environment or ./.env
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from chart_capture.cli import main

if __name__ == "__main__":
    sys.exit(main())
