#!/usr/bin/env python3
"""Raster to H3 conversion runner.

Usage:
    python scripts/run_conversion.py scripts/user_config.py raster.npy
    python scripts/run_conversion.py scripts/user_config.py raster.npy --resolution 9
    python scripts/run_conversion.py scripts/user_config.py raster.npy --scheduler process --workers 4

Note: User config in scripts/user_config.py, expert defaults in src/rasterhex/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from rasterhex.cli.run_convert import main


if __name__ == "__main__":
    sys.exit(main())
