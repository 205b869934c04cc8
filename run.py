#!/usr/bin/env python3
"""Run the FitSmart API server."""

import sys
import os

# Add package root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fitsmart.main import run

if __name__ == "__main__":
    run()
