#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py -1
    python main.py -x 20 -y 12 -m 40
    python main.py -x 16 --density 0.2
"""
import sys
from pathlib import Path

# Add src to path so the checkout runs without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from minesweeper.cli import main


if __name__ == "__main__":
    main()
