#!/usr/bin/env python3
"""
Wrapper script that calls the fetch-contract CLI in src/

This allows users to run `python fetch_contract.py` from the root directory.
"""

import sys
from pathlib import Path

# Add src directory to path
src_dir = Path(__file__).parent / "src"
sys.path.insert(0, str(src_dir))

# Import and run the main function
from fetch_contract import main

if __name__ == "__main__":
    sys.exit(main())
