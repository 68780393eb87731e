#!/usr/bin/env python3
"""
Simple wrapper script to run the alpha image to mesh converter.

This lets users run the tool from the command line without needing
to worry about Python module paths.
"""

import sys
from pathlib import Path

# Add the parent directory to the path so we can import alpha_to_mesh
sys.path.insert(0, str(Path(__file__).parent))

from alpha_to_mesh import main

if __name__ == "__main__":
    main()
