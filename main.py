#!/usr/bin/env python3
"""Main entry point for the guide frame camera.

Simplified entry point that delegates to the CLI module.

Usage:
    python main.py viewfinder     # Live preview with fit instructions
    python main.py capture        # Capture, crop and save one photo
    python main.py presets        # List fit policy presets

Or use the CLI directly:
    python -m face_frame viewfinder
"""

import sys
from pathlib import Path


def main():
    """Main entry point - delegates to CLI."""
    if len(sys.argv) == 1:
        print(__doc__)
        print("Run 'python main.py --help' for more options")
        sys.exit(0)

    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from face_frame.cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
