#!/usr/bin/env python3
"""Main entry point for streamgen."""

import sys

from streamgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
