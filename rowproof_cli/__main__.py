"""
Module execution entry point.

Allows running with: python -m rowproof_cli
"""

import sys
from rowproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
