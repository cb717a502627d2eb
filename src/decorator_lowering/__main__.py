"""
Entry point for module execution (``python -m decorator_lowering``).
"""

import sys
from decorator_lowering.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
