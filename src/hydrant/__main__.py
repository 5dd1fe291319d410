"""
Entry point for module execution (``python -m hydrant``).
"""

import sys

from hydrant.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
