"""Allow running as: python -m trap_grid"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
