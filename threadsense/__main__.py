"""
ThreadSense - python -m threadsense entry point.
"""

import sys

from threadsense.cli import main

if __name__ == "__main__":
    sys.exit(main())
