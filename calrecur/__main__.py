"""Entry point for `python -m calrecur` command."""

import sys

from calrecur.cli import main

if __name__ == "__main__":
    sys.exit(main())
