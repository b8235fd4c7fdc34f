"""Entry point for `python -m paper_network`."""

import sys

from paper_network.cli import main

if __name__ == "__main__":
    sys.exit(main())
