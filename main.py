"""
Entry point for the prewarm worker when run from a checkout:
    python main.py <job-id> <master-url> [parallel]
The installed package exposes the same CLI as the `prewarm` command.
"""

import sys

from prewarm.main import main

if __name__ == "__main__":
    sys.exit(main())
