"""Module entrypoint for ``python -m jumpnav``.

All argument parsing and runtime setup happen in ``jumpnav.cli``.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
