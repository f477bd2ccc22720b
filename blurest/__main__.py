"""
Allow running the package with: python -m blurest

Examples:
    python -m blurest get images/hero.jpg --root ./site
    python -m blurest warm ./site --db ./site/.blurhash.db
    python -m blurest config --init
"""

import sys

from .cli import main


if __name__ == '__main__':
    sys.exit(main())
