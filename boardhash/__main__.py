"""
Allow running the package with: python -m boardhash

Examples:
    python -m boardhash hash photo.jpg
    python -m boardhash compare ID_A ID_B
    python -m boardhash rehash --mode batch
    python -m boardhash config --init       # Create example config file
"""

import sys


def main():
    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
