import sys

from ufel.cli import main

if __name__ == "__main__":
    sys.exit(main())
