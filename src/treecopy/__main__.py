import sys

from treecopy.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
