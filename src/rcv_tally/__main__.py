import sys

from rcv_tally.cli import main

if __name__ == "__main__":
    sys.exit(main())
