# main.py
import sys

from ride_share.cli import main

if __name__ == "__main__":
    sys.exit(main())
