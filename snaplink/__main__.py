import sys

from snaplink.cli import main

sys.exit(main())
