import sys

from bugspot.cli import main

sys.exit(main())
