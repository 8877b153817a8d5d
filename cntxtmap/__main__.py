"""Allow ``python -m cntxtmap``."""

import sys

from cntxtmap.cli import main

sys.exit(main())
