"""Allow running the service with ``python -m taskapi``."""

import sys

from taskapi.cli import main

sys.exit(main())
