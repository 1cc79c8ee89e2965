"""Allow ``python -m podsync``."""

import sys

from .cli import main

sys.exit(main())
