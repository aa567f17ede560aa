"""Allow ``python -m logmon``."""

import sys

from .cli import main

sys.exit(main())
