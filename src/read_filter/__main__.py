"""Entry point for ``python -m read_filter``."""

import sys

from .pipeline import main

sys.exit(main())
