"""Allow ``python -m arterial_tree``."""

import sys

from .cli import main

sys.exit(main())
