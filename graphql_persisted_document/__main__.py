"""Allow running as ``python -m graphql_persisted_document``."""

import sys

from .cli import main

sys.exit(main())
