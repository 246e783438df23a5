"""Allow ``python -m kms_sync``."""

import sys

from kms_sync.main import main

sys.exit(main())
