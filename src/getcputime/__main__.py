"""Allow running getcputime with ``python -m getcputime``."""

from getcputime.cli import main

raise SystemExit(main())
