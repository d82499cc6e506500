from __future__ import annotations

from handheld.cli import main

raise SystemExit(main())
