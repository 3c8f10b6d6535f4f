"""Root conftest.py for pytest configuration.

Adds the ``src`` directory to sys.path so the package is importable when
the tests run from a checkout without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))
