"""Serverless entrypoint exposing the recipe planner ASGI app.

The platform imports this module from the repository root without installing
the project, so the ``src`` directory is added to the import path first.
"""

import sys
from pathlib import Path

_SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from recipe_planner.api.asgi import app  # noqa: E402

__all__ = ["app"]
