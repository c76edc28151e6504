"""Make the project importable and seed the environment before any test module loads."""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# shared.config refuses to import without DISCORD_TOKEN.
from shared.testing import apply_required_test_environment  # noqa: E402

apply_required_test_environment()
