"""Pytest setup"""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Keep test runs independent of a developer's local .env
os.environ.pop("FEATURE_BATCH_OPERATIONS", None)

# src on the path for runs without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
