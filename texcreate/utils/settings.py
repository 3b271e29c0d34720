"""
Environment-driven settings.

Values come from the process environment, optionally seeded from a ``.env``
file in the working directory.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_COMPILER = os.getenv("TEXCREATE_COMPILER", "pdflatex")
LOGS_PATH = Path(os.getenv("TEXCREATE_LOGS_PATH", "outs/logs"))
LOG_LEVEL = os.getenv("TEXCREATE_LOG_LEVEL", "INFO").upper()
