"""
Shared pytest configuration.

Keeps the API's rotating log file out of the working tree during tests.
"""

import os
import tempfile

os.environ.setdefault("ROCKET_LOG_DIR", tempfile.mkdtemp(prefix="rocket-feasibility-logs-"))
