"""
Twist Configuration - Single Source of Truth

All connection parameters defined here. Do not duplicate elsewhere.
Values come from the environment (or a .env file next to the server).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Package root (where this file lives)
_PACKAGE_ROOT = Path(__file__).parent

# .env in the repo root first, then whatever python-dotenv finds from cwd
load_dotenv(_PACKAGE_ROOT / ".env")
load_dotenv()

# Personal API token (Twist → Settings → Integrations)
API_KEY_ENV = "TWIST_API_KEY"
TWIST_API_KEY = os.environ.get(API_KEY_ENV, "")

# REST API root. Endpoint paths are relative to this (no leading slash).
TWIST_API_BASE_URL = os.environ.get("TWIST_API_BASE_URL", "https://api.twist.com/api/v3/")

# Web app root, used for building links to threads/comments/messages
TWIST_WEB_URL = os.environ.get("TWIST_WEB_URL", "https://twist.com").rstrip("/")

# Per-request timeout (seconds). Prevents indefinite hangs on stalled connections.
API_TIMEOUT = float(os.environ.get("TWIST_API_TIMEOUT", "60"))

LOG_LEVEL = os.environ.get("TWIST_LOG_LEVEL", "INFO")
