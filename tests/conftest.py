"""Test configuration for the storefront API."""

import os

# before the configuration is loaded on import
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE", "")

from tests.fixtures import *  # noqa: E402,F401,F403
