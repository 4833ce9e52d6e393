"""Storefront REST API.

CRUD endpoints over the store catalog plus a proxy to the upstream store API.
"""

__version__ = "0.1.0"
