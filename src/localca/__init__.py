# localca/__init__.py

"""
LocalCA - Local Certificate Authority
=====================================

This module provides tools for bootstrapping a local root CA, issuing leaf
certificates signed by it, and packaging them for Kubernetes, Traefik and SOPS.
"""

# ---- Package metadata ----
__version__ = "1.0.0"
__title__ = "Local Certificate Authority"
__short_title__ = "LocalCA"
__license__ = "MIT"


# ---- Public exports ----
__all__ = [
    "__version__",
    "__title__",
    "__short_title__",
    "__license__",
]
