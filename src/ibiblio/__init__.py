"""
ibiblio - artifact locator for Maven-style HTTP repositories

Computes candidate URLs for module descriptors and artifacts in legacy
and Maven2-compatible repository layouts.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
