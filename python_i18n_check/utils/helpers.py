"""
Helper utilities for the i18n checker.
"""

# Import version with fallback to avoid circular imports
try:
    from .. import __version__
except (ImportError, AttributeError):
    __version__ = None


def get_version():
    """
    Get package version.

    Returns:
        str: The package version or a default if not found
    """
    if __version__ is not None:
        return __version__

    try:
        from importlib.metadata import version
        return version("i18n-check")
    except Exception:
        return "0.0.0"
