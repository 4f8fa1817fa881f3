"""Version information for envbind."""

import importlib.metadata


def get_envbind_version() -> str:
    """Return the installed envbind version."""
    try:
        return importlib.metadata.version("envbind")
    except importlib.metadata.PackageNotFoundError:
        # Fallback for development/uninstalled package
        return "0.1.0-dev"
