"""
Version information for benchweights.

The package version is read from pyproject.toml via importlib.metadata so
there is a single source of truth. The version string is also embedded into
every generated artifact.
"""

try:
    from importlib.metadata import version

    __version__ = version("benchweights")
except Exception:
    # Fallback for development (package not installed)
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomllib.load(f)
            __version__ = pyproject["project"]["version"]
    except Exception:
        # Last resort fallback
        __version__ = "0.0.0-dev"
