"""Resource path resolution for source checkouts and packaged builds.

Configuration and data files live next to ``src/`` in a checkout and at the
bundle root in a PyInstaller build.

Typical usage:
    from vortrainer.core.resource_path import get_config_path, get_data_path

    stations_csv = get_data_path("navigation/vor_stations.csv")
"""

import sys
from pathlib import Path


def is_bundled() -> bool:
    """Check if running from a PyInstaller bundle."""
    return hasattr(sys, "_MEIPASS")


def get_project_root() -> Path:
    """Get the directory that holds ``config/`` and ``data/``.

    Returns:
        The checkout root (three levels above ``src/vortrainer/core``) or the
        PyInstaller extraction directory.
    """
    if is_bundled():
        return Path(getattr(sys, "_MEIPASS"))
    return Path(__file__).parent.parent.parent.parent


def get_resource_path(relative_path: str) -> Path:
    """Get the absolute path of a resource relative to the project root."""
    return get_project_root() / relative_path


def get_config_path(config_file: str) -> Path:
    """Get the path of a file under ``config/``.

    Examples:
        >>> get_config_path("trainer.yaml").name
        'trainer.yaml'
    """
    return get_resource_path(f"config/{config_file}")


def get_data_path(data_file: str) -> Path:
    """Get the path of a file under ``data/``.

    Examples:
        >>> get_data_path("navigation/vor_stations.csv").name
        'vor_stations.csv'
    """
    return get_resource_path(f"data/{data_file}")
