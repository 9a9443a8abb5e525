from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version


DISTRIBUTION = "shipyard-release"


def get_shipyard_version() -> str:
    """Installed distribution version, or ``dev`` for an uninstalled checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "dev"
