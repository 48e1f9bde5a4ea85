"""Packaged resource helpers for :mod:`synindex`."""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable


def get_resource(relative_path: str) -> Traversable:
    """Return a traversable handle to a packaged resource.

    Example:
        >>> get_resource("queries/go/highlights.scm").name
        'highlights.scm'
    """

    candidate = resources.files(__package__)
    for part in relative_path.split("/"):
        candidate = candidate.joinpath(part)
    if not candidate.is_file():
        raise FileNotFoundError(relative_path)
    return candidate


__all__ = ["get_resource"]
